"""
hostbridge

Marshalling layer between Python host values and the structured-document
model used for object-store configuration and metadata.

Two independent pieces:
    - Document Converter: encode() / decode()
    - Descriptor Doc-Binder: attach_doc() / attach_docs()

This package contains ZERO knowledge of:
    - Module or type registration
    - Library loading
    - Storage, networking, persistence

Callers own all of that and call in through the names exported here.
"""

from hostbridge.converter import encode, decode
from hostbridge.docbind import attach_doc, attach_docs
from hostbridge.document import (
    Document,
    Null,
    Bool,
    Int,
    UInt,
    Float,
    String,
    Array,
    Object,
)
from hostbridge.errors import (
    HostBridgeError,
    ConversionError,
    UnsupportedTypeError,
    IntegerOutOfRangeError,
    CircularReferenceError,
    NestingTooDeepError,
    DocBindError,
    InvalidEncodingError,
    AlreadyDocumentedError,
    UnsupportedTargetError,
)

__version__ = "0.1.0"

__all__ = [
    "encode",
    "decode",
    "attach_doc",
    "attach_docs",
    "Document",
    "Null",
    "Bool",
    "Int",
    "UInt",
    "Float",
    "String",
    "Array",
    "Object",
    "HostBridgeError",
    "ConversionError",
    "UnsupportedTypeError",
    "IntegerOutOfRangeError",
    "CircularReferenceError",
    "NestingTooDeepError",
    "DocBindError",
    "InvalidEncodingError",
    "AlreadyDocumentedError",
    "UnsupportedTargetError",
]
