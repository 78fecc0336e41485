"""
Descriptor Doc-Binder: attach documentation to exposed symbols.

Bindings are registered before their docs are known, so documentation is
attached afterwards, once per symbol, at module or type initialization:

    attach_doc(open_store, "Open an object store at the given path.")

ONE-SHOT-WRITE:
    A documentation slot goes from empty to populated at most once.
    A second attempt raises AlreadyDocumentedError and leaves the slot
    untouched. Duplicate documentation is a configuration bug, never
    silently overwritten.

THREAD SAFETY:
    The read-check-write sequence is not atomic. Callers that may
    initialize concurrently must serialize calls per target.
"""

import inspect
import logging
import types
from enum import Enum
from typing import Any, Mapping, Optional, Union

from hostbridge.errors import (
    InvalidEncodingError,
    AlreadyDocumentedError,
    UnsupportedTargetError,
)


logger = logging.getLogger(__name__)

DocText = Union[str, bytes, bytearray, memoryview]


class DescriptorKind(Enum):
    """
    The kinds of target a documentation slot can live on.

    Checked in declaration order, the first match wins.
    """
    CALLABLE = "function"
    BOUND_METHOD = "method"
    METHOD_DESCRIPTOR = "method descriptor"
    PROPERTY = "attribute"
    TYPE = "type"
    GENERIC = "object"


_CALLABLE_TYPES = (types.FunctionType, types.BuiltinFunctionType)
_METHOD_DESCRIPTOR_TYPES = (
    staticmethod,
    classmethod,
    types.MethodDescriptorType,
    types.ClassMethodDescriptorType,
    types.WrapperDescriptorType,
)
_PROPERTY_TYPES = (property, types.GetSetDescriptorType, types.MemberDescriptorType)


def classify_descriptor(target: Any) -> DescriptorKind:
    """Return the DescriptorKind of target. Never fails, GENERIC is the fallback."""
    if isinstance(target, _CALLABLE_TYPES):
        return DescriptorKind.CALLABLE
    if isinstance(target, types.MethodType):
        return DescriptorKind.BOUND_METHOD
    if isinstance(target, _METHOD_DESCRIPTOR_TYPES):
        return DescriptorKind.METHOD_DESCRIPTOR
    if isinstance(target, _PROPERTY_TYPES):
        return DescriptorKind.PROPERTY
    if isinstance(target, type):
        return DescriptorKind.TYPE
    return DescriptorKind.GENERIC


def normalize_doc(text: DocText) -> str:
    """
    Turn caller-supplied documentation into a private str.

    Byte buffers are decoded as strict UTF-8. A str must be encodable as
    UTF-8 (lone surrogates are rejected). The result is always an exact
    str built here, never the caller's buffer or str subclass instance.

    Raises:
        InvalidEncodingError: invalid UTF-8, or not text at all
    """
    if isinstance(text, (bytes, bytearray, memoryview)):
        try:
            return bytes(text).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidEncodingError(f"docstring is not valid UTF-8: {exc}") from exc
    if isinstance(text, str):
        try:
            return text.encode("utf-8").decode("utf-8")
        except UnicodeEncodeError as exc:
            raise InvalidEncodingError(f"docstring cannot be encoded as UTF-8: {exc}") from exc
    raise InvalidEncodingError(
        f"docstring must be str or bytes, not {type(text).__qualname__}"
    )


def _has_doc(doc: Any) -> bool:
    return isinstance(doc, (str, bytes)) and len(doc) > 0


def _name_of(obj: Any) -> Optional[str]:
    name = getattr(obj, "__qualname__", None) or getattr(obj, "__name__", None)
    return name if isinstance(name, str) else None


def _slot_owner(target: Any, kind: DescriptorKind) -> Any:
    """The object whose __doc__ is the slot for target."""
    if kind is DescriptorKind.BOUND_METHOD:
        return target.__func__
    return target


def _display_name(target: Any, kind: DescriptorKind) -> Optional[str]:
    if kind is DescriptorKind.BOUND_METHOD:
        return _name_of(target.__func__)
    if kind is DescriptorKind.PROPERTY and isinstance(target, property):
        return _name_of(target.fget) or _name_of(target)
    if kind is DescriptorKind.GENERIC:
        return None
    return _name_of(target)


def _write(owner: Any, doc: str, kind: DescriptorKind) -> None:
    try:
        owner.__doc__ = doc
    except (AttributeError, TypeError) as exc:
        raise UnsupportedTargetError(
            f"cannot set a docstring on {kind.value} of type {type(owner).__qualname__}: {exc}"
        ) from exc


def attach_doc(target: Any, text: DocText) -> None:
    """
    Attach documentation to target, exactly once.

    Args:
        target: a function, bound method, method descriptor
            (staticmethod, classmethod, C method), property or get-set
            descriptor, class, or any object with a writable __doc__
        text: the documentation, str or UTF-8 bytes

    Raises:
        InvalidEncodingError: text is not valid UTF-8
        AlreadyDocumentedError: target already has documentation
        UnsupportedTargetError: target refused the write

    On any error target is left unchanged.
    """
    doc = normalize_doc(text)
    kind = classify_descriptor(target)
    owner = _slot_owner(target, kind)

    # staticmethod/classmethod copy __doc__ at creation, the wrapped
    # function is a second slot that must be empty too.
    wrapped = None
    if kind is DescriptorKind.METHOD_DESCRIPTOR:
        wrapped = getattr(target, "__func__", None)
        if not isinstance(wrapped, types.FunctionType):
            wrapped = None

    if _has_doc(getattr(owner, "__doc__", None)) or (
        wrapped is not None and _has_doc(wrapped.__doc__)
    ):
        raise AlreadyDocumentedError(kind.value, _display_name(target, kind))

    _write(owner, doc, kind)
    if wrapped is not None:
        wrapped.__doc__ = doc

    logger.debug(
        "attached docstring to %s %s",
        kind.value,
        _display_name(target, kind) or type(target).__qualname__,
    )


def attach_docs(owner: Any, docs: Mapping[str, DocText]) -> None:
    """
    Attach documentation to several attributes of owner.

    Names are resolved with inspect.getattr_static, so the raw descriptor
    stored on a class (staticmethod, classmethod, property) is documented
    rather than whatever attribute access would return. The empty name
    documents owner itself.

    Stops at the first failure. The enclosing registration code is
    expected to treat that as fatal.

    Raises:
        UnsupportedTargetError: a name does not exist on owner
        plus anything attach_doc raises
    """
    for name, text in docs.items():
        if name == "":
            target = owner
        else:
            try:
                target = inspect.getattr_static(owner, name)
            except AttributeError as exc:
                raise UnsupportedTargetError(
                    f"{_name_of(owner) or type(owner).__qualname__} has no attribute '{name}'"
                ) from exc
        attach_doc(target, text)
