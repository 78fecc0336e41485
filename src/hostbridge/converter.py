"""
Document Converter: host values to Documents and back.

encode() walks a host value and builds a fresh Document tree.
decode() walks a Document and builds fresh host values.

Both are pure: no shared state, no I/O, safe to call from any thread.
The converter only reads the values it is given and never keeps a
reference to them after the call returns.

CLASSIFICATION ORDER:
    Capabilities overlap in Python (bool is an int), so every value is
    classified exactly once, in this fixed order, first match wins:

        null -> bool -> int -> float -> bytes -> str -> sequence -> mapping

BYTE-STRINGS:
    bytes are encoded as base64 text inside a String. decode() does NOT
    reverse this: a String is always decoded as str. Whether a String
    carries base64 is a convention the caller has to know about, see
    b64decode_string().
"""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional, Set

from hostbridge.config import get_settings
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
    INT64_MIN,
    INT64_MAX,
    UINT64_MAX,
)
from hostbridge.errors import (
    UnsupportedTypeError,
    IntegerOutOfRangeError,
    CircularReferenceError,
    NestingTooDeepError,
)


logger = logging.getLogger(__name__)


class ValueKind(Enum):
    """Capabilities a host value can be classified into."""
    NONE = "none"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    BYTES = "bytes"
    STR = "str"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def classify_value(value: Any) -> ValueKind:
    """
    Classify a host value into exactly one ValueKind.

    Raises:
        UnsupportedTypeError: if the value has none of the capabilities
    """
    if value is None:
        return ValueKind.NONE
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        return ValueKind.INT
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, (bytes, bytearray)):
        return ValueKind.BYTES
    if isinstance(value, str):
        return ValueKind.STR
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    logger.debug("rejecting value of type %s", type(value).__qualname__)
    raise UnsupportedTypeError(value)


def encode_int(value: int) -> Document:
    """
    Encode an integer as Int when it fits signed 64-bit, else as UInt.

    int subclasses (IntEnum, IntFlag, ...) are reduced to a plain int,
    the chosen variant always holds the exact value.

    Raises:
        IntegerOutOfRangeError: if it fits neither representation
    """
    number = int(value)
    if INT64_MIN <= number <= INT64_MAX:
        return Int(number)
    if 0 <= number <= UINT64_MAX:
        return UInt(number)
    raise IntegerOutOfRangeError(number)


def encode(value: Any, *, max_depth: Optional[int] = None) -> Document:
    """
    Encode a host value as a Document.

    Args:
        value: None, bool, int, float, bytes/bytearray, str, list/tuple,
            or any Mapping, nested arbitrarily
        max_depth: container nesting limit, defaults to Settings.max_depth

    Returns:
        A new Document tree that shares nothing with value

    Raises:
        UnsupportedTypeError: a value with no matching capability
        IntegerOutOfRangeError: an int outside both 64-bit ranges
        CircularReferenceError: a container that contains itself
        NestingTooDeepError: containers nested beyond max_depth
    """
    if max_depth is None:
        max_depth = get_settings().max_depth
    return _encode(value, 0, max_depth, set())


def _encode(value: Any, depth: int, max_depth: int, active: Set[int]) -> Document:
    kind = classify_value(value)

    if kind is ValueKind.NONE:
        return Null()
    if kind is ValueKind.BOOL:
        return Bool(bool(value))
    if kind is ValueKind.INT:
        return encode_int(value)
    if kind is ValueKind.FLOAT:
        return Float(float(value))
    if kind is ValueKind.BYTES:
        return String(base64.b64encode(value).decode("ascii"))
    if kind is ValueKind.STR:
        return String(str(value))

    # Containers from here on.
    if depth >= max_depth:
        raise NestingTooDeepError(max_depth)
    marker = id(value)
    if marker in active:
        raise CircularReferenceError(
            f"{type(value).__qualname__} at depth {depth} contains itself"
        )
    active.add(marker)
    try:
        if kind is ValueKind.SEQUENCE:
            items = []
            for item in value:
                items.append(_encode(item, depth + 1, max_depth, active))
            return Array(tuple(items))

        # Stringified keys may collide, later ones win.
        entries = {}
        for key, item in value.items():
            entries[str(key)] = _encode(item, depth + 1, max_depth, active)
        return Object(tuple(entries.items()))
    finally:
        active.discard(marker)


def decode(doc: Document) -> Any:
    """
    Decode a Document into plain host values.

    Null -> None, Bool -> bool, Int/UInt -> int, Float -> float,
    String -> str, Array -> list, Object -> dict (insertion order kept).

    Never fails for a well-formed Document, however deep: the tree is
    walked with an explicit stack. Strings are returned as-is, base64
    produced from bytes is NOT reversed.

    Raises:
        TypeError: if doc is not a Document at all
    """
    root = [None]
    # (node, container to fill, index or key in that container)
    pending = [(doc, root, 0)]
    while pending:
        node, parent, slot = pending.pop()
        if isinstance(node, Null):
            parent[slot] = None
        elif isinstance(node, (Bool, Int, UInt, Float, String)):
            parent[slot] = node.value
        elif isinstance(node, Array):
            out = [None] * len(node.items)
            parent[slot] = out
            for index, item in enumerate(node.items):
                pending.append((item, out, index))
        elif isinstance(node, Object):
            # Keys are placed now so insertion order matches the entries.
            out = dict.fromkeys(key for key, _ in node.entries)
            parent[slot] = out
            for key, value in node.entries:
                pending.append((value, out, key))
        else:
            raise TypeError(f"not a Document: {type(node).__qualname__}")
    return root[0]


def b64decode_string(doc: String) -> bytes:
    """
    Recover the bytes behind a String produced by encoding a byte-string.

    This is the caller-side half of the byte-string convention. Only call
    it for strings known to carry base64.

    Raises:
        ValueError: if doc is not a String or not valid base64
    """
    if not isinstance(doc, String):
        raise ValueError(f"expected a String document, got {type(doc).__qualname__}")
    try:
        return base64.b64decode(doc.value, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"String does not hold base64 data: {doc.value!r}") from exc
