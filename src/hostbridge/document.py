"""
Document Model for hostbridge

The generic structured-document tree that host values are converted into.
It is the JSON-like interchange shape used for configuration and metadata:

    Null, Bool, Int, UInt, Float, String, Array, Object

The set of cases is CLOSED. Nothing outside this module should subclass
Document, and every consumer may match exhaustively over the eight cases.

ARCHITECTURAL RULE:
    Documents are immutable and built bottom-up.
    A child always exists before its parent, so a tree can never
    contain a cycle and never aliases the host value it came from.
"""

from abc import ABC
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1
UINT64_MAX = 2 ** 64 - 1


class Document(ABC):
    """
    Base class for all document nodes.

    Structure only. Conversion to and from host values lives in
    hostbridge.converter, text encodings live in hostbridge.serialization.
    """
    pass


@dataclass(frozen=True)
class Null(Document):
    """The absent value."""


def _check_payload(case: str, value, expected: type) -> None:
    # bool is an int subclass, it never counts as one here.
    if not isinstance(value, expected) or (expected is not bool and isinstance(value, bool)):
        raise ValueError(f"{case} payload must be {expected.__name__}, got {type(value).__name__}")


@dataclass(frozen=True)
class Bool(Document):
    value: bool

    def __post_init__(self):
        _check_payload("Bool", self.value, bool)


@dataclass(frozen=True)
class Int(Document):
    """
    Signed 64-bit integer.

    Properties:
        value: integer in [INT64_MIN, INT64_MAX]
    """

    value: int

    def __post_init__(self):
        _check_payload("Int", self.value, int)
        if not INT64_MIN <= self.value <= INT64_MAX:
            raise ValueError(f"Int value out of signed 64-bit range: {self.value}")


@dataclass(frozen=True)
class UInt(Document):
    """
    Unsigned 64-bit integer.

    The converter only produces UInt for values above INT64_MAX, but a
    UInt holding a small value is still a valid document.

    Properties:
        value: integer in [0, UINT64_MAX]
    """

    value: int

    def __post_init__(self):
        _check_payload("UInt", self.value, int)
        if not 0 <= self.value <= UINT64_MAX:
            raise ValueError(f"UInt value out of unsigned 64-bit range: {self.value}")


@dataclass(frozen=True)
class Float(Document):
    value: float

    def __post_init__(self):
        _check_payload("Float", self.value, float)


@dataclass(frozen=True)
class String(Document):
    value: str

    def __post_init__(self):
        _check_payload("String", self.value, str)


@dataclass(frozen=True)
class Array(Document):
    """
    Ordered sequence of documents.

    Properties:
        items: tuple of Document, order is significant
    """

    items: Tuple[Document, ...] = ()

    def __post_init__(self):
        # Accept any iterable at construction, store a tuple.
        items = tuple(self.items)
        for item in items:
            if not isinstance(item, Document):
                raise ValueError(f"Array item is not a Document: {item!r}")
        object.__setattr__(self, "items", items)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Document]:
        return iter(self.items)


@dataclass(frozen=True)
class Object(Document):
    """
    Ordered mapping of text keys to documents.

    Example:
        {"name": "blob", "size": 10}

    Becomes:
        Object((
            ("name", String("blob")),
            ("size", Int(10)),
        ))

    Properties:
        entries: tuple of (key, Document) pairs in insertion order

    INVARIANTS:
        - Keys are str
        - Keys are unique within one Object
    """

    entries: Tuple[Tuple[str, Document], ...] = ()

    def __post_init__(self):
        entries = tuple((key, value) for key, value in self.entries)
        seen = set()
        for key, value in entries:
            if not isinstance(key, str):
                raise ValueError(f"Object key is not a string: {key!r}")
            if key in seen:
                raise ValueError(f"Duplicate Object key: {key!r}")
            if not isinstance(value, Document):
                raise ValueError(f"Object value for {key!r} is not a Document: {value!r}")
            seen.add(key)
        object.__setattr__(self, "entries", entries)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, Document]]) -> "Object":
        """
        Build an Object from pairs that may repeat keys.

        A repeated key overwrites the earlier value but keeps the position
        where the key was first inserted, the same as assigning into a dict.
        """
        merged = {}
        for key, value in pairs:
            merged[key] = value
        return cls(tuple(merged.items()))

    def keys(self) -> Tuple[str, ...]:
        return tuple(key for key, _ in self.entries)

    def get(self, key: str, default: Optional[Document] = None) -> Optional[Document]:
        for entry_key, value in self.entries:
            if entry_key == key:
                return value
        return default

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Tuple[str, Document]]:
        return iter(self.entries)
