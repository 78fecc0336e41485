"""
Error taxonomy for hostbridge.

Every failure here is a permanent input or logic error. Nothing is retried.

    HostBridgeError
        ConversionError          (encode)
            UnsupportedTypeError
            IntegerOutOfRangeError
            CircularReferenceError
            NestingTooDeepError
        DocBindError             (attach_doc)
            InvalidEncodingError
            AlreadyDocumentedError
            UnsupportedTargetError

Where a builtin exception already describes the failure (TypeError,
OverflowError, ValueError) the class also derives from it, so callers
that only know the builtin hierarchy still catch it.
"""

from typing import Any, Optional


class HostBridgeError(Exception):
    """Base class for all hostbridge errors."""
    pass


class ConversionError(HostBridgeError):
    """Raised when a host value cannot be encoded as a Document."""
    pass


class UnsupportedTypeError(ConversionError, TypeError):
    """The value matches none of the recognized capabilities."""

    def __init__(self, value: Any):
        # Only the type is used, repr() of the value may fail or be huge.
        self.value_type = type(value)
        super().__init__(f"cannot encode object of type {self.value_type.__qualname__}")


class IntegerOutOfRangeError(ConversionError, OverflowError):
    """The integer fits neither signed nor unsigned 64-bit."""

    def __init__(self, value: int):
        self.value = value
        super().__init__(
            "integer out of range for both signed and unsigned 64-bit: "
            f"{_int_repr(value)}"
        )


class CircularReferenceError(ConversionError):
    """A container holds itself, directly or through its children."""
    pass


class NestingTooDeepError(ConversionError):
    def __init__(self, max_depth: int):
        self.max_depth = max_depth
        super().__init__(f"value nested deeper than max_depth={max_depth}")


class DocBindError(HostBridgeError, RuntimeError):
    """Raised when documentation cannot be attached to a target."""
    pass


class InvalidEncodingError(DocBindError, ValueError):
    """The documentation text is not valid UTF-8."""
    pass


class AlreadyDocumentedError(DocBindError):
    """
    The target's documentation slot is already populated.

    Properties:
        name: the target's own name, when it has one
    """

    def __init__(self, kind: str, name: Optional[str]):
        self.name = name
        if name:
            message = f"{kind} '{name}' already has a docstring"
        else:
            message = f"{kind} already has a docstring"
        super().__init__(message)


class UnsupportedTargetError(DocBindError, TypeError):
    """The host object rejected the documentation write."""
    pass


def _int_repr(value: int, limit: int = 80) -> str:
    # repr() of a huge int can exceed sys.get_int_max_str_digits()
    if value.bit_length() > 1024:
        return f"<int of {value.bit_length()} bits>"
    text = repr(value)
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text
