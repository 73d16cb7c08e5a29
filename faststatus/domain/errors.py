from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover
    from .status import Status

__all__ = [
    "ResourceError",
    "ParseError",
    "OutOfRangeError",
    "InvalidStatusError",
]


class ResourceError(ValueError):
    """Base class for resource encode/decode errors.

    The `code` attribute lets the API map errors to stable machine codes.
    """

    code: str = "invalid_resource"


class ParseError(ResourceError):
    """Malformed hex identifier or malformed structured (JSON) input."""

    code = "parse_error"


class OutOfRangeError(ResourceError):
    """A Status value fell outside {Free, Busy, Occupied}.

    `value` is the offending raw value. `status` is what the caller is left
    with after the failure, which is always Free.
    """

    code = "out_of_range"

    def __init__(self, value: Any, message: str | None = None) -> None:
        from .status import Status

        self.value = value
        self.status: Status = Status.FREE
        super().__init__(message or f"Status not in valid range: {value!r}")


class InvalidStatusError(ParseError, OutOfRangeError):
    """Status out of range while decoding a structured Resource."""

    code = "status_out_of_range"
