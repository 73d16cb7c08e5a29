from __future__ import annotations

import json
from typing import ClassVar

from .errors import OutOfRangeError, ParseError

__all__ = [
    "Status",
    "UINT8_MAX",
]

UINT8_MAX = 0xFF

_NAMES = ("Free", "Busy", "Occupied")


class Status(int):
    """How busy a resource is, on a scale from 0 to 2.

    0 (Free) is a completely unoccupied resource, 2 (Occupied) is completely
    occupied and 1 (Busy) is anything in between.

    A Status holds any 8-bit value so that an out-of-range bit pattern can be
    represented; only 0..2 are valid. Checked entry points are `decode` and
    `deserialize`; `Status(n)` is an unchecked conversion. Rendering is
    lenient (invalid renders as Free), serialization is strict.
    """

    __slots__ = ()

    FREE: ClassVar[Status]
    BUSY: ClassVar[Status]
    OCCUPIED: ClassVar[Status]

    def __new__(cls, value: int = 0) -> Status:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Status requires an int, got {type(value).__name__}")
        if not 0 <= value <= UINT8_MAX:
            raise ValueError(f"Status must fit in 8 bits: {value}")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        if self.in_range:
            return f"Status.{_NAMES[self].upper()}"
        return f"Status({int(self)})"

    # For the API the compact "0,1,2" form is used; see pretty() for names.
    def __str__(self) -> str:
        return self.compact()

    @property
    def in_range(self) -> bool:
        return 0 <= self <= 2

    def force_range(self) -> Status:
        """Return this value if valid, else Free."""
        return self if self.in_range else Status.FREE

    # ------------------------
    # Decode
    # ------------------------
    @classmethod
    def decode(cls, raw: int) -> Status:
        """Decode a raw 8-bit integer into a valid Status.

        Raises:
            OutOfRangeError: if `raw` is not 0, 1 or 2. The error's `status`
                attribute is Free, the value a caller should fall back to.
        """
        if isinstance(raw, bool) or not isinstance(raw, int) or not 0 <= raw <= 2:
            raise OutOfRangeError(raw)
        return cls(raw)

    @classmethod
    def lenient(cls, raw: object) -> Status:
        """Any value as a Status for display: anything invalid, of any width, is Free."""
        if isinstance(raw, bool) or not isinstance(raw, int) or not 0 <= raw <= 2:
            return cls.FREE
        return cls(raw)

    # ------------------------
    # Text renderers (never fail)
    # ------------------------
    def compact(self) -> str:
        return str(int(self.force_range()))

    def pretty(self) -> str:
        return _NAMES[self.force_range()]

    # ------------------------
    # Machine-readable form
    # ------------------------
    def serialize(self) -> int:
        """Return the numeric form for JSON/storage.

        Raises:
            OutOfRangeError: never launders an invalid value into storage.
        """
        if not self.in_range:
            raise OutOfRangeError(int(self))
        return int(self)

    def to_json(self) -> str:
        return json.dumps(self.serialize())

    @classmethod
    def deserialize(cls, raw: str | bytes) -> Status:
        """Parse a JSON number into a valid Status.

        JSON ``null`` yields Free. Raises `ParseError` for anything that is not
        an unsigned 8-bit integer and `OutOfRangeError` for 3..255.
        """
        try:
            value = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ParseError(f"Status JSON is malformed: {raw!r}") from e
        return cls.from_wire(value)

    @classmethod
    def from_wire(cls, value: object) -> Status:
        """Validate an already-parsed JSON value (see `deserialize`)."""
        if value is None:
            return cls.FREE
        if isinstance(value, bool) or not isinstance(value, int):
            raise ParseError(f"Status must be an integer, got {value!r}")
        if not 0 <= value <= UINT8_MAX:
            raise ParseError(f"Status does not fit in 8 bits: {value}")
        return cls.decode(value)


Status.FREE = Status(0)
Status.BUSY = Status(1)
Status.OCCUPIED = Status(2)
