from __future__ import annotations

import re

from .errors import ParseError

__all__ = [
    "UINT64_MAX",
    "parse_hex_id",
    "format_display_id",
    "format_wire_id",
    "storage_key",
    "ids_from_path",
]

UINT64_MAX = (1 << 64) - 1

# Plain hex digits only: no "0x" prefix, sign, whitespace or underscores.
_HEX_RE = re.compile(r"[0-9A-Fa-f]+")


def parse_hex_id(text: str) -> int:
    """Parse a hexadecimal identifier into an unsigned 64-bit integer.

    Both cases are accepted. Raises:
        ParseError: if `text` is empty, not plain hex, or overflows 64 bits.
    """
    if not isinstance(text, str) or not _HEX_RE.fullmatch(text):
        raise ParseError(f"invalid hex identifier: {text!r}")
    value = int(text, 16)
    if value > UINT64_MAX:
        raise ParseError(f"hex identifier out of 64-bit range: {text!r}")
    return value


def format_display_id(value: int) -> str:
    """Fixed-width 16-digit uppercase form used in line-text output."""
    return f"{value:016X}"


def format_wire_id(value: int) -> str:
    """Uppercase unpadded form used in the structured (JSON) representation."""
    return f"{value:X}"


def storage_key(value: int) -> str:
    """Lowercase unpadded form used as the key in the store.

    Kept separate from the display forms: every write and read path derives
    keys through this function.
    """
    return f"{value:x}"


def ids_from_path(path: str) -> list[int]:
    """Split a slash-separated path of hex ids, ignoring empty segments."""
    return [parse_hex_id(seg) for seg in path.split("/") if seg]
