from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import InvalidStatusError, OutOfRangeError, ParseError
from .ids import UINT64_MAX, format_display_id, format_wire_id, parse_hex_id
from .status import Status
from .timefmt import ZERO_TIME, as_utc, format_rfc3339, format_rfc3339_nano, parse_rfc3339

__all__ = [
    "Resource",
    "ResourcePayload",
]


# ------------------------
# Wire schema
# ------------------------
class ResourcePayload(BaseModel):
    """Structured (JSON) form of a Resource as it appears on the wire.

    Every field is optional and falls back to its zero value. Keys are matched
    case-insensitively and ``null`` counts as absent.
    """

    model_config = ConfigDict(strict=True, populate_by_name=True, extra="ignore")

    id: str = ""
    friendly_name: str = Field("", alias="friendlyName")
    status: int = 0
    since: datetime = ZERO_TIME

    @model_validator(mode="before")
    @classmethod
    def _fold_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        canonical = {"id": "id", "friendlyname": "friendlyName", "status": "status", "since": "since"}
        out: dict[str, Any] = {}
        for key, value in data.items():
            name = canonical.get(str(key).lower())
            if name is None or value is None:
                continue
            out[name] = value
        return out

    # Strict mode never turns a str into a datetime, so RFC 3339 text is parsed
    # here; this also accepts nanosecond fractions.
    @field_validator("since", mode="before")
    @classmethod
    def _parse_since(cls, v: Any) -> Any:
        if isinstance(v, str):
            return parse_rfc3339(v)
        return v


# ------------------------
# Value type
# ------------------------
@dataclass
class Resource:
    """Any resource (a person, a bathroom, a server...) that needs to say how
    busy it is.

    A plain value: copy it with `dataclasses.replace`. Changing `status`
    should always come with a matching `since`. A status assigned after
    construction is not checked: line text renders an invalid one as Free and
    the structured form refuses it with OutOfRangeError.
    """

    id: int = 0
    friendly_name: str = ""
    status: Status = Status.FREE
    since: datetime = ZERO_TIME

    def __post_init__(self) -> None:
        if not 0 <= self.id <= UINT64_MAX:
            raise ValueError(f"id must be an unsigned 64-bit integer: {self.id}")
        self.status = Status(self.status)
        self.since = as_utc(self.since)

    def __str__(self) -> str:
        """Single-line form, sortable by timestamp:

            2006-01-02T15:04:05Z 1 0123456789ABCDEF My Resource
        """
        return " ".join(
            (
                format_rfc3339(self.since),
                Status.lenient(self.status).compact(),
                format_display_id(self.id),
                self.friendly_name,
            )
        )

    def to_dict(self) -> dict[str, Any]:
        """Structured form as a JSON-ready dict.

        Raises:
            OutOfRangeError: if `status` is invalid; nothing is produced.
        """
        return {
            "id": format_wire_id(self.id),
            "friendlyName": self.friendly_name,
            "status": Status.decode(self.status).serialize(),
            "since": format_rfc3339_nano(self.since),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))

    @classmethod
    def from_json(cls, raw: str | bytes) -> Resource:
        """Decode the structured form into a new Resource.

        Decoding is all-or-nothing: either a fully populated Resource is
        returned or an error is raised.

        Raises:
            ParseError: malformed JSON, wrong field types, or an id that is
                not plain 64-bit hex.
            InvalidStatusError: status outside 0..2 (also an OutOfRangeError).
        """
        try:
            payload = ResourcePayload.model_validate_json(raw)
        except ValidationError as e:
            raise ParseError(f"Resource JSON is invalid: {e}") from e
        return cls.from_payload(payload)

    @classmethod
    def from_payload(cls, payload: ResourcePayload) -> Resource:
        try:
            status = Status.from_wire(payload.status)
        except OutOfRangeError as e:
            raise InvalidStatusError(e.value) from e
        return cls(
            id=parse_hex_id(payload.id or "0"),
            friendly_name=payload.friendly_name,
            status=status,
            since=payload.since,
        )
