from __future__ import annotations

import json
from collections.abc import Callable, Iterable

from fastapi import Response, status

from ..domain.resource import Resource

__all__ = [
    "TEXT",
    "JSON",
    "text_or_json",
    "encode_text",
    "encode_json",
    "encoder",
    "not_found",
    "server_error",
    "render",
]

TEXT = "text/plain"
JSON = "application/json"


def text_or_json(accept: str | None) -> str:
    """Pick the response media type from an Accept header.

    The first listed of ``application/json`` / ``text/plain`` / ``*/*`` wins;
    anything else, or no header, means text.
    """
    for part in (accept or "").split(","):
        media = part.split(";", 1)[0].strip().lower()
        if media == JSON:
            return JSON
        if media in (TEXT, "*/*"):
            return TEXT
    return TEXT


def encode_text(resources: Iterable[Resource]) -> str:
    """One line-text record per resource, each newline-terminated."""
    return "".join(f"{r}\n" for r in resources)


def encode_json(resources: Iterable[Resource]) -> str:
    """JSON array of structured resources.

    Raises OutOfRangeError before anything is produced if any status is bad.
    """
    return json.dumps([r.to_dict() for r in resources], ensure_ascii=False) + "\n"


def encoder(media: str) -> Callable[[Iterable[Resource]], str]:
    if media == JSON:
        return encode_json
    return encode_text


def not_found(media: str) -> Response:
    if media == JSON:
        return Response("[]", status_code=status.HTTP_404_NOT_FOUND, media_type=JSON)
    return Response("Resource Not Found\n", status_code=status.HTTP_404_NOT_FOUND, media_type=TEXT)


def server_error(media: str) -> Response:
    if media == JSON:
        return Response("", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, media_type=JSON)
    return Response("Server Error\n", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, media_type=TEXT)


def render(resources: list[Resource], media: str, *, status_code: int = status.HTTP_200_OK) -> Response:
    """Encode `resources` for `media`; encoding errors propagate to the caller."""
    body = encoder(media)(resources)
    return Response(body, status_code=status_code, media_type=media)
