from __future__ import annotations

import secrets
from dataclasses import replace
from datetime import UTC, datetime

from ..domain.ids import UINT64_MAX, storage_key
from ..domain.resource import Resource
from ..domain.timefmt import ZERO_TIME
from ..logging_conf import get_logger
from ..store import ResourceStore

logger = get_logger("service.current")

# Give up allocating a fresh id after this many collisions.
_MAX_ID_ATTEMPTS = 8


class ResourceNotFoundError(LookupError):
    """No stored resource matched the requested id(s)."""

    code = "not_found"


class IdMismatchError(ValueError):
    """The id in a request body disagrees with the one in the URL."""

    code = "id_mismatch"


def now_utc() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(UTC)


def new_id() -> int:
    """Random non-zero 64-bit id."""
    return secrets.randbelow(UINT64_MAX) + 1


def _stamp(resource: Resource) -> Resource:
    # A write without `since` means "entered this status now".
    if resource.since == ZERO_TIME:
        return replace(resource, since=now_utc())
    return resource


# ------------------------
# Use-cases
# ------------------------

def get_resources(store: ResourceStore, *, ids: list[int]) -> list[Resource]:
    """Return stored resources for `ids` in request order, skipping missing ones.

    Raises:
        ResourceNotFoundError: if `ids` is empty or none of them exist.
    """
    if not ids:
        raise ResourceNotFoundError("no ids requested")
    found = store.get_many(ids)
    logger.info(
        "resource.get",
        extra={"event": "resource_get", "requested": len(ids), "found": len(found)},
    )
    if not found:
        raise ResourceNotFoundError("no matching resources")
    return found


def put_resource(store: ResourceStore, *, rid: int, body: bytes) -> Resource:
    """Create or replace the resource stored under `rid`.

    The body id may be omitted (0); otherwise it must equal `rid`.
    """
    resource = Resource.from_json(body)
    if resource.id not in (0, rid):
        raise IdMismatchError(
            f"body id {resource.id:X} does not match path id {rid:X}"
        )
    resource = _stamp(replace(resource, id=rid))
    store.put(resource)
    logger.info(
        "resource.put",
        extra={
            "event": "resource_put",
            "key": storage_key(rid),
            "status": resource.status.pretty(),
        },
    )
    return resource


def create_resource(store: ResourceStore, *, body: bytes) -> Resource:
    """Store a new resource under a freshly allocated id."""
    resource = Resource.from_json(body)
    if resource.id != 0:
        raise IdMismatchError("new resources must not carry an id")
    resource = _stamp(resource)
    for _ in range(_MAX_ID_ATTEMPTS):
        candidate = replace(resource, id=new_id())
        if store.insert(candidate):
            logger.info(
                "resource.create",
                extra={"event": "resource_create", "key": storage_key(candidate.id)},
            )
            return candidate
    raise RuntimeError("could not allocate a free resource id")


def delete_resource(store: ResourceStore, *, rid: int) -> None:
    """Remove the resource stored under `rid`."""
    if not store.delete(rid):
        raise ResourceNotFoundError(f"no resource with id {rid:X}")
    logger.info("resource.delete", extra={"event": "resource_delete", "key": storage_key(rid)})
