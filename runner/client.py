from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable

import httpx

from faststatus.domain.resource import Resource
from faststatus.domain.status import Status
from faststatus.logging_conf import get_logger
from runner.types import CreateError, FetchError, SmokeError, Tracked, UpdateError

logger = get_logger("runner.client")

_JSON = {"Accept": "application/json"}
_TEXT = {"Accept": "text/plain"}


async def wait_for_health(base_url: str, timeout_s: float = 20.0) -> None:
    """Ping /health until it returns ok or raise after a timeout."""
    deadline = time.monotonic() + timeout_s
    async with httpx.AsyncClient(base_url=base_url, timeout=5.0) as client:
        while time.monotonic() < deadline:
            try:
                r = await client.get("/health")
                if r.status_code == 200 and r.json().get("ok") is True:
                    logger.info("health.ok", extra={"event": "health_ok"})
                    return
            except httpx.HTTPError as e:
                logger.debug("health.wait", extra={"event": "health_wait", "error": str(e)})
            await asyncio.sleep(0.25)
    raise SmokeError("Health check did not pass within timeout")


async def create_resource(
    client: httpx.AsyncClient, name: str, *, retries: int = 3
) -> Tracked:
    """POST a Free resource and return its server-assigned id, with retry."""
    last_err: Exception | None = None
    body = Resource(friendly_name=name).to_dict()
    # Server allocates the id and stamps `since`.
    del body["id"], body["since"]
    for attempt in range(retries):
        try:
            r = await client.post("/current", json=body, headers=_JSON)
            r.raise_for_status()
            rid = r.json()[0]["id"]
            logger.info(
                "resource.created",
                extra={"event": "resource_created", "id": rid, "attempt": attempt + 1},
            )
            return Tracked(id=rid, name=name)
        except httpx.HTTPError as e:  # pragma: no cover - network flakiness
            last_err = e
            logger.warning(
                "resource.create_retry",
                extra={"event": "resource_create_retry", "attempt": attempt + 1, "error": str(e)},
            )
    raise CreateError(str(last_err) if last_err else "create failed")


async def set_status(
    client: httpx.AsyncClient, tracked: Tracked, status: Status, *, retries: int = 2
) -> None:
    """PUT a new status for `tracked`; `since` is left for the server to stamp."""
    body = {"id": tracked.id, "friendlyName": tracked.name, "status": status.serialize()}
    last_err: Exception | None = None
    for attempt in range(retries):
        try:
            r = await client.put(f"/current/{tracked.id}", json=body, headers=_JSON)
            r.raise_for_status()
            tracked.expected_status = int(status)
            return
        except httpx.HTTPError as e:  # pragma: no cover
            last_err = e
            logger.warning(
                "resource.update_retry",
                extra={
                    "event": "resource_update_retry",
                    "id": tracked.id,
                    "status": status.pretty(),
                    "attempt": attempt + 1,
                    "error": str(e),
                },
            )
    raise UpdateError(f"update failed for {tracked.id}: {last_err}")


async def fetch(
    client: httpx.AsyncClient, ids: Iterable[str], *, as_json: bool, retries: int = 3
) -> httpx.Response:
    """GET /current/<id>/<id>/... as JSON or text, with retry."""
    path = "/current/" + "/".join(ids)
    last_err: Exception | None = None
    for _ in range(retries):
        try:
            r = await client.get(path, headers=_JSON if as_json else _TEXT)
            r.raise_for_status()
            return r
        except httpx.HTTPError as e:  # pragma: no cover
            last_err = e
            logger.warning(
                "resource.fetch_retry",
                extra={"event": "resource_fetch_retry", "path": path, "error": str(e)},
            )
    raise FetchError(str(last_err) if last_err else "fetch failed")


async def delete_resource(client: httpx.AsyncClient, rid: str) -> bool:
    """DELETE one resource; True if the server removed it."""
    r = await client.delete(f"/current/{rid}")
    return r.status_code == 204
