from __future__ import annotations

from fastapi import APIRouter, Depends, Header, HTTPException, Request, Response, status
from fastapi.concurrency import run_in_threadpool

from ..domain.errors import ParseError, ResourceError
from ..domain.ids import ids_from_path, parse_hex_id
from ..logging_conf import get_logger
from ..service import current
from ..store import ResourceStore
from .negotiation import not_found, render, server_error, text_or_json

router = APIRouter(prefix="/current", tags=["current"])
logger = get_logger("api")


def get_store(request: Request) -> ResourceStore:
    """The store opened by the app at startup."""
    return request.app.state.store


def _media(accept: str | None = Header(default=None)) -> str:
    return text_or_json(accept)


def _log_failure(event: str, exc: Exception, **fields: object) -> None:
    logger.warning(
        event,
        extra={
            "event": event.replace(".", "_"),
            "error_code": getattr(exc, "code", type(exc).__name__),
            "error_message": str(exc),
            **fields,
        },
    )


def _bad_request(exc: current.IdMismatchError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error_code": exc.code, "error_message": str(exc)},
    )


@router.get("", include_in_schema=False)
@router.get("/", include_in_schema=False)
async def get_nothing(media: str = Depends(_media)) -> Response:
    """No ids requested."""
    return not_found(media)


@router.get("/{ids:path}", summary="Fetch resources by hex id")
def get_resources(
    ids: str,
    media: str = Depends(_media),
    store: ResourceStore = Depends(get_store),
) -> Response:
    """Return the resources named by slash-separated hex ids."""
    try:
        wanted = ids_from_path(ids)
    except ParseError as e:
        _log_failure("request.bad_ids", e, path=ids)
        return not_found(media)
    try:
        found = current.get_resources(store, ids=wanted)
    except current.ResourceNotFoundError:
        return not_found(media)
    except ResourceError as e:
        _log_failure("resource.decode_failed", e, path=ids)
        return server_error(media)
    try:
        return render(found, media)
    except ResourceError as e:
        _log_failure("resource.encode_failed", e, path=ids)
        return server_error(media)


@router.put("/{rid}", summary="Create or replace a resource")
async def put_resource(
    rid: str,
    request: Request,
    media: str = Depends(_media),
    store: ResourceStore = Depends(get_store),
) -> Response:
    """Store the resource in the body under `rid`; echo what was stored."""
    try:
        key = parse_hex_id(rid)
    except ParseError:
        return not_found(media)
    body = await request.body()
    try:
        stored = await run_in_threadpool(current.put_resource, store, rid=key, body=body)
        return render([stored], media)
    except current.IdMismatchError as e:
        _log_failure("resource.id_mismatch", e, rid=rid)
        raise _bad_request(e)
    except ResourceError as e:
        _log_failure("resource.put_failed", e, rid=rid)
        return server_error(media)


@router.post("", summary="Create a resource with a new id", status_code=status.HTTP_201_CREATED)
async def create_resource(
    request: Request,
    media: str = Depends(_media),
    store: ResourceStore = Depends(get_store),
) -> Response:
    """Allocate an id for the resource in the body and store it."""
    body = await request.body()
    try:
        created = await run_in_threadpool(current.create_resource, store, body=body)
        return render([created], media, status_code=status.HTTP_201_CREATED)
    except current.IdMismatchError as e:
        _log_failure("resource.id_mismatch", e)
        raise _bad_request(e)
    except ResourceError as e:
        _log_failure("resource.create_failed", e)
        return server_error(media)


@router.delete("/{rid}", summary="Delete a resource", status_code=status.HTTP_204_NO_CONTENT)
def delete_resource(
    rid: str,
    media: str = Depends(_media),
    store: ResourceStore = Depends(get_store),
) -> Response:
    """Remove the resource stored under `rid`."""
    try:
        current.delete_resource(store, rid=parse_hex_id(rid))
    except (ParseError, current.ResourceNotFoundError):
        return not_found(media)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
