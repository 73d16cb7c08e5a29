"""FastAPI app factory: health endpoint, request logging and the /current API."""
from __future__ import annotations

import os
import time
from collections.abc import Awaitable, Callable
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from . import __version__
from .api import router as current_router
from .logging_conf import get_logger, setup_logging
from .store import ResourceStore, get_db_path_from_env, get_db_timeout_from_env

# Configure logging before anything else.
setup_logging()
logger = get_logger("app")


def create_app(db_path: str | None = None) -> FastAPI:
    """Build the app. The store is opened on startup and closed on shutdown."""
    app = FastAPI(
        title="faststatus",
        version=os.getenv("APP_VERSION", __version__),
    )
    app.state.store = ResourceStore(
        db_path or get_db_path_from_env(),
        timeout=get_db_timeout_from_env(),
    )

    @app.on_event("startup")
    async def _on_startup() -> None:
        app.state.store.open()
        logger.info("startup", extra={"event": "startup", "db_path": app.state.store.path})

    @app.on_event("shutdown")
    async def _on_shutdown() -> None:
        app.state.store.close()
        logger.info("shutdown", extra={"event": "shutdown"})

    @app.middleware("http")
    async def request_logger(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """JSON request logging with a correlation id.

        An incoming X-Request-ID is propagated, otherwise one is minted; it is
        echoed back on the response.
        """
        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        request.state.request_id = request_id

        start = time.perf_counter()
        logger.info(
            "request.start",
            extra={
                "event": "request_start",
                "method": request.method,
                "path": request.url.path,
                "request_id": request_id,
            },
        )
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request.error",
                extra={
                    "event": "request_error",
                    "path": request.url.path,
                    "method": request.method,
                    "request_id": request_id,
                },
            )
            raise
        elapsed_ms = (time.perf_counter() - start) * 1000.0

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request.end",
            extra={
                "event": "request_end",
                "status_code": response.status_code,
                "elapsed_ms": round(elapsed_ms, 2),
                "request_id": request_id,
            },
        )
        return response

    @app.get("/health", summary="Liveness/readiness check")
    async def health() -> JSONResponse:
        return JSONResponse(content={"ok": True})

    app.include_router(current_router)

    return app


# ASGI entrypoint for uvicorn: `uvicorn faststatus.main:app --port 8000`
app = create_app()


def run() -> None:
    """Console entry point: serve `app` with uvicorn."""
    import uvicorn

    uvicorn.run(
        "faststatus.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        log_config=None,
    )
