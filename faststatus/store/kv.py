from __future__ import annotations

import os
from collections.abc import Iterable, Iterator

from sqlalchemy import Column, LargeBinary, MetaData, String, Table, create_engine, delete, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine

from ..domain.ids import storage_key
from ..domain.resource import Resource
from ..logging_conf import get_logger

__all__ = [
    "BUCKET",
    "StoreError",
    "ResourceStore",
    "get_db_path_from_env",
    "get_db_timeout_from_env",
    "metadata",
    "resources",
]

BUCKET = "resources"

logger = get_logger("store.kv")

metadata = MetaData()

# One bucket: lowercase hex id -> structured JSON bytes, stored verbatim.
resources = Table(
    BUCKET,
    metadata,
    Column("key", String, primary_key=True),
    Column("value", LargeBinary, nullable=False),
)


class StoreError(RuntimeError):
    """Raised when the store is used before `open()` or after `close()`."""


def get_db_path_from_env() -> str:
    """Return FASTSTATUS_DB from environment, defaulting to ./faststatus.db."""
    return os.getenv("FASTSTATUS_DB", "faststatus.db")


def get_db_timeout_from_env() -> float:
    """Return FASTSTATUS_DB_TIMEOUT (seconds), defaulting to 1.0."""
    raw = os.getenv("FASTSTATUS_DB_TIMEOUT", "1.0")
    try:
        val = float(raw)
    except ValueError as e:
        raise ValueError("FASTSTATUS_DB_TIMEOUT must be a float") from e
    if val <= 0:
        raise ValueError("FASTSTATUS_DB_TIMEOUT must be positive")
    return val


class ResourceStore:
    """Embedded key/value store for resources on an SQLite file.

    Keys are lowercase hex ids, values are the structured JSON form of a
    Resource stored verbatim. Each operation runs in its own transaction.
    """

    def __init__(self, path: str | os.PathLike[str], *, timeout: float = 1.0) -> None:
        self.path = os.fspath(path)
        self.timeout = timeout
        self._engine: Engine | None = None

    def __enter__(self) -> ResourceStore:
        self.open()
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @property
    def url(self) -> str:
        return f"sqlite:///{self.path}"

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise StoreError(f"store is not open: {self.path}")
        return self._engine

    def open(self) -> None:
        """Create the engine and the bucket table if missing."""
        if self._engine is not None:
            return
        engine = create_engine(
            self.url,
            connect_args={"timeout": self.timeout, "check_same_thread": False},
        )
        metadata.create_all(engine)
        self._engine = engine
        logger.info("store.open", extra={"event": "store_open", "path": self.path})

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        logger.info("store.close", extra={"event": "store_close", "path": self.path})

    # ------------------------
    # Raw bucket access
    # ------------------------
    def get_raw(self, rid: int) -> bytes | None:
        stmt = select(resources.c.value).where(resources.c.key == storage_key(rid))
        with self.engine.connect() as conn:
            value = conn.execute(stmt).scalar_one_or_none()
        return None if value is None else bytes(value)

    def put_raw(self, rid: int, value: bytes) -> None:
        """Write bytes under `rid` as-is, replacing any previous value."""
        stmt = sqlite_insert(resources).values(key=storage_key(rid), value=value)
        stmt = stmt.on_conflict_do_update(
            index_elements=[resources.c.key], set_={"value": stmt.excluded.value}
        )
        with self.engine.begin() as conn:
            conn.execute(stmt)

    def iter_raw(self, ids: Iterable[int]) -> Iterator[tuple[int, bytes | None]]:
        """Yield ``(id, raw)`` in request order; raw is None for missing keys."""
        for rid in ids:
            yield rid, self.get_raw(rid)

    # ------------------------
    # Resource API
    # ------------------------
    def get(self, rid: int) -> Resource | None:
        """Return the stored Resource or None.

        Raises ParseError/OutOfRangeError if the stored bytes do not decode.
        """
        raw = self.get_raw(rid)
        return None if raw is None else Resource.from_json(raw)

    def get_many(self, ids: Iterable[int]) -> list[Resource]:
        """Return the stored resources for `ids`, skipping missing ones."""
        return [Resource.from_json(raw) for _, raw in self.iter_raw(ids) if raw is not None]

    def exists(self, rid: int) -> bool:
        stmt = select(resources.c.key).where(resources.c.key == storage_key(rid))
        with self.engine.connect() as conn:
            return conn.execute(stmt).first() is not None

    def put(self, resource: Resource) -> None:
        """Insert or replace. Serialization errors abort before anything is written."""
        self.put_raw(resource.id, resource.to_json().encode("utf-8"))

    def insert(self, resource: Resource) -> bool:
        """Insert only if the key is free. Returns False on collision."""
        value = resource.to_json().encode("utf-8")
        stmt = (
            sqlite_insert(resources)
            .values(key=storage_key(resource.id), value=value)
            .on_conflict_do_nothing(index_elements=[resources.c.key])
        )
        with self.engine.begin() as conn:
            result = conn.execute(stmt)
        return result.rowcount == 1

    def delete(self, rid: int) -> bool:
        """Remove a key. Returns True if something was deleted."""
        stmt = delete(resources).where(resources.c.key == storage_key(rid))
        with self.engine.begin() as conn:
            result = conn.execute(stmt)
        return result.rowcount > 0
