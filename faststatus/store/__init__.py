"""Embedded key/value persistence for resources."""
from .kv import (
    BUCKET,
    ResourceStore,
    StoreError,
    get_db_path_from_env,
    get_db_timeout_from_env,
    resources,
)

__all__ = [
    "BUCKET",
    "ResourceStore",
    "StoreError",
    "get_db_path_from_env",
    "get_db_timeout_from_env",
    "resources",
]
