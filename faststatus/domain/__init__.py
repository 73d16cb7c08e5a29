"""Pure domain types: Status, Resource and their wire/text forms.

These modules are free of FastAPI/HTTP and storage concerns so they can be
unit-tested and reused by the server, the store and the smoke runner.
"""
from .errors import InvalidStatusError, OutOfRangeError, ParseError, ResourceError
from .resource import Resource
from .status import Status

__all__ = [
    "InvalidStatusError",
    "OutOfRangeError",
    "ParseError",
    "Resource",
    "ResourceError",
    "Status",
    "errors",
    "ids",
    "resource",
    "status",
    "timefmt",
]
