"""faststatus: occupancy status of arbitrary resources over HTTP.

Resources (people, rooms, machines) are Free, Busy or Occupied; the service
stores them in an embedded key/value store and serves them as text lines or
JSON.
"""
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("faststatus")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
