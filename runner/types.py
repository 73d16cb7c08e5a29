from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Tracked:
    """A resource created during the smoke run and what we expect of it."""

    id: str
    name: str
    expected_status: int = 0
    checks: dict[str, bool] = field(default_factory=dict)


class SmokeError(RuntimeError):
    """Raised when the smoke flow cannot proceed (e.g., health never ready)."""


class CreateError(SmokeError):
    """Raised when creating a resource fails after retries."""


class UpdateError(SmokeError):
    """Raised when a status update fails after retries."""


class FetchError(SmokeError):
    """Raised when fetching resources fails repeatedly."""
