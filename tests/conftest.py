"""Shared test fixtures for pytest."""

from datetime import UTC, datetime

import pytest

from faststatus.domain.resource import Resource
from faststatus.domain.status import Status
from faststatus.store import ResourceStore


@pytest.fixture
def sample_resource():
    """The canonical example resource."""
    return Resource(
        id=0x0123456789ABCDEF,
        friendly_name="My Resource",
        status=Status.BUSY,
        since=datetime(2006, 1, 2, 15, 4, 5, tzinfo=UTC),
    )


@pytest.fixture
def store(tmp_path):
    """An open store backed by a fresh database file."""
    with ResourceStore(tmp_path / "faststatus.db") as s:
        yield s


@pytest.fixture
def client(tmp_path, monkeypatch):
    """Test client for the app with an isolated database file."""
    monkeypatch.setenv("FASTSTATUS_DB", str(tmp_path / "api.db"))

    from fastapi.testclient import TestClient

    from faststatus.main import create_app

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client
