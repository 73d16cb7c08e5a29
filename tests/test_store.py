"""Tests for the SQLAlchemy-backed resource store."""

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from faststatus.domain.errors import OutOfRangeError, ParseError
from faststatus.domain.status import Status
from faststatus.store import ResourceStore, StoreError, get_db_timeout_from_env, resources


def test_put_then_get(store, sample_resource):
    store.put(sample_resource)
    assert store.get(sample_resource.id) == sample_resource
    assert store.exists(sample_resource.id)


def test_value_is_structured_form_under_lowercase_key(store, sample_resource):
    """Test: the stored bytes are exactly the structured form."""
    store.put(sample_resource)
    assert store.get_raw(0x0123456789ABCDEF) == sample_resource.to_json().encode()
    with store.engine.connect() as conn:
        keys = list(conn.execute(select(resources.c.key)).scalars())
    assert keys == ["123456789abcdef"]


def test_get_missing(store):
    assert store.get(42) is None
    assert store.get_raw(42) is None
    assert not store.exists(42)


def test_get_many_skips_missing_and_keeps_order(store, sample_resource):
    other = replace(sample_resource, id=7, friendly_name="Other")
    store.put(sample_resource)
    store.put(other)
    found = store.get_many([7, 99, sample_resource.id])
    assert [r.id for r in found] == [7, sample_resource.id]


def test_put_replaces(store, sample_resource):
    store.put(sample_resource)
    store.put(replace(sample_resource, status=Status.OCCUPIED))
    assert store.get(sample_resource.id).status == Status.OCCUPIED


def test_put_invalid_status_writes_nothing(store, sample_resource):
    with pytest.raises(OutOfRangeError):
        store.put(replace(sample_resource, status=Status(5)))
    assert not store.exists(sample_resource.id)


def test_insert_only_when_free(store, sample_resource):
    assert store.insert(sample_resource) is True
    assert store.insert(replace(sample_resource, friendly_name="dup")) is False
    assert store.get(sample_resource.id).friendly_name == "My Resource"


def test_delete(store, sample_resource):
    store.put(sample_resource)
    assert store.delete(sample_resource.id) is True
    assert store.delete(sample_resource.id) is False


def test_corrupt_value_surfaces_parse_error(store):
    store.put_raw(1, b"{nope")
    with pytest.raises(ParseError):
        store.get(1)


def test_persists_across_reopen(tmp_path, sample_resource):
    path = tmp_path / "reopen.db"
    with ResourceStore(path) as s:
        s.put(sample_resource)
    with ResourceStore(path) as s:
        assert s.get(sample_resource.id) == sample_resource


def test_closed_store_raises(tmp_path):
    s = ResourceStore(tmp_path / "closed.db")
    with pytest.raises(StoreError):
        s.get(1)
    s.open()
    s.close()
    s.close()
    assert not s.is_open


def test_timeout_from_env(monkeypatch):
    monkeypatch.setenv("FASTSTATUS_DB_TIMEOUT", "2.5")
    assert get_db_timeout_from_env() == 2.5
    monkeypatch.setenv("FASTSTATUS_DB_TIMEOUT", "0")
    with pytest.raises(ValueError):
        get_db_timeout_from_env()
    monkeypatch.setenv("FASTSTATUS_DB_TIMEOUT", "soon")
    with pytest.raises(ValueError):
        get_db_timeout_from_env()


# A value as written by another faststatus server: unpadded id, nanosecond
# fraction and a non-UTC offset.
FOREIGN_VALUE = (
    b'{"id":"123456789ABCDEF","friendlyName":"My Resource","status":1,'
    b'"since":"2006-01-02T15:04:05.123456789-07:00"}'
)


def test_reads_value_written_by_other_servers(store):
    store.put_raw(0x123456789ABCDEF, FOREIGN_VALUE)
    r = store.get(0x123456789ABCDEF)
    assert r.id == 0x123456789ABCDEF
    assert r.friendly_name == "My Resource"
    assert r.status == Status.BUSY
    assert r.since == datetime(2006, 1, 2, 15, 4, 5, 123456, tzinfo=timezone(timedelta(hours=-7)))
    assert r.since.utcoffset() == timedelta(hours=-7)


def test_put_raw_replaces(store):
    store.put_raw(1, b"{}")
    store.put_raw(1, b'{"id": "1"}')
    assert store.get_raw(1) == b'{"id": "1"}'
