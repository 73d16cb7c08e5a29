"""Tests for Resource line-text and structured forms."""

import json
from dataclasses import replace
from datetime import UTC, datetime, timedelta, timezone

import pytest

from faststatus.domain.errors import (
    InvalidStatusError,
    OutOfRangeError,
    ParseError,
)
from faststatus.domain.resource import Resource
from faststatus.domain.status import Status
from faststatus.domain.timefmt import ZERO_TIME


def test_empty_resource_defaults():
    r = Resource()
    assert r.id == 0
    assert r.friendly_name == ""
    assert r.status == Status.FREE
    assert r.since == ZERO_TIME


def test_line_text(sample_resource):
    assert str(sample_resource) == "2006-01-02T15:04:05Z 1 0123456789ABCDEF My Resource"


def test_line_text_empty_resource():
    assert str(Resource()) == "0001-01-01T00:00:00Z 0 0000000000000000 "


def test_line_text_keeps_offset_and_drops_fraction():
    since = datetime(2006, 1, 2, 15, 4, 5, 999, tzinfo=timezone(timedelta(hours=-7)))
    r = Resource(id=1, friendly_name="x", since=since)
    assert str(r) == "2006-01-02T15:04:05-07:00 0 0000000000000001 x"


def test_line_text_out_of_range_status_renders_free(sample_resource):
    sample_resource.status = Status(9)
    assert str(sample_resource).split(" ")[1] == "0"


def test_structured_form(sample_resource):
    assert sample_resource.to_dict() == {
        "id": "123456789ABCDEF",
        "friendlyName": "My Resource",
        "status": 1,
        "since": "2006-01-02T15:04:05Z",
    }
    assert json.loads(sample_resource.to_json()) == sample_resource.to_dict()


def test_structured_form_fractional_seconds():
    r = Resource(since=datetime(2020, 5, 1, 8, 0, 0, 250000, tzinfo=UTC))
    assert r.to_dict()["since"] == "2020-05-01T08:00:00.25Z"


def test_status_assigned_after_construction(sample_resource):
    """Test: a wide status set on the field renders Free but will not serialize."""
    sample_resource.status = 300
    assert str(sample_resource) == "2006-01-02T15:04:05Z 0 0123456789ABCDEF My Resource"
    with pytest.raises(OutOfRangeError):
        sample_resource.to_dict()


def test_serialize_out_of_range_status_fails(sample_resource):
    """Test: a bad status aborts serialization with no output."""
    bad = replace(sample_resource, status=Status(3))
    with pytest.raises(OutOfRangeError):
        bad.to_dict()
    with pytest.raises(OutOfRangeError):
        bad.to_json()


def test_round_trip(sample_resource):
    assert Resource.from_json(sample_resource.to_json()) == sample_resource


def test_round_trip_with_microseconds_and_offset():
    r = Resource(
        id=0xFFFFFFFFFFFFFFFF,
        friendly_name="Café ☕",
        status=Status.OCCUPIED,
        since=datetime(2024, 2, 29, 23, 59, 59, 123456, tzinfo=timezone(timedelta(hours=5, minutes=30))),
    )
    assert Resource.from_json(r.to_json()) == r


def test_decode_absent_fields_are_zero():
    assert Resource.from_json("{}") == Resource()


@pytest.mark.parametrize("body", ['{"id": "0"}', '{"id": ""}', '{"id": null}'])
def test_decode_zero_ids(body):
    assert Resource.from_json(body).id == 0


def test_decode_lowercase_hex_and_key_case():
    r = Resource.from_json(b'{"ID": "abc", "FriendlyName": "Room", "STATUS": 2}')
    assert r.id == 0xABC
    assert r.friendly_name == "Room"
    assert r.status == Status.OCCUPIED


def test_decode_naive_since_is_utc():
    r = Resource.from_json('{"since": "2006-01-02T15:04:05"}')
    assert r.since == datetime(2006, 1, 2, 15, 4, 5, tzinfo=UTC)


@pytest.mark.parametrize("rid", ["zz", "0x1F", "-1", "1_0", " 1", "1\n", "10000000000000000"])
def test_decode_bad_id(rid):
    with pytest.raises(ParseError):
        Resource.from_json(json.dumps({"id": rid}))


def test_decode_out_of_range_status():
    """Test: status 3 fails as both ParseError and OutOfRange, repaired to Free."""
    with pytest.raises(InvalidStatusError) as info:
        Resource.from_json('{"id": "1", "status": 3}')
    assert isinstance(info.value, ParseError)
    assert isinstance(info.value, OutOfRangeError)
    assert info.value.status == Status.FREE


@pytest.mark.parametrize(
    "body",
    [
        "not json",
        "[]",
        '{"id": 12}',
        '{"status": "1"}',
        '{"status": 1.5}',
        '{"status": 300}',
        '{"friendlyName": 5}',
        '{"since": "yesterday"}',
    ],
)
def test_decode_malformed(body):
    with pytest.raises(ParseError):
        Resource.from_json(body)


def test_constructor_rejects_wide_ids():
    with pytest.raises(ValueError):
        Resource(id=1 << 64)
    with pytest.raises(ValueError):
        Resource(id=-1)


def test_copy_is_independent(sample_resource):
    copy = replace(sample_resource)
    copy.status = Status.FREE
    assert sample_resource.status == Status.BUSY


@pytest.mark.parametrize(
    "since,expected",
    [
        ("2006-01-02T15:04:05Z", datetime(2006, 1, 2, 15, 4, 5, tzinfo=UTC)),
        ("2006-01-02T15:04:05-07:00", datetime(2006, 1, 2, 22, 4, 5, tzinfo=UTC)),
        ("2006-01-02T15:04:05+05:30", datetime(2006, 1, 2, 9, 34, 5, tzinfo=UTC)),
        ("2006-01-02T15:04:05.123456789Z", datetime(2006, 1, 2, 15, 4, 5, 123456, tzinfo=UTC)),
    ],
)
def test_decode_since_text(since, expected):
    r = Resource.from_json(json.dumps({"id": "1", "since": since}))
    assert r.since == expected


def test_decode_since_keeps_offset():
    r = Resource.from_json('{"since": "2006-01-02T15:04:05-07:00"}')
    assert r.since.utcoffset() == timedelta(hours=-7)
    assert str(r).startswith("2006-01-02T15:04:05-07:00 ")
