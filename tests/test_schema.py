from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from cabin.domain.schema import SchemaError, deserialize_record, serialize_record, serialize_value


def test_timestamp_and_date_fields_become_strings():
    created = datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc)
    doc = serialize_record("todos", {"id": "t1", "createdAt": created, "dueDate": date(2024, 1, 5), "title": "x"})
    assert doc["createdAt"] == "2024-01-01T09:30:00+00:00"
    assert doc["dueDate"] == "2024-01-05"
    assert doc["title"] == "x"


def test_round_trip_keeps_formatted_value():
    created = datetime(2024, 3, 10, 17, 5, 42, 123456, tzinfo=timezone(timedelta(hours=-3)))
    doc = serialize_record("minuteTracker", {"createdAt": created, "date": date(2024, 3, 10)})
    back = deserialize_record("minuteTracker", doc)
    assert back["createdAt"].isoformat() == created.isoformat()
    assert back["date"].isoformat() == "2024-03-10"


def test_only_declared_fields_are_converted():
    # "updatedAt" is not in the members schema, so it stays a plain string
    back = deserialize_record("members", {"createdAt": "2024-01-01T00:00:00", "updatedAt": "2024-01-02T00:00:00"})
    assert isinstance(back["createdAt"], datetime)
    assert back["updatedAt"] == "2024-01-02T00:00:00"


def test_none_optional_field_is_dropped():
    doc = serialize_record("todos", {"id": "t1", "dueDate": None})
    assert "dueDate" not in doc


def test_invalid_values_are_rejected():
    with pytest.raises(SchemaError):
        serialize_record("registry", {"date": "not-a-date"})
    with pytest.raises(SchemaError):
        serialize_record("users", {"createdAt": 12345})


def test_query_values_are_normalised():
    assert serialize_value("registry", "date", date(2024, 1, 1)) == "2024-01-01"
    assert serialize_value("registry", "date", datetime(2024, 1, 1, 23, 0)) == "2024-01-01"
    assert serialize_value("registry", "memberId", "m1") == "m1"


def test_trailing_z_timestamps_are_accepted():
    back = deserialize_record("users", {"createdAt": "2024-01-01T10:00:00.000Z"})
    assert back["createdAt"] == datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)


def test_date_fields_accept_full_timestamps():
    assert serialize_value("minuteTracker", "date", "2024-01-15T00:00:00.000Z") == "2024-01-15"
    back = deserialize_record("todos", {"dueDate": "2024-07-01T00:00:00.000Z"})
    assert back["dueDate"] == date(2024, 7, 1)
    with pytest.raises(SchemaError):
        deserialize_record("todos", {"dueDate": "2024-07-01Tnoon"})
