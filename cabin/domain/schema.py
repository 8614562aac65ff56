"""
Explicit description of which persisted fields hold dates or timestamps.

Documents are stored as plain JSON, so date-like values travel as strings.
Every collection lists its date-like fields here; anything not listed is
stored as-is. Values are checked at the serialization boundary so a malformed
date never reaches the store.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping

TIMESTAMP = "timestamp"
DATE = "date"

SCHEMA: dict[str, dict[str, str]] = {
    "users": {"createdAt": TIMESTAMP},
    "members": {"createdAt": TIMESTAMP},
    "registry": {"date": DATE},
    "todos": {"createdAt": TIMESTAMP, "dueDate": DATE},
    "minuteTracker": {"createdAt": TIMESTAMP, "date": DATE},
    "sessions": {"createdAt": TIMESTAMP},
}


class SchemaError(ValueError):
    """Raised when a date-like field holds a value that cannot be converted."""


def fields_for(collection: str) -> dict[str, str]:
    return SCHEMA.get(collection, {})


def _parse_timestamp(value: str) -> datetime:
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _parse_date(value: str) -> date:
    text = value.strip()
    if len(text) > 10:
        # older records hold a full timestamp in date-only fields
        return _parse_timestamp(text).date()
    return date.fromisoformat(text)


def _encode(kind: str, value: Any) -> str:
    if kind == TIMESTAMP:
        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(value, str):
            return _parse_timestamp(value).isoformat()
    elif kind == DATE:
        if isinstance(value, datetime):
            return value.date().isoformat()
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, str):
            return _parse_date(value).isoformat()
    raise TypeError(f"unsupported value {value!r}")


def _decode(kind: str, value: Any) -> Any:
    if not isinstance(value, str):
        return value
    if kind == TIMESTAMP:
        return _parse_timestamp(value)
    return _parse_date(value)


def serialize_value(collection: str, field: str, value: Any) -> Any:
    kind = fields_for(collection).get(field)
    if kind is None or value is None:
        return value
    try:
        return _encode(kind, value)
    except (TypeError, ValueError) as exc:
        raise SchemaError(f"{collection}.{field}: invalid {kind} value {value!r}") from exc


def serialize_record(collection: str, record: Mapping[str, Any]) -> dict:
    """Return a JSON-ready copy of ``record``; None-valued schema fields are dropped."""
    kinds = fields_for(collection)
    out: dict = {}
    for key, value in record.items():
        if key in kinds:
            if value is None:
                continue
            out[key] = serialize_value(collection, key, value)
        else:
            out[key] = value
    return out


def deserialize_record(collection: str, document: Mapping[str, Any] | None) -> dict | None:
    if document is None:
        return None
    kinds = fields_for(collection)
    out = dict(document)
    for key, kind in kinds.items():
        if key in out and out[key] is not None:
            try:
                out[key] = _decode(kind, out[key])
            except ValueError as exc:
                raise SchemaError(f"{collection}.{key}: stored value {out[key]!r} is not a valid {kind}") from exc
    return out
