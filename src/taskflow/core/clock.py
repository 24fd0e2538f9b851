# src/taskflow/core/clock.py

from __future__ import annotations

import uuid
from datetime import date, datetime, time, timezone

from .errors import ValidationError

# Sort key for "no due date": later than any real date.
FAR_FUTURE = datetime(9999, 12, 31, tzinfo=timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


def parse_datetime(value: datetime | date | str | None, *, label: str = "tanggal") -> datetime | None:
    """
    Normalize user input into an aware UTC datetime.

    Accepts:
    - None / "" -> None
    - datetime (naive values are taken as UTC)
    - date -> midnight UTC of that day
    - ISO-8601 string (a trailing "Z" is fine)
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time.min)
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            dt = datetime.fromisoformat(raw)
        except ValueError as e:
            raise ValidationError(f"Format {label} tidak valid: '{value}'") from e
    else:
        raise ValidationError(f"Format {label} tidak valid: '{value}'")

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt is not None else None
