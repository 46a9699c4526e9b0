"""
Structural validation of booking requests.

Runs before conflict detection: required ids, a YYYY-MM-DD date,
'HH:MM' times and start < end. All problems are collected and reported
together.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from tutorschedule.errors import ValidationError
from tutorschedule.intervals import minutes_to_time, time_to_minutes
from tutorschedule.model import Booking

REQUIRED_IDS = ("student_id", "teacher_id", "classroom_id", "subject_id")


def parse_date(value: Any) -> date:
    """
    Accept a date object or a 'YYYY-MM-DD' string.
    Raises ValueError otherwise.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()


def _parse_time(payload: dict[str, Any], key: str, errors: list[str]) -> Optional[int]:
    raw = payload.get(key)
    if raw is None or not str(raw).strip():
        errors.append(f"{key}: required")
        return None
    try:
        return time_to_minutes(str(raw))
    except ValueError:
        errors.append(f"{key}: expected HH:MM, got {raw!r}")
        return None


def validate_booking(payload: dict[str, Any]) -> Booking:
    """
    Validate a raw booking payload and return a candidate Booking (id=None).
    Raises ValidationError listing every problem.
    """
    errors: list[str] = []

    ids: dict[str, str] = {}
    for key in REQUIRED_IDS:
        value = str(payload.get(key) or "").strip()
        if not value:
            errors.append(f"{key}: required")
        ids[key] = value

    d: Optional[date] = None
    raw_date = payload.get("date")
    if raw_date is None or not str(raw_date).strip():
        errors.append("date: required")
    else:
        try:
            d = parse_date(raw_date)
        except ValueError:
            errors.append(f"date: expected YYYY-MM-DD, got {raw_date!r}")

    start = _parse_time(payload, "start", errors)
    end = _parse_time(payload, "end", errors)
    if start is not None and end is not None and start >= end:
        errors.append("start must be earlier than end")

    if errors or d is None or start is None or end is None:
        raise ValidationError(errors)

    notes = payload.get("notes")
    notes = str(notes).strip() if notes is not None else ""

    return Booking(
        student_id=ids["student_id"],
        teacher_id=ids["teacher_id"],
        classroom_id=ids["classroom_id"],
        subject_id=ids["subject_id"],
        date=d,
        start=minutes_to_time(start),
        end=minutes_to_time(end),
        notes=notes or None,
    )
