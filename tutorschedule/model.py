"""
Central data model definitions used across the project.

This module defines the canonical structure of Booking, Conflict and DayRecord
objects so that:
- all modules share the same field names
- the JSON store and the engine agree on one serialized form
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date as Date
from typing import Any, List, Optional

# Resource dimensions along which double-booking is not allowed.
STUDENT = "student"
TEACHER = "teacher"
CLASSROOM = "classroom"
DIMENSIONS = (STUDENT, TEACHER, CLASSROOM)

WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


@dataclass
class Booking:
    """
    One scheduled lesson: a student, a teacher, a classroom and a subject
    on a single date between `start` and `end` ('HH:MM').

    `id` is None for a candidate that has not been stored yet.
    """

    student_id: str
    teacher_id: str
    classroom_id: str
    subject_id: str
    date: Date
    start: str
    end: str
    notes: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[str] = None

    def resource_id(self, dimension: str) -> str:
        if dimension not in DIMENSIONS:
            raise ValueError(f"Unknown resource dimension: {dimension!r}")
        return getattr(self, f"{dimension}_id")

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["date"] = self.date.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Booking":
        """
        Build a Booking from its serialized form.
        Raises KeyError / ValueError / TypeError on malformed input.
        """
        raw_date = data["date"]
        d = raw_date if isinstance(raw_date, Date) else Date.fromisoformat(str(raw_date))
        return cls(
            student_id=str(data["student_id"]),
            teacher_id=str(data["teacher_id"]),
            classroom_id=str(data["classroom_id"]),
            subject_id=str(data["subject_id"]),
            date=d,
            start=str(data["start"]),
            end=str(data["end"]),
            notes=data.get("notes"),
            id=data.get("id"),
            created_at=data.get("created_at"),
        )


@dataclass
class Conflict:
    """
    One collision between a candidate and an existing booking on one dimension.
    """

    dimension: str
    booking_id: Optional[str]
    start: str
    end: str
    message: str


@dataclass
class DayRecord:
    """
    All bookings of one resource on one day (possibly none).
    """

    date: Date
    weekday: int
    label: str
    bookings: List[Booking] = field(default_factory=list)


@dataclass
class OperationLog:
    operation: str
    record_id: str
    description: str
    created_at: str
    operator: Optional[str] = None
    data: Optional[dict[str, Any]] = None
    old_data: Optional[dict[str, Any]] = None
