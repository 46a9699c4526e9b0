"""
Conflict detection.

A candidate booking conflicts with an existing booking when both:
- fall on the same date,
- share the student, the teacher or the classroom,
- have overlapping [start, end) intervals.

Every collision is reported, one entry per dimension, so the caller can show
the complete list instead of one problem at a time.
"""

from __future__ import annotations

from typing import Iterable, Optional

from tutorschedule.intervals import TimeInterval
from tutorschedule.model import DIMENSIONS, Booking, Conflict

_DIMENSION_TEXT = {
    "student": "Student",
    "teacher": "Teacher",
    "classroom": "Classroom",
}


def _stored_interval(b: Booking) -> Optional[TimeInterval]:
    """
    Parse the interval of a stored booking.
    Returns None for unparsable or inverted times (treated as never-overlapping).
    """
    try:
        interval = TimeInterval.from_strings(b.start, b.end)
    except ValueError:
        return None
    if interval.is_empty:
        return None
    return interval


def _conflict_message(dimension: str, resource_id: str, other: Booking) -> str:
    return (
        f"{_DIMENSION_TEXT[dimension]} {resource_id} is already booked "
        f"{other.start}-{other.end} on {other.date.isoformat()} "
        f"(subject {other.subject_id}, booking {other.id})"
    )


def find_conflicts(
    candidate: Booking,
    existing: Iterable[Booking],
    exclude_id: Optional[str] = None,
) -> list[Conflict]:
    """
    Return all conflicts between `candidate` and `existing`.

    The candidate's times must be valid (ValueError otherwise).
    `exclude_id` defaults to the candidate's own id, so re-checking a stored
    booking never reports a collision with itself.
    An empty list means the candidate is admissible.
    """
    cand = TimeInterval.from_strings(candidate.start, candidate.end)
    skip_id = exclude_id if exclude_id is not None else candidate.id

    # Pre-parse once, keep input order
    parsed: list[tuple[Booking, TimeInterval]] = []
    for b in existing:
        if b.date != candidate.date:
            continue
        if skip_id is not None and b.id == skip_id:
            continue
        interval = _stored_interval(b)
        if interval is None:
            continue
        parsed.append((b, interval))

    conflicts: list[Conflict] = []
    for dimension in DIMENSIONS:
        rid = candidate.resource_id(dimension)
        for b, interval in parsed:
            if b.resource_id(dimension) != rid:
                continue
            if cand.overlaps(interval):
                conflicts.append(
                    Conflict(
                        dimension=dimension,
                        booking_id=b.id,
                        start=b.start,
                        end=b.end,
                        message=_conflict_message(dimension, rid, b),
                    )
                )
    return conflicts


def find_overlapping_pairs(bookings: Iterable[Booking]) -> list[tuple[Booking, Booking, list[str]]]:
    """
    Find stored booking pairs (A,B) that already break the no-overlap rule.
    Each pair appears once (i<j) together with the dimensions they share.
    """
    parsed: list[tuple[Booking, TimeInterval]] = []
    for b in bookings:
        interval = _stored_interval(b)
        if interval is None:
            continue
        parsed.append((b, interval))

    pairs: list[tuple[Booking, Booking, list[str]]] = []

    # O(n^2) is fine for a tutoring center's booking volume
    for i in range(len(parsed)):
        b1, t1 = parsed[i]
        for j in range(i + 1, len(parsed)):
            b2, t2 = parsed[j]
            if b1.date != b2.date:
                continue
            shared = [dim for dim in DIMENSIONS if b1.resource_id(dim) == b2.resource_id(dim)]
            if shared and t1.overlaps(t2):
                pairs.append((b1, b2, shared))

    return pairs
