"""
Per-day timetable for one student, teacher or classroom.

A Timetable is a read-only projection over the bookings it is given.
Iterating it yields DayRecord objects ordered by date; every iteration
starts over, so the same Timetable can be rendered and exported.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, Iterator, Optional

from tutorschedule.intervals import time_to_minutes
from tutorschedule.model import DIMENSIONS, WEEKDAY_LABELS, Booking, DayRecord
from tutorschedule.weeks import WeekCalendar


def _start_key(b: Booking) -> tuple[int, int]:
    try:
        return (0, time_to_minutes(b.start))
    except ValueError:
        return (1, 0)


def day_record(d: date, bookings: list[Booking]) -> DayRecord:
    weekday = d.isoweekday()
    return DayRecord(
        date=d,
        weekday=weekday,
        label=WEEKDAY_LABELS[weekday - 1],
        bookings=sorted(bookings, key=_start_key),
    )


class Timetable:
    """
    Bookings of one resource grouped by day.

    With `start` and `end` every date of the inclusive range yields a record,
    empty days included. Without a range only dates holding bookings appear,
    in ascending order.
    """

    def __init__(
        self,
        bookings: Iterable[Booking],
        resource: str,
        resource_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> None:
        if resource not in DIMENSIONS:
            raise ValueError(f"Unknown resource: {resource!r}")
        if (start is None) != (end is None):
            raise ValueError("Both start and end must be given for a date range")
        if start is not None and end is not None and start > end:
            raise ValueError(f"Range start {start.isoformat()} is after end {end.isoformat()}")

        self.resource = resource
        self.resource_id = resource_id
        self.start = start
        self.end = end

        self._by_date: dict[date, list[Booking]] = defaultdict(list)
        for b in bookings:
            if b.resource_id(resource) == resource_id:
                self._by_date[b.date].append(b)

    @classmethod
    def for_week(
        cls,
        bookings: Iterable[Booking],
        resource: str,
        resource_id: str,
        calendar: WeekCalendar,
        week_index: int,
    ) -> "Timetable":
        start, end = calendar.week_range(week_index)
        return cls(bookings, resource, resource_id, start=start, end=end)

    def _dates(self) -> Iterator[date]:
        if self.start is None or self.end is None:
            yield from sorted(self._by_date)
            return
        d = self.start
        while d <= self.end:
            yield d
            d += timedelta(days=1)

    def __iter__(self) -> Iterator[DayRecord]:
        for d in self._dates():
            yield day_record(d, self._by_date.get(d, []))

    def __len__(self) -> int:
        if self.start is None or self.end is None:
            return len(self._by_date)
        return (self.end - self.start).days + 1
