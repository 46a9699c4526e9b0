"""
Week index <-> calendar date mapping.

Weeks are counted from the first Monday on/after January 1 of a reference year:

    week 1 = first_monday .. first_monday + 6 (Monday..Sunday)
    week w = week 1 shifted by (w - 1) * 7 days

Weekdays are ISO numbered everywhere in this module (Monday=1 .. Sunday=7).
Never mix this with 0=Sunday numbering: a Sunday January 1 must give
first_monday = January 2, and a Sunday always belongs to the week of the
Monday..Saturday before it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from tutorschedule.errors import WeekRangeError

MIN_WEEK = 1
MAX_WEEK = 52


def first_monday(year: int) -> date:
    jan1 = date(year, 1, 1)
    dow = jan1.isoweekday()
    offset = 0 if dow == 1 else 8 - dow
    return jan1 + timedelta(days=offset)


def clamp_week_index(week_index: int, low: int = MIN_WEEK, high: int = MAX_WEEK) -> int:
    return max(low, min(high, week_index))


@dataclass(frozen=True)
class WeekCalendar:
    """
    Bidirectional mapping between week indexes and dates for one reference year.

    The calendar does not enforce the 1..52 range (see clamp_week_index);
    any non-negative index is valid, week 0 being the week just before
    the first Monday.
    """

    year: int

    @property
    def first_monday(self) -> date:
        return first_monday(self.year)

    def week_start(self, week_index: int) -> date:
        if week_index < 0:
            raise WeekRangeError(f"Week index must be non-negative, got {week_index}")
        return self.first_monday + timedelta(days=(week_index - 1) * 7)

    def week_dates(self, week_index: int) -> list[date]:
        """
        Return the 7 dates of the week, Monday through Sunday.
        """
        start = self.week_start(week_index)
        return [start + timedelta(days=i) for i in range(7)]

    def week_range(self, week_index: int) -> tuple[date, date]:
        start = self.week_start(week_index)
        return start, start + timedelta(days=6)

    def week_index(self, d: date) -> int:
        """
        Return the week index containing `d`.
        Raises WeekRangeError for dates before the first Monday.
        """
        fm = self.first_monday
        if d < fm:
            raise WeekRangeError(f"{d.isoformat()} is before the first Monday of {self.year} ({fm.isoformat()})")
        return (d - fm).days // 7 + 1

    def locate(self, d: date) -> tuple[int, int]:
        """
        Return (week_index, iso_weekday) for `d`.
        """
        return self.week_index(d), d.isoweekday()

    def current_week(self, today: Optional[date] = None) -> int:
        """
        Week index of `today`, clamped to 1..52.

        Dates before the first Monday clamp to week 1 here; use week_index()
        when such dates must be rejected instead.
        """
        today = today or date.today()
        if today < self.first_monday:
            return MIN_WEEK
        return clamp_week_index(self.week_index(today))
