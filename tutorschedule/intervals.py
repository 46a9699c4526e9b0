"""
Wall-clock intervals within a single day.

Times are 'HH:MM' strings converted to minutes since midnight.
Intervals are half-open [start, end):
    overlap <=> a_start < b_end AND b_start < a_end
so two lessons that merely touch (10:00-11:00, 11:00-12:00) do not overlap.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_TIME_RE = re.compile(r"^([0-9]{1,2}):([0-9]{2})$")


def time_to_minutes(hhmm: str) -> int:
    """
    Convert 'HH:MM' (or 'H:MM') to minutes since midnight.
    Raises ValueError for invalid formats.
    """
    m = _TIME_RE.match(str(hhmm).strip())
    if not m:
        raise ValueError(f"Invalid time format: {hhmm!r}")
    h = int(m.group(1))
    mi = int(m.group(2))
    if not (0 <= h <= 23 and 0 <= mi <= 59):
        raise ValueError(f"Invalid time value: {hhmm!r}")
    return h * 60 + mi


def minutes_to_time(minutes: int) -> str:
    if not (0 <= minutes < 24 * 60):
        raise ValueError(f"Minutes out of range: {minutes!r}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    return a_start < b_end and b_start < a_end


@dataclass(frozen=True)
class TimeInterval:
    """
    Half-open interval [start, end) in minutes since midnight.
    """

    start: int
    end: int

    @classmethod
    def from_strings(cls, start: str, end: str) -> "TimeInterval":
        return cls(time_to_minutes(start), time_to_minutes(end))

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start

    def overlaps(self, other: "TimeInterval") -> bool:
        # inverted or empty intervals never collide with anything
        if self.is_empty or other.is_empty:
            return False
        return overlaps(self.start, self.end, other.start, other.end)

    def __str__(self) -> str:
        return f"{minutes_to_time(self.start)}-{minutes_to_time(self.end)}"
