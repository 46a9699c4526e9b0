"""
Bookings -> iCalendar (.ics) file, one VEVENT per lesson.

Times are written as floating local times (no TZID), which calendar apps show
in the viewer's own zone. Long lines are folded at 75 octets.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from tutorschedule.intervals import time_to_minutes
from tutorschedule.model import Booking

_TEXT_ESCAPES = str.maketrans({"\\": "\\\\", ";": "\\;", ",": "\\,", "\n": "\\n"})
_FOLD_AT = 75


def _text(value: str) -> str:
    return value.replace("\r\n", "\n").translate(_TEXT_ESCAPES)


def _fold(line: str) -> list[str]:
    """
    Split a content line into chunks of at most 75 UTF-8 octets.
    Continuation lines start with a single space.
    """
    out: list[str] = []
    current = ""
    limit = _FOLD_AT
    for ch in line:
        if len((current + ch).encode("utf-8")) > limit:
            out.append(current)
            current = " "
            limit = _FOLD_AT
        current += ch
    out.append(current)
    return out


def _local_stamp(b: Booking, hhmm: str) -> str:
    minutes = time_to_minutes(hhmm)
    return f"{b.date:%Y%m%d}T{minutes // 60:02d}{minutes % 60:02d}00"


def _summary(b: Booking) -> str:
    return f"{b.subject_id}: student {b.student_id} with teacher {b.teacher_id}"


def _event_lines(b: Booking, dtstamp: str) -> list[str]:
    start = _local_stamp(b, b.start)
    end = _local_stamp(b, b.end)
    uid = b.id or f"{b.student_id}-{b.teacher_id}-{start}"
    lines = [
        "BEGIN:VEVENT",
        f"UID:{_text(uid)}@tutorschedule",
        f"DTSTAMP:{dtstamp}",
        f"DTSTART:{start}",
        f"DTEND:{end}",
        f"SUMMARY:{_text(_summary(b))}",
        f"LOCATION:{_text(b.classroom_id)}",
        f"CATEGORIES:{_text(b.subject_id)}",
    ]
    if b.notes and b.notes.strip():
        lines.append(f"DESCRIPTION:{_text(b.notes.strip())}")
    lines.append("END:VEVENT")
    return lines


def export_bookings_to_ics(bookings: Iterable[Booking], out_path: str | Path) -> int:
    """
    Write `bookings` to `out_path`; bookings with unparsable times are skipped.
    Returns the number of events written.
    """
    dtstamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    body: list[str] = []
    count = 0
    for b in bookings:
        try:
            body.extend(_event_lines(b, dtstamp))
        except ValueError:
            continue
        count += 1

    lines = ["BEGIN:VCALENDAR", "VERSION:2.0", "PRODID:-//TutorSchedule//Lessons//EN", *body, "END:VCALENDAR"]

    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    folded = [chunk for line in lines for chunk in _fold(line)]
    # RFC 5545 requires CRLF
    out.write_bytes(("\r\n".join(folded) + "\r\n").encode("utf-8"))
    return count
