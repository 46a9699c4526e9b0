"""
Unit tests for the per-day timetable projection.
"""

import unittest
from datetime import date

from tutorschedule.model import Booking
from tutorschedule.timetable import Timetable
from tutorschedule.weeks import WeekCalendar


def make(booking_id, d, start, end, student="S1", teacher="T1") -> Booking:
    return Booking(
        student_id=student,
        teacher_id=teacher,
        classroom_id="R1",
        subject_id="MATH",
        date=d,
        start=start,
        end=end,
        id=booking_id,
    )


class TestTimetable(unittest.TestCase):
    def test_empty_week_has_seven_empty_days(self) -> None:
        tt = Timetable([], "student", "S1", start=date(2025, 7, 7), end=date(2025, 7, 13))
        days = list(tt)
        self.assertEqual(len(days), 7)
        self.assertEqual(len(tt), 7)
        self.assertTrue(all(day.bookings == [] for day in days))
        self.assertEqual([day.label for day in days], ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"])
        self.assertEqual([day.weekday for day in days], [1, 2, 3, 4, 5, 6, 7])

    def test_filters_resource_and_sorts_by_start(self) -> None:
        bookings = [
            make("b1", date(2025, 7, 8), "14:00", "15:00"),
            make("b2", date(2025, 7, 8), "9:00", "10:00"),
            make("b3", date(2025, 7, 8), "11:00", "12:00", student="S2"),
            make("b4", date(2025, 7, 13), "10:00", "11:00"),
        ]
        days = list(Timetable(bookings, "student", "S1", start=date(2025, 7, 7), end=date(2025, 7, 13)))
        self.assertEqual([b.id for b in days[1].bookings], ["b2", "b1"])
        self.assertEqual([b.id for b in days[6].bookings], ["b4"])
        self.assertEqual(days[6].label, "Sun")

    def test_without_range_groups_by_date_ascending(self) -> None:
        bookings = [
            make("b1", date(2025, 7, 10), "09:00", "10:00"),
            make("b2", date(2025, 7, 1), "09:00", "10:00"),
            make("b3", date(2025, 7, 10), "08:00", "09:00", teacher="T2"),
        ]
        days = list(Timetable(bookings, "teacher", "T1"))
        self.assertEqual([d.date for d in days], [date(2025, 7, 1), date(2025, 7, 10)])
        self.assertEqual([b.id for b in days[1].bookings], ["b1"])

    def test_restartable(self) -> None:
        tt = Timetable([make("b1", date(2025, 7, 7), "09:00", "10:00")], "teacher", "T1")
        self.assertEqual(list(tt), list(tt))

    def test_for_week_uses_calendar(self) -> None:
        bookings = [make("b1", date(2025, 7, 6), "09:00", "10:00")]
        days = list(Timetable.for_week(bookings, "teacher", "T1", WeekCalendar(2025), 26))
        self.assertEqual(days[0].date, date(2025, 6, 30))
        self.assertEqual(days[-1].date, date(2025, 7, 6))
        self.assertEqual([b.id for b in days[-1].bookings], ["b1"])

    def test_bad_arguments(self) -> None:
        with self.assertRaises(ValueError):
            Timetable([], "subject", "MATH")
        with self.assertRaises(ValueError):
            Timetable([], "student", "S1", start=date(2025, 7, 8), end=date(2025, 7, 7))
        with self.assertRaises(ValueError):
            Timetable([], "student", "S1", start=date(2025, 7, 8))


if __name__ == "__main__":
    unittest.main()
