"""
Unit tests for the week index <-> date mapping.

Weeks start on the first Monday on/after January 1 (ISO weekday numbering).
"""

import unittest
from datetime import date, timedelta

from tutorschedule.errors import WeekRangeError
from tutorschedule.weeks import WeekCalendar, clamp_week_index, first_monday


class TestFirstMonday(unittest.TestCase):
    def test_jan1_sunday_gives_jan2(self) -> None:
        # 2023-01-01 and 2017-01-01 are Sundays
        self.assertEqual(first_monday(2023), date(2023, 1, 2))
        self.assertEqual(first_monday(2017), date(2017, 1, 2))

    def test_jan1_monday_is_itself(self) -> None:
        self.assertEqual(first_monday(2024), date(2024, 1, 1))

    def test_other_weekdays(self) -> None:
        self.assertEqual(first_monday(2025), date(2025, 1, 6))  # Wednesday
        self.assertEqual(first_monday(2026), date(2026, 1, 5))  # Thursday
        self.assertEqual(first_monday(2028), date(2028, 1, 3))  # Saturday

    def test_always_a_monday_within_first_week(self) -> None:
        for year in range(2000, 2041):
            with self.subTest(year=year):
                fm = first_monday(year)
                self.assertEqual(fm.isoweekday(), 1)
                self.assertEqual(fm.year, year)
                self.assertLessEqual(fm.day, 7)


class TestWeekCalendar(unittest.TestCase):
    def test_week_dates_2025_week_26(self) -> None:
        dates = WeekCalendar(2025).week_dates(26)
        self.assertEqual(dates[0], date(2025, 6, 30))
        self.assertEqual(dates[-1], date(2025, 7, 6))
        self.assertEqual([d.isoweekday() for d in dates], [1, 2, 3, 4, 5, 6, 7])

    def test_sunday_stays_in_its_week(self) -> None:
        cal = WeekCalendar(2025)
        self.assertEqual(cal.week_index(date(2025, 7, 6)), 26)
        self.assertEqual(cal.week_index(date(2025, 7, 7)), 27)
        self.assertEqual(cal.locate(date(2025, 7, 6)), (26, 7))

    def test_round_trip_every_day_of_every_week(self) -> None:
        for year in range(2020, 2031):
            cal = WeekCalendar(year)
            for w in range(1, 54):
                for d in cal.week_dates(w):
                    self.assertEqual(cal.week_index(d), w, msg=f"{year} week {w} {d}")

    def test_weeks_tile_without_gaps_or_duplicates(self) -> None:
        for year in (2017, 2023, 2024, 2025, 2026):
            cal = WeekCalendar(year)
            seen = [d for w in range(1, 53) for d in cal.week_dates(w)]
            self.assertEqual(len(seen), len(set(seen)))
            expected = [cal.first_monday + timedelta(days=i) for i in range(52 * 7)]
            self.assertEqual(seen, expected)

    def test_date_before_first_monday_is_rejected(self) -> None:
        cal = WeekCalendar(2025)
        for d in (date(2025, 1, 1), date(2025, 1, 5), date(2024, 12, 31)):
            with self.subTest(d=d):
                with self.assertRaises(WeekRangeError):
                    cal.week_index(d)

    def test_dates_past_week_52_are_not_wrapped(self) -> None:
        cal = WeekCalendar(2025)
        self.assertEqual(cal.week_index(date(2025, 12, 31)), 52)
        self.assertEqual(cal.week_index(date(2026, 1, 4)), 52)
        self.assertEqual(cal.week_index(date(2026, 1, 5)), 53)

    def test_week_zero_and_negative(self) -> None:
        cal = WeekCalendar(2025)
        self.assertEqual(cal.week_start(0), date(2024, 12, 30))
        with self.assertRaises(WeekRangeError):
            cal.week_start(-1)

    def test_week_range(self) -> None:
        self.assertEqual(WeekCalendar(2026).week_range(1), (date(2026, 1, 5), date(2026, 1, 11)))

    def test_current_week_clamps(self) -> None:
        cal = WeekCalendar(2025)
        self.assertEqual(cal.current_week(date(2025, 1, 2)), 1)
        self.assertEqual(cal.current_week(date(2025, 7, 7)), 27)
        self.assertEqual(cal.current_week(date(2026, 1, 5)), 52)

    def test_clamp_week_index(self) -> None:
        self.assertEqual(clamp_week_index(0), 1)
        self.assertEqual(clamp_week_index(60), 52)
        self.assertEqual(clamp_week_index(10), 10)


if __name__ == "__main__":
    unittest.main()
