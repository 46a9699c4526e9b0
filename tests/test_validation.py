"""
Unit tests for structural validation of booking requests.
"""

import unittest
from datetime import date

from tutorschedule.errors import ValidationError
from tutorschedule.validation import parse_date, validate_booking


def payload(**overrides):
    data = {
        "student_id": "S1",
        "teacher_id": "T1",
        "classroom_id": "R1",
        "subject_id": "MATH",
        "date": "2025-07-07",
        "start": "9:00",
        "end": "10:00",
        "notes": "  bring workbook ",
    }
    data.update(overrides)
    return data


class TestValidateBooking(unittest.TestCase):
    def test_valid_payload(self) -> None:
        b = validate_booking(payload())
        self.assertIsNone(b.id)
        self.assertEqual(b.date, date(2025, 7, 7))
        self.assertEqual((b.start, b.end), ("09:00", "10:00"))
        self.assertEqual(b.notes, "bring workbook")

    def test_empty_notes_become_none(self) -> None:
        self.assertIsNone(validate_booking(payload(notes="   ")).notes)
        self.assertIsNone(validate_booking(payload(notes=None)).notes)

    def test_date_object_accepted(self) -> None:
        self.assertEqual(validate_booking(payload(date=date(2025, 7, 7))).date, date(2025, 7, 7))

    def test_start_not_before_end(self) -> None:
        for start, end in [("10:00", "10:00"), ("11:00", "10:00")]:
            with self.subTest(start=start, end=end):
                with self.assertRaises(ValidationError) as ctx:
                    validate_booking(payload(start=start, end=end))
                self.assertEqual(ctx.exception.errors, ["start must be earlier than end"])

    def test_all_errors_reported_together(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            validate_booking(payload(student_id="", teacher_id=None, date="07.07.2025", start="25:00", end=""))
        errors = ctx.exception.errors
        self.assertEqual(len(errors), 5)
        self.assertTrue(any(e.startswith("student_id") for e in errors))
        self.assertTrue(any(e.startswith("teacher_id") for e in errors))
        self.assertTrue(any(e.startswith("date") for e in errors))
        self.assertTrue(any(e.startswith("start") for e in errors))
        self.assertTrue(any(e.startswith("end") for e in errors))

    def test_validation_error_is_value_error(self) -> None:
        with self.assertRaises(ValueError):
            validate_booking({})

    def test_parse_date(self) -> None:
        self.assertEqual(parse_date(" 2025-07-07 "), date(2025, 7, 7))
        with self.assertRaises(ValueError):
            parse_date("2025-02-30")


if __name__ == "__main__":
    unittest.main()
