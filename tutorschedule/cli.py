"""
CLI (Command Line Interface).

Terminal commands for the front desk and for testing, e.g.:

    tutorschedule week 27 --year 2025
    tutorschedule locate 2025-07-07
    tutorschedule check --student S1 --teacher T1 --classroom R1 --subject MATH \
        --date 2025-07-07 --start 09:00 --end 10:00
    tutorschedule book ...same options...
    tutorschedule cancel <booking_id>
    tutorschedule list --date 2025-07-07
    tutorschedule timetable --teacher T1 --week 27
    tutorschedule audit
    tutorschedule export out.ics --student S1
    tutorschedule log

Note:
- All commands accept --data PATH to use another bookings file
- Plain lines are printed with print(); tables use rich
"""

from __future__ import annotations

import argparse
from datetime import date
from typing import Any, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from tutorschedule.conflicts import find_conflicts, find_overlapping_pairs
from tutorschedule.errors import BookingConflictError, ValidationError, WeekRangeError
from tutorschedule.export_ics import export_bookings_to_ics
from tutorschedule.model import WEEKDAY_LABELS, Booking, Conflict
from tutorschedule.storage import BookingStore
from tutorschedule.timetable import Timetable
from tutorschedule.validation import parse_date, validate_booking
from tutorschedule.weeks import MAX_WEEK, MIN_WEEK, WeekCalendar


def _booking_line(b: Booking) -> str:
    line = (
        f"{b.date.isoformat()} {b.start}-{b.end} | student {b.student_id} | teacher {b.teacher_id} "
        f"| room {b.classroom_id} | {b.subject_id} | id {b.id}"
    )
    if b.notes:
        line += f" | {b.notes}"
    return line


def _print_conflicts(conflicts: list[Conflict]) -> None:
    print(f"Conflicts found: {len(conflicts)}")
    for c in conflicts:
        print(f"- [{c.dimension}] {c.message}")


def _optional_date(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    return parse_date(value)


def _check_week(week: int) -> Optional[str]:
    if not (MIN_WEEK <= week <= MAX_WEEK):
        return f"Week must be between {MIN_WEEK} and {MAX_WEEK}, got {week}."
    return None


def _cmd_week(args: argparse.Namespace) -> int:
    """
    Print the seven dates of a week index.
    """
    problem = _check_week(args.week)
    if problem:
        print(problem)
        return 1

    year = args.year or date.today().year
    cal = WeekCalendar(year)
    dates = cal.week_dates(args.week)
    print(f"Week {args.week} of {year}: {dates[0].isoformat()} - {dates[-1].isoformat()}")
    for d in dates:
        print(f"  {WEEKDAY_LABELS[d.isoweekday() - 1]} {d.isoformat()}")
    return 0


def _cmd_locate(args: argparse.Namespace) -> int:
    """
    Print the week index and weekday of a date.
    """
    try:
        d = parse_date(args.date)
    except ValueError:
        print(f"Invalid date: {args.date!r} (expected YYYY-MM-DD)")
        return 1

    year = args.year or d.year
    try:
        week, weekday = WeekCalendar(year).locate(d)
    except WeekRangeError as e:
        print(f"Error: {e}")
        return 1

    print(f"{d.isoformat()}: week {week} of {year}, {WEEKDAY_LABELS[weekday - 1]} ({weekday})")
    return 0


def _payload(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "student_id": args.student,
        "teacher_id": args.teacher,
        "classroom_id": args.classroom,
        "subject_id": args.subject,
        "date": args.date,
        "start": args.start,
        "end": args.end,
        "notes": args.notes,
    }


def _cmd_check(args: argparse.Namespace, store: BookingStore) -> int:
    """
    Dry-run: report every conflict the booking would cause, store nothing.
    """
    try:
        candidate = validate_booking(_payload(args))
    except ValidationError as e:
        print("Invalid booking:")
        for err in e.errors:
            print(f"- {err}")
        return 1

    conflicts = find_conflicts(candidate, store.list_bookings_for_date(candidate.date))
    if not conflicts:
        print("No conflicts found.")
        return 0

    _print_conflicts(conflicts)
    return 1


def _cmd_book(args: argparse.Namespace, store: BookingStore) -> int:
    """
    Validate and store a booking. Nothing is stored if any conflict exists.
    """
    try:
        candidate = validate_booking(_payload(args))
    except ValidationError as e:
        print("Invalid booking:")
        for err in e.errors:
            print(f"- {err}")
        return 1

    try:
        stored = store.create_booking(candidate, operator=args.operator)
    except BookingConflictError as e:
        print("Booking rejected.")
        _print_conflicts(e.conflicts)
        return 1

    print(f"Booked: {_booking_line(stored)}")
    return 0


def _cmd_cancel(args: argparse.Namespace, store: BookingStore) -> int:
    booking_id = (args.booking_id or "").strip()
    if not booking_id:
        print("Please provide a booking id.")
        return 1

    if not store.delete_booking(booking_id, operator=args.operator):
        print(f"Not found: {booking_id}")
        return 1

    print(f"Cancelled: {booking_id}")
    return 0


def _cmd_list(args: argparse.Namespace, store: BookingStore) -> int:
    try:
        on = _optional_date(args.date)
    except ValueError:
        print(f"Invalid date: {args.date!r} (expected YYYY-MM-DD)")
        return 1

    bookings = store.list_bookings(
        on=on, student_id=args.student, teacher_id=args.teacher, classroom_id=args.classroom
    )
    if not bookings:
        print("No bookings.")
        return 0

    for b in bookings:
        print(_booking_line(b))
    return 0


def _resource(args: argparse.Namespace) -> tuple[str, str]:
    if args.student:
        return "student", args.student
    return "teacher", args.teacher


def _cmd_timetable(args: argparse.Namespace, store: BookingStore) -> int:
    """
    Show one student's or teacher's bookings day by day, empty days included.
    """
    resource, resource_id = _resource(args)
    bookings = store.list_bookings(**{f"{resource}_id": resource_id})

    try:
        if args.week is not None:
            if args.date_from is not None or args.date_to is not None:
                print("Use either --week or --from/--to, not both.")
                return 1
            problem = _check_week(args.week)
            if problem:
                print(problem)
                return 1
            year = args.year or date.today().year
            title = f"{resource.capitalize()} {resource_id} - week {args.week} of {year}"
            timetable = Timetable.for_week(bookings, resource, resource_id, WeekCalendar(year), args.week)
        else:
            start = _optional_date(args.date_from)
            end = _optional_date(args.date_to)
            title = f"{resource.capitalize()} {resource_id}"
            timetable = Timetable(bookings, resource, resource_id, start=start, end=end)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    if len(timetable) == 0:
        print("No bookings.")
        return 0

    table = Table(title=title, box=box.SIMPLE)
    table.add_column("Date")
    table.add_column("Day")
    table.add_column("Lessons")
    for day in timetable:
        lessons = "\n".join(
            f"{b.start}-{b.end} {b.subject_id} (student {b.student_id}, teacher {b.teacher_id}, room {b.classroom_id})"
            for b in day.bookings
        )
        table.add_row(day.date.isoformat(), day.label, lessons or "-")
    Console().print(table)
    return 0


def _cmd_audit(args: argparse.Namespace, store: BookingStore) -> int:
    """
    Print stored booking pairs that already overlap.
    """
    pairs = find_overlapping_pairs(store.list_bookings())
    if not pairs:
        print("No conflicts found.")
        return 0

    print(f"Conflicting pairs: {len(pairs)}")
    for a, b, dims in pairs:
        print(f"- {a.date.isoformat()} {a.start}-{a.end} {a.id}  <->  {b.start}-{b.end} {b.id}  ({', '.join(dims)})")
    return 1


def _cmd_export(args: argparse.Namespace, store: BookingStore) -> int:
    """
    Export bookings into an iCalendar (.ics) file.
    """
    out_path = (args.out or "").strip()
    if not out_path:
        print("Please provide output .ics path.")
        return 1

    bookings = store.list_bookings(student_id=args.student, teacher_id=args.teacher)
    if not bookings:
        print("No bookings to export.")
        return 0

    n = export_bookings_to_ics(bookings, out_path)
    print(f"Exported {n} bookings to: {out_path}")
    return 0


def _cmd_log(args: argparse.Namespace, store: BookingStore) -> int:
    logs = store.get_operation_logs(limit=args.limit)
    if not logs:
        print("No operations logged.")
        return 0

    table = Table(title="Operation log", box=box.SIMPLE)
    table.add_column("When")
    table.add_column("Operation")
    table.add_column("Booking")
    table.add_column("Operator")
    for entry in logs:
        table.add_row(
            str(entry.get("created_at", "")),
            str(entry.get("operation", "")),
            str(entry.get("record_id", "")),
            str(entry.get("operator") or "-"),
        )
    Console().print(table)
    return 0


def _add_booking_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--student", required=True, help="Student ID")
    p.add_argument("--teacher", required=True, help="Teacher ID")
    p.add_argument("--classroom", required=True, help="Classroom ID")
    p.add_argument("--subject", required=True, help="Subject ID")
    p.add_argument("--date", required=True, help="Lesson date (YYYY-MM-DD)")
    p.add_argument("--start", required=True, help="Start time (HH:MM)")
    p.add_argument("--end", required=True, help="End time (HH:MM)")
    p.add_argument("--notes", default=None, help="Optional notes")


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="tutorschedule", description="Tutoring center booking CLI")
    parser.add_argument("--data", default=None, help="Path of the bookings JSON file")
    parser.add_argument("--operator", default=None, help="Name recorded in the operation log")
    sub = parser.add_subparsers(dest="command", required=True)

    p_week = sub.add_parser("week", help="Show the dates of a week index")
    p_week.add_argument("week", type=int, help="Week index (1-52)")
    p_week.add_argument("--year", type=int, default=None, help="Reference year (default: current year)")

    p_locate = sub.add_parser("locate", help="Show the week index of a date")
    p_locate.add_argument("date", type=str, help="Date (YYYY-MM-DD)")
    p_locate.add_argument("--year", type=int, default=None, help="Reference year (default: the date's year)")

    p_check = sub.add_parser("check", help="Check a booking for conflicts without storing it")
    _add_booking_args(p_check)

    p_book = sub.add_parser("book", help="Create a booking")
    _add_booking_args(p_book)

    p_cancel = sub.add_parser("cancel", help="Delete a booking")
    p_cancel.add_argument("booking_id", type=str, help="Booking ID")

    p_list = sub.add_parser("list", help="List bookings")
    p_list.add_argument("--date", default=None, help="Only this date (YYYY-MM-DD)")
    p_list.add_argument("--student", default=None)
    p_list.add_argument("--teacher", default=None)
    p_list.add_argument("--classroom", default=None)

    p_tt = sub.add_parser("timetable", help="Show a student's or teacher's timetable")
    who = p_tt.add_mutually_exclusive_group(required=True)
    who.add_argument("--student", default=None)
    who.add_argument("--teacher", default=None)
    p_tt.add_argument("--week", type=int, default=None, help="Week index (1-52)")
    p_tt.add_argument("--year", type=int, default=None, help="Reference year (default: current year)")
    p_tt.add_argument("--from", dest="date_from", default=None, help="Range start (YYYY-MM-DD)")
    p_tt.add_argument("--to", dest="date_to", default=None, help="Range end (YYYY-MM-DD)")

    sub.add_parser("audit", help="Show stored bookings that already overlap")

    p_export = sub.add_parser("export", help="Export bookings to .ics")
    p_export.add_argument("out", type=str, help="Output file path (e.g. out.ics)")
    p_export.add_argument("--student", default=None)
    p_export.add_argument("--teacher", default=None)

    p_log = sub.add_parser("log", help="Show the operation log")
    p_log.add_argument("--limit", type=int, default=50)

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "week":
        raise SystemExit(_cmd_week(args))
    if args.command == "locate":
        raise SystemExit(_cmd_locate(args))

    store = BookingStore(args.data)

    if args.command == "check":
        raise SystemExit(_cmd_check(args, store))
    if args.command == "book":
        raise SystemExit(_cmd_book(args, store))
    if args.command == "cancel":
        raise SystemExit(_cmd_cancel(args, store))
    if args.command == "list":
        raise SystemExit(_cmd_list(args, store))
    if args.command == "timetable":
        raise SystemExit(_cmd_timetable(args, store))
    if args.command == "audit":
        raise SystemExit(_cmd_audit(args, store))
    if args.command == "export":
        raise SystemExit(_cmd_export(args, store))
    if args.command == "log":
        raise SystemExit(_cmd_log(args, store))

    raise SystemExit(2)
