"""
Persistent booking storage.

This module manages one JSON file (by default tutorschedule/data/bookings.json):

    {"bookings": [...], "operation_logs": [...]}

Creating a booking is a read -> check -> write sequence. Every mutation runs
under two locks so two creations for the same slot cannot both observe
"no conflict" and both succeed:
- an in-process lock shared by all BookingStore objects on the same file
- a FileLock on "<file>.lock" for other processes (e.g. parallel CLI runs)
"""

from __future__ import annotations

import json
import logging
import threading
import uuid
from contextlib import contextmanager
from dataclasses import asdict, replace
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Iterator, Optional

from filelock import FileLock

from tutorschedule.conflicts import find_conflicts
from tutorschedule.errors import BookingConflictError
from tutorschedule.model import Booking, OperationLog

logger = logging.getLogger(__name__)

CREATE = "CREATE"
DELETE = "DELETE"
UPDATE = "UPDATE"

# One in-process lock per resolved bookings file
_PATH_LOCKS: dict[str, threading.RLock] = {}
_PATH_LOCKS_GUARD = threading.Lock()


def _default_bookings_path() -> Path:
    """
    Return the default path of bookings.json inside the package.

    Using a function instead of a constant makes testing easier,
    because tests can override the path.
    """
    base_dir = Path(__file__).resolve().parent
    return base_dir / "data" / "bookings.json"


def _now() -> str:
    return datetime.now().isoformat(timespec="microseconds")


def _lock_for(path: Path) -> threading.RLock:
    key = str(path.resolve())
    with _PATH_LOCKS_GUARD:
        lock = _PATH_LOCKS.get(key)
        if lock is None:
            lock = threading.RLock()
            _PATH_LOCKS[key] = lock
        return lock


class BookingStore:
    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else _default_bookings_path()
        self._lock = _lock_for(self.path)
        self._file_lock = FileLock(f"{self.path}.lock")

    @contextmanager
    def _locked(self) -> Iterator[None]:
        """
        Hold the in-process lock, then the file lock, for one read-check-write.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self._lock:
            with self._file_lock:
                yield

    # ------------------------------------------------------------------
    # File I/O
    # ------------------------------------------------------------------

    def _load(self) -> tuple[list[Booking], list[dict[str, Any]]]:
        """
        Read bookings and operation logs.

        Missing file -> empty store. A corrupt file or malformed entries are
        logged and skipped rather than crashing the application.
        """
        if not self.path.exists():
            return [], []

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s, treating it as empty: %s", self.path, e)
            return [], []

        if not isinstance(data, dict):
            logger.warning("Unexpected content in %s, treating it as empty", self.path)
            return [], []

        bookings: list[Booking] = []
        for raw in data.get("bookings", []) or []:
            try:
                bookings.append(Booking.from_dict(raw))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning("Skipping malformed booking entry %r: %s", raw, e)

        logs = data.get("operation_logs", []) or []
        if not isinstance(logs, list):
            logs = []
        return bookings, [x for x in logs if isinstance(x, dict)]

    def _save(self, bookings: list[Booking], logs: list[dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "bookings": [b.to_dict() for b in bookings],
            "operation_logs": logs,
        }
        tmp = self.path.with_name(f"{self.path.name}.{uuid.uuid4().hex}.tmp")
        tmp.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        tmp.replace(self.path)

    @staticmethod
    def _log_entry(
        operation: str,
        booking: Booking,
        operator: Optional[str],
        description: str,
        old: Optional[Booking] = None,
    ) -> dict[str, Any]:
        entry = OperationLog(
            operation=operation,
            record_id=booking.id or "",
            description=description,
            created_at=_now(),
            operator=operator,
            data=booking.to_dict(),
            old_data=old.to_dict() if old is not None else None,
        )
        return asdict(entry)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_bookings(
        self,
        on: Optional[date] = None,
        student_id: Optional[str] = None,
        teacher_id: Optional[str] = None,
        classroom_id: Optional[str] = None,
    ) -> list[Booking]:
        """
        Return stored bookings matching every given filter, sorted by date and start.
        """
        bookings, _ = self._load()
        out = [
            b
            for b in bookings
            if (on is None or b.date == on)
            and (student_id is None or b.student_id == student_id)
            and (teacher_id is None or b.teacher_id == teacher_id)
            and (classroom_id is None or b.classroom_id == classroom_id)
        ]
        out.sort(key=lambda b: (b.date, b.start))
        return out

    def list_bookings_for_date(self, d: date, **filters: Optional[str]) -> list[Booking]:
        return self.list_bookings(on=d, **filters)

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        bookings, _ = self._load()
        for b in bookings:
            if b.id == booking_id:
                return b
        return None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_booking(self, booking: Booking, operator: Optional[str] = None) -> Booking:
        """
        Store `booking` unless it collides with an existing booking on the same date.

        Raises BookingConflictError with every conflict found.
        Returns the stored booking with its new id.
        """
        with self._locked():
            bookings, logs = self._load()
            same_day = [b for b in bookings if b.date == booking.date]
            conflicts = find_conflicts(booking, same_day)
            if conflicts:
                raise BookingConflictError(conflicts)

            stored = replace(booking, id=uuid.uuid4().hex, created_at=_now())
            bookings.append(stored)
            logs.append(self._log_entry(CREATE, stored, operator, f"Created booking {stored.id}"))
            self._save(bookings, logs)

        logger.info(
            "Created booking %s (%s %s-%s)", stored.id, stored.date.isoformat(), stored.start, stored.end
        )
        return stored

    def delete_booking(self, booking_id: str, operator: Optional[str] = None) -> bool:
        """
        Delete a booking. Returns False if no booking has that id.
        """
        with self._locked():
            bookings, logs = self._load()
            remaining = [b for b in bookings if b.id != booking_id]
            if len(remaining) == len(bookings):
                return False
            removed = next(b for b in bookings if b.id == booking_id)
            logs.append(self._log_entry(DELETE, removed, operator, f"Deleted booking {booking_id}"))
            self._save(remaining, logs)

        logger.info("Deleted booking %s", booking_id)
        return True

    def reschedule_booking(self, booking_id: str, new: Booking, operator: Optional[str] = None) -> Booking:
        """
        Replace a booking by a new one (delete + create) in one step.

        The old booking is ignored by the conflict check and kept when the
        new one conflicts. Raises KeyError for an unknown id.
        """
        with self._locked():
            bookings, logs = self._load()
            old = next((b for b in bookings if b.id == booking_id), None)
            if old is None:
                raise KeyError(booking_id)
            same_day = [b for b in bookings if b.date == new.date]
            conflicts = find_conflicts(new, same_day, exclude_id=booking_id)
            if conflicts:
                raise BookingConflictError(conflicts)

            stored = replace(new, id=uuid.uuid4().hex, created_at=_now())
            remaining = [b for b in bookings if b.id != booking_id]
            remaining.append(stored)
            logs.append(
                self._log_entry(UPDATE, stored, operator, f"Rescheduled booking {booking_id} as {stored.id}", old=old)
            )
            self._save(remaining, logs)

        logger.info("Rescheduled booking %s as %s", booking_id, stored.id)
        return stored

    # ------------------------------------------------------------------
    # Operation log
    # ------------------------------------------------------------------

    def get_operation_logs(
        self, limit: int = 50, offset: int = 0, record_id: Optional[str] = None
    ) -> list[dict[str, Any]]:
        """
        Return operation log entries, newest first.
        """
        _, logs = self._load()
        if record_id is not None:
            logs = [x for x in logs if x.get("record_id") == record_id]
        # stored oldest first; reverse so equal stamps still come out newest first
        logs = sorted(reversed(logs), key=lambda x: str(x.get("created_at", "")), reverse=True)
        return logs[offset : offset + limit]

    def cleanup_old_logs(self, days: int = 30, now: Optional[datetime] = None) -> int:
        """
        Drop log entries older than `days`. Returns how many were removed.
        """
        cutoff = ((now or datetime.now()) - timedelta(days=days)).isoformat(timespec="microseconds")
        with self._locked():
            bookings, logs = self._load()
            kept = [x for x in logs if str(x.get("created_at", "")) >= cutoff]
            removed = len(logs) - len(kept)
            if removed:
                self._save(bookings, kept)

        if removed:
            logger.info("Removed %d old operation log entries", removed)
        return removed
