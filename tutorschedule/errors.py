"""
Exception types shared by the engine, the store and the CLI.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tutorschedule.model import Conflict


class ValidationError(ValueError):
    """
    Raised when a booking request is structurally invalid.
    Carries one message per problem found.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid booking")


class WeekRangeError(ValueError):
    """
    Raised when a date lies before the reference year's first Monday,
    or when a negative week index is requested.
    """


class BookingConflictError(Exception):
    """
    Raised by the store when a booking collides with existing ones.
    `conflicts` holds every collision, never just the first.
    """

    def __init__(self, conflicts: list["Conflict"]) -> None:
        self.conflicts = list(conflicts)
        lines = [c.message for c in self.conflicts]
        super().__init__("Booking conflicts: " + "; ".join(lines))
