"""Exceptions raised by the scheduling core and its services."""

from __future__ import annotations

import datetime


class SchedulingError(RuntimeError):
    """Base class for scheduling failures surfaced to callers."""


class UnauthenticatedError(SchedulingError):
    """Raised when an operation is attempted without a current user."""


class EntryNotFoundError(SchedulingError):
    """Raised when a schedule entry cannot be resolved."""

    def __init__(self, identifier: str):
        super().__init__(f"No scheduled item matches '{identifier}'")
        self.identifier = identifier


class NoAvailabilityError(SchedulingError):
    """Raised when no slot of the requested duration fits on a date."""

    def __init__(self, date: datetime.date, duration: int):
        super().__init__(
            f"No free slots available on {date.isoformat()} for a {duration}-minute session"
        )
        self.date = date
        self.duration = duration


class AvailabilityNotConfiguredError(SchedulingError):
    """Raised when the user has not declared any availability windows."""


class ScheduleConflictError(SchedulingError):
    """Raised when a manual entry would overlap an existing one."""


class TaskNotFoundError(SchedulingError):
    """Raised when a task id does not exist for the user."""


class ScheduleStoreError(SchedulingError):
    """Raised when the persistence layer fails."""


__all__ = [
    "SchedulingError",
    "UnauthenticatedError",
    "EntryNotFoundError",
    "NoAvailabilityError",
    "AvailabilityNotConfiguredError",
    "ScheduleConflictError",
    "TaskNotFoundError",
    "ScheduleStoreError",
]
