"""Scheduling domain package: slot search, bulk planning and chat commands."""

from .commands import Command, Intent, classify, parse_add_task_command, parse_move_command
from .errors import (
    AvailabilityNotConfiguredError,
    EntryNotFoundError,
    NoAvailabilityError,
    ScheduleConflictError,
    ScheduleStoreError,
    SchedulingError,
    TaskNotFoundError,
    UnauthenticatedError,
)
from .models import MoveRequest, Priority, ScheduleEntry, Task, TaskDraft
from .planner import ScheduleRun, SchedulingPolicy, UnscheduledTask, schedule_all
from .reschedule import MovePlan, execute_move
from .slots import find_earliest_slot
from .timeutils import TimeSlot, from_minutes, overlaps, parse_interval, to_minutes

__all__ = [
    "Command",
    "Intent",
    "classify",
    "parse_add_task_command",
    "parse_move_command",
    "SchedulingError",
    "UnauthenticatedError",
    "EntryNotFoundError",
    "NoAvailabilityError",
    "AvailabilityNotConfiguredError",
    "ScheduleConflictError",
    "ScheduleStoreError",
    "TaskNotFoundError",
    "MoveRequest",
    "Priority",
    "ScheduleEntry",
    "Task",
    "TaskDraft",
    "ScheduleRun",
    "SchedulingPolicy",
    "UnscheduledTask",
    "schedule_all",
    "MovePlan",
    "execute_move",
    "find_earliest_slot",
    "TimeSlot",
    "from_minutes",
    "overlaps",
    "parse_interval",
    "to_minutes",
]
