"""Domain models for tasks and schedule entries."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .timeutils import TimeSlot, parse_interval


class Priority(str, Enum):
    """Task priority levels."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def weight(self) -> int:
        return _PRIORITY_WEIGHTS[self.value]


_PRIORITY_WEIGHTS = {"high": 3, "medium": 2, "low": 1}


@dataclass(slots=True)
class Task:
    """A user task as seen by the scheduler."""

    id: str
    title: str
    priority: Priority
    deadline: datetime.datetime
    estimated_time: Optional[int] = None
    completed: bool = False
    description: Optional[str] = None
    category: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ScheduleEntry:
    """A placed block of time on a specific calendar day."""

    date: datetime.date
    interval: str
    task_description: str
    task_id: Optional[str] = None
    is_auto_scheduled: bool = False
    id: Optional[str] = None

    @property
    def slot(self) -> Optional[TimeSlot]:
        """Parsed interval, or None when the stored value is malformed."""

        return parse_interval(self.interval)


@dataclass(frozen=True, slots=True)
class MoveRequest:
    """Parameters of a conversational move/reschedule command."""

    identifier: str
    target_date: datetime.date
    target_time_minutes: Optional[int] = None


@dataclass(frozen=True, slots=True)
class TaskDraft:
    """Task fields extracted from an ``add task`` utterance."""

    title: str
    priority: Priority
    deadline: datetime.datetime
    estimated_time: Optional[int]
    description: Optional[str] = None
    category: Optional[str] = None


__all__ = [
    "Priority",
    "TimeSlot",
    "Task",
    "ScheduleEntry",
    "MoveRequest",
    "TaskDraft",
]
