"""Greedy multi-day placement of tasks into availability windows."""

from __future__ import annotations

import datetime
import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from ..utils.datetime_utils import add_days, is_weekend, iter_days
from .availability import occupied_intervals_for_date, parse_windows
from .models import ScheduleEntry, Task
from .slots import BULK_STEP_MINUTES, find_earliest_slot
from .timeutils import TimeSlot

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SchedulingPolicy:
    """Tunable constants of a bulk scheduling run."""

    session_minutes: int = 60
    deadline_margin_days: int = 2
    today_buffer_minutes: int = 60
    step_minutes: int = BULK_STEP_MINUTES
    skip_weekends: bool = False


@dataclass(frozen=True, slots=True)
class UnscheduledTask:
    """A task whose sessions could not all be placed before its cutoff."""

    task_id: str
    title: str
    sessions_placed: int
    sessions_needed: int


@dataclass(slots=True)
class ScheduleRun:
    """Outcome of :func:`schedule_all`."""

    entries: list[ScheduleEntry] = field(default_factory=list)
    unscheduled: list[UnscheduledTask] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ScheduleAccumulator:
    """Placed entries plus per-date occupancy, threaded through a run."""

    entries: tuple[ScheduleEntry, ...] = ()
    occupancy: Mapping[datetime.date, tuple[TimeSlot, ...]] = field(
        default_factory=dict
    )

    @classmethod
    def from_entries(cls, entries: Sequence[ScheduleEntry]) -> "ScheduleAccumulator":
        occupancy: dict[datetime.date, tuple[TimeSlot, ...]] = {}
        for day in sorted({entry.date for entry in entries}):
            occupancy[day] = tuple(occupied_intervals_for_date(day, entries))
        return cls(entries=(), occupancy=occupancy)

    def occupied_on(self, day: datetime.date) -> tuple[TimeSlot, ...]:
        return self.occupancy.get(day, ())

    def place(self, entry: ScheduleEntry, slot: TimeSlot) -> "ScheduleAccumulator":
        occupancy = dict(self.occupancy)
        occupancy[entry.date] = self.occupied_on(entry.date) + (slot,)
        return ScheduleAccumulator(entries=self.entries + (entry,), occupancy=occupancy)


def sort_tasks(tasks: Iterable[Task]) -> list[Task]:
    """Order tasks by priority weight descending, then deadline ascending.

    The sort is stable so ties keep their input order.
    """

    return sorted(tasks, key=lambda task: (-task.priority.weight, task.deadline))


def session_durations(estimated_time: int | None, session_minutes: int) -> list[int]:
    """Split an estimate into sessions of at most ``session_minutes``.

    150 minutes with a 60-minute cap becomes ``[60, 60, 30]``. A missing or
    non-positive estimate is a single full session.
    """

    if not estimated_time or estimated_time <= 0:
        return [session_minutes]
    count = math.ceil(estimated_time / session_minutes)
    durations = [session_minutes] * count
    durations[-1] = estimated_time - session_minutes * (count - 1)
    return durations


def session_title(title: str, index: int, total: int) -> str:
    if total == 1:
        return title
    return f"{title} (Session {index}/{total})"


def _place_task(
    task: Task,
    windows: Sequence[TimeSlot],
    state: ScheduleAccumulator,
    *,
    today: datetime.date,
    now_minutes: int,
    policy: SchedulingPolicy,
) -> tuple[ScheduleAccumulator, int, int]:
    durations = session_durations(task.estimated_time, policy.session_minutes)
    total = len(durations)
    max_date = add_days(task.deadline.date(), -policy.deadline_margin_days)
    placed = 0

    for day in iter_days(today, max_date):
        if placed == total:
            break
        if policy.skip_weekends and is_weekend(day):
            continue

        min_start = now_minutes + policy.today_buffer_minutes if day == today else 0
        slot = find_earliest_slot(
            windows,
            state.occupied_on(day),
            durations[placed],
            min_start=min_start,
            step=policy.step_minutes,
        )
        if slot is None:
            continue

        entry = ScheduleEntry(
            date=day,
            interval=slot.to_interval(),
            task_description=session_title(task.title, placed + 1, total),
            task_id=task.id,
            is_auto_scheduled=True,
        )
        state = state.place(entry, slot)
        placed += 1
        logger.debug(
            "Placed %s on %s at %s", entry.task_description, day, entry.interval
        )

    return state, placed, total


def schedule_all(
    tasks: Iterable[Task],
    availability: Iterable[str],
    existing_entries: Sequence[ScheduleEntry],
    *,
    today: datetime.date,
    now_minutes: int,
    policy: SchedulingPolicy | None = None,
) -> ScheduleRun:
    """Place every pending task's sessions greedily, earliest fit first.

    Completed tasks and tasks that already own an entry are skipped. Each
    session lands on its own day between ``today`` and the task deadline minus
    the policy margin. Tasks that cannot be fully placed are reported in
    ``ScheduleRun.unscheduled``; placed sessions of such tasks are kept.
    """

    policy = policy or SchedulingPolicy()
    windows = parse_windows(availability)
    already_scheduled = {entry.task_id for entry in existing_entries if entry.task_id}
    pending = [
        task
        for task in tasks
        if not task.completed and task.id not in already_scheduled
    ]

    state = ScheduleAccumulator.from_entries(existing_entries)
    unscheduled: list[UnscheduledTask] = []

    for task in sort_tasks(pending):
        state, placed, total = _place_task(
            task,
            windows,
            state,
            today=today,
            now_minutes=now_minutes,
            policy=policy,
        )
        if placed < total:
            logger.info(
                "Task %s (%s) placed %d of %d session(s) before its cutoff",
                task.id,
                task.title,
                placed,
                total,
            )
            unscheduled.append(
                UnscheduledTask(
                    task_id=task.id,
                    title=task.title,
                    sessions_placed=placed,
                    sessions_needed=total,
                )
            )

    return ScheduleRun(entries=list(state.entries), unscheduled=unscheduled)


__all__ = [
    "SchedulingPolicy",
    "UnscheduledTask",
    "ScheduleRun",
    "ScheduleAccumulator",
    "sort_tasks",
    "session_durations",
    "session_title",
    "schedule_all",
]
