"""Service layer wiring the scheduling core to the schedule store."""

from __future__ import annotations

import datetime
import logging
from typing import Optional

from ..config import Settings
from ..repository import ScheduleRepository
from ..scheduling.availability import normalize_window, occupied_intervals_for_date
from ..scheduling.errors import (
    AvailabilityNotConfiguredError,
    EntryNotFoundError,
    ScheduleConflictError,
    TaskNotFoundError,
    UnauthenticatedError,
)
from ..scheduling.models import MoveRequest, Priority, ScheduleEntry, Task, TaskDraft
from ..scheduling.planner import ScheduleRun, SchedulingPolicy, schedule_all
from ..scheduling.reschedule import (
    SEARCH_DAYS_AFTER,
    SEARCH_DAYS_BEFORE,
    MovePlan,
    execute_move,
)
from ..scheduling.slots import has_conflict
from ..scheduling.timeutils import parse_interval
from ..utils.datetime_utils import add_days
from .time_context import Clock, TimeSnapshot, create_time_snapshot

logger = logging.getLogger(__name__)

_REQUIRED_TASK_FIELDS = frozenset({"title", "priority", "deadline", "completed"})


def require_user(user_id: Optional[str]) -> str:
    """Return the stripped user id or raise :class:`UnauthenticatedError`."""

    if user_id is None or not user_id.strip():
        raise UnauthenticatedError("Please sign in to access your schedule.")
    return user_id.strip()


class ScheduleService:
    """Fetch a snapshot from the store, run the core, persist the result."""

    def __init__(
        self,
        repository: ScheduleRepository,
        settings: Settings,
        *,
        clock: Optional[Clock] = None,
    ):
        self._repository = repository
        self._settings = settings
        self._clock = clock

    @property
    def repository(self) -> ScheduleRepository:
        return self._repository

    def snapshot(self) -> TimeSnapshot:
        return create_time_snapshot(self._settings.timezone, clock=self._clock)

    def policy(self) -> SchedulingPolicy:
        return SchedulingPolicy(
            session_minutes=self._settings.session_minutes,
            deadline_margin_days=self._settings.deadline_margin_days,
            today_buffer_minutes=self._settings.today_buffer_minutes,
            step_minutes=self._settings.bulk_step_minutes,
            skip_weekends=self._settings.skip_weekends,
        )

    # === TASKS ===

    async def list_tasks(self, user_id: Optional[str]) -> list[Task]:
        return await self._repository.list_tasks(require_user(user_id))

    async def create_task(self, user_id: Optional[str], draft: TaskDraft) -> Task:
        user = require_user(user_id)
        task = await self._repository.create_task(
            user,
            title=draft.title,
            priority=draft.priority,
            deadline=self.snapshot().to_local(draft.deadline),
            estimated_time=draft.estimated_time,
            description=draft.description,
            category=draft.category,
        )
        logger.info("Created task %s (%s) for user %s", task.id, task.title, user)
        return task

    async def update_task(
        self, user_id: Optional[str], task_id: str, updates: dict
    ) -> Task:
        user = require_user(user_id)
        # these columns are NOT NULL; an explicit null means "leave unchanged"
        updates = {
            key: value
            for key, value in updates.items()
            if value is not None or key not in _REQUIRED_TASK_FIELDS
        }
        if isinstance(updates.get("deadline"), datetime.datetime):
            updates = {**updates, "deadline": self.snapshot().to_local(updates["deadline"])}
        if "priority" in updates and updates["priority"] is not None:
            updates = {**updates, "priority": Priority(updates["priority"])}
        task = await self._repository.update_task(user, task_id, updates)
        if task is None:
            raise TaskNotFoundError(f"Task {task_id} not found")
        return task

    async def delete_task(self, user_id: Optional[str], task_id: str) -> None:
        if not await self._repository.delete_task(require_user(user_id), task_id):
            raise TaskNotFoundError(f"Task {task_id} not found")

    # === AVAILABILITY ===

    async def get_availability(self, user_id: Optional[str]) -> list[str]:
        return await self._repository.get_availability(require_user(user_id))

    async def set_availability(
        self, user_id: Optional[str], windows: list[str]
    ) -> list[str]:
        """Store windows in canonical ``HH:MM-HH:MM`` form.

        Raises ValueError naming the first malformed window.
        """
        user = require_user(user_id)
        canonical: list[str] = []
        for window in windows:
            normalized = normalize_window(window)
            if normalized is None:
                raise ValueError(f"Invalid availability window '{window}'")
            canonical.append(normalized)
        return await self._repository.set_availability(user, canonical)

    # === SCHEDULE ===

    async def list_entries(
        self,
        user_id: Optional[str],
        start: Optional[datetime.date] = None,
        end: Optional[datetime.date] = None,
    ) -> list[ScheduleEntry]:
        return await self._repository.list_entries(require_user(user_id), start, end)

    async def add_manual_entry(
        self,
        user_id: Optional[str],
        *,
        date: datetime.date,
        interval: str,
        task_description: str,
        task_id: Optional[str] = None,
    ) -> ScheduleEntry:
        """Insert a user-typed entry after checking it against the day's entries."""
        user = require_user(user_id)
        slot = parse_interval(interval)
        if slot is None:
            raise ValueError(f"Invalid interval '{interval}'")

        same_day = await self._repository.list_entries(user, date, date)
        if has_conflict(slot, occupied_intervals_for_date(date, same_day)):
            raise ScheduleConflictError(
                f"{slot.to_interval()} overlaps an existing entry on {date.isoformat()}"
            )

        entry = ScheduleEntry(
            date=date,
            interval=slot.to_interval(),
            task_description=task_description,
            task_id=task_id,
            is_auto_scheduled=False,
        )
        return await self._repository.insert_entry(user, entry)

    async def update_entry(
        self,
        user_id: Optional[str],
        entry_id: str,
        *,
        date: Optional[datetime.date] = None,
        interval: Optional[str] = None,
        task_description: Optional[str] = None,
    ) -> ScheduleEntry:
        """Edit an entry in place, re-checking overlap with the rest of its day.

        Raises EntryNotFoundError for an unknown id, ValueError for a bad
        interval and ScheduleConflictError when the edited slot overlaps.
        """
        user = require_user(user_id)
        current = await self._repository.get_entry(user, entry_id)
        if current is None:
            raise EntryNotFoundError(entry_id)

        new_interval = current.interval
        if interval is not None:
            parsed = parse_interval(interval)
            if parsed is None:
                raise ValueError(f"Invalid interval '{interval}'")
            new_interval = parsed.to_interval()

        updated = ScheduleEntry(
            date=date or current.date,
            interval=new_interval,
            task_description=task_description or current.task_description,
            task_id=current.task_id,
            is_auto_scheduled=current.is_auto_scheduled,
            id=current.id,
        )

        slot = updated.slot
        if slot is not None:
            same_day = await self._repository.list_entries(user, updated.date, updated.date)
            others = [entry for entry in same_day if entry.id != entry_id]
            if has_conflict(slot, occupied_intervals_for_date(updated.date, others)):
                raise ScheduleConflictError(
                    f"{updated.interval} overlaps an existing entry on {updated.date.isoformat()}"
                )

        if not await self._repository.update_entry(user, updated):
            raise EntryNotFoundError(entry_id)
        logger.info("Updated entry %s to %s %s", entry_id, updated.date, updated.interval)
        return updated

    async def delete_entry(self, user_id: Optional[str], entry_id: str) -> None:
        if not await self._repository.delete_entry(require_user(user_id), entry_id):
            raise EntryNotFoundError(entry_id)

    async def generate_schedule(self, user_id: Optional[str]) -> ScheduleRun:
        """Place every unscheduled pending task and persist the new entries."""
        user = require_user(user_id)
        availability = await self._repository.get_availability(user)
        if not availability:
            raise AvailabilityNotConfiguredError(
                "No available times configured; set time preferences first."
            )

        tasks = await self._repository.list_tasks(user)
        existing = await self._repository.list_entries(user)
        now = self.snapshot()

        run = schedule_all(
            tasks,
            availability,
            existing,
            today=now.today,
            now_minutes=now.minutes,
            policy=self.policy(),
        )
        run.entries = await self._repository.insert_entries(user, run.entries)
        logger.info(
            "Generated %d entr(y/ies) for user %s; %d task(s) not fully placed",
            len(run.entries),
            user,
            len(run.unscheduled),
        )
        return run

    async def move_entry(self, user_id: Optional[str], request: MoveRequest) -> MovePlan:
        """Resolve, re-place and persist a move as one delete-then-insert."""
        user = require_user(user_id)
        availability = await self._repository.get_availability(user)
        if not availability:
            raise AvailabilityNotConfiguredError(
                "You haven't set your available times yet. Please set them in Time Preferences first."
            )

        entries = await self._repository.list_entries(
            user,
            add_days(request.target_date, -SEARCH_DAYS_BEFORE),
            add_days(request.target_date, SEARCH_DAYS_AFTER),
        )
        tasks = {task.id: task for task in await self._repository.list_tasks(user)}
        now = self.snapshot()

        plan = execute_move(
            request,
            entries,
            availability,
            tasks.get,
            today=now.today,
            now_minutes=now.minutes,
            today_buffer_minutes=self._settings.today_buffer_minutes,
            step=self._settings.reschedule_step_minutes,
            default_duration=self._settings.default_move_duration_minutes,
        )
        if plan.original.id is None:
            raise EntryNotFoundError(request.identifier)
        stored = await self._repository.replace_entry(
            user, plan.original.id, plan.replacement
        )
        logger.info(
            "Moved entry %s to %s %s (new id %s)",
            plan.original.id,
            stored.date,
            stored.interval,
            stored.id,
        )
        return MovePlan(original=plan.original, replacement=stored)


__all__ = ["ScheduleService", "require_user"]
