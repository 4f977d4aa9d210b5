"""Conversational entry point answering schedule questions and moves."""

from __future__ import annotations

import itertools
import logging
from typing import Optional

from ..scheduling.commands import (
    Intent,
    classify,
    parse_add_task_command,
    parse_move_command,
)
from ..scheduling.errors import (
    AvailabilityNotConfiguredError,
    EntryNotFoundError,
    NoAvailabilityError,
    ScheduleStoreError,
    UnauthenticatedError,
)
from ..scheduling.status import StatusKind, current_or_next, next_entry
from ..utils.datetime_utils import add_days, date_to_string
from .schedule_service import ScheduleService, require_user

logger = logging.getLogger(__name__)

GREETING = (
    "Hi! I'm your study planning assistant. Ask me:\n"
    "• \"What should I do now?\"\n"
    "• \"What's my next task?\"\n"
    "• \"Move algebra to tomorrow 14:30\"\n"
    "• \"Reschedule 09:00 - 10:00 to today 15:00\"\n"
    "• \"Add task: lab report high priority 2 hours by friday\""
)

_CHAT_REPLIES = (
    "I'm here to help you plan. Try \"What should I do now?\"",
    "Need a hand rescheduling? Say \"Move algebra to tomorrow 14:30\".",
    "Ask me \"What's my next task?\"",
)


class AssistantService:
    """Turn a free-text message into a schedule query or mutation and a reply."""

    def __init__(self, schedule_service: ScheduleService):
        self._schedule = schedule_service
        self._chat_replies = itertools.cycle(_CHAT_REPLIES)

    async def handle_user_message(self, text: str, user_id: Optional[str]) -> str:
        """Return a human-readable reply to ``text`` for ``user_id``."""

        try:
            user = require_user(user_id)
        except UnauthenticatedError as exc:
            return str(exc)

        command = classify(text)
        if not command.raw_text:
            return GREETING

        logger.debug("Message from %s classified as %s", user, command.intent.value)
        if command.intent is Intent.HELP:
            return GREETING
        try:
            if command.intent is Intent.STATUS_NOW:
                return await self._status_now(user)
            if command.intent is Intent.STATUS_NEXT:
                return await self._status_next(user)
            if command.intent is Intent.MOVE:
                return await self._move(user, command.raw_text)
            if command.intent is Intent.ADD_TASK:
                return await self._add_task(user, command.raw_text)
        except ScheduleStoreError as exc:
            logger.error("Store failure while handling %s: %s", command.intent.value, exc)
            return f"Something went wrong while updating your schedule: {exc}"

        return next(self._chat_replies)

    async def _status_now(self, user: str) -> str:
        now = self._schedule.snapshot()
        items = await self._schedule.list_entries(user, now.today, now.today)
        if not items:
            return "You have nothing scheduled today 🎉"

        hit = current_or_next(items, now.minutes)
        if hit is None:
            return "You've finished all tasks for today. Nice work! 🎉"
        if hit.kind is StatusKind.CURRENT:
            return f"Right now: \"{hit.entry.task_description}\" ({hit.entry.interval})."
        return f"Next up: \"{hit.entry.task_description}\" at {hit.entry.interval}."

    async def _status_next(self, user: str) -> str:
        now = self._schedule.snapshot()
        tomorrow = add_days(now.today, 1)
        items = await self._schedule.list_entries(user, now.today, tomorrow)
        if not items:
            return "No upcoming tasks scheduled in the next day."

        hit = next_entry(
            [item for item in items if item.date == now.today],
            [item for item in items if item.date == tomorrow],
            now.minutes,
        )
        if hit is None:
            return "No upcoming tasks scheduled soon."
        if hit.entry.date == now.today:
            return f"Next today: \"{hit.entry.task_description}\" at {hit.entry.interval}."
        return f"Next is tomorrow: \"{hit.entry.task_description}\" at {hit.entry.interval}."

    async def _move(self, user: str, raw_text: str) -> str:
        request = parse_move_command(raw_text, self._schedule.snapshot().today)
        if not request.identifier:
            return (
                "Please tell me which task to move (e.g., \"move algebra to tomorrow 14:30\" "
                "or \"reschedule 09:00 - 10:00 to today 15:00\")."
            )

        try:
            plan = await self._schedule.move_entry(user, request)
        except EntryNotFoundError:
            return (
                f"I couldn't find a scheduled item matching \"{request.identifier}\". "
                "Please provide the exact interval (\"HH:MM - HH:MM\") or a unique part of the title."
            )
        except NoAvailabilityError as exc:
            return (
                f"No free slots available on {date_to_string(exc.date)} "
                f"for a {exc.duration}-minute session."
            )
        except AvailabilityNotConfiguredError as exc:
            return str(exc)

        replacement = plan.replacement
        return (
            f"Rescheduled \"{replacement.task_description}\" to "
            f"{date_to_string(replacement.date)} at {replacement.interval}."
        )

    async def _add_task(self, user: str, raw_text: str) -> str:
        draft = parse_add_task_command(raw_text, self._schedule.snapshot().now_local)
        task = await self._schedule.create_task(user, draft)
        return (
            f"Added \"{task.title}\" ({task.priority.value} priority, "
            f"{task.estimated_time} min, due {task.deadline:%Y-%m-%d %H:%M}). "
            "I'll factor it into your next generated schedule."
        )


__all__ = ["AssistantService", "GREETING"]
