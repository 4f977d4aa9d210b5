"""Keyword intent classification and parameter extraction for chat commands."""

from __future__ import annotations

import datetime
import re
from dataclasses import dataclass
from enum import Enum

from ..utils.datetime_utils import (
    add_days,
    parse_date_string,
    parse_day_first_date,
    parse_lenient_datetime,
)
from .models import MoveRequest, Priority, TaskDraft
from .timeutils import to_minutes


class Intent(str, Enum):
    STATUS_NOW = "status_now"
    STATUS_NEXT = "status_next"
    MOVE = "move"
    ADD_TASK = "add_task"
    HELP = "help"
    CHAT = "chat"


@dataclass(frozen=True, slots=True)
class Command:
    """Classified user utterance."""

    intent: Intent
    raw_text: str


_NOW_PHRASES = ("what should i do now", "what should i be doing")
_NEXT_PHRASES = ("what's next", "whats next", "next task")
_MOVE_PREFIXES = ("move ", "reschedule ")

_MOVE_KEYWORD = re.compile(r"^(?:move|reschedule)\s+", re.IGNORECASE)
_ADD_TASK_KEYWORD = re.compile(r"^add task:?\s*", re.IGNORECASE)
_ISO_DATE = re.compile(r"\b(\d{4}-\d{2}-\d{2})\b")
_DAY_FIRST_DATE = re.compile(r"\b(\d{2}-\d{2}-\d{4})\b")
_TIME_TOKEN = re.compile(r"\b([01]?\d|2[0-3]):([0-5]\d)\b")
_TODAY = re.compile(r"\btoday\b", re.IGNORECASE)
_TOMORROW = re.compile(r"\btomorrow\b", re.IGNORECASE)

_PRIORITY = re.compile(r"\b(high|medium|low)\s+priority\b", re.IGNORECASE)
_ESTIMATE = re.compile(r"\b(\d+)\s*(hours?|hrs?|minutes?|mins?)\b", re.IGNORECASE)
_DEADLINE_KEYWORD = re.compile(r"\b(?:by\s+)?(today|tomorrow)\b", re.IGNORECASE)
_DEADLINE_BY = re.compile(r"\bby\s+(.+)$", re.IGNORECASE)

DEFAULT_TASK_TITLE = "New Task"
DEFAULT_TASK_ESTIMATE = 60


def _normalise_whitespace(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip()


def classify(utterance: str) -> Command:
    """Classify an utterance; the first matching rule wins."""

    raw = (utterance or "").strip()
    text = raw.lower()

    if any(phrase in text for phrase in _NOW_PHRASES) or (
        "what" in text and "do" in text and "now" in text
    ):
        return Command(Intent.STATUS_NOW, raw)
    if any(phrase in text for phrase in _NEXT_PHRASES):
        return Command(Intent.STATUS_NEXT, raw)
    if text.startswith(_MOVE_PREFIXES):
        return Command(Intent.MOVE, raw)
    if text.startswith("add task"):
        return Command(Intent.ADD_TASK, raw)
    if "help" in text:
        return Command(Intent.HELP, raw)
    return Command(Intent.CHAT, raw)


def normalize_identifier(identifier: str) -> str:
    """Expand bare hyphens to `` - `` so intervals match the display form."""

    return _normalise_whitespace(identifier.replace("-", " - "))


def _parse_target_date(tail: str, today: datetime.date) -> datetime.date | None:
    iso_match = _ISO_DATE.search(tail)
    if iso_match:
        parsed = parse_date_string(iso_match.group(1))
        if parsed is not None:
            return parsed

    day_first_match = _DAY_FIRST_DATE.search(tail)
    if day_first_match:
        parsed = parse_day_first_date(day_first_match.group(1))
        if parsed is not None:
            return parsed

    if _TODAY.search(tail):
        return today
    if _TOMORROW.search(tail):
        return add_days(today, 1)
    return None


def _parse_target_time(tail: str) -> int | None:
    match = _TIME_TOKEN.search(tail)
    if match is None:
        return None
    return to_minutes(f"{match.group(1).zfill(2)}:{match.group(2)}")


def parse_move_command(text: str, today: datetime.date) -> MoveRequest:
    """Extract the target identifier, date and optional start time.

    ``move algebra to tomorrow 14:30`` gives identifier ``algebra``, tomorrow's
    date and 870 minutes. The text is split on the last `` to ``; without one
    the whole remainder is the identifier and the date defaults to today.
    """

    body = " " + _MOVE_KEYWORD.sub("", text.strip(), count=1).strip()

    split_at = body.lower().rfind(" to ")
    if split_at >= 0:
        identifier = body[:split_at].strip()
        tail = body[split_at + len(" to "):].strip()
    else:
        identifier = body.strip()
        tail = ""

    target_date = _parse_target_date(tail, today) if tail else None
    target_time = _parse_target_time(tail) if tail else None

    return MoveRequest(
        identifier=normalize_identifier(identifier),
        target_date=target_date or today,
        target_time_minutes=target_time,
    )


def parse_add_task_command(text: str, now: datetime.datetime) -> TaskDraft:
    """Build a task draft from ``add task: <title> [priority] [estimate] [deadline]``."""

    body = _ADD_TASK_KEYWORD.sub("", text.strip(), count=1).strip()

    priority = Priority.MEDIUM
    priority_match = _PRIORITY.search(body)
    if priority_match:
        priority = Priority(priority_match.group(1).lower())
        body = _PRIORITY.sub("", body, count=1)

    estimated_time = DEFAULT_TASK_ESTIMATE
    estimate_match = _ESTIMATE.search(body)
    if estimate_match:
        amount = int(estimate_match.group(1))
        unit = estimate_match.group(2).lower()
        estimated_time = amount * 60 if unit.startswith(("hour", "hr")) else amount
        body = _ESTIMATE.sub("", body, count=1)

    deadline = now + datetime.timedelta(days=1)
    keyword_match = _DEADLINE_KEYWORD.search(body)
    by_match = _DEADLINE_BY.search(body)
    if keyword_match:
        if keyword_match.group(1).lower() == "today":
            deadline = now
        body = body[: keyword_match.start()] + body[keyword_match.end() :]
    elif by_match:
        # an unparsable "by ..." clause stays part of the title
        parsed = parse_lenient_datetime(by_match.group(1), default=now)
        if parsed is not None:
            deadline = parsed
            body = body[: by_match.start()]

    title = _normalise_whitespace(body).strip(" ,.-") or DEFAULT_TASK_TITLE

    return TaskDraft(
        title=title,
        priority=priority,
        deadline=deadline,
        estimated_time=max(1, estimated_time),
        description="Added via assistant",
    )


__all__ = [
    "Intent",
    "Command",
    "classify",
    "normalize_identifier",
    "parse_move_command",
    "parse_add_task_command",
]
