"""Shared utilities for producing a consistent notion of "now" and "today"."""

from __future__ import annotations

import datetime as _dt
import logging
from dataclasses import dataclass
from typing import Callable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..utils.datetime_utils import minutes_of_day

logger = logging.getLogger(__name__)

Clock = Callable[[], _dt.datetime]


def resolve_timezone(
    timezone_name: Optional[str],
    fallback: Optional[_dt.tzinfo] = None,
) -> _dt.tzinfo:
    """Resolve ``timezone_name`` to a tzinfo, falling back to sensible defaults."""

    if timezone_name:
        try:
            return ZoneInfo(timezone_name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone %r; using fallback", timezone_name)

    if fallback is not None:
        return fallback

    return _dt.datetime.now().astimezone().tzinfo or _dt.timezone.utc


def system_clock() -> _dt.datetime:
    return _dt.datetime.now(_dt.timezone.utc)


@dataclass(slots=True)
class TimeSnapshot:
    """The current moment as naive local wall-clock time."""

    tzinfo: _dt.tzinfo
    now_local: _dt.datetime

    @property
    def today(self) -> _dt.date:
        return self.now_local.date()

    @property
    def minutes(self) -> int:
        """Minutes elapsed since local midnight."""

        return minutes_of_day(self.now_local)

    def to_local(self, value: _dt.datetime) -> _dt.datetime:
        """Express ``value`` as naive local time; naive values pass through."""

        if value.tzinfo is None:
            return value
        return value.astimezone(self.tzinfo).replace(tzinfo=None)


def create_time_snapshot(
    timezone_name: Optional[str] = None,
    *,
    clock: Optional[Clock] = None,
) -> TimeSnapshot:
    """Return a TimeSnapshot for ``timezone_name`` at ``clock()``.

    A naive clock value is taken as already local.
    """

    tzinfo = resolve_timezone(timezone_name)
    moment = (clock or system_clock)()
    if moment.tzinfo is not None:
        moment = moment.astimezone(tzinfo).replace(tzinfo=None)
    return TimeSnapshot(tzinfo=tzinfo, now_local=moment)


__all__ = [
    "Clock",
    "TimeSnapshot",
    "create_time_snapshot",
    "resolve_timezone",
    "system_clock",
]
