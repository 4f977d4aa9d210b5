"""Tests for the "now" and "next" schedule lookups."""

from __future__ import annotations

import datetime

from studyplanner.scheduling.models import ScheduleEntry
from studyplanner.scheduling.status import (
    StatusKind,
    current_or_next,
    first_entry,
    next_entry,
)

TODAY = datetime.date(2026, 3, 16)
TOMORROW = TODAY + datetime.timedelta(days=1)


def _entry(day, interval, title):
    return ScheduleEntry(date=day, interval=interval, task_description=title)


TODAY_ENTRIES = [
    _entry(TODAY, "11:00-12:00", "Essay"),
    _entry(TODAY, "09:00-10:00", "Algebra"),
    _entry(TODAY, "garbage", "Broken"),
]


def test_entry_in_progress_is_current():
    hit = current_or_next(TODAY_ENTRIES, 570)
    assert hit is not None
    assert hit.kind is StatusKind.CURRENT
    assert hit.entry.task_description == "Algebra"


def test_end_minute_still_counts_as_current():
    hit = current_or_next(TODAY_ENTRIES, 600)
    assert hit is not None and hit.kind is StatusKind.CURRENT


def test_gap_reports_next_entry():
    hit = current_or_next(TODAY_ENTRIES, 630)
    assert hit is not None
    assert hit.kind is StatusKind.NEXT
    assert hit.entry.task_description == "Essay"


def test_after_last_entry_returns_none():
    assert current_or_next(TODAY_ENTRIES, 800) is None


def test_first_entry_ignores_unparsable():
    assert first_entry(TODAY_ENTRIES).task_description == "Algebra"
    assert first_entry([_entry(TODAY, "??", "x")]) is None


def test_next_skips_entry_in_progress():
    hit = next_entry(TODAY_ENTRIES, [], 570)
    assert hit is not None
    assert hit.entry.task_description == "Essay"


def test_next_falls_back_to_tomorrow():
    tomorrow = [_entry(TOMORROW, "14:00-15:00", "Reading"), _entry(TOMORROW, "08:00-09:00", "Gym")]
    hit = next_entry(TODAY_ENTRIES, tomorrow, 700)
    assert hit is not None
    assert hit.kind is StatusKind.NEXT
    assert hit.entry.date == TOMORROW
    assert hit.entry.task_description == "Gym"


def test_next_with_nothing_left():
    assert next_entry(TODAY_ENTRIES, [], 800) is None
