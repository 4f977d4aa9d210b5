"""Tests for chat intent classification and parameter extraction."""

from __future__ import annotations

import datetime

import pytest

from studyplanner.scheduling.commands import (
    Intent,
    classify,
    normalize_identifier,
    parse_add_task_command,
    parse_move_command,
)
from studyplanner.scheduling.models import Priority

TODAY = datetime.date(2026, 3, 16)
NOW = datetime.datetime(2026, 3, 16, 8, 0)


@pytest.mark.parametrize(
    ("text", "intent"),
    [
        ("What should I do now?", Intent.STATUS_NOW),
        ("what do I have to do right now", Intent.STATUS_NOW),
        ("What's next", Intent.STATUS_NEXT),
        ("show me my next task", Intent.STATUS_NEXT),
        ("Move algebra to tomorrow 14:30", Intent.MOVE),
        ("reschedule 09:00-10:00 to today", Intent.MOVE),
        ("Add task: essay", Intent.ADD_TASK),
        ("help", Intent.HELP),
        ("Can you help me plan?", Intent.HELP),
        ("add task: help mom", Intent.ADD_TASK),
        ("hello there", Intent.CHAT),
        ("", Intent.CHAT),
    ],
)
def test_classify(text, intent):
    assert classify(text).intent is intent


def test_classify_keeps_stripped_text():
    assert classify("  move x to today ").raw_text == "move x to today"
    assert classify(None).raw_text == ""


def test_normalize_identifier():
    assert normalize_identifier("09:00-10:00") == "09:00 - 10:00"
    assert normalize_identifier("  Algebra   practice ") == "Algebra practice"


class TestParseMoveCommand:
    def test_relative_date_and_time(self):
        request = parse_move_command("move algebra to tomorrow 14:30", TODAY)
        assert request.identifier == "algebra"
        assert request.target_date == datetime.date(2026, 3, 17)
        assert request.target_time_minutes == 870

    def test_iso_date_without_time(self):
        request = parse_move_command("reschedule 09:00-10:00 to 2026-03-20", TODAY)
        assert request.identifier == "09:00 - 10:00"
        assert request.target_date == datetime.date(2026, 3, 20)
        assert request.target_time_minutes is None

    def test_day_first_date_and_single_digit_hour(self):
        request = parse_move_command("move essay to 20-03-2026 9:15", TODAY)
        assert request.target_date == datetime.date(2026, 3, 20)
        assert request.target_time_minutes == 555

    def test_without_target_defaults_to_today(self):
        request = parse_move_command("move chemistry", TODAY)
        assert request.identifier == "chemistry"
        assert request.target_date == TODAY
        assert request.target_time_minutes is None

    def test_splits_on_last_to(self):
        request = parse_move_command("move trip to museum to today", TODAY)
        assert request.identifier == "trip to museum"
        assert request.target_date == TODAY

    def test_missing_identifier(self):
        request = parse_move_command("reschedule to tomorrow", TODAY)
        assert request.identifier == ""
        assert request.target_date == datetime.date(2026, 3, 17)


class TestParseAddTaskCommand:
    def test_full_command(self):
        draft = parse_add_task_command(
            "add task: Essay draft high priority 2 hours by 2026-03-20", NOW
        )
        assert draft.title == "Essay draft"
        assert draft.priority is Priority.HIGH
        assert draft.estimated_time == 120
        assert draft.deadline.date() == datetime.date(2026, 3, 20)

    def test_keyword_deadline(self):
        draft = parse_add_task_command("add task: quiz prep today 30 min", NOW)
        assert draft.title == "quiz prep"
        assert draft.estimated_time == 30
        assert draft.deadline == NOW

    def test_tomorrow_is_default_deadline(self):
        draft = parse_add_task_command("add task read chapter 4 tomorrow", NOW)
        assert draft.title == "read chapter 4"
        assert draft.deadline == NOW + datetime.timedelta(days=1)

    def test_by_tomorrow_is_stripped_from_title(self):
        draft = parse_add_task_command("add task: essay by tomorrow", NOW)
        assert draft.title == "essay"
        assert draft.deadline == NOW + datetime.timedelta(days=1)

    def test_by_today_sets_deadline_to_now(self):
        draft = parse_add_task_command("add task: Lab notes by today 45 mins", NOW)
        assert draft.title == "Lab notes"
        assert draft.estimated_time == 45
        assert draft.deadline == NOW

    def test_unparsable_by_clause_stays_in_title(self):
        draft = parse_add_task_command("add task: study by the lake 2 hours", NOW)
        assert draft.title == "study by the lake"
        assert draft.estimated_time == 120
        assert draft.deadline == NOW + datetime.timedelta(days=1)

    def test_defaults(self):
        draft = parse_add_task_command("add task:", NOW)
        assert draft.title == "New Task"
        assert draft.priority is Priority.MEDIUM
        assert draft.estimated_time == 60
        assert draft.deadline == NOW + datetime.timedelta(days=1)
        assert draft.description == "Added via assistant"
