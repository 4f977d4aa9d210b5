from __future__ import annotations

import dataclasses
import datetime

import pytest

from studyplanner.repository import ScheduleRepository
from studyplanner.scheduling.errors import EntryNotFoundError
from studyplanner.scheduling.models import Priority, ScheduleEntry

DAY = datetime.date(2026, 3, 16)


@pytest.fixture
async def repository(tmp_path):
    repo = ScheduleRepository(tmp_path / "planner.db")
    await repo.initialize()
    try:
        yield repo
    finally:
        await repo.close()


def _entry(day, interval, title, **kwargs):
    return ScheduleEntry(date=day, interval=interval, task_description=title, **kwargs)


@pytest.mark.anyio
async def test_task_roundtrip(repository):
    deadline = datetime.datetime(2026, 3, 20, 17, 0)
    created = await repository.create_task(
        "user-1",
        title="Essay",
        priority=Priority.HIGH,
        deadline=deadline,
        estimated_time=90,
        category="writing",
    )

    tasks = await repository.list_tasks("user-1")

    assert [task.id for task in tasks] == [created.id]
    assert tasks[0].priority is Priority.HIGH
    assert tasks[0].deadline == deadline
    assert tasks[0].estimated_time == 90
    assert tasks[0].completed is False
    assert await repository.list_tasks("someone-else") == []


@pytest.mark.anyio
async def test_update_task_ignores_unknown_columns(repository):
    created = await repository.create_task(
        "user-1",
        title="Essay",
        priority=Priority.LOW,
        deadline=datetime.datetime(2026, 3, 20, 17, 0),
    )

    updated = await repository.update_task(
        "user-1",
        created.id,
        {"completed": True, "priority": Priority.MEDIUM, "user_id": "hijack"},
    )

    assert updated is not None
    assert updated.completed is True
    assert updated.priority is Priority.MEDIUM
    assert await repository.get_task("user-1", created.id) is not None
    assert await repository.update_task("user-1", "missing", {"title": "x"}) is None


@pytest.mark.anyio
async def test_delete_task(repository):
    created = await repository.create_task(
        "user-1",
        title="Essay",
        priority=Priority.LOW,
        deadline=datetime.datetime(2026, 3, 20, 17, 0),
    )

    assert await repository.delete_task("user-1", created.id) is True
    assert await repository.delete_task("user-1", created.id) is False


@pytest.mark.anyio
async def test_entries_are_filtered_by_range_and_ordered(repository):
    later = DAY + datetime.timedelta(days=2)
    await repository.insert_entries(
        "user-1",
        [
            _entry(later, "09:00-10:00", "Later"),
            _entry(DAY, "11:00-12:00", "First"),
            _entry(DAY, "09:00-10:00", "Second"),
        ],
    )

    all_entries = await repository.list_entries("user-1")
    same_day = await repository.list_entries("user-1", DAY, DAY)

    assert [entry.task_description for entry in all_entries] == ["First", "Second", "Later"]
    assert [entry.task_description for entry in same_day] == ["First", "Second"]
    assert all(entry.id for entry in all_entries)


@pytest.mark.anyio
async def test_insert_assigns_id_and_keeps_flags(repository):
    stored = await repository.insert_entry(
        "user-1", _entry(DAY, "09:00-10:00", "Algebra", task_id="t1", is_auto_scheduled=True)
    )

    fetched = await repository.get_entry("user-1", stored.id)

    assert fetched == stored
    assert fetched.is_auto_scheduled is True
    assert fetched.task_id == "t1"


@pytest.mark.anyio
async def test_update_entry_in_place(repository):
    stored = await repository.insert_entry(
        "user-1", _entry(DAY, "09:00-10:00", "Algebra", task_id="t1", is_auto_scheduled=True)
    )
    edited = dataclasses.replace(stored, interval="10:00-11:00", task_description="Algebra II")

    assert await repository.update_entry("other-user", edited) is False
    assert await repository.update_entry("user-1", edited) is True
    assert await repository.get_entry("user-1", stored.id) == edited


@pytest.mark.anyio
async def test_replace_entry_swaps_atomically(repository):
    original = await repository.insert_entry("user-1", _entry(DAY, "09:00-10:00", "Algebra"))
    replacement = _entry(DAY + datetime.timedelta(days=1), "14:30-15:30", "Algebra")

    stored = await repository.replace_entry("user-1", original.id, replacement)

    entries = await repository.list_entries("user-1")
    assert entries == [stored]
    assert stored.id != original.id


@pytest.mark.anyio
async def test_replace_missing_entry_inserts_nothing(repository):
    with pytest.raises(EntryNotFoundError):
        await repository.replace_entry(
            "user-1", "missing", _entry(DAY, "09:00-10:00", "Ghost")
        )

    assert await repository.list_entries("user-1") == []


@pytest.mark.anyio
async def test_delete_entry(repository):
    stored = await repository.insert_entry("user-1", _entry(DAY, "09:00-10:00", "Algebra"))

    assert await repository.delete_entry("other-user", stored.id) is False
    assert await repository.delete_entry("user-1", stored.id) is True
    assert await repository.get_entry("user-1", stored.id) is None


@pytest.mark.anyio
async def test_availability_upsert(repository):
    assert await repository.get_availability("user-1") == []

    await repository.set_availability("user-1", ["09:00-12:00"])
    await repository.set_availability("user-1", ["13:00-15:00", "18:00-20:00"])

    assert await repository.get_availability("user-1") == ["13:00-15:00", "18:00-20:00"]
