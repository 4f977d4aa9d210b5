from __future__ import annotations

import dataclasses
import datetime

import pytest

from studyplanner.config import Settings
from studyplanner.repository import ScheduleRepository
from studyplanner.scheduling.errors import (
    AvailabilityNotConfiguredError,
    EntryNotFoundError,
    ScheduleConflictError,
    TaskNotFoundError,
    UnauthenticatedError,
)
from studyplanner.scheduling.models import MoveRequest, Priority, TaskDraft
from studyplanner.services.schedule_service import ScheduleService, require_user

USER = "user-1"


@pytest.fixture
async def service(tmp_path, fixed_clock):
    settings = Settings(database_path=tmp_path / "planner.db", timezone="UTC")
    repo = ScheduleRepository(settings.database_path)
    await repo.initialize()
    try:
        yield ScheduleService(repo, settings, clock=fixed_clock)
    finally:
        await repo.close()


def _draft(title="Essay", *, days=5, estimate=150, priority=Priority.MEDIUM):
    return TaskDraft(
        title=title,
        priority=priority,
        deadline=datetime.datetime(2026, 3, 16, 17, 0) + datetime.timedelta(days=days),
        estimated_time=estimate,
    )


def test_require_user():
    assert require_user("  abc ") == "abc"
    for value in (None, "", "   "):
        with pytest.raises(UnauthenticatedError):
            require_user(value)


@pytest.mark.anyio
async def test_generate_requires_availability(service):
    await service.create_task(USER, _draft())

    with pytest.raises(AvailabilityNotConfiguredError):
        await service.generate_schedule(USER)


@pytest.mark.anyio
async def test_generate_persists_sessions(service, today):
    await service.set_availability(USER, ["9:00 - 12:00"])
    task = await service.create_task(USER, _draft())

    run = await service.generate_schedule(USER)

    assert [entry.interval for entry in run.entries] == [
        "09:00-10:00",
        "09:00-10:00",
        "09:00-09:30",
    ]
    assert all(entry.id for entry in run.entries)
    assert run.entries[0].date == today
    stored = await service.list_entries(USER)
    assert stored == run.entries
    assert {entry.task_id for entry in stored} == {task.id}

    again = await service.generate_schedule(USER)
    assert again.entries == []


@pytest.mark.anyio
async def test_availability_is_canonicalised(service):
    assert await service.set_availability(USER, ["9:00 - 12:00"]) == ["09:00-12:00"]
    assert await service.get_availability(USER) == ["09:00-12:00"]

    with pytest.raises(ValueError):
        await service.set_availability(USER, ["12:00-09:00"])


@pytest.mark.anyio
async def test_manual_entry_conflicts(service, today):
    first = await service.add_manual_entry(
        USER, date=today, interval="09:00 - 10:00", task_description="Gym"
    )
    assert first.interval == "09:00-10:00"
    assert first.is_auto_scheduled is False

    with pytest.raises(ScheduleConflictError):
        await service.add_manual_entry(
            USER, date=today, interval="09:30-10:30", task_description="Call"
        )

    touching = await service.add_manual_entry(
        USER, date=today, interval="10:00-11:00", task_description="Call"
    )
    assert touching.id != first.id

    with pytest.raises(ValueError):
        await service.add_manual_entry(
            USER, date=today, interval="later", task_description="Nap"
        )


@pytest.mark.anyio
async def test_update_entry_ignores_its_own_slot(service, today):
    entry = await service.add_manual_entry(
        USER, date=today, interval="09:00-10:00", task_description="Gym"
    )

    updated = await service.update_entry(USER, entry.id, interval="09:30 - 10:30")

    assert updated.id == entry.id
    assert updated.interval == "09:30-10:30"
    assert updated.task_description == "Gym"
    stored = await service.list_entries(USER, today, today)
    assert [(item.id, item.interval) for item in stored] == [(entry.id, "09:30-10:30")]


@pytest.mark.anyio
async def test_update_entry_conflicts_with_other_entries(service, today):
    tomorrow = today + datetime.timedelta(days=1)
    await service.add_manual_entry(
        USER, date=today, interval="09:00-10:00", task_description="Gym"
    )
    await service.add_manual_entry(
        USER, date=tomorrow, interval="14:00-15:00", task_description="Lab"
    )
    call = await service.add_manual_entry(
        USER, date=today, interval="10:00-11:00", task_description="Call"
    )

    with pytest.raises(ScheduleConflictError):
        await service.update_entry(USER, call.id, interval="09:30-10:30")
    with pytest.raises(ScheduleConflictError):
        await service.update_entry(USER, call.id, date=tomorrow, interval="14:30-15:30")

    unchanged = await service.list_entries(USER, today, today)
    assert [item.interval for item in unchanged] == ["09:00-10:00", "10:00-11:00"]

    moved = await service.update_entry(USER, call.id, date=tomorrow)
    assert (moved.date, moved.interval) == (tomorrow, "10:00-11:00")


@pytest.mark.anyio
async def test_update_entry_description_only(service, today):
    entry = await service.add_manual_entry(
        USER, date=today, interval="09:00-10:00", task_description="Gym"
    )

    updated = await service.update_entry(USER, entry.id, task_description="Swim")

    assert (updated.date, updated.interval) == (today, "09:00-10:00")
    stored = await service.list_entries(USER, today, today)
    assert stored[0].task_description == "Swim"


@pytest.mark.anyio
async def test_update_entry_errors(service, today):
    entry = await service.add_manual_entry(
        USER, date=today, interval="09:00-10:00", task_description="Gym"
    )

    with pytest.raises(EntryNotFoundError):
        await service.update_entry(USER, "missing", task_description="Swim")
    with pytest.raises(EntryNotFoundError):
        await service.update_entry("user-2", entry.id, task_description="Swim")
    with pytest.raises(ValueError):
        await service.update_entry(USER, entry.id, interval="later")


@pytest.mark.anyio
async def test_move_reports_unsaved_original(service, today, monkeypatch):
    await service.set_availability(USER, ["14:00-16:00"])
    await service.add_manual_entry(
        USER, date=today, interval="09:00-10:00", task_description="Algebra"
    )
    list_entries = service.repository.list_entries

    async def without_ids(*args, **kwargs):
        entries = await list_entries(*args, **kwargs)
        return [dataclasses.replace(entry, id=None) for entry in entries]

    monkeypatch.setattr(service.repository, "list_entries", without_ids)

    with pytest.raises(EntryNotFoundError):
        await service.move_entry(USER, MoveRequest("algebra", today))


@pytest.mark.anyio
async def test_delete_missing_entry(service):
    with pytest.raises(EntryNotFoundError):
        await service.delete_entry(USER, "missing")


@pytest.mark.anyio
async def test_move_persists_replacement(service, today):
    await service.set_availability(USER, ["14:00-16:00"])
    original = await service.add_manual_entry(
        USER, date=today, interval="09:00-10:00", task_description="Algebra practice"
    )
    tomorrow = today + datetime.timedelta(days=1)

    plan = await service.move_entry(USER, MoveRequest("algebra", tomorrow, 14 * 60 + 30))

    assert plan.original.id == original.id
    assert plan.replacement.id is not None
    entries = await service.list_entries(USER)
    assert [(entry.date, entry.interval) for entry in entries] == [(tomorrow, "14:30-15:30")]
    assert entries[0].task_description == "Algebra practice"


@pytest.mark.anyio
async def test_move_without_availability(service, today):
    await service.add_manual_entry(
        USER, date=today, interval="09:00-10:00", task_description="Algebra"
    )

    with pytest.raises(AvailabilityNotConfiguredError):
        await service.move_entry(USER, MoveRequest("algebra", today))


@pytest.mark.anyio
async def test_aware_deadline_stored_as_local(service):
    plus_two = datetime.timezone(datetime.timedelta(hours=2))
    draft = TaskDraft(
        title="Essay",
        priority=Priority.HIGH,
        deadline=datetime.datetime(2026, 3, 20, 12, 0, tzinfo=plus_two),
        estimated_time=60,
    )

    task = await service.create_task(USER, draft)

    assert task.deadline == datetime.datetime(2026, 3, 20, 10, 0)


@pytest.mark.anyio
async def test_update_and_delete_task(service):
    task = await service.create_task(USER, _draft())

    updated = await service.update_task(USER, task.id, {"priority": "high", "completed": True})
    assert updated.priority is Priority.HIGH
    assert updated.completed is True

    with pytest.raises(TaskNotFoundError):
        await service.update_task(USER, "missing", {"title": "x"})

    await service.delete_task(USER, task.id)
    with pytest.raises(TaskNotFoundError):
        await service.delete_task(USER, task.id)
