"""SQLite-backed store for tasks, schedule entries and time preferences."""

from __future__ import annotations

import datetime
import json
import logging
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Iterable, Optional

import aiosqlite

from .scheduling.errors import EntryNotFoundError, ScheduleStoreError
from .scheduling.models import Priority, ScheduleEntry, Task
from .utils.datetime_utils import date_to_string, parse_date_string

logger = logging.getLogger(__name__)

_TASK_COLUMNS = {
    "title",
    "description",
    "priority",
    "deadline",
    "completed",
    "category",
    "estimated_time",
}


def _utcnow() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


class ScheduleRepository:
    """Persist tasks, schedule entries and availability windows per user."""

    def __init__(self, database_path: Path):
        self._path = database_path
        self._connection: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        """Open the SQLite connection and ensure tables exist."""

        if self._connection is not None:
            return

        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = await aiosqlite.connect(self._path)
        self._connection.row_factory = aiosqlite.Row
        await self._connection.execute("PRAGMA journal_mode=WAL;")
        await self._create_schema()

    async def _create_schema(self) -> None:
        assert self._connection is not None
        await self._connection.executescript(
            """
            CREATE TABLE IF NOT EXISTS tasks (
                task_id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                title TEXT NOT NULL,
                description TEXT,
                priority TEXT NOT NULL DEFAULT 'medium',
                deadline TEXT NOT NULL,
                completed INTEGER NOT NULL DEFAULT 0,
                category TEXT,
                estimated_time INTEGER,
                created_at TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS schedule_items (
                entry_id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                schedule_date TEXT NOT NULL,
                interval_time TEXT NOT NULL,
                task_description TEXT NOT NULL,
                task_id TEXT,
                is_auto_scheduled INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS time_preferences (
                user_id TEXT PRIMARY KEY,
                available_times TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_tasks_user ON tasks(user_id);
            CREATE INDEX IF NOT EXISTS idx_schedule_items_user_date
                ON schedule_items(user_id, schedule_date);
            """
        )
        await self._connection.commit()

    async def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Commit on success, roll back and wrap driver errors otherwise."""

        assert self._connection is not None
        try:
            yield self._connection
            await self._connection.commit()
        except aiosqlite.Error as exc:
            await self._connection.rollback()
            raise ScheduleStoreError(str(exc)) from exc
        except Exception:
            await self._connection.rollback()
            raise

    async def _fetchall(self, query: str, params: Iterable[Any]) -> list[aiosqlite.Row]:
        assert self._connection is not None
        try:
            cursor = await self._connection.execute(query, tuple(params))
            rows = await cursor.fetchall()
            await cursor.close()
        except aiosqlite.Error as exc:
            raise ScheduleStoreError(str(exc)) from exc
        return list(rows)

    # === TASKS ===

    def _row_to_task(self, row: aiosqlite.Row) -> Task:
        try:
            priority = Priority(row["priority"])
        except ValueError:
            logger.warning(
                "Task %s has unknown priority %r; treating as medium",
                row["task_id"],
                row["priority"],
            )
            priority = Priority.MEDIUM
        return Task(
            id=row["task_id"],
            title=row["title"],
            priority=priority,
            deadline=datetime.datetime.fromisoformat(row["deadline"]),
            estimated_time=row["estimated_time"],
            completed=bool(row["completed"]),
            description=row["description"],
            category=row["category"],
        )

    async def list_tasks(self, user_id: str) -> list[Task]:
        """Return every task of ``user_id`` ordered by deadline."""
        rows = await self._fetchall(
            "SELECT * FROM tasks WHERE user_id = ? ORDER BY deadline ASC, created_at ASC",
            (user_id,),
        )
        return [self._row_to_task(row) for row in rows]

    async def get_task(self, user_id: str, task_id: str) -> Task | None:
        rows = await self._fetchall(
            "SELECT * FROM tasks WHERE user_id = ? AND task_id = ?",
            (user_id, task_id),
        )
        return self._row_to_task(rows[0]) if rows else None

    async def create_task(
        self,
        user_id: str,
        *,
        title: str,
        priority: Priority,
        deadline: datetime.datetime,
        estimated_time: Optional[int] = None,
        description: Optional[str] = None,
        category: Optional[str] = None,
        completed: bool = False,
    ) -> Task:
        task = Task(
            id=str(uuid.uuid4()),
            title=title,
            priority=priority,
            deadline=deadline,
            estimated_time=estimated_time,
            completed=completed,
            description=description,
            category=category,
        )
        async with self._transaction() as connection:
            await connection.execute(
                """
                INSERT INTO tasks (
                    task_id, user_id, title, description, priority, deadline,
                    completed, category, estimated_time, created_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    task.id,
                    user_id,
                    task.title,
                    task.description,
                    task.priority.value,
                    task.deadline.isoformat(),
                    int(task.completed),
                    task.category,
                    task.estimated_time,
                    _utcnow(),
                ),
            )
        return task

    async def update_task(
        self, user_id: str, task_id: str, updates: dict[str, Any]
    ) -> Task | None:
        """Apply a partial update; unknown keys are ignored."""
        assignments: list[str] = []
        params: list[Any] = []
        for column, value in updates.items():
            if column not in _TASK_COLUMNS:
                continue
            if isinstance(value, Priority):
                value = value.value
            elif isinstance(value, datetime.datetime):
                value = value.isoformat()
            elif isinstance(value, bool):
                value = int(value)
            assignments.append(f"{column} = ?")
            params.append(value)

        if assignments:
            async with self._transaction() as connection:
                await connection.execute(
                    f"UPDATE tasks SET {', '.join(assignments)} WHERE user_id = ? AND task_id = ?",
                    (*params, user_id, task_id),
                )
        return await self.get_task(user_id, task_id)

    async def delete_task(self, user_id: str, task_id: str) -> bool:
        async with self._transaction() as connection:
            cursor = await connection.execute(
                "DELETE FROM tasks WHERE user_id = ? AND task_id = ?",
                (user_id, task_id),
            )
            deleted = cursor.rowcount
            await cursor.close()
        return bool(deleted)

    # === SCHEDULE ENTRIES ===

    def _row_to_entry(self, row: aiosqlite.Row) -> ScheduleEntry | None:
        day = parse_date_string(row["schedule_date"])
        if day is None:
            logger.warning(
                "Skipping schedule entry %s with invalid date %r",
                row["entry_id"],
                row["schedule_date"],
            )
            return None
        return ScheduleEntry(
            id=row["entry_id"],
            date=day,
            interval=row["interval_time"],
            task_description=row["task_description"],
            task_id=row["task_id"],
            is_auto_scheduled=bool(row["is_auto_scheduled"]),
        )

    async def list_entries(
        self,
        user_id: str,
        start: datetime.date | None = None,
        end: datetime.date | None = None,
    ) -> list[ScheduleEntry]:
        """Return entries of ``user_id`` between ``start`` and ``end`` inclusive."""
        query = "SELECT * FROM schedule_items WHERE user_id = ?"
        params: list[Any] = [user_id]
        if start is not None:
            query += " AND schedule_date >= ?"
            params.append(date_to_string(start))
        if end is not None:
            query += " AND schedule_date <= ?"
            params.append(date_to_string(end))
        query += " ORDER BY schedule_date ASC, created_at ASC, rowid ASC"

        rows = await self._fetchall(query, params)
        entries = [self._row_to_entry(row) for row in rows]
        return [entry for entry in entries if entry is not None]

    async def get_entry(self, user_id: str, entry_id: str) -> ScheduleEntry | None:
        rows = await self._fetchall(
            "SELECT * FROM schedule_items WHERE user_id = ? AND entry_id = ?",
            (user_id, entry_id),
        )
        return self._row_to_entry(rows[0]) if rows else None

    async def _insert_entry(
        self, connection: aiosqlite.Connection, user_id: str, entry: ScheduleEntry
    ) -> ScheduleEntry:
        stored = ScheduleEntry(
            id=str(uuid.uuid4()),
            date=entry.date,
            interval=entry.interval,
            task_description=entry.task_description,
            task_id=entry.task_id,
            is_auto_scheduled=entry.is_auto_scheduled,
        )
        await connection.execute(
            """
            INSERT INTO schedule_items (
                entry_id, user_id, schedule_date, interval_time,
                task_description, task_id, is_auto_scheduled, created_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                stored.id,
                user_id,
                date_to_string(stored.date),
                stored.interval,
                stored.task_description,
                stored.task_id,
                int(stored.is_auto_scheduled),
                _utcnow(),
            ),
        )
        return stored

    async def insert_entry(self, user_id: str, entry: ScheduleEntry) -> ScheduleEntry:
        """Insert an entry and return it with its assigned id."""
        async with self._transaction() as connection:
            return await self._insert_entry(connection, user_id, entry)

    async def insert_entries(
        self, user_id: str, entries: Iterable[ScheduleEntry]
    ) -> list[ScheduleEntry]:
        """Insert several entries in one transaction, preserving order."""
        async with self._transaction() as connection:
            return [
                await self._insert_entry(connection, user_id, entry)
                for entry in entries
            ]

    async def delete_entry(self, user_id: str, entry_id: str) -> bool:
        async with self._transaction() as connection:
            cursor = await connection.execute(
                "DELETE FROM schedule_items WHERE user_id = ? AND entry_id = ?",
                (user_id, entry_id),
            )
            deleted = cursor.rowcount
            await cursor.close()
        return bool(deleted)

    async def update_entry(self, user_id: str, entry: ScheduleEntry) -> bool:
        """Overwrite date, interval and description of ``entry.id`` in place."""
        async with self._transaction() as connection:
            cursor = await connection.execute(
                """
                UPDATE schedule_items
                SET schedule_date = ?, interval_time = ?, task_description = ?
                WHERE user_id = ? AND entry_id = ?
                """,
                (
                    date_to_string(entry.date),
                    entry.interval,
                    entry.task_description,
                    user_id,
                    entry.id,
                ),
            )
            updated = cursor.rowcount
            await cursor.close()
        return bool(updated)

    async def replace_entry(
        self, user_id: str, entry_id: str, replacement: ScheduleEntry
    ) -> ScheduleEntry:
        """Delete ``entry_id`` and insert ``replacement`` atomically."""
        async with self._transaction() as connection:
            cursor = await connection.execute(
                "DELETE FROM schedule_items WHERE user_id = ? AND entry_id = ?",
                (user_id, entry_id),
            )
            deleted = cursor.rowcount
            await cursor.close()
            if not deleted:
                raise EntryNotFoundError(entry_id)
            return await self._insert_entry(connection, user_id, replacement)

    # === TIME PREFERENCES ===

    async def get_availability(self, user_id: str) -> list[str]:
        """Return the stored availability windows (possibly empty)."""
        rows = await self._fetchall(
            "SELECT available_times FROM time_preferences WHERE user_id = ?",
            (user_id,),
        )
        if not rows:
            return []
        try:
            windows = json.loads(rows[0]["available_times"])
        except json.JSONDecodeError:
            logger.warning("Availability for user %s is not valid JSON", user_id)
            return []
        if not isinstance(windows, list):
            return []
        return [window for window in windows if isinstance(window, str)]

    async def set_availability(self, user_id: str, windows: list[str]) -> list[str]:
        async with self._transaction() as connection:
            await connection.execute(
                """
                INSERT INTO time_preferences (user_id, available_times, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    available_times = excluded.available_times,
                    updated_at = excluded.updated_at
                """,
                (user_id, json.dumps(windows), _utcnow()),
            )
        return list(windows)


__all__ = ["ScheduleRepository"]
