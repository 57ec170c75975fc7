"""SQLite storage adapter — implements StoragePort over TaskDB/AssignmentDB.

The DB classes use the blocking sqlite3 module; every call is wrapped with
asyncio.to_thread for async compatibility.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from typing import Callable, Iterable, TypeVar

from chore_planner.data.db import AssignmentDB, TaskDB
from chore_planner.data.models import ScheduledAssignment, ScheduledTask, Task
from chore_planner.ports.storage_port import StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SQLiteStorageAdapter:
    """SQLite implementation of StoragePort.

    Construct once at process start and pass it to whoever needs storage.
    """

    def __init__(self, db_path: str | None = None) -> None:
        try:
            self._tasks = TaskDB(db_path=db_path)
            # Share the resolved path so an in-memory database is one database
            self._assignments = AssignmentDB(db_path=self._tasks.db_path)
        except sqlite3.Error as exc:
            logger.error("SQLite error (open %s): %s", db_path, exc)
            raise StorageError(f"Failed to open database: {exc}") from exc

    async def _run(self, op: str, func: Callable[..., T], *args) -> T:
        try:
            return await asyncio.to_thread(func, *args)
        except sqlite3.Error as exc:
            logger.error("SQLite error (%s): %s", op, exc)
            raise StorageError(f"Failed to {op}: {exc}") from exc

    async def add_task(self, name: str, frequency: str, priority: str) -> Task:
        return await self._run("add task", self._tasks.add_task, name, frequency, priority)

    async def get_task(self, task_id: int) -> Task | None:
        return await self._run("get task", self._tasks.get_task, task_id)

    async def list_tasks(self) -> list[Task]:
        return await self._run("list tasks", self._tasks.list_all)

    async def delete_task(self, task_id: int) -> bool:
        return await self._run("delete task", self._tasks.delete_task, task_id)

    async def existing_assignment_keys(
        self, start: str, end: str
    ) -> set[tuple[int, str]]:
        return await self._run(
            "read scheduled tasks", self._assignments.existing_keys, start, end,
        )

    async def insert_assignments(self, pairs: Iterable[tuple[int, str]]) -> int:
        return await self._run(
            "insert scheduled tasks", self._assignments.insert_many, list(pairs),
        )

    async def clear_assignments(self) -> int:
        return await self._run("clear schedule", self._assignments.clear_all)

    async def get_schedule(self, start: str, end: str) -> list[ScheduledTask]:
        return await self._run("read schedule", self._assignments.list_range, start, end)

    async def get_assignment(self, assignment_id: int) -> ScheduledAssignment | None:
        return await self._run(
            "get scheduled task", self._assignments.get_assignment, assignment_id,
        )

    async def set_assignment_status(self, assignment_id: int, status: str) -> bool:
        return await self._run(
            "update scheduled task", self._assignments.set_status, assignment_id, status,
        )
