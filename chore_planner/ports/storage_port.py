"""Storage port — abstract interface for task and schedule persistence.

Core modules depend on this protocol, never on a specific backend.
"""

from __future__ import annotations

from typing import Iterable, Protocol

from chore_planner.data.models import ScheduledAssignment, ScheduledTask, Task


class StorageError(Exception):
    """Raised when any storage backend operation fails.

    A call that raised committed nothing.
    """


class StoragePort(Protocol):
    """Abstract storage interface used by the schedule service."""

    async def add_task(self, name: str, frequency: str, priority: str) -> Task: ...

    async def get_task(self, task_id: int) -> Task | None: ...

    async def list_tasks(self) -> list[Task]: ...

    async def delete_task(self, task_id: int) -> bool: ...

    async def existing_assignment_keys(
        self, start: str, end: str
    ) -> set[tuple[int, str]]: ...

    async def insert_assignments(self, pairs: Iterable[tuple[int, str]]) -> int: ...

    async def clear_assignments(self) -> int: ...

    async def get_schedule(self, start: str, end: str) -> list[ScheduledTask]: ...

    async def get_assignment(self, assignment_id: int) -> ScheduledAssignment | None: ...

    async def set_assignment_status(self, assignment_id: int, status: str) -> bool: ...
