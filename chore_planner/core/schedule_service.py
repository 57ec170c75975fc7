"""
Chore Planner — UI-Agnostic Schedule Service.

Stateless service layer between a front end and storage:
validate input -> read tasks and stored assignments -> run the pure
scheduler -> insert only the assignments not already stored.

The storage handle is injected; this module never opens a database itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from chore_planner.core.date_range import DateLike, parse_date
from chore_planner.core.schedule_assigner import (
    Schedule,
    UnplacedTask,
    generate_schedule,
)
from chore_planner.core.task_input import validate_new_task
from chore_planner.data.models import AssignmentStatus

if TYPE_CHECKING:
    from chore_planner.data.models import ScheduledAssignment, ScheduledTask, Task
    from chore_planner.ports.storage_port import StoragePort

logger = logging.getLogger(__name__)


@dataclass
class GenerationReport:
    """Outcome of generating and storing a schedule for one window."""

    start: str
    end: str
    schedule: Schedule
    inserted: int = 0
    skipped_existing: int = 0
    unplaced: list[UnplacedTask] = field(default_factory=list)


class ScheduleService:
    """Orchestrates task management and schedule generation over a StoragePort."""

    def __init__(self, storage: StoragePort) -> None:
        self._storage = storage

    # ------------------------------------------------------------------
    # Public: tasks
    # ------------------------------------------------------------------

    async def add_task(
        self, name: str, frequency: str = "daily", priority: str = "mid",
    ) -> Task:
        """Validate and store a new task. Raises TaskValidationError."""
        new_task = validate_new_task(name, frequency, priority)
        return await self._storage.add_task(
            new_task.name, new_task.frequency.value, new_task.priority.value,
        )

    async def list_tasks(self) -> list[Task]:
        return await self._storage.list_tasks()

    async def delete_task(self, task_id: int) -> Task | None:
        """Delete a task and its scheduled assignments.

        Returns the deleted task, or None if no task has that id.
        """
        task = await self._storage.get_task(task_id)
        if task is None:
            return None
        await self._storage.delete_task(task_id)
        return task

    # ------------------------------------------------------------------
    # Public: schedule
    # ------------------------------------------------------------------

    async def generate(self, start: DateLike, end: DateLike) -> GenerationReport:
        """Generate the schedule for [start, end] and store what is new.

        All reads finish before the scheduler runs; new assignments are
        written as one batch. Running it again for the same window with the
        same tasks inserts nothing.
        """
        start_iso = parse_date(start).isoformat()
        end_iso = parse_date(end).isoformat()

        tasks = await self._storage.list_tasks()
        existing = await self._storage.existing_assignment_keys(start_iso, end_iso)

        result = generate_schedule(tasks, start_iso, end_iso)

        new_pairs: list[tuple[int, str]] = []
        skipped = 0
        for day, day_tasks in result.schedule.items():
            for task in day_tasks:
                if (task.id, day) in existing:
                    skipped += 1
                else:
                    new_pairs.append((task.id, day))

        inserted = 0
        if new_pairs:
            inserted = await self._storage.insert_assignments(new_pairs)

        logger.info(
            "Schedule %s..%s: %d new, %d already stored, %d task(s) unplaced",
            start_iso, end_iso, inserted, skipped, len(result.unplaced),
        )
        return GenerationReport(
            start=start_iso,
            end=end_iso,
            schedule=result.schedule,
            inserted=inserted,
            skipped_existing=skipped + (len(new_pairs) - inserted),
            unplaced=result.unplaced,
        )

    async def clear(self) -> int:
        """Remove every stored assignment."""
        return await self._storage.clear_assignments()

    async def get_schedule(self, start: DateLike, end: DateLike) -> list[ScheduledTask]:
        """Stored assignments in [start, end], by date then priority."""
        return await self._storage.get_schedule(
            parse_date(start).isoformat(), parse_date(end).isoformat(),
        )

    async def mark_done(self, assignment_id: int) -> ScheduledAssignment | None:
        """Mark one stored assignment as done.

        Returns the updated assignment, or None if no assignment has that id.
        Marking an already-done assignment leaves it unchanged.
        """
        assignment = await self._storage.get_assignment(assignment_id)
        if assignment is None:
            return None
        if assignment.status != AssignmentStatus.DONE.value:
            await self._storage.set_assignment_status(
                assignment_id, AssignmentStatus.DONE.value,
            )
            assignment = replace(assignment, status=AssignmentStatus.DONE.value)
        return assignment
