"""
Chore Planner — Schedule Assigner.

Places recurring tasks on the days of a window. Tasks are walked in priority
order (high, mid, low; ties keep input order) and each one lands on its
earliest candidate date that still has room. A day holds at most
DAILY_CAPACITY tasks.

Daily tasks take every candidate day with room. Every other frequency gets a
single occurrence per run; its later candidates are fallbacks for when the
earlier ones are full.

Tasks that cannot be placed are never an error: they are returned in
ScheduleResult.unplaced with the reason.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from chore_planner.core.date_range import DateLike, candidate_dates, expand_date_range
from chore_planner.data.models import Frequency, Priority, Task

logger = logging.getLogger(__name__)

DAILY_CAPACITY = 3

PRIORITY_RANK = {
    Priority.HIGH.value: 1,
    Priority.MID.value: 2,
    Priority.LOW.value: 3,
}
_UNKNOWN_PRIORITY_RANK = len(PRIORITY_RANK) + 1

_KNOWN_FREQUENCIES = {f.value for f in Frequency}

Schedule = dict[str, list[Task]]


class SkipReason(Enum):
    UNKNOWN_FREQUENCY = "unknown_frequency"
    NO_CANDIDATES = "no_candidates"
    CAPACITY_EXHAUSTED = "capacity_exhausted"


@dataclass
class UnplacedTask:
    """A task (or some of its daily occurrences) left out of the schedule."""

    task: Task
    reason: SkipReason
    dates: list[str] = field(default_factory=list)  # candidates that were full


@dataclass
class ScheduleResult:
    """Output of generate_schedule: the per-day plan plus what was skipped."""

    schedule: Schedule
    unplaced: list[UnplacedTask] = field(default_factory=list)


def priority_rank(priority: str) -> int:
    """Sort key for a priority value; unknown values sort after low."""
    return PRIORITY_RANK.get(priority, _UNKNOWN_PRIORITY_RANK)


def order_by_priority(tasks: Iterable[Task]) -> list[Task]:
    """Stable sort by priority rank; equal priorities keep their input order."""
    ordered = list(tasks)
    for task in ordered:
        if task.priority not in PRIORITY_RANK:
            logger.warning(
                "Unknown priority '%s' for task #%s '%s', scheduling it last",
                task.priority, task.id, task.name,
            )
    ordered.sort(key=lambda t: priority_rank(t.priority))
    return ordered


def generate_schedule(
    tasks: Iterable[Task], start: DateLike, end: DateLike,
) -> ScheduleResult:
    """Assign tasks to the days of [start, end].

    Args:
        tasks: Tasks to place. Not mutated.
        start: First day of the window (date or ISO string).
        end: Last day of the window, inclusive.

    Returns:
        ScheduleResult whose schedule maps every ISO day of the window, in
        calendar order, to the tasks placed that day in placement order.
    """
    schedule: Schedule = {day: [] for day in expand_date_range(start, end)}
    result = ScheduleResult(schedule=schedule)

    for task in order_by_priority(tasks):
        if task.frequency not in _KNOWN_FREQUENCIES:
            logger.warning(
                "Unknown frequency '%s' for task #%s '%s', not scheduled",
                task.frequency, task.id, task.name,
            )
            result.unplaced.append(
                UnplacedTask(task=task, reason=SkipReason.UNKNOWN_FREQUENCY)
            )
            continue

        candidates = [d for d in candidate_dates(task.frequency, start, end) if d in schedule]
        if not candidates:
            logger.info("No candidate dates for task #%s '%s'", task.id, task.name)
            result.unplaced.append(
                UnplacedTask(task=task, reason=SkipReason.NO_CANDIDATES)
            )
            continue

        if task.frequency == Frequency.DAILY.value:
            full = _place_every(task, candidates, schedule)
        else:
            full = _place_first(task, candidates, schedule)

        if full:
            logger.info(
                "Task #%s '%s' hit capacity on %d day(s): %s",
                task.id, task.name, len(full), ", ".join(full),
            )
            result.unplaced.append(
                UnplacedTask(task=task, reason=SkipReason.CAPACITY_EXHAUSTED, dates=full)
            )

    placed = sum(len(day_tasks) for day_tasks in schedule.values())
    logger.debug(
        "Generated schedule for %d day(s): %d placement(s), %d skipped",
        len(schedule), placed, len(result.unplaced),
    )
    return result


def _has_room(schedule: Schedule, day: str) -> bool:
    return len(schedule[day]) < DAILY_CAPACITY


def _place_every(task: Task, candidates: list[str], schedule: Schedule) -> list[str]:
    """Place task on every candidate with room; return the days that were full."""
    full: list[str] = []
    for day in candidates:
        if _has_room(schedule, day):
            schedule[day].append(task)
        else:
            full.append(day)
    return full


def _place_first(task: Task, candidates: list[str], schedule: Schedule) -> list[str]:
    """Place task on the first candidate with room.

    Returns [] once placed, or every candidate if all were full.
    """
    for day in candidates:
        if _has_room(schedule, day):
            schedule[day].append(task)
            return []
    return list(candidates)


def placed_task_ids(schedule: Schedule) -> set[int]:
    """Ids of every task that appears somewhere in the schedule."""
    return {task.id for day_tasks in schedule.values() for task in day_tasks}
