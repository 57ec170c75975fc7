"""
Chore Planner — Data Models.

Tasks and their scheduled assignments persist in SQLite between runs.
The scheduling core only ever reads these records; ids and statuses are
owned by the storage layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    MONTHLY = "monthly"


class Priority(str, Enum):
    HIGH = "high"
    MID = "mid"
    LOW = "low"


class AssignmentStatus(str, Enum):
    PENDING = "pending"
    DONE = "done"


@dataclass
class Task:
    """A recurring chore.

    frequency and priority are kept as plain text so that rows written by an
    older or foreign client with unknown values still load; the scheduler
    reports those instead of failing.
    """

    id: int
    name: str                 # e.g., "Take out trash"
    frequency: str            # daily | weekly | bi-weekly | monthly
    priority: str = Priority.MID.value  # high | mid | low


@dataclass
class ScheduledAssignment:
    """A task placed on a concrete date."""

    id: int
    task_id: int
    scheduled_date: str       # ISO date YYYY-MM-DD
    status: str = AssignmentStatus.PENDING.value


@dataclass
class ScheduledTask:
    """An assignment joined with the attributes of its task."""

    assignment_id: int
    task_id: int
    scheduled_date: str
    status: str
    name: str
    frequency: str
    priority: str
