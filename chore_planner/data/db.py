"""
Chore Planner — Task and Schedule Database.

Tasks and their scheduled assignments persist in SQLite across runs.
The scheduler itself never touches this module; the storage adapter does.
"""

from __future__ import annotations

import logging
import sqlite3
import uuid
from pathlib import Path
from typing import Iterable

from chore_planner.data.models import (
    AssignmentStatus,
    ScheduledAssignment,
    ScheduledTask,
    Task,
)

logger = logging.getLogger(__name__)


MEMORY_PATH = ":memory:"


def _open_path(db_path: str) -> tuple[str, sqlite3.Connection | None]:
    """Resolve db_path to the path every connection should open.

    A plain ":memory:" database lives only as long as its connection, so it
    is replaced by a uniquely named shared-cache in-memory URI plus one
    connection that keeps it alive. Any other path gets its parent
    directory created.
    """
    if db_path == MEMORY_PATH:
        uri = f"file:chore_planner_{uuid.uuid4().hex}?mode=memory&cache=shared"
        return uri, sqlite3.connect(uri, uri=True, check_same_thread=False)
    if not db_path.startswith("file:"):
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    return db_path, None


def _connect(db_path: str) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path, uri=db_path.startswith("file:"))
    conn.row_factory = sqlite3.Row
    return conn


def _init_schema(conn: sqlite3.Connection) -> None:
    """Create both tables if missing, and migrate older schemas.

    The two DB classes share one file and reference each other's table
    (delete cascades, joined reads), so either one creates the full schema.
    """
    conn.execute("""
        CREATE TABLE IF NOT EXISTS tasks (
            id        INTEGER PRIMARY KEY AUTOINCREMENT,
            name      TEXT NOT NULL,
            frequency TEXT NOT NULL DEFAULT 'daily',
            priority  TEXT NOT NULL DEFAULT 'mid'
        )
    """)
    # Migrate existing DBs: older files were created without priority
    existing_cols = {
        row[1] for row in conn.execute("PRAGMA table_info(tasks)").fetchall()
    }
    if "priority" not in existing_cols:
        conn.execute(
            "ALTER TABLE tasks ADD COLUMN priority TEXT NOT NULL DEFAULT 'mid'"
        )
    conn.execute("""
        CREATE TABLE IF NOT EXISTS scheduled_tasks (
            id             INTEGER PRIMARY KEY AUTOINCREMENT,
            task_id        INTEGER NOT NULL,
            scheduled_date TEXT    NOT NULL,
            status         TEXT    NOT NULL DEFAULT 'pending'
        )
    """)
    conn.execute("""
        CREATE INDEX IF NOT EXISTS idx_scheduled_tasks_date
            ON scheduled_tasks (scheduled_date)
    """)


class TaskDB:
    """SQLite-backed storage for recurring tasks."""

    def __init__(self, db_path: str | None = None) -> None:
        if db_path is None:
            from chore_planner.config import settings
            db_path = settings.DATABASE_PATH

        self._db_path, self._keepalive = _open_path(db_path)
        self._init_db()

    @property
    def db_path(self) -> str:
        """Path (or in-memory URI) that other DB classes can share."""
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        return _connect(self._db_path)

    def _init_db(self) -> None:
        with self._connect() as conn:
            _init_schema(conn)
        logger.debug("Tasks table initialized at %s", self._db_path)

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=row["id"],
            name=row["name"],
            frequency=row["frequency"],
            priority=row["priority"],
        )

    def add_task(self, name: str, frequency: str, priority: str = "mid") -> Task:
        """Insert a new task and return it with its assigned id."""
        with self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO tasks (name, frequency, priority) VALUES (?, ?, ?)",
                (name, frequency, priority),
            )
            task_id = cursor.lastrowid

        task = Task(id=task_id, name=name, frequency=frequency, priority=priority)
        logger.info("Task added: #%d '%s' (%s, %s)", task_id, name, frequency, priority)
        return task

    def get_task(self, task_id: int) -> Task | None:
        """Fetch a single task by ID."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM tasks WHERE id = ?", (task_id,)
            ).fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    def list_all(self) -> list[Task]:
        """Return all tasks in creation order."""
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM tasks ORDER BY id").fetchall()
        return [self._row_to_task(r) for r in rows]

    def delete_task(self, task_id: int) -> bool:
        """Permanently delete a task together with its scheduled assignments."""
        with self._connect() as conn:
            conn.execute("DELETE FROM scheduled_tasks WHERE task_id = ?", (task_id,))
            cursor = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        deleted = cursor.rowcount > 0
        if deleted:
            logger.info("Task #%d deleted", task_id)
        return deleted


class AssignmentDB:
    """SQLite-backed storage for tasks placed on dates.

    At most one row exists per (task_id, scheduled_date); inserts look up
    the pair first and skip it when present.
    """

    def __init__(self, db_path: str | None = None) -> None:
        if db_path is None:
            from chore_planner.config import settings
            db_path = settings.DATABASE_PATH

        self._db_path, self._keepalive = _open_path(db_path)
        self._init_db()

    @property
    def db_path(self) -> str:
        """Path (or in-memory URI) that other DB classes can share."""
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        return _connect(self._db_path)

    def _init_db(self) -> None:
        with self._connect() as conn:
            _init_schema(conn)
        logger.debug("Scheduled tasks table initialized at %s", self._db_path)

    @staticmethod
    def _row_to_assignment(row: sqlite3.Row) -> ScheduledAssignment:
        return ScheduledAssignment(
            id=row["id"],
            task_id=row["task_id"],
            scheduled_date=row["scheduled_date"],
            status=row["status"],
        )

    def existing_keys(self, start: str, end: str) -> set[tuple[int, str]]:
        """Return the (task_id, date) pairs already stored within [start, end]."""
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT task_id, scheduled_date FROM scheduled_tasks
                WHERE scheduled_date BETWEEN ? AND ?
                """,
                (start, end),
            ).fetchall()
        return {(r["task_id"], r["scheduled_date"]) for r in rows}

    def insert_many(self, pairs: Iterable[tuple[int, str]]) -> int:
        """Insert pending assignments, skipping pairs that already exist.

        All inserts share one transaction: an error rolls the batch back.
        Returns the number of rows inserted.
        """
        inserted = 0
        with self._connect() as conn:
            for task_id, scheduled_date in pairs:
                exists = conn.execute(
                    "SELECT 1 FROM scheduled_tasks WHERE task_id = ? AND scheduled_date = ?",
                    (task_id, scheduled_date),
                ).fetchone()
                if exists is not None:
                    continue
                conn.execute(
                    """
                    INSERT INTO scheduled_tasks (task_id, scheduled_date, status)
                    VALUES (?, ?, ?)
                    """,
                    (task_id, scheduled_date, AssignmentStatus.PENDING.value),
                )
                inserted += 1
        logger.info("Inserted %d scheduled task(s)", inserted)
        return inserted

    def get_assignment(self, assignment_id: int) -> ScheduledAssignment | None:
        """Fetch a single assignment by ID."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM scheduled_tasks WHERE id = ?", (assignment_id,)
            ).fetchone()
        if row is None:
            return None
        return self._row_to_assignment(row)

    def clear_all(self) -> int:
        """Delete every scheduled assignment. Returns rows removed."""
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM scheduled_tasks")
        logger.info("Cleared %d scheduled task(s)", cursor.rowcount)
        return cursor.rowcount

    def list_range(self, start: str, end: str) -> list[ScheduledTask]:
        """Assignments within [start, end] joined with their task.

        Ordered by date, then priority (high first), then task id.
        """
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT s.id AS assignment_id, s.task_id, s.scheduled_date, s.status,
                       t.name, t.frequency, t.priority
                FROM scheduled_tasks s
                JOIN tasks t ON t.id = s.task_id
                WHERE s.scheduled_date BETWEEN ? AND ?
                ORDER BY s.scheduled_date,
                         CASE t.priority
                             WHEN 'high' THEN 1
                             WHEN 'mid'  THEN 2
                             WHEN 'low'  THEN 3
                             ELSE 4
                         END,
                         t.id
                """,
                (start, end),
            ).fetchall()
        return [
            ScheduledTask(
                assignment_id=r["assignment_id"],
                task_id=r["task_id"],
                scheduled_date=r["scheduled_date"],
                status=r["status"],
                name=r["name"],
                frequency=r["frequency"],
                priority=r["priority"],
            )
            for r in rows
        ]

    def set_status(self, assignment_id: int, status: str) -> bool:
        """Update the status of one assignment (e.g. mark it done)."""
        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE scheduled_tasks SET status = ? WHERE id = ?",
                (status, assignment_id),
            )
        updated = cursor.rowcount > 0
        if updated:
            logger.info("Scheduled task #%d set to %s", assignment_id, status)
        return updated
