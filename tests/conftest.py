"""Shared test fixtures and configuration.

Sets fake environment variables before any chore_planner imports so the
settings singleton never reads a developer's .env, and provides temp-DB
fixtures.
"""

import os

# Patch env vars BEFORE any chore_planner imports
os.environ.setdefault("DATABASE_PATH", ":memory:")
os.environ.setdefault("LOG_LEVEL", "INFO")

import pytest


@pytest.fixture
def tmp_db_path(tmp_path):
    """Return a temporary SQLite DB path."""
    return str(tmp_path / "test_tasks.db")


@pytest.fixture
def task_db(tmp_db_path):
    """Return a TaskDB instance backed by a temp file."""
    from chore_planner.data.db import TaskDB
    return TaskDB(db_path=tmp_db_path)


@pytest.fixture
def assignment_db(tmp_db_path):
    """Return an AssignmentDB sharing the task_db file."""
    from chore_planner.data.db import AssignmentDB
    return AssignmentDB(db_path=tmp_db_path)


@pytest.fixture
def storage(tmp_db_path):
    """Return a SQLiteStorageAdapter backed by a temp file."""
    from chore_planner.adapters.sqlite_storage import SQLiteStorageAdapter
    return SQLiteStorageAdapter(db_path=tmp_db_path)


@pytest.fixture
def service(storage):
    """Return a ScheduleService wired to the temp-file storage."""
    from chore_planner.core.schedule_service import ScheduleService
    return ScheduleService(storage)

