"""Tests for chore_planner.core.schedule_service — generate/store orchestration."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from chore_planner.core.schedule_assigner import SkipReason
from chore_planner.core.schedule_service import ScheduleService
from chore_planner.core.task_input import TaskValidationError
from chore_planner.data.models import ScheduledAssignment, Task
from chore_planner.ports.storage_port import StorageError

WEEK = ("2025-01-06", "2025-01-12")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _mock_storage(tasks=None, existing=None):
    storage = MagicMock()
    storage.list_tasks = AsyncMock(return_value=tasks or [])
    storage.existing_assignment_keys = AsyncMock(return_value=existing or set())
    storage.insert_assignments = AsyncMock(side_effect=lambda pairs: len(list(pairs)))
    return storage


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


class TestTasks:
    @pytest.mark.asyncio
    async def test_add_task_validates_and_stores(self, service):
        task = await service.add_task("  Water plants ", "WEEKLY", "High")
        assert task.name == "Water plants"
        assert task.frequency == "weekly"
        assert task.priority == "high"
        assert await service.list_tasks() == [task]

    @pytest.mark.asyncio
    async def test_add_task_rejects_blank_name(self, service):
        with pytest.raises(TaskValidationError, match="name"):
            await service.add_task("   ", "daily", "mid")
        assert await service.list_tasks() == []

    @pytest.mark.asyncio
    async def test_add_task_rejects_unknown_frequency(self, service):
        with pytest.raises(TaskValidationError, match="frequency"):
            await service.add_task("Taxes", "yearly", "mid")

    @pytest.mark.asyncio
    async def test_delete_task_returns_deleted_task(self, service):
        task = await service.add_task("Dust", "weekly", "low")
        assert await service.delete_task(task.id) == task
        assert await service.delete_task(task.id) is None
        assert await service.list_tasks() == []

    @pytest.mark.asyncio
    async def test_delete_missing_task_skips_delete(self):
        storage = _mock_storage()
        storage.get_task = AsyncMock(return_value=None)
        storage.delete_task = AsyncMock()
        service = ScheduleService(storage)

        assert await service.delete_task(42) is None
        storage.get_task.assert_awaited_once_with(42)
        storage.delete_task.assert_not_called()


# ---------------------------------------------------------------------------
# Generate
# ---------------------------------------------------------------------------


class TestGenerate:
    @pytest.mark.asyncio
    async def test_generate_stores_schedule(self, service):
        daily = await service.add_task("Dishes", "daily", "high")
        weekly = await service.add_task("Laundry", "weekly", "mid")

        report = await service.generate(*WEEK)

        assert report.inserted == 8
        assert report.skipped_existing == 0
        assert report.unplaced == []
        rows = await service.get_schedule(*WEEK)
        assert len(rows) == 8
        assert [r.task_id for r in rows if r.scheduled_date == "2025-01-06"] == [
            daily.id, weekly.id,
        ]

    @pytest.mark.asyncio
    async def test_regenerate_is_idempotent(self, service):
        await service.add_task("Dishes", "daily", "high")
        first = await service.generate(*WEEK)
        second = await service.generate(*WEEK)

        assert second.inserted == 0
        assert second.skipped_existing == first.inserted
        assert second.schedule == first.schedule
        assert len(await service.get_schedule(*WEEK)) == 7

    @pytest.mark.asyncio
    async def test_regenerate_inserts_only_new_pairs(self, service):
        await service.add_task("Dishes", "daily", "high")
        await service.generate(*WEEK)
        await service.add_task("Laundry", "weekly", "low")

        report = await service.generate(*WEEK)

        assert report.inserted == 1
        assert report.skipped_existing == 7
        assert len(await service.get_schedule(*WEEK)) == 8

    @pytest.mark.asyncio
    async def test_generate_reports_unplaced(self, service):
        for name in ("A", "B", "C", "D"):
            await service.add_task(name, "daily", "mid")
        report = await service.generate("2025-01-06", "2025-01-06")
        assert report.inserted == 3
        assert len(report.unplaced) == 1
        assert report.unplaced[0].task.name == "D"
        assert report.unplaced[0].reason is SkipReason.CAPACITY_EXHAUSTED

    @pytest.mark.asyncio
    async def test_generate_accepts_dates_and_normalizes(self):
        from datetime import date

        storage = _mock_storage()
        service = ScheduleService(storage)
        report = await service.generate(date(2025, 1, 6), date(2025, 1, 12))
        assert (report.start, report.end) == WEEK
        storage.existing_assignment_keys.assert_awaited_once_with(*WEEK)

    @pytest.mark.asyncio
    async def test_generate_truncates_datetimes(self, service):
        from datetime import datetime

        await service.add_task("Dishes", "daily", "high")
        report = await service.generate(datetime(2025, 1, 1, 9), datetime(2025, 1, 3, 9))

        assert (report.start, report.end) == ("2025-01-01", "2025-01-03")
        assert list(report.schedule) == ["2025-01-01", "2025-01-02", "2025-01-03"]
        assert report.inserted == 3
        rows = await service.get_schedule(datetime(2025, 1, 1, 23), datetime(2025, 1, 3, 0))
        assert [r.scheduled_date for r in rows] == list(report.schedule)

    @pytest.mark.asyncio
    async def test_no_insert_when_nothing_new(self):
        task = Task(id=1, name="Dishes", frequency="daily", priority="high")
        existing = {(1, "2025-01-06")}
        storage = _mock_storage(tasks=[task], existing=existing)
        service = ScheduleService(storage)

        report = await service.generate("2025-01-06", "2025-01-06")

        storage.insert_assignments.assert_not_called()
        assert report.inserted == 0
        assert report.skipped_existing == 1

    @pytest.mark.asyncio
    async def test_new_pairs_sent_as_one_batch(self):
        tasks = [
            Task(id=1, name="Dishes", frequency="daily", priority="high"),
            Task(id=2, name="Laundry", frequency="weekly", priority="low"),
        ]
        storage = _mock_storage(tasks=tasks, existing={(1, "2025-01-06")})
        service = ScheduleService(storage)

        await service.generate("2025-01-06", "2025-01-07")

        storage.insert_assignments.assert_awaited_once()
        [pairs] = storage.insert_assignments.await_args.args
        assert list(pairs) == [(2, "2025-01-06"), (1, "2025-01-07")]

    @pytest.mark.asyncio
    async def test_storage_error_propagates(self):
        storage = _mock_storage(tasks=[Task(id=1, name="A", frequency="daily")])
        storage.insert_assignments = AsyncMock(side_effect=StorageError("disk full"))
        service = ScheduleService(storage)
        with pytest.raises(StorageError, match="disk full"):
            await service.generate(*WEEK)

    @pytest.mark.asyncio
    async def test_malformed_date_raises_before_storage(self):
        storage = _mock_storage()
        service = ScheduleService(storage)
        with pytest.raises(ValueError):
            await service.generate("next monday", "2025-01-12")
        storage.list_tasks.assert_not_called()


# ---------------------------------------------------------------------------
# Clear / show / done
# ---------------------------------------------------------------------------


class TestStoredSchedule:
    @pytest.mark.asyncio
    async def test_clear(self, service):
        await service.add_task("Dishes", "daily", "high")
        await service.generate(*WEEK)
        assert await service.clear() == 7
        assert await service.get_schedule(*WEEK) == []

    @pytest.mark.asyncio
    async def test_generate_after_clear_restores(self, service):
        await service.add_task("Dishes", "daily", "high")
        await service.generate(*WEEK)
        await service.clear()
        report = await service.generate(*WEEK)
        assert report.inserted == 7

    @pytest.mark.asyncio
    async def test_mark_done(self, service):
        await service.add_task("Dishes", "daily", "high")
        await service.generate("2025-01-06", "2025-01-06")
        [row] = await service.get_schedule("2025-01-06", "2025-01-06")

        done = await service.mark_done(row.assignment_id)
        assert done == ScheduledAssignment(
            id=row.assignment_id, task_id=row.task_id,
            scheduled_date="2025-01-06", status="done",
        )
        [row] = await service.get_schedule("2025-01-06", "2025-01-06")
        assert row.status == "done"

    @pytest.mark.asyncio
    async def test_mark_done_missing(self, service):
        assert await service.mark_done(999) is None

    @pytest.mark.asyncio
    async def test_mark_done_missing_skips_update(self):
        storage = _mock_storage()
        storage.get_assignment = AsyncMock(return_value=None)
        storage.set_assignment_status = AsyncMock()
        service = ScheduleService(storage)

        assert await service.mark_done(7) is None
        storage.set_assignment_status.assert_not_called()

    @pytest.mark.asyncio
    async def test_mark_done_twice_writes_once(self):
        stored = ScheduledAssignment(id=7, task_id=1, scheduled_date="2025-01-06", status="done")
        storage = _mock_storage()
        storage.get_assignment = AsyncMock(return_value=stored)
        storage.set_assignment_status = AsyncMock()
        service = ScheduleService(storage)

        assert await service.mark_done(7) == stored
        storage.set_assignment_status.assert_not_called()

    @pytest.mark.asyncio
    async def test_done_status_survives_regeneration(self, service):
        await service.add_task("Dishes", "daily", "high")
        await service.generate("2025-01-06", "2025-01-06")
        [row] = await service.get_schedule("2025-01-06", "2025-01-06")
        await service.mark_done(row.assignment_id)

        await service.generate("2025-01-06", "2025-01-06")

        [row] = await service.get_schedule("2025-01-06", "2025-01-06")
        assert row.status == "done"
