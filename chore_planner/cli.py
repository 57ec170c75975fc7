"""
Chore Planner — Command-line front end.

Renders tasks and schedules as plain text and wires each subcommand to the
ScheduleService. The schedule window defaults to the current Monday–Sunday
week.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import TYPE_CHECKING

from chore_planner.core.date_range import current_week, parse_date
from chore_planner.core.schedule_service import GenerationReport, ScheduleService
from chore_planner.data.models import AssignmentStatus, Frequency, Priority
from chore_planner.ports.storage_port import StorageError

if TYPE_CHECKING:
    from chore_planner.data.models import ScheduledTask, Task

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def format_tasks(tasks: list[Task]) -> str:
    if not tasks:
        return "No tasks yet."
    lines = [f"{'ID':>4}  {'Name':<30} {'Frequency':<10} Priority"]
    for t in tasks:
        lines.append(f"{t.id:>4}  {t.name:<30} {t.frequency:<10} {t.priority}")
    return "\n".join(lines)


def format_schedule(rows: list[ScheduledTask]) -> str:
    """Group stored assignments by day, one task per line."""
    if not rows:
        return "Nothing scheduled."
    lines: list[str] = []
    current_day = None
    for row in rows:
        if row.scheduled_date != current_day:
            current_day = row.scheduled_date
            weekday = parse_date(current_day).strftime("%A")
            if lines:
                lines.append("")
            lines.append(f"{current_day} ({weekday})")
        mark = "x" if row.status == AssignmentStatus.DONE.value else " "
        lines.append(f"  [{mark}] #{row.assignment_id} {row.name} ({row.priority})")
    return "\n".join(lines)


def format_report(report: GenerationReport) -> str:
    lines = [
        f"Schedule {report.start}..{report.end}: "
        f"{report.inserted} new assignment(s), "
        f"{report.skipped_existing} already scheduled.",
    ]
    for item in report.unplaced:
        detail = f" on {', '.join(item.dates)}" if item.dates else ""
        lines.append(
            f"  skipped #{item.task.id} '{item.task.name}': {item.reason.value}{detail}"
        )
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _add_window_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--start", default=None, help="Window start YYYY-MM-DD (default: this Monday)")
    p.add_argument("--end", default=None, help="Window end YYYY-MM-DD (default: this Sunday)")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="chore-planner",
        description="Plan recurring chores across the week.",
    )
    ap.add_argument("--db", default=None, help="SQLite database path (default: DATABASE_PATH)")
    sub = ap.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Add a recurring task")
    add.add_argument("name", help="Task name")
    add.add_argument(
        "--frequency", default=Frequency.DAILY.value,
        help=f"One of: {', '.join(f.value for f in Frequency)} (default: daily)",
    )
    add.add_argument(
        "--priority", default=Priority.MID.value,
        help=f"One of: {', '.join(p.value for p in Priority)} (default: mid)",
    )

    sub.add_parser("list", help="List all tasks")

    delete = sub.add_parser("delete", help="Delete a task and its scheduled days")
    delete.add_argument("task_id", type=int)

    generate = sub.add_parser("generate", help="Generate and store the schedule for a window")
    _add_window_args(generate)

    show = sub.add_parser("show", help="Show the stored schedule for a window")
    _add_window_args(show)

    sub.add_parser("clear", help="Remove every scheduled assignment")

    done = sub.add_parser("done", help="Mark a scheduled assignment as done")
    done.add_argument("assignment_id", type=int)

    return ap


def _resolve_window(args: argparse.Namespace) -> tuple[str, str]:
    monday, sunday = current_week()
    start = parse_date(args.start) if args.start else monday
    end = parse_date(args.end) if args.end else sunday
    return start.isoformat(), end.isoformat()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def run_command(service: ScheduleService, args: argparse.Namespace) -> str:
    """Execute one parsed command and return the text to print."""
    if args.command == "add":
        task = await service.add_task(args.name, args.frequency, args.priority)
        return f"Added task #{task.id} '{task.name}' ({task.frequency}, {task.priority})."

    if args.command == "list":
        return format_tasks(await service.list_tasks())

    if args.command == "delete":
        task = await service.delete_task(args.task_id)
        if task is not None:
            return f"Deleted task #{task.id} '{task.name}'."
        return f"Task #{args.task_id} not found."

    if args.command == "generate":
        start, end = _resolve_window(args)
        return format_report(await service.generate(start, end))

    if args.command == "show":
        start, end = _resolve_window(args)
        return format_schedule(await service.get_schedule(start, end))

    if args.command == "clear":
        removed = await service.clear()
        return f"Cleared {removed} scheduled assignment(s)."

    if args.command == "done":
        assignment = await service.mark_done(args.assignment_id)
        if assignment is not None:
            return (
                f"Marked #{assignment.id} (task #{assignment.task_id} on "
                f"{assignment.scheduled_date}) as done."
            )
        return f"Scheduled assignment #{args.assignment_id} not found."

    raise ValueError(f"Unknown command: {args.command!r}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    from chore_planner.adapters.sqlite_storage import SQLiteStorageAdapter

    try:
        service = ScheduleService(SQLiteStorageAdapter(db_path=args.db))
        output = asyncio.run(run_command(service, args))
    except ValueError as exc:  # includes TaskValidationError and bad dates
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except StorageError as exc:
        logger.error("Storage failure: %s", exc)
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1

    print(output)
    return 0
