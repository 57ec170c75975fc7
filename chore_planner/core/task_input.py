"""Validation of user-entered tasks before they reach storage."""

from __future__ import annotations

from pydantic import BaseModel, ValidationError, field_validator

from chore_planner.data.models import Frequency, Priority


class TaskValidationError(ValueError):
    """Raised when a new task has an empty name or an unknown enum value."""


class NewTask(BaseModel):
    """A task as entered by the user.

    JSON example:
    {
        "name": "Water plants",
        "frequency": "weekly",
        "priority": "high"
    }
    """
    name: str
    frequency: Frequency = Frequency.DAILY
    priority: Priority = Priority.MID

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Task name cannot be empty")
        return v

    @field_validator("frequency", "priority", mode="before")
    @classmethod
    def normalize_case(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v


def validate_new_task(
    name: str, frequency: str = "daily", priority: str = "mid",
) -> NewTask:
    """Build a NewTask, converting pydantic errors into TaskValidationError."""
    try:
        return NewTask(name=name, frequency=frequency, priority=priority)
    except ValidationError as exc:
        messages = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise TaskValidationError(messages) from exc
