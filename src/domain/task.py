"""Task domain models and enums."""

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

from src.core.config import Constants


class TaskStatus(StrEnum):
    """Workflow status stored alongside the completion flag."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskPriority(StrEnum):
    """Task priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


def ensure_utc(value: datetime | None) -> datetime | None:
    """Treat naive timestamps as UTC so they compare with aware ones."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def normalize_tags(tags: list[str]) -> list[str]:
    """Trim and lowercase tags, dropping blanks and case-insensitive duplicates (order kept)."""
    seen: set[str] = set()
    result: list[str] = []
    for raw in tags:
        tag = raw.strip().lower()
        if tag and tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result


class Task(BaseModel):
    """Task data transfer object, as served by the task API and stored in the cache."""

    id: str = Field(..., min_length=1, description="Opaque unique task ID")
    title: str = Field(..., min_length=1, max_length=Constants.TITLE_MAX_LENGTH, description="Task title")
    description: str = Field(
        default="", max_length=Constants.DESCRIPTION_MAX_LENGTH, description="Detailed task description"
    )
    completed: bool = Field(default=False, description="Completion flag, authoritative for display")
    status: TaskStatus = Field(default=TaskStatus.TODO, description="Stored workflow status")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="Task priority")
    due_date: datetime | None = Field(default=None, description="Optional due timestamp")
    tags: list[str] = Field(default_factory=list, description="Lowercase tags, case-insensitive unique")
    category: str = Field(default=Constants.DEFAULT_CATEGORY, description="Category name")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
    completed_at: datetime | None = Field(default=None, description="When the task was last completed")

    @field_validator("due_date", "created_at", "updated_at", "completed_at")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        """Interpret naive wire timestamps as UTC."""
        return ensure_utc(v)

    @field_validator("tags")
    @classmethod
    def lowercase_tags(cls, v: list[str]) -> list[str]:
        """Keep tags lowercase and unique regardless of what the server sent."""
        return normalize_tags(v)

    @property
    def display_status(self) -> TaskStatus:
        """Status shown to the user; the completion flag wins over the stored status."""
        if self.completed:
            return TaskStatus.COMPLETED
        if self.status == TaskStatus.COMPLETED:
            return TaskStatus.TODO
        return self.status

    def with_completion(self, *, completed: bool, now: datetime) -> "Task":
        """Return a copy with the completion flag set and timestamps stamped.

        `completed_at` is set when the flag turns true and cleared when it turns
        false. `updated_at` never moves backwards.
        """
        completed_at = self.completed_at
        if completed and not self.completed:
            completed_at = now
        elif not completed:
            completed_at = None
        return self.model_copy(
            update={
                "completed": completed,
                "completed_at": completed_at,
                "updated_at": max(now, self.updated_at),
            }
        )
