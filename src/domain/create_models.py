"""Pydantic models for creating tasks."""

from datetime import datetime

from pydantic import BaseModel, Field, ValidationError, field_validator

from src.core.config import Constants
from src.core.errors import TaskValidationError
from src.domain.task import TaskPriority, ensure_utc, normalize_tags


class TaskCreate(BaseModel):
    """Draft of a new task, as submitted by the task form.

    Serializes to the body of `POST /tasks`.
    """

    title: str = Field(..., description="Task title, trimmed")
    description: str = Field(default="", description="Task description, trimmed")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="Task priority")
    category: str = Field(default=Constants.DEFAULT_CATEGORY, description="Category name")
    tags: list[str] = Field(default_factory=list, description="Lowercase unique tags")
    due_date: datetime | None = Field(default=None, description="Optional due timestamp")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Validate the trimmed title is present and within the length limit."""
        title = v.strip()
        if not title:
            msg = "Please enter a task title"
            raise ValueError(msg)
        if len(title) > Constants.TITLE_MAX_LENGTH:
            msg = f"Title must be at most {Constants.TITLE_MAX_LENGTH} characters"
            raise ValueError(msg)
        return title

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        """Validate the trimmed description is within the length limit."""
        description = v.strip()
        if len(description) > Constants.DESCRIPTION_MAX_LENGTH:
            msg = f"Description must be at most {Constants.DESCRIPTION_MAX_LENGTH} characters"
            raise ValueError(msg)
        return description

    @field_validator("category")
    @classmethod
    def default_blank_category(cls, v: str) -> str:
        return v.strip() or Constants.DEFAULT_CATEGORY

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        """Normalize tags and enforce the tag limit."""
        tags = normalize_tags(v)
        if len(tags) > Constants.MAX_TAGS:
            msg = f"A task can have at most {Constants.MAX_TAGS} tags"
            raise ValueError(msg)
        return tags

    @field_validator("due_date")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v)

    @classmethod
    def from_form(cls, **fields: object) -> "TaskCreate":
        """Build a draft from raw form input, raising TaskValidationError on bad input."""
        try:
            return cls.model_validate(fields)
        except ValidationError as e:
            messages = "; ".join(str(err["msg"]).removeprefix("Value error, ") for err in e.errors())
            raise TaskValidationError(messages) from e


def add_tag(tags: list[str], tag: str) -> list[str]:
    """Return tags with a new tag appended, as the tag input does.

    Blank tags, duplicates (case-insensitive) and tags beyond the limit are
    ignored and the original list is returned unchanged.
    """
    candidate = tag.strip().lower()
    if not candidate or candidate in tags or len(tags) >= Constants.MAX_TAGS:
        return list(tags)
    return [*tags, candidate]


def remove_tag(tags: list[str], tag: str) -> list[str]:
    """Return tags without the given tag."""
    return [t for t in tags if t != tag]
