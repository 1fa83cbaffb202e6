"""Pydantic models for service layer return types.

These models give the presentation layer typed, read-only views of the sync
core's state.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from src.domain.filters import FilterCriteria
from src.domain.task import Task


class TaskStats(BaseModel):
    """Aggregate computed by the task API (`GET /tasks/stats`)."""

    total_tasks: int
    completed_tasks: int
    pending_tasks: int
    overdue_tasks: int
    by_priority: dict[str, int] = Field(default_factory=dict)
    by_category: dict[str, int] = Field(default_factory=dict)
    by_status: dict[str, int] = Field(default_factory=dict)


class TaskCounts(BaseModel):
    """Tab label counts, computed over the filtered result."""

    total: int
    completed: int
    pending: int


class TaskListView(BaseModel):
    """What the list screen renders for one set of criteria."""

    model_config = ConfigDict(frozen=True)

    tasks: tuple[Task, ...]
    counts: TaskCounts
    overdue_ids: frozenset[str] = frozenset()


class CacheStatus(StrEnum):
    """Outcome of reading the cached snapshot."""

    HIT = "hit"
    EMPTY = "empty"
    CORRUPT = "corrupt"
    UNAVAILABLE = "unavailable"


class CacheSnapshot(BaseModel):
    """Result of loading the task collection from the local cache."""

    model_config = ConfigDict(frozen=True)

    tasks: tuple[Task, ...] = ()
    status: CacheStatus = CacheStatus.EMPTY
    warning: str | None = None


class DataSource(StrEnum):
    """Where the current task collection came from."""

    NONE = "none"
    REMOTE = "remote"
    CACHE = "cache"
    LOCAL = "local"


class SyncSnapshot(BaseModel):
    """Immutable copy of the coordinator's state returned by every operation."""

    model_config = ConfigDict(frozen=True)

    tasks: tuple[Task, ...]
    is_offline: bool
    stats: TaskStats | None = None
    criteria: FilterCriteria = Field(default_factory=FilterCriteria)
    source: DataSource = DataSource.NONE
    warning: str | None = None
