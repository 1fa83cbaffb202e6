"""View-scoping criteria chosen in the task list UI."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.core.config import Constants
from src.domain.task import TaskPriority


class StatusTab(StrEnum):
    """Which completion state the list tab shows."""

    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"


class FilterCriteria(BaseModel):
    """Transient filter state. Never persisted."""

    model_config = ConfigDict(frozen=True)

    search: str = Field(default="", description="Free-text query")
    priority: str = Field(default=Constants.FILTER_ALL, description="Priority value or 'all'")
    category: str = Field(default=Constants.FILTER_ALL, description="Category or 'all'")
    status: StatusTab = Field(default=StatusTab.ALL, description="Status tab")

    @field_validator("priority")
    @classmethod
    def validate_priority(cls, v: str) -> str:
        """Accept a known priority or the 'all' selector."""
        if v != Constants.FILTER_ALL and v not in set(TaskPriority):
            msg = f"Unknown priority: {v}"
            raise ValueError(msg)
        return str(v)

    @property
    def search_text(self) -> str:
        return self.search.strip()

    @property
    def is_unscoped(self) -> bool:
        """True when no criterion narrows the task set."""
        return (
            not self.search_text
            and self.priority == Constants.FILTER_ALL
            and self.category == Constants.FILTER_ALL
            and self.status == StatusTab.ALL
        )
