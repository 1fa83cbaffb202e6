"""Domain models and DTOs."""

from src.domain.create_models import TaskCreate, add_tag, remove_tag
from src.domain.filters import FilterCriteria, StatusTab
from src.domain.task import Task, TaskPriority, TaskStatus


__all__ = [
    "FilterCriteria",
    "StatusTab",
    "Task",
    "TaskCreate",
    "TaskPriority",
    "TaskStatus",
    "add_tag",
    "remove_tag",
]
