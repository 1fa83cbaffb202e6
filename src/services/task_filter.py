"""Filter/search engine deriving the visible task subset.

Every function here is pure: inputs are never mutated and the result keeps
the collection's order.
"""

import math
from collections.abc import Sequence
from datetime import UTC, datetime

from src.core.config import Constants
from src.domain.filters import FilterCriteria, StatusTab
from src.domain.task import Task, ensure_utc
from src.models.service_models import TaskCounts, TaskListView


_SECONDS_PER_DAY = 24 * 60 * 60


def matches_search(task: Task, query: str) -> bool:
    """Case-insensitive substring match on title, description, category or any tag."""
    needle = query.strip().lower()
    if not needle:
        return True
    return (
        needle in task.title.lower()
        or needle in task.description.lower()
        or needle in task.category.lower()
        or any(needle in tag.lower() for tag in task.tags)
    )


def matches_criteria(task: Task, criteria: FilterCriteria) -> bool:
    """Check whether a task passes every active criterion."""
    if not matches_search(task, criteria.search):
        return False
    if criteria.priority != Constants.FILTER_ALL and task.priority != criteria.priority:
        return False
    if criteria.category != Constants.FILTER_ALL and task.category != criteria.category:
        return False
    if criteria.status == StatusTab.COMPLETED:
        return task.completed
    if criteria.status == StatusTab.PENDING:
        return not task.completed
    return True


def filter_tasks(tasks: Sequence[Task], criteria: FilterCriteria) -> list[Task]:
    """Return the tasks visible under the criteria, in collection order."""
    return [task for task in tasks if matches_criteria(task, criteria)]


def count_tasks(tasks: Sequence[Task]) -> TaskCounts:
    """Count total/completed/pending over an (already filtered) task list."""
    total = len(tasks)
    completed = sum(1 for task in tasks if task.completed)
    return TaskCounts(total=total, completed=completed, pending=total - completed)


def is_overdue(task: Task, now: datetime | None = None) -> bool:
    """A task is overdue when its due date has passed and it is not completed."""
    if task.completed or task.due_date is None:
        return False
    now = ensure_utc(now) or datetime.now(UTC)
    return task.due_date < now


def describe_due_date(due: datetime, now: datetime | None = None) -> str:
    """Relative label for a due date, e.g. "Today", "In 3 days", "2 days ago".

    The day difference is rounded up, so anything later today counts as one day ahead.
    """
    now = ensure_utc(now) or datetime.now(UTC)
    due = ensure_utc(due)
    diff_days = math.ceil((due - now).total_seconds() / _SECONDS_PER_DAY)

    if diff_days == 0:
        return "Today"
    if diff_days == 1:
        return "Tomorrow"
    if diff_days == -1:
        return "Yesterday"
    if diff_days > 1:
        return f"In {diff_days} days"
    return f"{abs(diff_days)} days ago"


def build_view(tasks: Sequence[Task], criteria: FilterCriteria, now: datetime | None = None) -> TaskListView:
    """Derive everything the list screen needs for one set of criteria."""
    now = ensure_utc(now) or datetime.now(UTC)
    visible = filter_tasks(tasks, criteria)
    return TaskListView(
        tasks=tuple(visible),
        counts=count_tasks(visible),
        overdue_ids=frozenset(task.id for task in visible if is_overdue(task, now)),
    )
