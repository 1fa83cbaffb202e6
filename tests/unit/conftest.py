"""Pytest configuration and fixtures for unit tests."""

from datetime import UTC, datetime, timedelta

import pytest

from src.domain.task import Task, TaskPriority
from src.models.service_models import TaskStats
from src.services.sync_coordinator import SyncCoordinator
from src.services.task_cache import TaskCache
from tests.unit.mocks import FakeTaskApi, InMemoryKeyValueStore


NOW = datetime(2026, 3, 14, 12, 0, tzinfo=UTC)


def make_task(task_id: str, title: str, **fields: object) -> Task:
    """Build a task with sensible timestamps."""
    data: dict[str, object] = {
        "id": task_id,
        "title": title,
        "created_at": NOW - timedelta(days=1),
        "updated_at": NOW - timedelta(days=1),
    }
    data.update(fields)
    return Task.model_validate(data)


@pytest.fixture
def sample_tasks() -> list[Task]:
    """The two-task scenario: a pending shopping task and a completed finance task."""
    return [
        make_task("1", "Buy milk", priority=TaskPriority.LOW, category="shopping", completed=False),
        make_task(
            "2",
            "File taxes",
            priority=TaskPriority.URGENT,
            category="finance",
            completed=True,
            tags=["work", "annual"],
        ),
    ]


@pytest.fixture
def sample_stats() -> TaskStats:
    return TaskStats(
        total_tasks=2,
        completed_tasks=1,
        pending_tasks=1,
        overdue_tasks=0,
        by_priority={"low": 1, "urgent": 1},
        by_category={"shopping": 1, "finance": 1},
        by_status={"todo": 1, "completed": 1},
    )


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def task_cache(kv_store: InMemoryKeyValueStore) -> TaskCache:
    return TaskCache(kv_store)


@pytest.fixture
def fake_api(sample_tasks: list[Task], sample_stats: TaskStats) -> FakeTaskApi:
    return FakeTaskApi(tasks=sample_tasks, stats=sample_stats)


@pytest.fixture
def clock():
    """Controllable clock starting at NOW, advanced one minute per call."""
    ticks = {"now": NOW}

    def _now() -> datetime:
        ticks["now"] = ticks["now"] + timedelta(minutes=1)
        return ticks["now"]

    return _now


@pytest.fixture
def coordinator(fake_api: FakeTaskApi, task_cache: TaskCache, clock) -> SyncCoordinator:
    ids = iter(f"local-{n}" for n in range(1, 100))
    return SyncCoordinator(api=fake_api, cache=task_cache, clock=clock, id_factory=lambda: next(ids))
