"""Sync coordinator: the single authority over the task collection.

Every listing or mutating operation goes through here:

- Reads try the remote API first and fall back to the local cache on any
  remote failure. They never raise for remote problems; the mode flips to
  offline instead.
- Writes made while online go to the API first. Only on success is the
  confirmed change applied to the cached collection, followed by a full
  re-sync (`_reconcile`). A failed online write is raised to the caller and
  nothing is written locally.
- Writes made while offline are applied to the in-memory collection and
  persisted to the cache before the operation returns.

Operations are serialized with an asyncio lock, so they complete in the order
they are invoked and never interleave.
"""

import asyncio
import inspect
import logging
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol, TypeVar

from src.core.errors import CacheUnavailableError, RemoteError, TaskValidationError
from src.core.logging import span
from src.domain.create_models import TaskCreate
from src.domain.filters import FilterCriteria
from src.domain.task import Task, TaskStatus
from src.models.service_models import CacheStatus, DataSource, SyncSnapshot, TaskListView, TaskStats
from src.services import task_filter
from src.services.connectivity import ModeTracker
from src.services.task_cache import TaskCache


logger = logging.getLogger(__name__)

ConfirmDelete = Callable[[Task], bool | Awaitable[bool]]
TaskMutation = Callable[[list[Task]], list[Task]]
T = TypeVar("T")


class TaskApi(Protocol):
    """Remote operations the coordinator depends on."""

    async def list_tasks(self, criteria: FilterCriteria | None = None) -> list[Task]: ...

    async def create_task(self, draft: TaskCreate) -> Task: ...

    async def update_completion(self, task_id: str, *, completed: bool) -> Task: ...

    async def delete_task(self, task_id: str) -> None: ...

    async def get_stats(self) -> TaskStats: ...


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _new_task_id() -> str:
    return uuid.uuid4().hex


def _confirm_always(task: Task) -> bool:  # noqa: ARG001
    return True


def _upsert(tasks: list[Task], task: Task) -> list[Task]:
    """Replace the task with the same id in place, or put it first when it is new."""
    if any(t.id == task.id for t in tasks):
        return [task if t.id == task.id else t for t in tasks]
    return [task, *tasks]


@dataclass
class SyncState:
    """Mutable context owned by one coordinator."""

    tasks: list[Task] = field(default_factory=list)
    mode: ModeTracker = field(default_factory=ModeTracker)
    stats: TaskStats | None = None
    criteria: FilterCriteria = field(default_factory=FilterCriteria)
    # False when `tasks` came from a scoped remote fetch and is only a subset of the cache
    is_superset: bool = True
    source: DataSource = DataSource.NONE
    warning: str | None = None

    def snapshot(self) -> SyncSnapshot:
        return SyncSnapshot(
            tasks=tuple(self.tasks),
            is_offline=self.mode.is_offline,
            stats=self.stats,
            criteria=self.criteria,
            source=self.source,
            warning=self.warning,
        )


class SyncCoordinator:
    """Orchestrates load, create, toggle, delete and stats across API and cache."""

    def __init__(
        self,
        *,
        api: TaskApi,
        cache: TaskCache,
        state: SyncState | None = None,
        confirm_delete: ConfirmDelete | None = None,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_task_id,
    ) -> None:
        """Initialize the coordinator.

        Args:
            api: Remote task API client
            cache: Local cache of the unfiltered collection
            state: Initial state; a fresh, empty, online state by default
            confirm_delete: Yes/no decision asked before every deletion.
                Defaults to always confirming, for headless use.
            clock: Source of "now" for locally stamped timestamps
            id_factory: Generator for ids of tasks created offline
        """
        self._api = api
        self._cache = cache
        self._state = state or SyncState()
        self._confirm_delete = confirm_delete or _confirm_always
        self._clock = clock
        self._id_factory = id_factory
        self._lock = asyncio.Lock()

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def is_offline(self) -> bool:
        return self._state.mode.is_offline

    def snapshot(self) -> SyncSnapshot:
        return self._state.snapshot()

    def visible(self, criteria: FilterCriteria | None = None, now: datetime | None = None) -> TaskListView:
        """Filtered view of the current collection (defaults to the active criteria)."""
        return task_filter.build_view(self._state.tasks, criteria or self._state.criteria, now or self._clock())

    def _find(self, task_id: str) -> Task | None:
        return next((task for task in self._state.tasks if task.id == task_id), None)

    # ---- reads ----

    async def load_tasks(self, criteria: FilterCriteria | None = None) -> SyncSnapshot:
        """Load tasks from the API, falling back to the cached snapshot.

        Never raises for remote or cache failures; check `is_offline` and
        `warning` on the returned snapshot instead.
        """
        async with self._lock:
            await self._load_tasks(criteria or self._state.criteria)
            return self._state.snapshot()

    async def refresh_stats(self) -> SyncSnapshot:
        """Fetch the aggregate stats. Failure keeps the previous value and the current mode."""
        async with self._lock:
            await self._refresh_stats()
            return self._state.snapshot()

    async def refresh(self, criteria: FilterCriteria | None = None) -> SyncSnapshot:
        """Pull-to-refresh: reload tasks, then stats."""
        async with self._lock:
            await self._load_tasks(criteria or self._state.criteria)
            await self._refresh_stats()
            return self._state.snapshot()

    async def reconcile(self) -> SyncSnapshot:
        """Replace the collection with the server's view for the active criteria."""
        async with self._lock:
            await self._reconcile()
            return self._state.snapshot()

    async def _load_tasks(self, criteria: FilterCriteria) -> None:
        state = self._state
        state.criteria = criteria

        with span("sync_coordinator.load_tasks", scoped=not criteria.is_unscoped):
            try:
                tasks = await self._api.list_tasks(criteria)
            except RemoteError as e:
                state.mode.record_failure(e)
                await self._load_from_cache()
                return

            state.mode.record_success()
            state.tasks = list(tasks)
            state.source = DataSource.REMOTE
            state.is_superset = criteria.is_unscoped
            state.warning = None

            # The cache keeps the unfiltered superset, so only unscoped results replace it.
            if state.is_superset:
                try:
                    await self._cache.save(state.tasks)
                except CacheUnavailableError as e:
                    logger.warning("Failed to persist fetched tasks to cache: %s", e)
                    state.warning = "Tasks could not be saved for offline use"

    async def _load_from_cache(self) -> None:
        state = self._state
        cached = await self._cache.load()
        state.tasks = list(cached.tasks)
        state.source = DataSource.CACHE
        state.is_superset = True
        state.warning = cached.warning
        logger.info("Serving %d cached tasks (cache status: %s)", len(state.tasks), cached.status)

    async def _refresh_stats(self) -> None:
        with span("sync_coordinator.refresh_stats"):
            try:
                stats = await self._api.get_stats()
            except RemoteError as e:
                logger.warning("Failed to load stats, keeping previous value: %s", e)
                return
            self._state.stats = stats

    async def _reconcile(self) -> None:
        """Second phase of an online write: full re-sync. Caller holds the lock."""
        logger.debug("Reconciling with task API")
        await self._load_tasks(self._state.criteria)
        await self._refresh_stats()

    # ---- writes ----

    async def create_task(self, draft: TaskCreate) -> SyncSnapshot:
        """Create a task remotely (then re-sync) or, when offline, locally.

        Raises:
            TaskValidationError: Empty title; raised before any network call
            RemoteError: The online create failed; nothing was written locally
            CacheUnavailableError: The offline create could not be persisted
        """
        if not draft.title.strip():
            msg = "Please enter a task title"
            raise TaskValidationError(msg)

        async with self._lock:
            with span("sync_coordinator.create_task", offline=self.is_offline):
                if self._state.mode.is_online:
                    created = await self._remote_write(self._api.create_task(draft))
                    await self._confirm_remote(lambda tasks: _upsert(tasks, created))
                    logger.info("Created task remotely", extra={"title": draft.title})
                else:
                    task = self._build_local_task(draft)
                    await self._commit_local(lambda tasks: [task, *tasks])
                    logger.info("Created task offline", extra={"task_id": task.id})
                return self._state.snapshot()

    async def toggle_task(self, task_id: str) -> SyncSnapshot:
        """Flip the completion flag of a task. Unknown ids are ignored.

        Raises:
            RemoteError: The online update failed; nothing was changed locally
            CacheUnavailableError: The offline change could not be persisted
        """
        async with self._lock:
            task = self._find(task_id)
            if task is None:
                logger.debug("Toggle ignored, task not found: %s", task_id)
                return self._state.snapshot()

            with span("sync_coordinator.toggle_task", task_id=task_id, offline=self.is_offline):
                if self._state.mode.is_online:
                    updated = await self._remote_write(
                        self._api.update_completion(task_id, completed=not task.completed)
                    )
                    await self._confirm_remote(lambda tasks: _upsert(tasks, updated))
                else:
                    updated = task.with_completion(completed=not task.completed, now=self._clock())
                    await self._commit_local(lambda tasks: [updated if t.id == task_id else t for t in tasks])
                    logger.info("Toggled task offline", extra={"task_id": task_id, "completed": updated.completed})
                return self._state.snapshot()

    async def delete_task(self, task_id: str, confirm: ConfirmDelete | None = None) -> SyncSnapshot:
        """Delete a task after the user confirms. Unknown ids are ignored.

        Args:
            task_id: ID of the task to delete
            confirm: Yes/no decision for this call; the coordinator default otherwise

        Raises:
            RemoteError: The online delete failed; nothing was changed locally
            CacheUnavailableError: The offline delete could not be persisted
        """
        async with self._lock:
            task = self._find(task_id)
            if task is None:
                logger.debug("Delete ignored, task not found: %s", task_id)
                return self._state.snapshot()

            decision = (confirm or self._confirm_delete)(task)
            if inspect.isawaitable(decision):
                decision = await decision
            if not decision:
                logger.info("Deletion cancelled by user", extra={"task_id": task_id})
                return self._state.snapshot()

            with span("sync_coordinator.delete_task", task_id=task_id, offline=self.is_offline):
                if self._state.mode.is_online:
                    await self._remote_write(self._api.delete_task(task_id))
                    await self._confirm_remote(lambda tasks: [t for t in tasks if t.id != task_id])
                else:
                    await self._commit_local(lambda tasks: [t for t in tasks if t.id != task_id])
                    logger.info("Deleted task offline", extra={"task_id": task_id})
                return self._state.snapshot()

    async def _remote_write(self, call: Awaitable[T]) -> T:
        """Run a remote write. Failures flip the mode and propagate."""
        try:
            result = await call
        except RemoteError as e:
            self._state.mode.record_failure(e)
            logger.error("Remote write failed: %s", e)
            raise
        self._state.mode.record_success()
        return result

    async def _confirm_remote(self, mutate: TaskMutation) -> None:
        """Second phase of a successful online write: update the cache, then reconcile.

        The confirmed change is applied to the unfiltered collection before the
        re-sync, so a scoped view still leaves a complete cache behind. Cache
        failures become a warning on the snapshot, not an error.
        """
        warning = await self._persist_confirmed(mutate)
        await self._reconcile()
        if warning:
            self._state.warning = warning

    async def _persist_confirmed(self, mutate: TaskMutation) -> str | None:
        state = self._state
        if state.is_superset:
            superset = mutate(list(state.tasks))
        else:
            cached = await self._cache.load()
            if cached.status == CacheStatus.UNAVAILABLE:
                logger.warning("Cannot update cached tasks after remote write: %s", cached.warning)
                return cached.warning
            superset = mutate(list(cached.tasks))

        try:
            await self._cache.save(superset)
        except CacheUnavailableError as e:
            logger.warning("Failed to persist remote write to cache: %s", e)
            return "Tasks could not be saved for offline use"
        return None

    async def _commit_local(self, mutate: TaskMutation) -> None:
        """Apply an offline change and persist the unfiltered collection.

        The cache is written first; if that fails the in-memory collection is
        left unchanged and the error propagates.
        """
        state = self._state
        updated = mutate(list(state.tasks))
        if state.is_superset:
            superset = updated
        else:
            cached = await self._cache.load()
            if cached.status == CacheStatus.UNAVAILABLE:
                raise CacheUnavailableError(cached.warning)
            superset = mutate(list(cached.tasks))

        await self._cache.save(superset)
        state.tasks = updated
        state.source = DataSource.LOCAL

    def _build_local_task(self, draft: TaskCreate) -> Task:
        now = self._clock()
        return Task(
            id=self._id_factory(),
            title=draft.title.strip(),
            description=draft.description,
            completed=False,
            status=TaskStatus.TODO,
            priority=draft.priority,
            due_date=draft.due_date,
            tags=list(draft.tags),
            category=draft.category,
            created_at=now,
            updated_at=now,
        )
