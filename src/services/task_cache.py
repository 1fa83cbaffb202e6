"""Local cache of the last known, unfiltered task collection."""

import logging
from collections.abc import Sequence
from typing import Protocol

from pydantic import TypeAdapter, ValidationError

from src.core.errors import CacheUnavailableError
from src.domain.task import Task
from src.models.service_models import CacheSnapshot, CacheStatus


logger = logging.getLogger(__name__)

_TASK_LIST = TypeAdapter(list[Task])


class KeyValueStore(Protocol):
    """Async string key/value persistence used by the cache."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...


class TaskCache:
    """Stores one snapshot of the full task collection under a single key.

    The snapshot is always the unfiltered superset. Saving replaces it in one
    step; loading never raises, it reports missing, corrupt or unreadable data
    as an empty snapshot carrying a warning.
    """

    def __init__(self, store: KeyValueStore, key: str = "@tasks") -> None:
        self._store = store
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    async def save(self, tasks: Sequence[Task]) -> None:
        """Overwrite the stored snapshot.

        Raises:
            CacheUnavailableError: If the store cannot be written
        """
        payload = _TASK_LIST.dump_json(list(tasks)).decode()
        await self._store.set(self._key, payload)
        logger.debug("Saved %d tasks to cache", len(tasks))

    async def load(self) -> CacheSnapshot:
        """Read the stored snapshot, or an explicit empty result."""
        try:
            raw = await self._store.get(self._key)
        except CacheUnavailableError as e:
            logger.warning("Task cache unavailable: %s", e)
            return CacheSnapshot(status=CacheStatus.UNAVAILABLE, warning=f"Task cache unavailable: {e}")

        if raw is None:
            logger.info("No cached tasks found")
            return CacheSnapshot(status=CacheStatus.EMPTY)

        try:
            tasks = _TASK_LIST.validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding unparseable task cache: %d error(s)", e.error_count())
            return CacheSnapshot(
                status=CacheStatus.CORRUPT,
                warning="Cached tasks could not be read and were ignored",
            )

        logger.info("Loaded %d tasks from cache", len(tasks))
        return CacheSnapshot(tasks=tuple(tasks), status=CacheStatus.HIT)

    async def clear(self) -> None:
        """Drop the stored snapshot."""
        await self._store.delete(self._key)
        logger.info("Cleared task cache")
