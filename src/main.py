"""taskpilot - offline-first task list sync core.

Running this module performs a headless pull-to-refresh: load the task list
(from the API, or the local cache when the API is unreachable), fetch stats,
and log a summary.
"""

import asyncio
import logging
from dataclasses import dataclass

from src.core.config import Settings, get_settings
from src.core.kv_store import SQLiteKeyValueStore
from src.core.logging import configure_logfire, log_with_context
from src.interface.task_api_client import TaskApiClient
from src.models.service_models import SyncSnapshot
from src.services.sync_coordinator import ConfirmDelete, SyncCoordinator
from src.services.task_cache import TaskCache


logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Wired application objects. Close it to release the cache file."""

    settings: Settings
    store: SQLiteKeyValueStore
    coordinator: SyncCoordinator

    async def close(self) -> None:
        await self.store.close()


def build_app(settings: Settings | None = None, *, confirm_delete: ConfirmDelete | None = None) -> AppContext:
    """Build the coordinator with its API client and cache from settings.

    A missing API base URL is not an error: every remote call fails fast and
    the coordinator serves the cache in offline mode.
    """
    settings = settings or get_settings()
    if settings.remote_configured:
        logger.info("startup_validation", extra={"service": "task_api", "status": "configured"})
    else:
        logger.warning("startup_validation", extra={"service": "task_api", "status": "not_configured"})

    store = SQLiteKeyValueStore(settings.cache_db_path)
    coordinator = SyncCoordinator(
        api=TaskApiClient.from_settings(settings),
        cache=TaskCache(store, key=settings.cache_key),
        confirm_delete=confirm_delete,
    )
    return AppContext(settings=settings, store=store, coordinator=coordinator)


async def run_refresh(settings: Settings | None = None) -> SyncSnapshot:
    """Load tasks and stats once, log what the list screen would show and return the snapshot."""
    app = build_app(settings)
    try:
        snapshot = await app.coordinator.refresh()
        view = app.coordinator.visible()
        log_with_context(
            logger,
            "info",
            "Task list refreshed",
            source=snapshot.source.value,
            offline=snapshot.is_offline,
            total=view.counts.total,
            completed=view.counts.completed,
            pending=view.counts.pending,
            overdue=len(view.overdue_ids),
        )
        if snapshot.warning:
            logger.warning(snapshot.warning)
    finally:
        await app.close()
    return snapshot


def main() -> int:
    """Console entry point."""
    settings = get_settings()
    configure_logfire(settings)
    asyncio.run(run_refresh(settings))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
