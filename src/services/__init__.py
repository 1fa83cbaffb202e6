from src.services import connectivity, sync_coordinator, task_cache, task_filter


__all__ = [
    "connectivity",
    "sync_coordinator",
    "task_cache",
    "task_filter",
]
