"""Fixtures wiring a real HTTP client and SQLite cache to the coordinator."""

import json

import httpx
import pytest

from src.core.kv_store import SQLiteKeyValueStore
from src.interface.task_api_client import TaskApiClient
from src.services.sync_coordinator import SyncCoordinator
from src.services.task_cache import TaskCache


class TaskServer:
    """Minimal in-process task API served through httpx.MockTransport."""

    def __init__(self) -> None:
        self.tasks: dict[str, dict] = {}
        self.down = False
        self.garbled = False
        self.requests: list[httpx.Request] = []
        self._next_id = 1

    def add(self, title: str, *, completed: bool = False, **fields: object) -> dict:
        task = {
            "id": str(self._next_id),
            "title": title,
            "description": "",
            "completed": completed,
            "status": "completed" if completed else "todo",
            "priority": "medium",
            "tags": [],
            "category": "general",
            "created_at": "2026-03-14T10:00:00Z",
            "updated_at": "2026-03-14T10:00:00Z",
            **fields,
        }
        self._next_id += 1
        self.tasks[task["id"]] = task
        return task

    def stats(self) -> dict:
        done = sum(1 for task in self.tasks.values() if task["completed"])
        return {
            "total_tasks": len(self.tasks),
            "completed_tasks": done,
            "pending_tasks": len(self.tasks) - done,
            "overdue_tasks": 0,
            "by_priority": {},
            "by_category": {},
            "by_status": {},
        }

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.down:
            raise httpx.ConnectError("connection refused", request=request)
        if self.garbled:
            return httpx.Response(200, headers={"Content-Encoding": "gzip"}, stream=httpx.ByteStream(b"not gzip"))

        path = request.url.path.removeprefix("/api")
        if path == "/tasks" and request.method == "GET":
            tasks = list(self.tasks.values())
            completed = request.url.params.get("completed")
            if completed is not None:
                tasks = [task for task in tasks if task["completed"] == (completed == "true")]
            return httpx.Response(200, json=tasks)
        if path == "/tasks" and request.method == "POST":
            body = json.loads(request.content)
            task = self.add(body.pop("title"), **body)
            return httpx.Response(201, json=task)
        if path == "/tasks/stats":
            return httpx.Response(200, json=self.stats())

        task_id = path.removeprefix("/tasks/")
        if task_id not in self.tasks:
            return httpx.Response(404, json={"detail": "Task not found"})
        if request.method == "PUT":
            completed = json.loads(request.content)["completed"]
            self.tasks[task_id].update(completed=completed, status="completed" if completed else "todo")
            return httpx.Response(200, json=self.tasks[task_id])
        if request.method == "DELETE":
            del self.tasks[task_id]
            return httpx.Response(204)
        return httpx.Response(405)


@pytest.fixture
def server() -> TaskServer:
    return TaskServer()


@pytest.fixture
async def store(tmp_path):
    kv = SQLiteKeyValueStore(tmp_path / "cache.sqlite3")
    yield kv
    await kv.close()


@pytest.fixture
def coordinator(server: TaskServer, store: SQLiteKeyValueStore) -> SyncCoordinator:
    client = TaskApiClient(base_url="https://tasks.test", transport=httpx.MockTransport(server.handle))
    return SyncCoordinator(api=client, cache=TaskCache(store))
