"""HTTP client for the remote task API using httpx.

Every call either returns a decoded, schema-validated payload or raises one of
RemoteUnreachableError, RemoteRejectedError or MalformedPayloadError. A failed
call is never turned into an empty success.
"""

import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from src.core.config import Constants, Settings
from src.core.errors import MalformedPayloadError, RemoteRejectedError, RemoteUnreachableError
from src.domain.create_models import TaskCreate
from src.domain.filters import FilterCriteria, StatusTab
from src.domain.task import Task
from src.models.service_models import TaskStats


logger = logging.getLogger(__name__)

_TASK_LIST = TypeAdapter(list[Task])

# Longest slice of an error body kept in RemoteRejectedError.detail
_ERROR_DETAIL_LIMIT = 200


def build_list_params(criteria: FilterCriteria) -> dict[str, str]:
    """Build query parameters for `GET /tasks` from the active criteria.

    Only criteria that deviate from "all"/empty are sent; an absent parameter
    means no constraint.
    """
    params: dict[str, str] = {}
    if criteria.priority != Constants.FILTER_ALL:
        params["priority"] = str(criteria.priority)
    if criteria.category != Constants.FILTER_ALL:
        params["category"] = criteria.category
    if criteria.search_text:
        params["search"] = criteria.search_text
    if criteria.status == StatusTab.COMPLETED:
        params["completed"] = "true"
    elif criteria.status == StatusTab.PENDING:
        params["completed"] = "false"
    return params


class TaskApiClient:
    """Stateless request/response wrapper around the task API."""

    def __init__(
        self,
        *,
        base_url: str | None,
        api_prefix: str = "/api",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API origin, e.g. "https://tasks.example.com". None or blank
                means the remote is unreachable and no request is ever sent.
            api_prefix: Path prefix in front of every route
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self._base_url = (base_url or "").strip().rstrip("/")
        self._api_prefix = "/" + api_prefix.strip("/") if api_prefix.strip("/") else ""
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "TaskApiClient":
        return cls(
            base_url=settings.api_base_url,
            api_prefix=settings.api_prefix,
            timeout=settings.request_timeout_seconds,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self._base_url)

    def _url(self, path: str) -> str:
        return f"{self._base_url}{self._api_prefix}{path}"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        expect_body: bool = True,
    ) -> Any:  # noqa: ANN401
        """Send one request and return the decoded JSON body.

        Raises:
            RemoteUnreachableError: No base URL, or the request never got a response
            RemoteRejectedError: Non-success HTTP status
            MalformedPayloadError: Body that cannot be decoded, or a success status
                with a body that is not JSON
        """
        if not self.is_configured:
            msg = "Task API base URL is not configured"
            raise RemoteUnreachableError(msg)

        url = self._url(path)
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.DecodingError as e:
            logger.warning("Task API sent an undecodable body: %s %s (%s)", method, url, e)
            msg = f"{method} {path} returned a body that could not be decoded: {e}"
            raise MalformedPayloadError(msg) from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            logger.warning("Task API unreachable: %s %s (%s)", method, url, e)
            msg = f"{method} {path} failed: {e}"
            raise RemoteUnreachableError(msg) from e

        if not response.is_success:
            logger.warning("Task API rejected %s %s with HTTP %d", method, path, response.status_code)
            raise RemoteRejectedError(response.status_code, response.text[:_ERROR_DETAIL_LIMIT])

        if not expect_body:
            return None

        try:
            return response.json()
        except ValueError as e:
            msg = f"{method} {path} returned a body that is not JSON"
            raise MalformedPayloadError(msg) from e

    async def list_tasks(self, criteria: FilterCriteria | None = None) -> list[Task]:
        """Fetch tasks matching the criteria (`GET /tasks`)."""
        params = build_list_params(criteria or FilterCriteria())
        payload = await self._request("GET", "/tasks", params=params or None)
        try:
            tasks = _TASK_LIST.validate_python(payload)
        except ValidationError as e:
            msg = f"GET /tasks returned an invalid task list: {e.error_count()} error(s)"
            raise MalformedPayloadError(msg) from e
        logger.info("Fetched %d tasks from API", len(tasks), extra={"params": params})
        return tasks

    async def create_task(self, draft: TaskCreate) -> Task:
        """Create a task (`POST /tasks`) and return the server's copy."""
        body = draft.model_dump(mode="json", exclude_none=True)
        payload = await self._request("POST", "/tasks", json=body)
        return self._parse_task(payload, "POST /tasks")

    async def update_completion(self, task_id: str, *, completed: bool) -> Task:
        """Set the completion flag of a task (`PUT /tasks/{id}`)."""
        path = f"/tasks/{quote(task_id, safe='')}"
        payload = await self._request("PUT", path, json={"completed": completed})
        return self._parse_task(payload, f"PUT {path}")

    async def delete_task(self, task_id: str) -> None:
        """Delete a task (`DELETE /tasks/{id}`). The response body is ignored."""
        await self._request("DELETE", f"/tasks/{quote(task_id, safe='')}", expect_body=False)

    async def get_stats(self) -> TaskStats:
        """Fetch the task aggregate (`GET /tasks/stats`)."""
        payload = await self._request("GET", "/tasks/stats")
        try:
            return TaskStats.model_validate(payload)
        except ValidationError as e:
            msg = f"GET /tasks/stats returned invalid stats: {e.error_count()} error(s)"
            raise MalformedPayloadError(msg) from e

    @staticmethod
    def _parse_task(payload: Any, operation: str) -> Task:  # noqa: ANN401
        try:
            return Task.model_validate(payload)
        except ValidationError as e:
            msg = f"{operation} returned an invalid task: {e.error_count()} error(s)"
            raise MalformedPayloadError(msg) from e
