from __future__ import annotations

from datetime import date
from typing import Any, Optional

import httpx

from task_tracker.domain.task_models import Task, TaskStatus


class TaskClientError(Exception):
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


def _jsonable(fields: dict[str, Any]) -> dict[str, Any]:
    out = {}
    for k, v in fields.items():
        if isinstance(v, TaskStatus):
            v = v.value
        elif isinstance(v, date):
            v = v.isoformat()
        out[k] = v
    return out


class TaskClient:
    """
    Async client for the task API.

        async with TaskClient("http://localhost:8080") as client:
            task = await client.create_task(title="Buy milk", due_date="2025-01-10", status="pending")
    """

    def __init__(self, base_url: str, *, transport: Optional[httpx.AsyncBaseTransport] = None, timeout: float = 10.0):
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "TaskClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, json: Optional[dict] = None) -> Any:
        resp = await self._http.request(method, path, json=json)
        if resp.is_error:
            try:
                body = resp.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("error"):
                message = str(body["error"])
            else:
                message = resp.reason_phrase or resp.text
            raise TaskClientError(resp.status_code, message)
        return resp.json()

    async def health(self) -> dict:
        return await self._request("GET", "/health")

    async def list_tasks(self) -> list[Task]:
        return [Task.model_validate(item) for item in await self._request("GET", "/tasks")]

    async def get_task(self, task_id: int) -> Task:
        return Task.model_validate(await self._request("GET", f"/tasks/{task_id}"))

    async def create_task(
        self,
        *,
        title: str,
        due_date: date | str,
        status: TaskStatus | str,
        description: Optional[str] = None,
    ) -> Task:
        body = _jsonable({"title": title, "description": description, "due_date": due_date, "status": status})
        return Task.model_validate(await self._request("POST", "/tasks", json=body))

    async def update_task(self, task_id: int, **fields: Any) -> Task:
        """Send only the given fields; everything else stays as stored."""
        return Task.model_validate(await self._request("PUT", f"/tasks/{task_id}", json=_jsonable(fields)))

    async def delete_task(self, task_id: int) -> dict:
        return await self._request("DELETE", f"/tasks/{task_id}")
