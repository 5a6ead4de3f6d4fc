# tests/test_api.py

from __future__ import annotations

import httpx
import pytest

from task_tracker.app.main import create_app
from task_tracker.domain.errors import StoreUnavailable
from task_tracker.domain.task_models import Task
from task_tracker.infra.db.task_repo_memory import InMemoryTaskRepo


async def _create(client, payload: dict) -> dict:
    resp = await client.post("/tasks", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.mark.asyncio
async def test_health(client) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_create_returns_created_task(client, milk: dict) -> None:
    body = await _create(client, milk)

    assert isinstance(body["id"], int)
    assert {k: body[k] for k in milk} == milk
    assert body["created_at"] == body["updated_at"]


@pytest.mark.asyncio
async def test_create_validation_error_is_400(client, milk: dict) -> None:
    resp = await client.post("/tasks", json={**milk, "title": "ab"})

    assert resp.status_code == 400
    body = resp.json()
    assert body["error_code"] == "VALIDATION_ERROR"
    assert body["error"].startswith("title")
    assert [e["field"] for e in body["details"]["errors"]] == ["title"]

    assert (await client.get("/tasks")).json() == []


@pytest.mark.asyncio
async def test_create_bad_date_is_400(client, milk: dict) -> None:
    resp = await client.post("/tasks", json={**milk, "due_date": "10-01-2025"})
    assert resp.status_code == 400
    assert "YYYY-MM-DD" in resp.json()["error"]


@pytest.mark.asyncio
async def test_malformed_json_is_400(client) -> None:
    resp = await client.post("/tasks", content=b"{not json", headers={"content-type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["error_code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_list_returns_newest_first(client, milk: dict) -> None:
    first = await _create(client, {**milk, "title": "first"})
    second = await _create(client, {**milk, "title": "second"})

    resp = await client.get("/tasks")
    assert resp.status_code == 200
    assert [t["id"] for t in resp.json()] == [second["id"], first["id"]]


@pytest.mark.asyncio
async def test_get_unknown_task_is_404(client) -> None:
    resp = await client.get("/tasks/999")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Task not found", "error_code": "NOT_FOUND", "details": {"id": 999}}


@pytest.mark.asyncio
async def test_non_integer_id_is_400(client) -> None:
    resp = await client.get("/tasks/abc")
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_put_updates_only_supplied_fields(client, milk: dict) -> None:
    created = await _create(client, milk)

    resp = await client.put(f"/tasks/{created['id']}", json={"status": "completed"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "completed"
    assert Task.model_validate(body).updated_at > Task.model_validate(created).updated_at
    unchanged = ("id", "title", "description", "due_date", "created_at")
    assert {k: body[k] for k in unchanged} == {k: created[k] for k in unchanged}


@pytest.mark.asyncio
async def test_put_invalid_status_is_400_and_not_written(client, milk: dict) -> None:
    created = await _create(client, milk)

    resp = await client.put(f"/tasks/{created['id']}", json={"status": "done", "title": "New title"})
    assert resp.status_code == 400

    stored = (await client.get(f"/tasks/{created['id']}")).json()
    assert stored == created


@pytest.mark.asyncio
async def test_put_unknown_task_is_404(client) -> None:
    resp = await client.put("/tasks/42", json={"status": "completed"})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_delete_then_get_is_404(client, milk: dict) -> None:
    created = await _create(client, milk)

    resp = await client.delete(f"/tasks/{created['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Task deleted successfully", "id": created["id"]}

    assert (await client.get(f"/tasks/{created['id']}")).status_code == 404
    assert (await client.delete(f"/tasks/{created['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_api_prefix_serves_same_routes(client, milk: dict) -> None:
    created = await _create(client, milk)
    resp = await client.get(f"/api/tasks/{created['id']}")
    assert resp.status_code == 200
    assert resp.json() == created


@pytest.mark.asyncio
async def test_request_id_is_echoed(client) -> None:
    resp = await client.get("/health", headers={"X-Request-ID": "req-123"})
    assert resp.headers["x-request-id"] == "req-123"

    resp = await client.get("/tasks/999")
    assert resp.headers["x-request-id"]


class _UnreachableStore(InMemoryTaskRepo):
    async def list(self):
        raise StoreUnavailable("list tasks")


@pytest.mark.asyncio
async def test_store_failure_is_500(settings) -> None:
    app = create_app(settings, repo=_UnreachableStore())
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        resp = await c.get("/tasks")

    assert resp.status_code == 500
    assert resp.json() == {
        "error": "Failed to list tasks",
        "error_code": "STORE_UNAVAILABLE",
        "details": {"operation": "list tasks"},
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
async def test_huge_id_is_404(client, method: str) -> None:
    body = {"status": "completed"} if method == "PUT" else None
    resp = await client.request(method, "/tasks/99999999999999999999", json=body)

    assert resp.status_code == 404
    assert resp.json()["error_code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_oversized_request_id_is_replaced(client) -> None:
    resp = await client.get("/health", headers={"X-Request-ID": "x" * 500})

    assert resp.status_code == 200
    echoed = resp.headers["x-request-id"]
    assert echoed != "x" * 500
    assert len(echoed) <= 128
