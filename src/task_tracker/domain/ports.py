"""
Storage port used by TaskService.

The service depends on this Protocol rather than a concrete store, so the
SQL repository can be swapped for the in-memory one in tests.
"""

from __future__ import annotations

from typing import Any, List, Optional, Protocol

from task_tracker.domain.task_models import Task, TaskCreate


class TaskRepo(Protocol):
    async def create(self, data: TaskCreate) -> Task: ...

    async def get(self, task_id: int) -> Optional[Task]: ...

    async def list(self) -> List[Task]: ...

    async def update(self, task_id: int, changes: dict[str, Any]) -> Optional[Task]:
        """Apply ``changes`` and refresh updated_at. None when the task is absent."""
        ...

    async def delete(self, task_id: int) -> bool: ...
