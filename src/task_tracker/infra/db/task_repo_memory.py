from __future__ import annotations
from itertools import count
from typing import Any, Dict, List, Optional

from task_tracker.domain.task_models import Task, TaskCreate, next_updated_at, utcnow


class InMemoryTaskRepo:
    """
    Dict-backed store with the same semantics as SQLTaskRepo.
    Used by tests and for running the API without a database.
    """
    def __init__(self):
        self._tasks: Dict[int, Task] = {}
        self._ids = count(1)

    async def create(self, data: TaskCreate) -> Task:
        now = utcnow()
        task = Task(
            id=next(self._ids),
            title=data.title,
            description=data.description,
            due_date=data.due_date,
            status=data.status,
            created_at=now,
            updated_at=now,
        )
        self._tasks[task.id] = task
        return task

    async def get(self, task_id: int) -> Optional[Task]:
        return self._tasks.get(task_id)

    async def list(self) -> List[Task]:
        # newest first
        return sorted(self._tasks.values(), key=lambda t: (t.created_at, t.id), reverse=True)

    async def update(self, task_id: int, changes: dict[str, Any]) -> Optional[Task]:
        task = self._tasks.get(task_id)
        if task is None:
            return None
        updated = task.model_copy(update={**changes, "updated_at": next_updated_at(task.updated_at)})
        self._tasks[task_id] = updated
        return updated

    async def delete(self, task_id: int) -> bool:
        return self._tasks.pop(task_id, None) is not None
