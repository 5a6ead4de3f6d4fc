import logging
from typing import Any, List, Mapping, Union
from task_tracker.domain.errors import TaskNotFound
from task_tracker.domain.ports import TaskRepo
from task_tracker.domain.task_models import Task, TaskCreate, TaskUpdate, parse_task_create, parse_task_update

logger = logging.getLogger("tracker.tasks")


class TaskService:
    """Task operations over an injected repository.

    Inputs are either validated models (the HTTP layer binds them) or raw
    mappings, which are parsed here first. Either way nothing reaches the
    repository unless it passed validation.
    """

    def __init__(self, repo: TaskRepo):
        self.repo = repo

    async def create_task(self, data: Union[TaskCreate, Mapping[str, Any]]) -> Task:
        if not isinstance(data, TaskCreate):
            data = parse_task_create(data)
        task = await self.repo.create(data)
        logger.info(
            "task.create",
            extra={"category": "tasks", "event": "task.create", "task_id": task.id, "title": task.title},
        )
        return task

    async def get_task(self, task_id: int) -> Task:
        task = await self.repo.get(task_id)
        if task is None:
            raise TaskNotFound(task_id)
        return task

    async def list_tasks(self) -> List[Task]:
        return await self.repo.list()

    async def update_task(self, task_id: int, data: Union[TaskUpdate, Mapping[str, Any]]) -> Task:
        if not isinstance(data, TaskUpdate):
            data = parse_task_update(data)
        changes = data.changes()
        task = await self.repo.update(task_id, changes)
        if task is None:
            raise TaskNotFound(task_id)
        logger.info(
            "task.update",
            extra={"category": "tasks", "event": "task.update", "task_id": task_id, "fields": sorted(changes)},
        )
        return task

    async def delete_task(self, task_id: int) -> None:
        if not await self.repo.delete(task_id):
            raise TaskNotFound(task_id)
        logger.info("task.delete", extra={"category": "tasks", "event": "task.delete", "task_id": task_id})
