from fastapi import APIRouter, Depends, Request
from task_tracker.domain.task_models import Task, TaskCreate, TaskUpdate
from task_tracker.services.task_service import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


def get_service(request: Request) -> TaskService:
    # Wired in main.create_app
    return request.app.state.task_service


@router.post("", response_model=Task, status_code=201)
async def create_task(payload: TaskCreate, svc: TaskService = Depends(get_service)):
    return await svc.create_task(payload)


@router.get("", response_model=list[Task])
async def list_tasks(svc: TaskService = Depends(get_service)):
    return await svc.list_tasks()


@router.get("/{task_id}", response_model=Task)
async def get_task(task_id: int, svc: TaskService = Depends(get_service)):
    return await svc.get_task(task_id)


@router.put("/{task_id}", response_model=Task)
async def update_task(task_id: int, payload: TaskUpdate, svc: TaskService = Depends(get_service)):
    return await svc.update_task(task_id, payload)


@router.delete("/{task_id}")
async def delete_task(task_id: int, svc: TaskService = Depends(get_service)):
    await svc.delete_task(task_id)
    return {"message": "Task deleted successfully", "id": task_id}
