"""Task status endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from cephprov.dependencies import get_task_manager
from cephprov.models.storage import APIResponse
from cephprov.models.task import ListTasksResponse
from cephprov.services.tasks import TaskManager

router = APIRouter(prefix="", tags=["Tasks"])


@router.get("", response_model=APIResponse, summary="List Tasks")
async def list_tasks(
    task_manager: Annotated[TaskManager, Depends(get_task_manager)],
) -> APIResponse:
    """List known tasks, oldest first."""
    tasks = [task.summary() for task in task_manager.list()]
    response_data = ListTasksResponse(tasks=tasks, count=len(tasks))
    return APIResponse(status="success", data=response_data.model_dump(mode="json"))


@router.get("/{task_id}", response_model=APIResponse, summary="Get Task")
async def get_task(
    task_id: str,
    task_manager: Annotated[TaskManager, Depends(get_task_manager)],
) -> APIResponse:
    """Get a task with its status log.

    Raises:
        TaskNotFoundError: If the task id is unknown
    """
    task = task_manager.get(task_id)
    return APIResponse(status="success", data=task.info().model_dump(mode="json"))
