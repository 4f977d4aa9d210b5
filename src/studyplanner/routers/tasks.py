"""REST API endpoints for task management."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..scheduling.errors import TaskNotFoundError
from ..schemas.tasks import TaskCreate, TaskResponse, TaskUpdate
from ..services.schedule_service import ScheduleService
from .dependencies import get_current_user, get_schedule_service

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=List[TaskResponse])
async def list_tasks(
    user_id: str = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
) -> List[TaskResponse]:
    """List all tasks of the caller ordered by deadline."""
    tasks = await service.list_tasks(user_id)
    return [TaskResponse.from_task(task) for task in tasks]


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: TaskCreate,
    user_id: str = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
) -> TaskResponse:
    task = await service.create_task(user_id, payload.to_draft())
    return TaskResponse.from_task(task)


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    payload: TaskUpdate,
    user_id: str = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
) -> TaskResponse:
    """Update the fields present in the payload."""
    try:
        task = await service.update_task(
            user_id, task_id, payload.model_dump(exclude_unset=True)
        )
    except TaskNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return TaskResponse.from_task(task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: str,
    user_id: str = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
) -> Response:
    try:
        await service.delete_task(user_id, task_id)
    except TaskNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
