"""REST API endpoints for schedule entries, generation and moves."""

from __future__ import annotations

import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ..scheduling.errors import (
    AvailabilityNotConfiguredError,
    EntryNotFoundError,
    NoAvailabilityError,
    ScheduleConflictError,
)
from ..schemas.schedule import (
    EntryUpdateRequest,
    GenerateScheduleResponse,
    ManualEntryRequest,
    MoveRequestPayload,
    MoveResponse,
    ScheduleEntryResponse,
    UnscheduledTaskResponse,
)
from ..services.schedule_service import ScheduleService
from .dependencies import get_current_user, get_schedule_service

router = APIRouter(prefix="/api/schedule", tags=["schedule"])


@router.get("", response_model=List[ScheduleEntryResponse])
async def list_entries(
    start: Optional[datetime.date] = Query(default=None),
    end: Optional[datetime.date] = Query(default=None),
    user_id: str = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
) -> List[ScheduleEntryResponse]:
    """List entries between ``start`` and ``end`` inclusive."""
    if start is not None and end is not None and end < start:
        raise HTTPException(status_code=400, detail="end must not be before start")
    entries = await service.list_entries(user_id, start, end)
    return [ScheduleEntryResponse.model_validate(entry) for entry in entries]


@router.post(
    "/entries",
    response_model=ScheduleEntryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_entry(
    payload: ManualEntryRequest,
    user_id: str = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
) -> ScheduleEntryResponse:
    """Add a manual entry; rejected when it overlaps the day's entries."""
    try:
        entry = await service.add_manual_entry(
            user_id,
            date=payload.date,
            interval=payload.interval,
            task_description=payload.task_description,
            task_id=payload.task_id,
        )
    except ScheduleConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return ScheduleEntryResponse.model_validate(entry)


@router.patch("/entries/{entry_id}", response_model=ScheduleEntryResponse)
async def update_entry(
    entry_id: str,
    payload: EntryUpdateRequest,
    user_id: str = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
) -> ScheduleEntryResponse:
    """Edit the date, interval or description of an entry."""
    try:
        entry = await service.update_entry(
            user_id,
            entry_id,
            date=payload.date,
            interval=payload.interval,
            task_description=payload.task_description,
        )
    except EntryNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ScheduleConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return ScheduleEntryResponse.model_validate(entry)


@router.delete("/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(
    entry_id: str,
    user_id: str = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
) -> Response:
    try:
        await service.delete_entry(user_id, entry_id)
    except EntryNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/generate", response_model=GenerateScheduleResponse)
async def generate_schedule(
    user_id: str = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
) -> GenerateScheduleResponse:
    """Place every pending task that has no entries yet."""
    try:
        run = await service.generate_schedule(user_id)
    except AvailabilityNotConfiguredError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return GenerateScheduleResponse(
        entries=[ScheduleEntryResponse.model_validate(entry) for entry in run.entries],
        unscheduled=[
            UnscheduledTaskResponse.model_validate(item) for item in run.unscheduled
        ],
    )


@router.post("/move", response_model=MoveResponse)
async def move_entry(
    payload: MoveRequestPayload,
    user_id: str = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
) -> MoveResponse:
    """Move one entry to the earliest free slot on the target date."""
    try:
        plan = await service.move_entry(user_id, payload.to_request())
    except EntryNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except (NoAvailabilityError, AvailabilityNotConfiguredError) as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return MoveResponse(
        original=ScheduleEntryResponse.model_validate(plan.original),
        replacement=ScheduleEntryResponse.model_validate(plan.replacement),
    )


__all__ = ["router"]
