"""REST API endpoints for standing availability windows."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..schemas.preferences import AvailabilityPayload
from ..services.schedule_service import ScheduleService
from .dependencies import get_current_user, get_schedule_service

router = APIRouter(prefix="/api/preferences", tags=["preferences"])


@router.get("/availability", response_model=AvailabilityPayload)
async def get_availability(
    user_id: str = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
) -> AvailabilityPayload:
    windows = await service.get_availability(user_id)
    return AvailabilityPayload(available_times=windows)


@router.put("/availability", response_model=AvailabilityPayload)
async def replace_availability(
    payload: AvailabilityPayload,
    user_id: str = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
) -> AvailabilityPayload:
    """Replace the caller's windows; values arrive already canonical."""
    windows = await service.set_availability(user_id, payload.available_times)
    return AvailabilityPayload(available_times=windows)


__all__ = ["router"]
