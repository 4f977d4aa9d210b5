"""FastAPI dependencies shared by the planner routers."""

from __future__ import annotations

from typing import Optional

from fastapi import Header, HTTPException, Request, status

from ..scheduling.errors import UnauthenticatedError
from ..services.assistant_service import AssistantService
from ..services.schedule_service import ScheduleService, require_user


def get_schedule_service(request: Request) -> ScheduleService:
    service = getattr(request.app.state, "schedule_service", None)
    if service is None:  # pragma: no cover - defensive
        raise RuntimeError("Schedule service is not configured")
    return service


def get_assistant_service(request: Request) -> AssistantService:
    service = getattr(request.app.state, "assistant_service", None)
    if service is None:  # pragma: no cover - defensive
        raise RuntimeError("Assistant service is not configured")
    return service


def get_current_user(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Resolve the caller from the ``X-User-Id`` header."""
    try:
        return require_user(x_user_id)
    except UnauthenticatedError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)
        ) from exc


__all__ = ["get_assistant_service", "get_current_user", "get_schedule_service"]
