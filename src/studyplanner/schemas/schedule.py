"""Pydantic models for schedule entries, generation and moves."""

from __future__ import annotations

import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..scheduling.models import MoveRequest
from ..scheduling.timeutils import parse_interval, to_minutes

_HHMM_PATTERN = r"^\d{1,2}:\d{2}$"


class ScheduleEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = None
    date: datetime.date
    interval: str
    task_description: str
    task_id: Optional[str] = None
    is_auto_scheduled: bool = False


class ManualEntryRequest(BaseModel):
    """Request body for adding a user-typed entry."""

    date: datetime.date
    interval: str = Field(..., description="HH:MM-HH:MM or HH:MM - HH:MM")
    task_description: str = Field(..., min_length=1, max_length=200)
    task_id: Optional[str] = None

    @field_validator("interval")
    @classmethod
    def _check_interval(cls, value: str) -> str:
        slot = parse_interval(value)
        if slot is None:
            raise ValueError(f"Invalid interval '{value}'")
        return slot.to_interval()


class EntryUpdateRequest(BaseModel):
    """Partial edit of a placed entry; omitted fields keep their value."""

    date: Optional[datetime.date] = None
    interval: Optional[str] = Field(default=None, description="HH:MM-HH:MM or HH:MM - HH:MM")
    task_description: Optional[str] = Field(default=None, min_length=1, max_length=200)

    @field_validator("interval")
    @classmethod
    def _check_interval(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        slot = parse_interval(value)
        if slot is None:
            raise ValueError(f"Invalid interval '{value}'")
        return slot.to_interval()


class MoveRequestPayload(BaseModel):
    """Typed counterpart of "move <identifier> to <date> [HH:MM]"."""

    identifier: str = Field(..., min_length=1, description="Interval or part of the title")
    target_date: datetime.date
    target_time: Optional[str] = Field(default=None, pattern=_HHMM_PATTERN)

    @field_validator("target_time")
    @classmethod
    def _check_time(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        hours, minutes = (int(part) for part in value.split(":"))
        if hours > 23 or minutes > 59:
            raise ValueError(f"Invalid time '{value}'")
        return value

    def to_request(self) -> MoveRequest:
        return MoveRequest(
            identifier=self.identifier.strip(),
            target_date=self.target_date,
            target_time_minutes=(
                to_minutes(self.target_time) if self.target_time is not None else None
            ),
        )


class MoveResponse(BaseModel):
    original: ScheduleEntryResponse
    replacement: ScheduleEntryResponse


class UnscheduledTaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    task_id: str
    title: str
    sessions_placed: int
    sessions_needed: int


class GenerateScheduleResponse(BaseModel):
    """Entries placed by one generation run plus tasks that did not fit."""

    entries: List[ScheduleEntryResponse]
    unscheduled: List[UnscheduledTaskResponse]


__all__ = [
    "EntryUpdateRequest",
    "GenerateScheduleResponse",
    "ManualEntryRequest",
    "MoveRequestPayload",
    "MoveResponse",
    "ScheduleEntryResponse",
    "UnscheduledTaskResponse",
]
