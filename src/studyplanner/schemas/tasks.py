"""Pydantic models for the task endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..scheduling.models import Priority, Task, TaskDraft


class TaskCreate(BaseModel):
    """Request body for creating a task."""

    title: str = Field(..., min_length=1, max_length=200)
    priority: Priority = Priority.MEDIUM
    deadline: datetime = Field(..., description="Due date and time (ISO format)")
    estimated_time: Optional[int] = Field(
        default=None, ge=1, le=24 * 60, description="Estimated minutes of work"
    )
    description: Optional[str] = None
    category: Optional[str] = None

    def to_draft(self) -> TaskDraft:
        return TaskDraft(
            title=self.title.strip(),
            priority=self.priority,
            deadline=self.deadline,
            estimated_time=self.estimated_time,
            description=self.description,
            category=self.category,
        )


class TaskUpdate(BaseModel):
    """Partial update; only fields that are set are written."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    priority: Optional[Priority] = None
    deadline: Optional[datetime] = None
    estimated_time: Optional[int] = Field(default=None, ge=1, le=24 * 60)
    description: Optional[str] = None
    category: Optional[str] = None
    completed: Optional[bool] = None


class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    priority: Priority
    deadline: datetime
    estimated_time: Optional[int] = None
    completed: bool = False
    description: Optional[str] = None
    category: Optional[str] = None

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        return cls.model_validate(task)


__all__ = ["TaskCreate", "TaskResponse", "TaskUpdate"]
