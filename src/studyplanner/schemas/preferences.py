"""Pydantic models for availability preferences."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, field_validator

from ..scheduling.availability import normalize_window


class AvailabilityPayload(BaseModel):
    """Standing daily windows such as ``"09:00-12:00"``."""

    available_times: List[str] = Field(default_factory=list)

    @field_validator("available_times")
    @classmethod
    def _normalize(cls, value: List[str]) -> List[str]:
        windows: List[str] = []
        for raw in value:
            normalized = normalize_window(raw)
            if normalized is None:
                raise ValueError(f"Invalid availability window '{raw}'")
            windows.append(normalized)
        return windows


__all__ = ["AvailabilityPayload"]
