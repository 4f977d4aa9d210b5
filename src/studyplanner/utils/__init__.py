"""Utility helpers for planner services."""

from .datetime_utils import add_days, date_to_string, iter_days, parse_date_string

__all__ = ["add_days", "date_to_string", "iter_days", "parse_date_string"]
