"""Monthly period keys: the unit of ledger isolation."""

from __future__ import annotations

import calendar
import re
from datetime import date
from typing import Optional

from .exceptions import ValidationError

__all__ = [
    "STORAGE_PREFIX",
    "current_period_key",
    "label",
    "period_key_of",
    "storage_key",
    "validate_period_key",
]

PERIOD_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")
STORAGE_PREFIX = "budget-"


def period_key_of(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def current_period_key(today: Optional[date] = None) -> str:
    return period_key_of(today or date.today())


def validate_period_key(value: object) -> str:
    if not isinstance(value, str):
        raise ValidationError("period must be a string in YYYY-MM format")
    match = PERIOD_PATTERN.fullmatch(value.strip())
    if match is None or not 1 <= int(match.group(2)) <= 12:
        raise ValidationError(f"period '{value}' must be in YYYY-MM format")
    return match.group(0)


def label(period_key: str) -> str:
    """Return a human label such as ``"March 2025"``."""
    year, month = validate_period_key(period_key).split("-")
    return f"{calendar.month_name[int(month)]} {year}"


def storage_key(period_key: str) -> str:
    return STORAGE_PREFIX + validate_period_key(period_key)
