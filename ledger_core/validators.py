"""Validation helpers shared across budget ledger services."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Dict, Iterable, Optional

from .exceptions import InvalidAmountError, ValidationError
from .models import parse_date
from .money import Money, parse_decimal

CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")

EXPENSE_METHODS = {"wallet", "bank"}
LENDING_DIRECTIONS = {"lend", "borrow"}
LENDING_STATUSES = {"pending", "settled"}

# Older snapshots and prompts called a repaid loan "returned".
STATUS_ALIASES: Dict[str, str] = {"returned": "settled"}

NAME_MAX_LENGTH = 50
NOTES_MAX_LENGTH = 200


def parse_amount(raw: object, currency: str, field: str = "amount") -> Money:
    """Convert raw input to a positive Money value with at most three fraction digits."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise InvalidAmountError(f"{field} is required")
    try:
        money = parse_decimal(raw, currency)
    except InvalidAmountError as exc:
        raise InvalidAmountError(f"{field} must be a decimal number, e.g. 1.250") from exc
    if not money.is_positive:
        raise InvalidAmountError(f"{field} must be greater than zero")
    return money


def validate_currency(code: object) -> str:
    if not isinstance(code, str):
        raise ValidationError("currency must be a 3-letter ISO 4217 code")
    canonical = code.strip().upper()
    if not CURRENCY_PATTERN.fullmatch(canonical):
        raise ValidationError("currency must be a 3-letter ISO 4217 code")
    return canonical


def validate_required_str(value: object, field: str, max_length: int) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(f"{field} cannot be empty")
    if len(trimmed) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return trimmed


def validate_optional_str(value: object, field: str, max_length: int) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    trimmed = value.strip()
    if len(trimmed) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return trimmed


def validate_date(value: object, field: str = "date") -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return parse_date(value)
        except ValueError as exc:
            raise ValidationError(f"{field} must be an ISO date (YYYY-MM-DD)") from exc
    raise ValidationError(f"{field} must be a date or ISO 8601 string")


def validate_enum(
    value: object,
    field: str,
    allowed: Iterable[str],
    *,
    aliases: Optional[Dict[str, str]] = None,
) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    canonical = value.strip().lower()
    if aliases:
        canonical = aliases.get(canonical, canonical)
    if canonical not in allowed:
        raise ValidationError(f"{field} must be one of: {', '.join(sorted(allowed))}")
    return canonical
