from __future__ import annotations
"""Reusable form-level validation helpers.

Malformed input is rejected here with a 400 before it can reach any aggregation.
"""
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional
from flask import abort


def validate_choice(value: str, allowed: Iterable[str], field_name: str = 'status') -> str:
    """Validate that value is inside allowed.

    Returns the value (to enable inline usage) or aborts with 400.
    """
    if value not in allowed:
        abort(400, description=f"{field_name} invalid")
    return value


def _whole_number(raw, field_name: str) -> int:
    """Whole currency units; fractions are rejected, never truncated."""
    if isinstance(raw, bool) or raw is None:
        abort(400, description=f"{field_name} must be a number")
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        abort(400, description=f"{field_name} must be a number")
    if not value.is_finite():
        abort(400, description=f"{field_name} must be a number")
    if value != value.to_integral_value():
        abort(400, description=f"{field_name} must be a whole number")
    return int(value)


def validate_amount(raw, field_name: str = 'amount') -> int:
    amount = _whole_number(raw, field_name)
    if amount <= 0:
        abort(400, description=f"{field_name} must be > 0")
    return amount


def validate_non_negative(raw, field_name: str, maximum: Optional[int] = None) -> int:
    value = _whole_number(raw, field_name)
    if value < 0:
        abort(400, description=f"{field_name} must be >= 0")
    if maximum is not None and value > maximum:
        abort(400, description=f"{field_name} must be <= {maximum}")
    return value


def parse_date(raw, field_name: str = 'date', required: bool = True):
    if raw in (None, ''):
        if required:
            abort(400, description=f"{field_name} required")
        return None
    try:
        return date.fromisoformat(str(raw))
    except ValueError:
        abort(400, description=f"{field_name} must be YYYY-MM-DD")


def require_text(payload: dict, field_name: str) -> str:
    value = (payload.get(field_name) or '').strip() if isinstance(payload.get(field_name), str) else ''
    if not value:
        abort(400, description=f"{field_name} required")
    return value

__all__ = ['validate_choice', 'validate_amount', 'validate_non_negative', 'parse_date', 'require_text']
