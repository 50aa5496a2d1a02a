from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..core.constants import MAX_MONEY_AMOUNT
from ..core.exceptions import ValidationError


def require_int_in_range(value: Any, field_name: str, low: int, high: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number", {field_name: "must be a whole number"})
    if number < low or number > high:
        message = f"must be between {low} and {high}"
        raise ValidationError(f"{field_name} {message}", {field_name: message})
    return number


def parse_amount(value: Any, field_name: str) -> Decimal:
    """Parse a major-unit money amount coming from a form."""
    if isinstance(value, bool) or value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field_name} is required", {field_name: "is required"})
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{field_name} must be a number", {field_name: "must be a number"})
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a number", {field_name: "must be a number"})
    if amount < 0:
        raise ValidationError(f"{field_name} must not be negative", {field_name: "must not be negative"})
    if amount > MAX_MONEY_AMOUNT:
        message = f"must not exceed {MAX_MONEY_AMOUNT:,}"
        raise ValidationError(f"{field_name} {message}", {field_name: message})
    return amount


def optional_amount(value: Any, field_name: str) -> Optional[Decimal]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_amount(value, field_name)


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
