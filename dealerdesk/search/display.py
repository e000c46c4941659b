"""Display helpers shared by the entity adapters."""

from __future__ import annotations

from typing import Any

CURRENCY_SIGN = "₪"


def format_amount(value: Any) -> str:
    """Group thousands the way the back-office UI shows money; missing is 0."""
    if value is None or value == "":
        return "0"
    try:
        number = float(value)
    except (TypeError, ValueError):
        return str(value)
    if number.is_integer():
        return f"{int(number):,}"
    return f"{round(number, 3):,}"


def money(value: Any) -> str:
    return f"{CURRENCY_SIGN}{format_amount(value)}"


def text(value: Any) -> str:
    """Render an optional column as display text."""
    if value is None:
        return ""
    return str(value)


def join_bullets(*parts: Any) -> str:
    return " • ".join(text(part) for part in parts)
