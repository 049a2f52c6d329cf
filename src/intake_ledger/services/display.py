"""Parsing and formatting helpers for screens built on the ledger."""

import math
from datetime import date


def parse_amount(raw: str | None) -> float | None:
    """Parse a text field into a non-negative amount, or None if invalid."""
    if raw is None:
        return None
    text = raw.strip()
    if "_" in text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def format_header_date(day: date) -> str:
    """Format the day shown above today's progress, e.g. Monday, Jan 01, 2024."""
    return day.strftime("%A, %b %d, %Y")


def format_day(day: date) -> str:
    """Format a history row date, e.g. Jan 01, 2024."""
    return day.strftime("%b %d, %Y")


def format_amount(value: float) -> str:
    """Format an intake total without fraction digits."""
    return f"{value:.0f}"


def format_progress_label(value: float, goal: float) -> str:
    return f"{int(value)}/{int(goal)}"
