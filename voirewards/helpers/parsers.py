"""Parsing and formatting utilities for common data transformations."""

import math
import re
from collections.abc import Iterator
from datetime import date, datetime, timedelta

from voirewards.helpers.constants import AVERAGE_MONTH_DAYS, MICRO_UNITS, SECONDS_PER_DAY


_COMPACT_DATE = re.compile(r"^\d{8}$")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_LEADING_DIGITS = re.compile(r"^\d+")


def parse_compact_date(value: str) -> date:
    """Parse a ``YYYYMMDD`` string.

    Args:
        value: Date string such as "20240506"

    Returns:
        date: The parsed date

    Raises:
        ValueError: If the string is not a valid compact date

    Example:
        >>> parse_compact_date("20240506")
        datetime.date(2024, 5, 6)
    """
    if not _COMPACT_DATE.match(value):
        msg = f"Invalid compact date: {value!r}"
        raise ValueError(msg)
    return datetime.strptime(value, "%Y%m%d").date()


def format_compact_date(day: date) -> str:
    """Format a date as ``YYYYMMDD``."""
    return day.strftime("%Y%m%d")


def parse_iso_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string.

    Raises:
        ValueError: If the string is not a valid ISO date
    """
    if not _ISO_DATE.match(value):
        msg = f"Invalid date format: {value!r}. Use YYYY-MM-DD"
        raise ValueError(msg)
    return date.fromisoformat(value)


def parse_version(version: str | None) -> tuple[int, ...] | None:
    """Parse a dotted software version into a tuple of integers.

    Each component contributes its leading digits, so "3.22.1-stable"
    parses as (3, 22, 1).

    Args:
        version: Version string or None

    Returns:
        tuple[int, ...] | None: Numeric components, or None when the version
        is missing or has no numeric prefix

    Example:
        >>> parse_version("3.22.1")
        (3, 22, 1)
        >>> parse_version(None) is None
        True
    """
    if not version:
        return None

    parts: list[int] = []
    for component in str(version).strip().lstrip("vV").split("."):
        match = _LEADING_DIGITS.match(component)
        if not match:
            break
        parts.append(int(match.group()))

    return tuple(parts) if parts else None


def compare_versions(left: str | None, right: str | None) -> int:
    """Compare two dotted versions.

    Missing components count as zero ("3.22" == "3.22.0"). A missing or
    unparseable version sorts below any parseable one.

    Returns:
        int: -1 if left < right, 0 if equal, 1 if left > right
    """
    left_parts = parse_version(left)
    right_parts = parse_version(right)

    if left_parts is None or right_parts is None:
        if left_parts is None and right_parts is None:
            return 0
        return -1 if left_parts is None else 1

    width = max(len(left_parts), len(right_parts))
    padded_left = left_parts + (0,) * (width - len(left_parts))
    padded_right = right_parts + (0,) * (width - len(right_parts))

    return (padded_left > padded_right) - (padded_left < padded_right)


def week_bounds(day: date) -> tuple[date, date]:
    """Monday and Sunday of the ISO week containing ``day``."""
    monday = day - timedelta(days=day.weekday())
    return monday, monday + timedelta(days=6)


def previous_week_label(day: date) -> str:
    """Label of the Monday-Sunday week strictly before ``day``.

    A weekly snapshot dated on a Monday describes the week that just ended.

    Example:
        >>> previous_week_label(date(2024, 5, 6))
        '2024-04-29 - 2024-05-05'
    """
    days_since_monday = day.weekday() or 7
    monday = day - timedelta(days=days_since_monday)
    days_since_sunday = (day.weekday() + 1) % 7 or 7
    sunday = day - timedelta(days=days_since_sunday)
    return f"{monday.isoformat()} - {sunday.isoformat()}"


def iter_weeks(start: date, until: date) -> Iterator[date]:
    """Yield ``start`` and every following week while it is ``<= until``."""
    current = start
    while current <= until:
        yield current
        current += timedelta(weeks=1)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day from ``start`` through ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def truncate_address(address: str, chars: int = 6) -> str:
    """Shorten an address to its first and last ``chars`` characters.

    Example:
        >>> truncate_address("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
        'ABCDEF...UVWXYZ'
    """
    if len(address) <= chars * 2:
        return address
    return f"{address[:chars]}...{address[-chars:]}"


def micro_to_units(micro: int | float) -> float:
    """Convert atomic units to whole tokens."""
    return micro / MICRO_UNITS


def units_to_micro(units: float) -> int:
    """Convert whole tokens to atomic units, rounding down."""
    return math.floor(units * MICRO_UNITS)


def format_units(micro: int | float) -> str:
    """Format an atomic amount as whole tokens with two decimals.

    Example:
        >>> format_units(1_234_567_890)
        '1,234.57'
    """
    return f"{micro_to_units(micro):,.2f}"


def format_duration_months(seconds: float) -> str:
    """Format a lockup duration as a whole number of average months.

    Example:
        >>> format_duration_months(31_557_600)
        '12 months'
    """
    months = math.floor(seconds / (AVERAGE_MONTH_DAYS * SECONDS_PER_DAY) + 0.5)
    return f"{months} {'month' if months == 1 else 'months'}"


_DISTANCE_UNITS = (
    ("year", 365 * SECONDS_PER_DAY),
    ("month", 30 * SECONDS_PER_DAY),
    ("day", SECONDS_PER_DAY),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
)


def format_distance_to_now(moment: datetime, now: datetime) -> str:
    """Largest whole unit elapsed between ``moment`` and ``now``.

    Example:
        >>> format_distance_to_now(datetime(2024, 5, 19), datetime(2024, 5, 22))
        '3 days ago'
    """
    elapsed = math.floor((now - moment).total_seconds())
    for label, size in _DISTANCE_UNITS:
        count = elapsed // size
        if count >= 1:
            return f"1 {label} ago" if count == 1 else f"{count} {label}s ago"
    return "just now"


__all__ = [
    "compare_versions",
    "format_compact_date",
    "format_distance_to_now",
    "format_duration_months",
    "format_units",
    "iter_days",
    "iter_weeks",
    "micro_to_units",
    "parse_compact_date",
    "parse_iso_date",
    "parse_version",
    "previous_week_label",
    "truncate_address",
    "units_to_micro",
    "week_bounds",
]
