# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for the course service.

All timestamps are stored as UTC and every Python datetime handled by the
service is timezone-aware. Some drivers (SQLite) hand back naive values, so
comparisons against database values go through ensure_utc().

Usage:
------
    from src.utils.datetime import utc_now, has_passed

    # Derived "has started" flag, recomputed on every read
    started = has_passed(session.start_datetime)
"""

from datetime import date, datetime, timedelta, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None.

    Note:
        - If dt is None, returns None
        - If dt is naive, assumes UTC and adds tzinfo
        - If dt is aware, converts to UTC
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume UTC
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def has_passed(moment: datetime | None) -> bool:
    """Check whether a moment lies strictly before the current time.

    Args:
        moment: The datetime to compare with the wall clock.

    Returns:
        True if moment is in the past, False if it is None or not yet reached.
    """
    if moment is None:
        return False

    return ensure_utc(moment) < utc_now()


def whole_minutes_between(start: datetime, end: datetime) -> int:
    """Number of whole minutes from start to end (truncated toward zero).

    Args:
        start: Range start.
        end: Range end.

    Returns:
        Whole minutes, negative when end precedes start.
    """
    delta = ensure_utc(end) - ensure_utc(start)
    return int(delta / timedelta(minutes=1))


def age_in_years(born: date | datetime | None, today: date | None = None) -> int | None:
    """Compute age in completed years.

    Args:
        born: Date of birth.
        today: Reference date, defaults to the current UTC date.

    Returns:
        Age in years, or None if born is None.
    """
    if born is None:
        return None

    if isinstance(born, datetime):
        born = ensure_utc(born).date()

    today = today or utc_now().date()
    years = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        years -= 1
    return years


def years_ago(years: int) -> datetime:
    """Get the datetime exactly N calendar years before now.

    February 29th falls back to February 28th in non-leap target years.

    Args:
        years: Number of years to go back.

    Returns:
        Timezone-aware UTC datetime.
    """
    current = utc_now()
    try:
        return current.replace(year=current.year - years)
    except ValueError:
        return current.replace(year=current.year - years, day=28)
