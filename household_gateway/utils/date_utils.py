"""Date manipulation utilities"""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime"""
    return datetime.now(timezone.utc)


def add_weeks(from_time: datetime, weeks: int) -> datetime:
    """Shift a timestamp forward by whole weeks"""
    return from_time + timedelta(days=7 * weeks)
