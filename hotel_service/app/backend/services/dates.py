from datetime import date, datetime, timedelta, timezone
from typing import List


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_today() -> date:
    return utc_now().date()


def get_today() -> date:
    """FastAPI dependency, overridden in tests to pin the calendar."""
    return utc_today()


def nights_inclusive(from_date: date, to_date: date) -> List[date]:
    """Every calendar date from from_date to to_date, both included."""
    # Offsets from from_date, so to_date == date.max never steps past the calendar
    return [from_date + timedelta(days=offset) for offset in range((to_date - from_date).days + 1)]
