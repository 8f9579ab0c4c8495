"""School-local time. Payment timestamps are stored timezone-aware; reports bucket them by the school's calendar."""

from datetime import date, datetime, time, timedelta
from functools import lru_cache
from typing import Tuple
from zoneinfo import ZoneInfo

from app.core.config import settings


@lru_cache(maxsize=None)
def _zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def get_school_timezone() -> ZoneInfo:
    return _zone(settings.school_timezone)


def to_school_time(moment: datetime) -> datetime:
    """Aware datetimes are converted to the school zone; naive ones are taken as already local."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(get_school_timezone())


def school_today() -> date:
    return datetime.now(get_school_timezone()).date()


def day_bounds(start: date, end: date) -> Tuple[datetime, datetime]:
    """[start 00:00, day after end 00:00) in school time, for half-open timestamp range queries."""
    tz = get_school_timezone()
    return (
        datetime.combine(start, time.min, tzinfo=tz),
        datetime.combine(end + timedelta(days=1), time.min, tzinfo=tz),
    )
