from datetime import datetime, date, time, timezone as dt_timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from partnerhub.core.config import settings

# Due dates are inclusive through the last instant of the day
END_OF_DAY = time.max


def get_zoneinfo() -> Optional[ZoneInfo]:
    tz_name = getattr(settings, "DEFAULT_TIMEZONE", None)
    if not tz_name:
        return None
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        return None


def now_utc() -> datetime:
    return datetime.now(dt_timezone.utc)


def now_local() -> datetime:
    tz = get_zoneinfo()
    return datetime.now(tz) if tz else datetime.utcnow()


def now_local_naive() -> datetime:
    """Current local wall-clock time without tzinfo, matching how timestamps are stored."""
    return now_local().replace(tzinfo=None)


def today_local() -> date:
    return now_local().date()


def to_local_naive(dt: Union[datetime, date, None]) -> Optional[datetime]:
    """
    Convert any datetime to local timezone (settings.DEFAULT_TIMEZONE) and strip tzinfo.
    - Aware datetimes are converted to local tz and tzinfo is stripped
    - Naive datetimes are assumed local and returned as-is
    - Plain dates become local midnight
    """
    if dt is None:
        return None
    if not isinstance(dt, datetime):
        return datetime.combine(dt, time.min)
    if dt.tzinfo is None:
        return dt
    tz = get_zoneinfo()
    if tz is None:
        return dt.astimezone(dt_timezone.utc).replace(tzinfo=None)
    return dt.astimezone(tz).replace(tzinfo=None)


def end_of_day(d: Union[date, datetime]) -> datetime:
    if isinstance(d, datetime):
        d = d.date()
    return datetime.combine(d, END_OF_DAY)
