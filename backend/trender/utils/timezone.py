"""
Timezone helpers

All wall-clock reasoning (bucket boundaries, timestamps written to the
database) happens in the deployment timezone configured by BUCKET_TIMEZONE.
"""
from datetime import datetime, tzinfo
from typing import Optional, Union

import pytz

from trender.config import settings


def get_deployment_tz(name: Optional[str] = None) -> tzinfo:
    """
    Resolve a timezone name (defaults to BUCKET_TIMEZONE)

    Raises:
        pytz.UnknownTimeZoneError: unknown zone name
    """
    return pytz.timezone(name or settings.bucket_timezone)


def resolve_tz(tz: Union[str, tzinfo, None]) -> tzinfo:
    if tz is None or isinstance(tz, str):
        return get_deployment_tz(tz)
    return tz


def now_local(tz: Union[str, tzinfo, None] = None) -> datetime:
    """
    Current time in the deployment timezone (timezone-aware)
    """
    return datetime.now(resolve_tz(tz))


def to_local(dt: datetime, tz: Union[str, tzinfo, None] = None) -> datetime:
    """
    Express a datetime in the deployment timezone

    Naive datetimes are taken to already be deployment wall-clock time.
    """
    zone = resolve_tz(tz)
    if dt.tzinfo is None:
        localize = getattr(zone, "localize", None)
        return localize(dt) if localize else dt.replace(tzinfo=zone)
    return dt.astimezone(zone)


def normalize(dt: datetime, tz: tzinfo) -> datetime:
    """Fix up the UTC offset after arithmetic on a pytz-aware datetime"""
    fix = getattr(tz, "normalize", None)
    return fix(dt) if fix else dt
