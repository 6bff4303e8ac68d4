"""
Time bucket alignment

Metric observations are grouped into fixed, non-overlapping windows. A
window starts on a minute-of-hour that is a multiple of the bucket size,
measured on the wall clock of the deployment timezone (BUCKET_TIMEZONE).
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from typing import Optional, Union

from trender.config import settings
from trender.utils.timezone import normalize, now_local, resolve_tz, to_local


@dataclass(frozen=True)
class BucketWindow:
    """Half-open window [start, end)"""

    start: datetime
    end: datetime
    size_minutes: int

    @property
    def label(self) -> str:
        return bucket_size_label(self.size_minutes)

    def contains(self, timestamp: datetime) -> bool:
        return self.start <= timestamp < self.end


def bucket_size_label(size_minutes: int) -> str:
    """15 -> '15m', 60 -> '1h'"""
    if size_minutes % 60 == 0:
        return f"{size_minutes // 60}h"
    return f"{size_minutes}m"


def _validate_size(size_minutes: int) -> int:
    if size_minutes <= 0 or 60 % size_minutes != 0:
        raise ValueError(f"Bucket size must divide an hour evenly, got {size_minutes} minutes")
    return size_minutes


def align_to_bucket(
    timestamp: datetime,
    bucket_size_minutes: Optional[int] = None,
    tz: Union[str, tzinfo, None] = None,
) -> BucketWindow:
    """
    Find the bucket enclosing a timestamp

    Args:
        timestamp: aware datetime, or naive deployment wall-clock time
        bucket_size_minutes: window width (defaults to BUCKET_SIZE_MINUTES)
        tz: timezone for wall-clock alignment (defaults to BUCKET_TIMEZONE)

    Returns:
        BucketWindow with timezone-aware bounds
    """
    if bucket_size_minutes is None:
        bucket_size_minutes = settings.bucket_size_minutes
    size = _validate_size(bucket_size_minutes)
    zone = resolve_tz(tz)
    local = to_local(timestamp, zone)

    offset = timedelta(
        minutes=local.minute % size,
        seconds=local.second,
        microseconds=local.microsecond,
    )
    start = normalize(local - offset, zone)
    end = normalize(start + timedelta(minutes=size), zone)
    return BucketWindow(start=start, end=end, size_minutes=size)


def current_bucket_window(
    bucket_size_minutes: Optional[int] = None,
    tz: Union[str, tzinfo, None] = None,
) -> BucketWindow:
    """Bucket enclosing the current moment"""
    zone = resolve_tz(tz)
    return align_to_bucket(now_local(zone), bucket_size_minutes, zone)
