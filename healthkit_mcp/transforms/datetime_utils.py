"""Date and time parsing utilities"""
import re
from datetime import datetime, timezone
from typing import Any, Optional

from ..core.errors import InvalidDateFormatError
from ..core.models import TimeWindow

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DB_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Fixed English names; %b/%p would follow the process locale
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def parse_date(date_str: Any) -> datetime:
    """
    Parse a YYYY-MM-DD calendar date to UTC midnight.

    Raises InvalidDateFormatError for anything that is not a string in
    that exact shape or not a real calendar date (e.g. 2024-02-30).
    """
    if not isinstance(date_str, str) or not DATE_PATTERN.match(date_str):
        raise InvalidDateFormatError()

    try:
        dt = datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise InvalidDateFormatError() from e

    return dt.replace(tzinfo=timezone.utc)


def parse_date_range(start_text: Any, end_text: Any) -> TimeWindow:
    """Parse start/end date strings into a TimeWindow (order is not checked)"""
    return TimeWindow(start=parse_date(start_text), end=parse_date(end_text))


def parse_healthkit_datetime(dt_str: Optional[str]) -> Optional[datetime]:
    """
    Parse Apple Health export timestamps to an aware UTC datetime.

    Input: "2025-11-24 08:00:00 -0800"
    Output: datetime(2025, 11, 24, 16, 0, tzinfo=UTC)
    """
    if not dt_str or dt_str.strip() == "":
        return None

    dt_str = dt_str.strip()

    for fmt in ("%Y-%m-%d %H:%M:%S %z", "%Y-%m-%dT%H:%M:%S%z"):
        try:
            return datetime.strptime(dt_str, fmt).astimezone(timezone.utc)
        except ValueError:
            continue

    # No offset given, assume UTC
    try:
        dt = datetime.strptime(dt_str, "%Y-%m-%d %H:%M:%S")
        return dt.replace(tzinfo=timezone.utc)
    except ValueError:
        pass

    return None


def to_db_timestamp(dt: datetime) -> str:
    """Aware datetime -> UTC text that sorts chronologically"""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    # strftime %Y does not zero-pad years below 1000 on every platform
    return (
        f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"
        f"T{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}Z"
    )


def from_db_timestamp(ts: str) -> datetime:
    return datetime.strptime(ts, DB_TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


def format_date(dt: datetime) -> str:
    """Medium date style: 'Jan 5, 2024' (rendered in UTC)"""
    dt = dt.astimezone(timezone.utc)
    return f"{MONTH_ABBREVIATIONS[dt.month - 1]} {dt.day}, {dt.year}"


def format_datetime(dt: datetime) -> str:
    """Medium date + short time: 'Jan 5, 2024 at 3:45 PM' (rendered in UTC)"""
    dt = dt.astimezone(timezone.utc)
    hour = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    return f"{format_date(dt)} at {hour}:{dt.minute:02d} {meridiem}"
