from datetime import datetime, timedelta, timezone

import pytest

from healthkit_mcp.core.errors import InvalidDateFormatError
from healthkit_mcp.transforms.datetime_utils import (
    format_date,
    format_datetime,
    from_db_timestamp,
    parse_date_range,
    parse_healthkit_datetime,
    to_db_timestamp,
)


def test_valid_range_parses_to_utc_midnights() -> None:
    window = parse_date_range("2024-01-01", "2024-01-07")

    assert window.start == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert window.end == datetime(2024, 1, 7, tzinfo=timezone.utc)
    assert window.start.utcoffset() == timedelta(0)


def test_same_day_and_leap_day_are_valid() -> None:
    window = parse_date_range("2024-02-29", "2024-02-29")
    assert window.start == window.end


def test_inverted_range_is_not_rejected() -> None:
    window = parse_date_range("2024-01-07", "2024-01-01")
    assert window.start > window.end


@pytest.mark.parametrize(
    "bad",
    [
        "2024/01/01",
        "2024-1-1",
        "20240101",
        "abcd-ef-gh",
        "2024-02-30",
        "2023-02-29",
        "2024-13-01",
        "2024-00-10",
        "2024-01-32",
        " 2024-01-01",
        "2024-01-01T00:00:00",
        "",
        None,
        20240101,
    ],
)
def test_malformed_dates_raise_invalid_date_format(bad) -> None:
    with pytest.raises(InvalidDateFormatError) as excinfo:
        parse_date_range(bad, "2024-01-07")
    assert str(excinfo.value) == "Invalid date format. Expected YYYY-MM-DD"

    with pytest.raises(InvalidDateFormatError):
        parse_date_range("2024-01-01", bad)


def test_parse_healthkit_datetime_converts_offset_to_utc() -> None:
    assert parse_healthkit_datetime("2025-11-24 08:00:00 -0800") == datetime(
        2025, 11, 24, 16, 0, tzinfo=timezone.utc
    )
    assert parse_healthkit_datetime("2025-11-24 08:00:00") == datetime(
        2025, 11, 24, 8, 0, tzinfo=timezone.utc
    )
    assert parse_healthkit_datetime("not a date") is None
    assert parse_healthkit_datetime("") is None


def test_db_timestamps_sort_chronologically() -> None:
    earlier = to_db_timestamp(datetime(2024, 1, 1, 23, 0, tzinfo=timezone(timedelta(hours=-8))))
    later = to_db_timestamp(datetime(2024, 1, 2, 8, 0, tzinfo=timezone.utc))

    assert earlier == "2024-01-02T07:00:00Z"
    assert earlier < later
    assert from_db_timestamp(later) == datetime(2024, 1, 2, 8, 0, tzinfo=timezone.utc)


def test_human_readable_formats() -> None:
    assert format_date(datetime(2024, 1, 5, 23, 59, tzinfo=timezone.utc)) == "Jan 5, 2024"
    assert format_datetime(datetime(2024, 1, 5, 0, 5, tzinfo=timezone.utc)) == "Jan 5, 2024 at 12:05 AM"
    assert format_datetime(datetime(2024, 12, 25, 12, 0, tzinfo=timezone.utc)) == "Dec 25, 2024 at 12:00 PM"
    assert format_datetime(datetime(2024, 3, 9, 15, 45, tzinfo=timezone.utc)) == "Mar 9, 2024 at 3:45 PM"


def test_db_timestamp_pads_years_below_1000() -> None:
    early = datetime(999, 1, 1, tzinfo=timezone.utc)

    assert to_db_timestamp(early) == "0999-01-01T00:00:00Z"
    assert to_db_timestamp(early) < "2023-12-31T23:30:00Z"
    assert from_db_timestamp("0999-01-01T00:00:00Z") == early
