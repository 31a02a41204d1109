"""Data transformation utilities"""
from .units import (
    kj_to_kcal,
    cal_to_kcal,
    per_second_to_per_minute,
)
from .datetime_utils import (
    parse_date,
    parse_date_range,
    parse_healthkit_datetime,
    to_db_timestamp,
    from_db_timestamp,
    format_date,
    format_datetime,
)
