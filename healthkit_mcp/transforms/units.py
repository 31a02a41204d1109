"""Unit conversion utilities

All conversions are TO the units reported by the tools (kcal, count/min).
"""
from typing import Optional

KJ_PER_KCAL = 4.184


def kj_to_kcal(kj: Optional[float]) -> Optional[float]:
    """Convert kilojoules to kilocalories"""
    if kj is None:
        return None
    return kj / KJ_PER_KCAL


def cal_to_kcal(cal: Optional[float]) -> Optional[float]:
    """Convert (small) calories to kilocalories"""
    if cal is None:
        return None
    return cal / 1000.0


def per_second_to_per_minute(rate: Optional[float]) -> Optional[float]:
    """Convert count/s to count/min"""
    if rate is None:
        return None
    return rate * 60.0


# Source unit -> converter into the stored unit (kcal, count/min)
ENERGY_CONVERTERS = {
    "kcal": lambda v: v,
    "Cal": lambda v: v,
    "kJ": kj_to_kcal,
    "cal": cal_to_kcal,
}

HEART_RATE_CONVERTERS = {
    "count/min": lambda v: v,
    "count/s": per_second_to_per_minute,
}
