import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from healthkit_mcp.core.database import Database
from healthkit_mcp.core.models import SampleRow, SampleType, SleepVocabulary, TimeWindow
from healthkit_mcp.providers.base import HealthDataProvider, RawSample


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class FakeHealthProvider(HealthDataProvider):
    """In-memory provider with canned sums/samples and injectable failures"""

    def __init__(
        self,
        sums: Optional[Dict[SampleType, Optional[float]]] = None,
        samples: Optional[Dict[SampleType, List[RawSample]]] = None,
        failures: Optional[Dict[SampleType, Exception]] = None,
        sleep_vocabulary: SleepVocabulary = SleepVocabulary.EXTENDED,
    ):
        self.sums = sums or {}
        self.samples = samples or {}
        self.failures = failures or {}
        self.sleep_vocabulary = sleep_vocabulary
        self.calls: List[tuple] = []

    def is_health_data_available(self) -> bool:
        return True

    async def request_authorization(self, read_types) -> None:
        self.calls.append(("authorize", tuple(read_types)))

    async def cumulative_sum(self, sample_type: SampleType, window: TimeWindow) -> Optional[float]:
        self.calls.append(("sum", sample_type, window))
        await asyncio.sleep(0)
        if sample_type in self.failures:
            raise self.failures[sample_type]
        return self.sums.get(sample_type)

    async def sample_list(self, sample_type: SampleType, window: TimeWindow) -> List[RawSample]:
        self.calls.append(("samples", sample_type, window))
        await asyncio.sleep(0)
        if sample_type in self.failures:
            raise self.failures[sample_type]
        return list(self.samples.get(sample_type, []))


@pytest.fixture
def fake_provider():
    return FakeHealthProvider


@pytest.fixture
def january_window() -> TimeWindow:
    return TimeWindow(start=utc(2024, 1, 1), end=utc(2024, 1, 7))


@pytest.fixture
def sample_db(tmp_path: Path) -> Path:
    """Initialized store with a handful of samples around 2024-01-01..2024-01-07"""
    db_path = tmp_path / "health_data.db"
    rows = [
        # Starts before the window, overlaps its start: excluded by strict-start
        SampleRow(SampleType.STEP_COUNT, "2023-12-31T23:30:00Z", "2024-01-01T00:30:00Z", 1000, "count", "iPhone"),
        SampleRow(SampleType.STEP_COUNT, "2024-01-01T00:00:00Z", "2024-01-01T00:10:00Z", 200, "count", "iPhone"),
        SampleRow(SampleType.STEP_COUNT, "2024-01-03T12:00:00Z", "2024-01-03T12:30:00Z", 300.5, "count", "iPhone"),
        # Starts exactly at window end: excluded
        SampleRow(SampleType.STEP_COUNT, "2024-01-07T00:00:00Z", "2024-01-07T00:10:00Z", 5000, "count", "iPhone"),
        SampleRow(SampleType.HEART_RATE, "2024-01-02T08:00:00Z", "2024-01-02T08:00:00Z", 61, "count/min", "Watch"),
        SampleRow(SampleType.HEART_RATE, "2024-01-04T08:00:00Z", "2024-01-04T08:00:00Z", 75, "count/min", "Watch"),
        SampleRow(SampleType.HEART_RATE, "2024-01-03T08:00:00Z", "2024-01-03T08:00:00Z", 68, "count/min", "Watch"),
        SampleRow(SampleType.SLEEP_ANALYSIS, "2024-01-02T01:00:00Z", "2024-01-02T03:00:00Z", 4, None, "Watch"),
        SampleRow(SampleType.SLEEP_ANALYSIS, "2024-01-02T03:00:00Z", "2024-01-02T03:30:00Z", 2, None, "Watch"),
    ]
    with Database(db_path) as db:
        db.init_schema()
        for row in rows:
            db.insert_sample(row)
        db.conn.commit()
    return db_path
