"""Metric query implementations for MCP server

One coroutine per metric, each turning raw provider samples into typed
results. Provider errors propagate unchanged; nothing is retried.
"""
from typing import Dict, List, Optional

from healthkit_mcp.core.models import (
    CategorySample,
    CumulativeMetric,
    HeartRateSample,
    MetricKind,
    QuantitySample,
    SampleType,
    SleepSample,
    SleepState,
    SleepVocabulary,
    TimeWindow,
)
from healthkit_mcp.providers.base import HealthDataProvider

# Sleep analysis category codes
IN_BED = 0
ASLEEP_UNSPECIFIED = 1
AWAKE = 2
ASLEEP_CORE = 3
ASLEEP_DEEP = 4
ASLEEP_REM = 5

SLEEP_STATE_TABLES: Dict[SleepVocabulary, Dict[int, SleepState]] = {
    SleepVocabulary.EXTENDED: {
        ASLEEP_CORE: SleepState.CORE,
        ASLEEP_DEEP: SleepState.DEEP,
        ASLEEP_REM: SleepState.REM,
        AWAKE: SleepState.AWAKE,
        ASLEEP_UNSPECIFIED: SleepState.ASLEEP,
        IN_BED: SleepState.IN_BED,
    },
    SleepVocabulary.LEGACY: {
        ASLEEP_UNSPECIFIED: SleepState.ASLEEP,
        AWAKE: SleepState.AWAKE,
        IN_BED: SleepState.IN_BED,
    },
}


def sleep_state_for(code: int, vocabulary: SleepVocabulary) -> SleepState:
    """Map a category code to a sleep state, Unknown when unrecognized"""
    return SLEEP_STATE_TABLES[vocabulary].get(code, SleepState.UNKNOWN)


class MetricQueryService:
    """Typed queries over a shared, read-only provider"""

    def __init__(self, provider: HealthDataProvider):
        self.provider = provider

    async def query_cumulative(self, kind: MetricKind, window: TimeWindow) -> CumulativeMetric:
        """Sum a quantity over the window; no data counts as 0"""
        total: Optional[float] = await self.provider.cumulative_sum(kind.sample_type, window)
        return CumulativeMetric(
            kind=kind,
            window=window,
            total_value=total if total is not None else 0.0,
            unit=kind.unit,
        )

    async def query_steps(self, window: TimeWindow) -> CumulativeMetric:
        return await self.query_cumulative(MetricKind.STEPS, window)

    async def query_active_energy(self, window: TimeWindow) -> CumulativeMetric:
        return await self.query_cumulative(MetricKind.ACTIVE_ENERGY, window)

    async def query_heart_rate_samples(self, window: TimeWindow) -> List[HeartRateSample]:
        """All heart rate readings, most recent first"""
        samples = await self.provider.sample_list(SampleType.HEART_RATE, window)
        return [
            HeartRateSample(timestamp=sample.start, value=sample.value, unit="bpm")
            for sample in samples
            if isinstance(sample, QuantitySample)
        ]

    async def query_sleep_samples(self, window: TimeWindow) -> List[SleepSample]:
        """Sleep intervals, most recent first"""
        samples = await self.provider.sample_list(SampleType.SLEEP_ANALYSIS, window)
        vocabulary = self.provider.sleep_vocabulary
        return [
            SleepSample(
                start=sample.start,
                end=sample.end,
                duration_hours=(sample.end - sample.start).total_seconds() / 3600.0,
                state=sleep_state_for(sample.value, vocabulary),
            )
            for sample in samples
            if isinstance(sample, CategorySample)
        ]
