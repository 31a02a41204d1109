"""Health data provider interface"""
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Union

from ..core.models import (
    CategorySample,
    QuantitySample,
    SampleType,
    SleepVocabulary,
    TimeWindow,
)

RawSample = Union[QuantitySample, CategorySample]

# Types the server asks to read at startup
READ_TYPES = (
    SampleType.STEP_COUNT,
    SampleType.HEART_RATE,
    SampleType.ACTIVE_ENERGY,
    SampleType.SLEEP_ANALYSIS,
)


class HealthDataProvider(ABC):
    """Read-only source of health samples.

    Both query shapes restrict samples with the strict-start rule:
    window.start <= sample.start < window.end. Implementations must be
    safe to call concurrently; the query layer holds no locks.
    """

    sleep_vocabulary: SleepVocabulary = SleepVocabulary.EXTENDED

    @abstractmethod
    def is_health_data_available(self) -> bool:
        """Whether the underlying store can be queried at all"""

    @abstractmethod
    async def request_authorization(self, read_types: Iterable[SampleType]) -> None:
        """Grant read access; raises ProviderError subclasses on failure"""

    @abstractmethod
    async def cumulative_sum(
        self, sample_type: SampleType, window: TimeWindow
    ) -> Optional[float]:
        """Sum of quantity values in the window, None when there are none"""

    @abstractmethod
    async def sample_list(
        self, sample_type: SampleType, window: TimeWindow
    ) -> List[RawSample]:
        """All samples in the window, most recent start first"""
