"""Data models for health metric queries"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class SampleType(str, Enum):
    """Provider sample types, named after their Apple Health identifiers"""
    STEP_COUNT = "HKQuantityTypeIdentifierStepCount"
    HEART_RATE = "HKQuantityTypeIdentifierHeartRate"
    ACTIVE_ENERGY = "HKQuantityTypeIdentifierActiveEnergyBurned"
    SLEEP_ANALYSIS = "HKCategoryTypeIdentifierSleepAnalysis"

    @property
    def is_category(self) -> bool:
        return self is SampleType.SLEEP_ANALYSIS


class MetricKind(str, Enum):
    """Cumulative metrics: value is the report name, unit is fixed per kind"""
    STEPS = "steps"
    ACTIVE_ENERGY = "active_energy"

    @property
    def sample_type(self) -> SampleType:
        if self is MetricKind.STEPS:
            return SampleType.STEP_COUNT
        return SampleType.ACTIVE_ENERGY

    @property
    def unit(self) -> str:
        if self is MetricKind.STEPS:
            return "steps"
        return "kcal"


class SleepState(str, Enum):
    CORE = "Core Sleep"
    DEEP = "Deep Sleep"
    REM = "REM Sleep"
    AWAKE = "Awake"
    ASLEEP = "Asleep"
    IN_BED = "In Bed"
    UNKNOWN = "Unknown"

    @property
    def is_sleeping(self) -> bool:
        """True for states whose name denotes sleep (Core/Deep/REM/Asleep)"""
        return "Sleep" in self.value or "Asleep" in self.value


class SleepVocabulary(str, Enum):
    """Which sleep-state codes a data source distinguishes"""
    EXTENDED = "extended"
    LEGACY = "legacy"


@dataclass(frozen=True)
class TimeWindow:
    """Query window; start <= end is not enforced"""
    start: datetime
    end: datetime


@dataclass(frozen=True)
class QuantitySample:
    """Raw quantity sample as stored by the provider"""
    start: datetime
    end: datetime
    value: float


@dataclass(frozen=True)
class CategorySample:
    """Raw category sample; value is the integer state code"""
    start: datetime
    end: datetime
    value: int


@dataclass(frozen=True)
class CumulativeMetric:
    kind: MetricKind
    window: TimeWindow
    total_value: float
    unit: str


@dataclass(frozen=True)
class HeartRateSample:
    timestamp: datetime
    value: float
    unit: str = "bpm"


@dataclass(frozen=True)
class SleepSample:
    start: datetime
    end: datetime
    duration_hours: float
    state: SleepState


@dataclass(frozen=True)
class CombinedSummary:
    window: TimeWindow
    steps: CumulativeMetric
    active_energy: CumulativeMetric
    heart_rate: Tuple[HeartRateSample, ...]
    sleep: Tuple[SleepSample, ...]


@dataclass(frozen=True)
class ToolInvocation:
    operation: str
    arguments: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ToolResult:
    text: str
    is_error: bool = False


@dataclass
class ImportResult:
    """Result of an import operation"""
    processed: int = 0
    inserted: int = 0
    skipped: int = 0
    by_type: Dict[str, int] = field(default_factory=dict)

    def __str__(self) -> str:
        return (
            f"Processed: {self.processed}, "
            f"Inserted: {self.inserted}, "
            f"Skipped: {self.skipped}"
        )


@dataclass
class SampleRow:
    """Normalized sample ready for insertion into the store"""
    sample_type: SampleType
    start_time: str
    end_time: str
    value: float
    unit: Optional[str] = None
    source_name: Optional[str] = None

