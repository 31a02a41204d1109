"""Text report rendering for tool results

Pure functions: identical input always yields identical text. Dates and
times are rendered in UTC.
"""
import statistics
from typing import Sequence

from healthkit_mcp.core.models import (
    CombinedSummary,
    CumulativeMetric,
    HeartRateSample,
    SleepSample,
)
from healthkit_mcp.transforms.datetime_utils import format_date, format_datetime

RECENT_SAMPLE_LIMIT = 10


def total_sleep_hours(samples: Sequence[SleepSample]) -> float:
    """Hours spent in states that denote sleep (Awake/In Bed/Unknown excluded)"""
    return sum(s.duration_hours for s in samples if s.state.is_sleeping)


def render_cumulative(metric: CumulativeMetric) -> str:
    return (
        f"{metric.kind.value.upper()} SUMMARY\n"
        f"Period: {format_date(metric.window.start)} to {format_date(metric.window.end)}\n"
        f"Total: {metric.total_value:.2f} {metric.unit}"
    )


def render_heart_rate(samples: Sequence[HeartRateSample]) -> str:
    """Statistics plus the most recent readings (input is newest first)"""
    result = "HEART RATE SAMPLES\n"
    result += f"Total samples: {len(samples)}\n\n"

    if samples:
        values = [s.value for s in samples]

        result += "Statistics:\n"
        result += f"- Average: {statistics.mean(values):.1f} bpm\n"
        result += f"- Min: {min(values):.1f} bpm\n"
        result += f"- Max: {max(values):.1f} bpm\n\n"

        result += "Recent samples:\n"
        for sample in samples[:RECENT_SAMPLE_LIMIT]:
            result += f"- {format_datetime(sample.timestamp)}: {sample.value:.1f} {sample.unit}\n"

        if len(samples) > RECENT_SAMPLE_LIMIT:
            result += f"... and {len(samples) - RECENT_SAMPLE_LIMIT} more samples\n"
    else:
        result += "No heart rate data available for this period.\n"

    return result


def render_sleep(samples: Sequence[SleepSample]) -> str:
    result = "SLEEP ANALYSIS\n"
    result += f"Total samples: {len(samples)}\n\n"

    if samples:
        result += f"Total sleep time: {total_sleep_hours(samples):.2f} hours\n\n"

        result += "Sleep sessions:\n"
        for sample in samples:
            result += (
                f"- {sample.state.value}: {format_datetime(sample.start)} "
                f"to {format_datetime(sample.end)}\n"
            )
            result += f"  Duration: {sample.duration_hours:.2f} hours\n"
    else:
        result += "No sleep data available for this period.\n"

    return result


def render_combined(summary: CombinedSummary) -> str:
    """Composite report; steps are whole numbers here, unlike render_cumulative"""
    result = "COMPREHENSIVE HEALTH SUMMARY\n"
    result += (
        f"Period: {format_date(summary.window.start)} "
        f"to {format_date(summary.window.end)}\n\n"
    )

    result += "STEPS\n"
    result += f"Total: {summary.steps.total_value:.0f} steps\n\n"

    result += "ACTIVE ENERGY\n"
    result += f"Total: {summary.active_energy.total_value:.2f} kcal\n\n"

    result += "HEART RATE\n"
    if summary.heart_rate:
        average = statistics.mean([s.value for s in summary.heart_rate])
        result += f"Average: {average:.1f} bpm\n"
        result += f"Samples: {len(summary.heart_rate)}\n\n"
    else:
        result += "No data available\n\n"

    result += "SLEEP\n"
    if summary.sleep:
        result += f"Total sleep: {total_sleep_hours(summary.sleep):.2f} hours\n"
        result += f"Sessions: {len(summary.sleep)}\n"
    else:
        result += "No data available\n"

    return result
