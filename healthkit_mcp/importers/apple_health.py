"""Apple Health export.xml importer"""
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from ..core.models import SampleRow, SampleType
from ..transforms.datetime_utils import parse_healthkit_datetime, to_db_timestamp
from ..transforms.units import ENERGY_CONVERTERS, HEART_RATE_CONVERTERS
from .base import BaseImporter

# Export value names -> integer codes used by the sleep analysis category
SLEEP_VALUE_CODES = {
    "HKCategoryValueSleepAnalysisInBed": 0,
    "HKCategoryValueSleepAnalysisAsleepUnspecified": 1,
    "HKCategoryValueSleepAnalysisAsleep": 1,
    "HKCategoryValueSleepAnalysisAwake": 2,
    "HKCategoryValueSleepAnalysisAsleepCore": 3,
    "HKCategoryValueSleepAnalysisAsleepDeep": 4,
    "HKCategoryValueSleepAnalysisAsleepREM": 5,
}


class AppleHealthImporter(BaseImporter):
    """Import steps, heart rate, active energy and sleep from Apple Health export.xml

    Uses streaming XML parsing (iterparse) for memory efficiency
    with large export files (often 500MB+).
    """

    SOURCE_NAME = "apple_healthkit"

    RECORD_TYPES = {t.value: t for t in SampleType}

    def _parse_file(self, file_path: Path) -> Iterator[Dict[str, Any]]:
        """Parse Apple Health export XML using streaming"""
        self.logger.info("Parsing Apple Health export (this may take a while for large files)...")

        context = ET.iterparse(str(file_path), events=("end",))
        count = 0

        for event, elem in context:
            if elem.tag == "Record":
                record_type = elem.get("type", "")

                if record_type in self.RECORD_TYPES:
                    yield {
                        "type": record_type,
                        "value": elem.get("value"),
                        "unit": elem.get("unit"),
                        "startDate": elem.get("startDate"),
                        "endDate": elem.get("endDate"),
                        "sourceName": elem.get("sourceName"),
                    }
                    count += 1

                    if count % 10000 == 0:
                        self.logger.debug(f"Processed {count} records...")

                # Clear element to free memory
                elem.clear()

        self.logger.info(f"Found {count} supported records")

    def _to_sample(self, record: Dict[str, Any]) -> Optional[SampleRow]:
        """Normalize a single export record"""
        sample_type = self.RECORD_TYPES[record["type"]]

        start = parse_healthkit_datetime(record.get("startDate"))
        end = parse_healthkit_datetime(record.get("endDate"))
        if start is None or end is None:
            self.logger.warning(
                f"Skipping {record['type']} with invalid dates: "
                f"{record.get('startDate')} - {record.get('endDate')}"
            )
            return None

        if sample_type is SampleType.SLEEP_ANALYSIS:
            value = SLEEP_VALUE_CODES.get(record.get("value") or "")
            if value is None:
                self.logger.warning(f"Skipping sleep record with unknown value: {record.get('value')}")
                return None
            unit = None
        else:
            converted = self._convert_quantity(sample_type, record.get("value"), record.get("unit"))
            if converted is None:
                self.logger.warning(
                    f"Skipping {record['type']} with invalid value: "
                    f"{record.get('value')} {record.get('unit')}"
                )
                return None
            value, unit = converted

        return SampleRow(
            sample_type=sample_type,
            start_time=to_db_timestamp(start),
            end_time=to_db_timestamp(end),
            value=value,
            unit=unit,
            source_name=record.get("sourceName"),
        )

    def _convert_quantity(
        self, sample_type: SampleType, value: Optional[str], unit: Optional[str]
    ) -> Optional[tuple]:
        """Parse value and convert to the stored unit, None if unusable"""
        number = self._parse_float(value)
        if number is None:
            return None

        if sample_type is SampleType.STEP_COUNT:
            return number, "count"

        if sample_type is SampleType.HEART_RATE:
            converter = HEART_RATE_CONVERTERS.get(unit or "count/min")
            return (converter(number), "count/min") if converter else None

        converter = ENERGY_CONVERTERS.get(unit or "kcal")
        return (converter(number), "kcal") if converter else None

    def _parse_float(self, value: Optional[str]) -> Optional[float]:
        """Parse float value"""
        if not value:
            return None
        try:
            return float(value)
        except (ValueError, TypeError):
            return None

    def _log_insert(self, row: SampleRow) -> None:
        """Log insert"""
        self.logger.debug(
            f"Inserted: {row.start_time} - {row.sample_type.name}: {row.value} ({row.source_name})"
        )
