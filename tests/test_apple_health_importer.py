import asyncio
from pathlib import Path

import pytest

from healthkit_mcp.core.database import Database
from healthkit_mcp.importers import AppleHealthImporter
from healthkit_mcp.mcp.dispatcher import ToolDispatcher
from healthkit_mcp.providers import READ_TYPES, SQLiteHealthStore

EXPORT_XML = """<?xml version="1.0" encoding="UTF-8"?>
<HealthData locale="en_US">
 <ExportDate value="2024-01-08 10:00:00 -0800"/>
 <Record type="HKQuantityTypeIdentifierStepCount" sourceName="iPhone" unit="count" value="1234"
  startDate="2024-01-02 08:00:00 -0800" endDate="2024-01-02 08:15:00 -0800"/>
 <Record type="HKQuantityTypeIdentifierHeartRate" sourceName="Watch" unit="count/min" value="64"
  startDate="2024-01-03 07:00:00 +0000" endDate="2024-01-03 07:00:00 +0000">
  <MetadataEntry key="HKMetadataKeyHeartRateMotionContext" value="0"/>
 </Record>
 <Record type="HKQuantityTypeIdentifierActiveEnergyBurned" sourceName="Watch" unit="kJ" value="418.4"
  startDate="2024-01-03 12:00:00 +0000" endDate="2024-01-03 12:30:00 +0000"/>
 <Record type="HKCategoryTypeIdentifierSleepAnalysis" sourceName="Watch"
  value="HKCategoryValueSleepAnalysisAsleepDeep"
  startDate="2024-01-04 01:00:00 +0000" endDate="2024-01-04 02:30:00 +0000"/>
 <Record type="HKQuantityTypeIdentifierBodyMass" sourceName="Scale" unit="kg" value="70"
  startDate="2024-01-04 06:00:00 +0000" endDate="2024-01-04 06:00:00 +0000"/>
 <Record type="HKQuantityTypeIdentifierStepCount" sourceName="iPhone" unit="count" value="99"
  startDate="yesterday" endDate="today"/>
</HealthData>
"""


@pytest.fixture
def export_file(tmp_path: Path) -> Path:
    path = tmp_path / "export.xml"
    path.write_text(EXPORT_XML, encoding="utf-8")
    return path


def test_import_counts(tmp_path, export_file) -> None:
    with Database(tmp_path / "health.db") as db:
        db.init_schema()
        result = AppleHealthImporter(db).import_file(export_file)

        assert result.processed == 5
        assert result.inserted == 4
        assert result.skipped == 1
        assert result.by_type == {
            "HKQuantityTypeIdentifierStepCount": 1,
            "HKQuantityTypeIdentifierHeartRate": 1,
            "HKQuantityTypeIdentifierActiveEnergyBurned": 1,
            "HKCategoryTypeIdentifierSleepAnalysis": 1,
        }

        log = db.conn.execute("SELECT status, records_inserted FROM import_log").fetchone()
        assert log["status"] == "completed"
        assert log["records_inserted"] == 4


def test_import_normalizes_times_and_units(tmp_path, export_file) -> None:
    with Database(tmp_path / "health.db") as db:
        db.init_schema()
        AppleHealthImporter(db).import_file(export_file)

        steps = db.conn.execute(
            "SELECT start_time, end_time, value FROM quantity_samples WHERE sample_type = ?",
            ("HKQuantityTypeIdentifierStepCount",),
        ).fetchone()
        assert steps["start_time"] == "2024-01-02T16:00:00Z"
        assert steps["end_time"] == "2024-01-02T16:15:00Z"
        assert steps["value"] == 1234

        energy = db.conn.execute(
            "SELECT value, unit FROM quantity_samples WHERE sample_type = ?",
            ("HKQuantityTypeIdentifierActiveEnergyBurned",),
        ).fetchone()
        assert energy["value"] == pytest.approx(100.0)
        assert energy["unit"] == "kcal"

        sleep = db.conn.execute("SELECT value FROM category_samples").fetchone()
        assert sleep["value"] == 4


def test_reimport_inserts_nothing(tmp_path, export_file) -> None:
    with Database(tmp_path / "health.db") as db:
        db.init_schema()
        AppleHealthImporter(db).import_file(export_file)
        again = AppleHealthImporter(db).import_file(export_file)

        assert again.inserted == 0
        assert again.skipped == 5
        assert sum(db.sample_counts().values()) == 4


def test_missing_file_raises(tmp_path) -> None:
    with Database(tmp_path / "health.db") as db:
        db.init_schema()
        with pytest.raises(FileNotFoundError):
            AppleHealthImporter(db).import_file(tmp_path / "nope.xml")


def test_malformed_xml_marks_import_failed(tmp_path) -> None:
    broken = tmp_path / "broken.xml"
    broken.write_text("<HealthData><Record type=", encoding="utf-8")

    with Database(tmp_path / "health.db") as db:
        db.init_schema()
        with pytest.raises(Exception):
            AppleHealthImporter(db).import_file(broken)

        log = db.conn.execute("SELECT status, error_message FROM import_log").fetchone()
        assert log["status"] == "failed"
        assert log["error_message"]


def test_imported_data_is_queryable(tmp_path, export_file) -> None:
    db_path = tmp_path / "health.db"
    with Database(db_path) as db:
        db.init_schema()
        AppleHealthImporter(db).import_file(export_file)

    store = SQLiteHealthStore(db_path)
    asyncio.run(store.request_authorization(READ_TYPES))
    dispatcher = ToolDispatcher.from_provider(store)
    arguments = {"start_date": "2024-01-01", "end_date": "2024-01-07"}

    steps = asyncio.run(dispatcher.dispatch("get_steps", arguments))
    energy = asyncio.run(dispatcher.dispatch("get_active_energy", arguments))
    sleep = asyncio.run(dispatcher.dispatch("get_sleep", arguments))

    assert steps.text.endswith("Total: 1234.00 steps")
    assert energy.text.endswith("Total: 100.00 kcal")
    assert "Total sleep time: 1.50 hours\n" in sleep.text
    assert "- Deep Sleep: Jan 4, 2024 at 1:00 AM to Jan 4, 2024 at 2:30 AM\n" in sleep.text
