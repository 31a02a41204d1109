"""SQLite-backed health data provider

Reads samples written by the Apple Health importer. Each query opens its
own connection on a worker thread, so concurrent calls share nothing.
"""
import asyncio
import sqlite3
from pathlib import Path
from typing import Iterable, List, Optional, Set

from ..core.errors import (
    AuthorizationDeniedError,
    HealthDataNotAvailableError,
    QueryExecutionError,
)
from ..core.logging_setup import get_logger
from ..core.models import (
    CategorySample,
    QuantitySample,
    SampleType,
    SleepVocabulary,
    TimeWindow,
)
from ..transforms.datetime_utils import from_db_timestamp, to_db_timestamp
from .base import HealthDataProvider, RawSample

logger = get_logger("providers.sqlite")


class SQLiteHealthStore(HealthDataProvider):
    """Health data provider over the local sample database"""

    def __init__(
        self,
        db_path: Path,
        sleep_vocabulary: SleepVocabulary = SleepVocabulary.EXTENDED,
    ):
        self.db_path = Path(db_path)
        self.sleep_vocabulary = sleep_vocabulary
        self._authorized: Set[SampleType] = set()

    def _get_conn(self) -> sqlite3.Connection:
        """Get read-only database connection"""
        conn = sqlite3.connect(f"{self.db_path.resolve().as_uri()}?mode=ro", uri=True)
        conn.row_factory = sqlite3.Row
        return conn

    def _fetch_all(self, sql: str, params: tuple) -> List[sqlite3.Row]:
        try:
            conn = self._get_conn()
            try:
                return conn.execute(sql, params).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise QueryExecutionError(str(e)) from e

    def is_health_data_available(self) -> bool:
        return self.db_path.is_file()

    async def request_authorization(self, read_types: Iterable[SampleType]) -> None:
        """Grant access to types whose table can be read"""
        if not self.is_health_data_available():
            raise HealthDataNotAvailableError()

        requested = set(read_types)
        try:
            await asyncio.to_thread(self._check_tables, requested)
        except sqlite3.Error as e:
            logger.warning(f"Authorization check failed: {e}")
            raise AuthorizationDeniedError() from e

        self._authorized |= requested
        logger.info(f"Authorized read access for {len(requested)} sample types")

    def _check_tables(self, requested: Set[SampleType]) -> None:
        conn = self._get_conn()
        try:
            if any(t.is_category for t in requested):
                conn.execute("SELECT 1 FROM category_samples LIMIT 1").fetchall()
            if any(not t.is_category for t in requested):
                conn.execute("SELECT 1 FROM quantity_samples LIMIT 1").fetchall()
        finally:
            conn.close()

    def _ensure_authorized(self, sample_type: SampleType) -> None:
        if sample_type not in self._authorized:
            raise AuthorizationDeniedError()

    async def cumulative_sum(
        self, sample_type: SampleType, window: TimeWindow
    ) -> Optional[float]:
        self._ensure_authorized(sample_type)
        if sample_type.is_category:
            raise QueryExecutionError(f"Cannot sum category type {sample_type.value}")
        return await asyncio.to_thread(self._run_sum, sample_type, window)

    async def sample_list(
        self, sample_type: SampleType, window: TimeWindow
    ) -> List[RawSample]:
        self._ensure_authorized(sample_type)
        return await asyncio.to_thread(self._run_samples, sample_type, window)

    def _run_sum(self, sample_type: SampleType, window: TimeWindow) -> Optional[float]:
        rows = self._fetch_all(
            """
            SELECT SUM(value) AS total
            FROM quantity_samples
            WHERE sample_type = ?
              AND start_time >= ?
              AND start_time < ?
            """,
            (sample_type.value, to_db_timestamp(window.start), to_db_timestamp(window.end)),
        )
        return rows[0]["total"] if rows else None

    def _run_samples(self, sample_type: SampleType, window: TimeWindow) -> List[RawSample]:
        table = "category_samples" if sample_type.is_category else "quantity_samples"
        rows = self._fetch_all(
            f"""
            SELECT start_time, end_time, value
            FROM {table}
            WHERE sample_type = ?
              AND start_time >= ?
              AND start_time < ?
            ORDER BY start_time DESC, id DESC
            """,
            (sample_type.value, to_db_timestamp(window.start), to_db_timestamp(window.end)),
        )

        if sample_type.is_category:
            return [
                CategorySample(
                    start=from_db_timestamp(row["start_time"]),
                    end=from_db_timestamp(row["end_time"]),
                    value=int(row["value"]),
                )
                for row in rows
            ]
        return [
            QuantitySample(
                start=from_db_timestamp(row["start_time"]),
                end=from_db_timestamp(row["end_time"]),
                value=float(row["value"]),
            )
            for row in rows
        ]
