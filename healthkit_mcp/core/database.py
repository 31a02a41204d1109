"""Database connection and schema initialization"""
import sqlite3
from pathlib import Path
from typing import Dict, Optional

from .models import SampleRow

DEFAULT_DB_PATH = Path("data/health_data.db")
SCHEMA_PATH = Path(__file__).parent.parent / "schema" / "init.sql"


class Database:
    """SQLite database manager used by the importer and CLI"""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path or DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def init_schema(self) -> None:
        """Initialize database schema from init.sql"""
        if not SCHEMA_PATH.exists():
            raise FileNotFoundError(f"Schema file not found: {SCHEMA_PATH}")

        schema_sql = SCHEMA_PATH.read_text()
        self.conn.executescript(schema_sql)
        self.conn.commit()

    def insert_sample(self, row: SampleRow) -> bool:
        """Insert a sample, return False if an identical one already exists"""
        if row.sample_type.is_category:
            cursor = self.conn.execute(
                """INSERT OR IGNORE INTO category_samples
                   (sample_type, start_time, end_time, value, source_name)
                   VALUES (?, ?, ?, ?, ?)""",
                (row.sample_type.value, row.start_time, row.end_time,
                 int(row.value), row.source_name)
            )
        else:
            cursor = self.conn.execute(
                """INSERT OR IGNORE INTO quantity_samples
                   (sample_type, start_time, end_time, value, unit, source_name)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (row.sample_type.value, row.start_time, row.end_time,
                 row.value, row.unit, row.source_name)
            )
        return cursor.rowcount > 0

    def create_import_log(self, file_path: str) -> int:
        """Create new import log entry, return ID"""
        cursor = self.conn.execute(
            """INSERT INTO import_log (file_path, status)
               VALUES (?, 'running')""",
            (file_path,)
        )
        self.conn.commit()
        return cursor.lastrowid

    def update_import_log(
        self,
        import_id: int,
        processed: int,
        inserted: int,
        skipped: int,
        status: str = "completed",
        error_message: Optional[str] = None
    ) -> None:
        """Update import log with final counts"""
        self.conn.execute(
            """UPDATE import_log SET
                records_processed = ?,
                records_inserted = ?,
                records_skipped = ?,
                status = ?,
                error_message = ?
               WHERE id = ?""",
            (processed, inserted, skipped, status, error_message, import_id)
        )
        self.conn.commit()

    def sample_counts(self) -> Dict[str, int]:
        """Number of stored samples per sample type"""
        counts: Dict[str, int] = {}
        for table in ("quantity_samples", "category_samples"):
            rows = self.conn.execute(
                f"SELECT sample_type, COUNT(*) AS n FROM {table} GROUP BY sample_type"
            ).fetchall()
            for row in rows:
                counts[row["sample_type"]] = row["n"]
        return counts

    def close(self) -> None:
        """Close database connection"""
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
