"""Base importer class"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from ..core.database import Database
from ..core.logging_setup import get_logger
from ..core.models import ImportResult, SampleRow


class BaseImporter(ABC):
    """Abstract base class for sample importers"""

    SOURCE_NAME: str = ""  # Override in subclasses

    def __init__(self, db: Database, verbosity: int = 0):
        self.db = db
        self.verbosity = verbosity
        self.logger = get_logger("importers")
        self.import_id: Optional[int] = None

    def import_file(self, file_path: Path) -> ImportResult:
        """Main entry point for importing a file"""
        self.logger.info(f"Starting import: {self.SOURCE_NAME}")
        self.logger.info(f"File: {file_path}")

        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        self.import_id = self.db.create_import_log(str(file_path))
        self.logger.info(f"Created import log #{self.import_id}")

        result = ImportResult()

        try:
            for record in self._parse_file(file_path):
                result.processed += 1
                row = self._to_sample(record)

                if row is None:
                    result.skipped += 1
                    continue

                if self.db.insert_sample(row):
                    result.inserted += 1
                    key = row.sample_type.value
                    result.by_type[key] = result.by_type.get(key, 0) + 1
                    if self.verbosity >= 1:
                        self._log_insert(row)
                else:
                    result.skipped += 1
                    if self.verbosity >= 1:
                        self._log_skip(row)

            self.db.conn.commit()

            self.db.update_import_log(
                self.import_id,
                result.processed,
                result.inserted,
                result.skipped,
                status="completed"
            )

            self.logger.info("Import complete")
            self.logger.info(f"       Processed:  {result.processed}")
            self.logger.info(f"       Inserted:   {result.inserted}")
            self.logger.info(f"       Skipped:    {result.skipped} (duplicates or invalid)")

        except Exception as e:
            self.db.conn.rollback()
            self.db.update_import_log(
                self.import_id,
                result.processed,
                result.inserted,
                result.skipped,
                status="failed",
                error_message=str(e)
            )
            raise

        return result

    @abstractmethod
    def _parse_file(self, file_path: Path) -> Iterator[Dict[str, Any]]:
        """Parse file and yield records as dicts. Override in subclass."""
        pass

    @abstractmethod
    def _to_sample(self, record: Dict[str, Any]) -> Optional[SampleRow]:
        """Convert a parsed record to a SampleRow, None to skip it"""
        pass

    def _log_insert(self, row: SampleRow) -> None:
        """Log insert at verbose level. Override for custom formatting."""
        self.logger.debug(f"Inserted: {row}")

    def _log_skip(self, row: SampleRow) -> None:
        """Log skip at verbose level. Override for custom formatting."""
        self.logger.debug(f"Skipped: {row} (already exists)")
