"""MCP server configuration"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from healthkit_mcp.core.database import DEFAULT_DB_PATH
from healthkit_mcp.core.models import SleepVocabulary

SERVER_NAME = "healthkit-mcp-server"
SERVER_VERSION = "1.0.0"

# Environment overrides
DB_PATH = Path(os.environ.get("HEALTHKIT_MCP_DB", str(DEFAULT_DB_PATH)))
SLEEP_VOCABULARY = os.environ.get("HEALTHKIT_MCP_SLEEP_VOCABULARY", SleepVocabulary.EXTENDED.value)


@dataclass(frozen=True)
class ServerConfig:
    """Settings for one server/CLI process"""
    db_path: Path = DB_PATH
    sleep_vocabulary: SleepVocabulary = SleepVocabulary.EXTENDED
    name: str = SERVER_NAME
    version: str = SERVER_VERSION

    @classmethod
    def from_env(cls, db_path: Optional[str] = None) -> "ServerConfig":
        """Build config from environment, with an optional explicit db path"""
        try:
            vocabulary = SleepVocabulary(SLEEP_VOCABULARY.strip().lower())
        except ValueError:
            raise ValueError(
                f"Invalid HEALTHKIT_MCP_SLEEP_VOCABULARY: {SLEEP_VOCABULARY}. Use extended/legacy"
            ) from None
        return cls(
            db_path=Path(db_path) if db_path else DB_PATH,
            sleep_vocabulary=vocabulary,
        )
