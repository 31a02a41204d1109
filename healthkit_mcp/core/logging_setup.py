"""Logging configuration for the health MCP server and CLI"""
import logging
import os
import sys
from pathlib import Path
from typing import Optional, TextIO

LOGGER_NAME = "healthkit_mcp"
LOG_DIR = Path(os.environ.get("HEALTHKIT_MCP_LOG_DIR", "logs"))


def setup_logging(
    verbosity: int = 0,
    quiet: bool = False,
    log_to_file: bool = True,
    log_file_name: str = "healthkit_mcp.log",
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure logging based on verbosity level.

    verbosity=0: INFO + warnings (default)
    verbosity>=1: DEBUG
    quiet=True: errors only
    log_to_file: also write to logs/<log_file_name>
    stream: console stream, stderr by default so stdio transports stay clean
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()

    if quiet:
        level = logging.ERROR
    elif verbosity >= 1:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logger.setLevel(level)

    # Console handler
    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setLevel(level)
    console_fmt = logging.Formatter("[%(levelname)s] %(message)s")
    console_handler.setFormatter(console_fmt)
    logger.addHandler(console_handler)

    # File handler
    if log_to_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(LOG_DIR / log_file_name, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)  # Always log everything to file
        file_fmt = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        file_handler.setFormatter(file_fmt)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get the package logger, or a child of it"""
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)
