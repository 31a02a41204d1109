"""Health data providers"""
from .base import HealthDataProvider, READ_TYPES, RawSample
from .sqlite_store import SQLiteHealthStore
