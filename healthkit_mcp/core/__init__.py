"""Core modules for health metric queries"""
from .database import Database
from .logging_setup import setup_logging, get_logger
