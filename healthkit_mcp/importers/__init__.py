"""Importers that load health samples into the local store"""
from .apple_health import AppleHealthImporter
