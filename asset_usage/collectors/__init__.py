"""
Collectors for remote usage statistics.

A collector produces a complete UsageSnapshot for a module scope or raises
CollectionError; it never returns partial data.
"""

from .base import CollectionError, StatsCollector
from .file_collector import FileCollector

__all__ = ["CollectionError", "StatsCollector", "FileCollector"]
