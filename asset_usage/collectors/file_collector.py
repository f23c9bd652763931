"""
File-backed statistics collector.

Reads a snapshot exported from the remote asset service as YAML or JSON.
"""

import logging
from pathlib import Path

import yaml

from asset_usage.storage.models import UsageSnapshot
from .base import CollectionError, StatsCollector

logger = logging.getLogger(__name__)


class FileCollector(StatsCollector):
    """Collector reading the raw statistics structure from a file.

    The file holds the flat structure accepted by UsageSnapshot.from_dict,
    either at the top level or under a key named after the module scope.
    """

    def __init__(self, path: str):
        if not path or not str(path).strip():
            raise ValueError("path is required and cannot be empty")
        self.path = Path(path)

    def collect(self, module_scope: str) -> UsageSnapshot:
        logger.debug(f"Collecting usage statistics for {module_scope} from {self.path}")
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                raw = yaml.safe_load(f)
        except OSError as e:
            raise CollectionError(f"Cannot read usage statistics from {self.path}: {e}") from e
        except yaml.YAMLError as e:
            raise CollectionError(f"Invalid usage statistics in {self.path}: {e}") from e

        if not raw:
            raise CollectionError(f"Usage statistics file is empty: {self.path}")

        if isinstance(raw, dict) and isinstance(raw.get(module_scope), dict):
            raw = raw[module_scope]

        try:
            return UsageSnapshot.from_dict(raw)
        except ValueError as e:
            raise CollectionError(f"Invalid usage statistics in {self.path}: {e}") from e
