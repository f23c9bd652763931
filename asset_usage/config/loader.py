"""
Configuration management and loading.

Handles the statistics cache and collector settings.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

import yaml

from asset_usage.core.stats_cache import DEFAULT_TTL_SECONDS
from asset_usage.storage.db import DEFAULT_DB_PATH


@dataclass(frozen=True)
class CacheConfig:
    """Persistent cache settings."""
    path: str = DEFAULT_DB_PATH
    ttl: Optional[int] = DEFAULT_TTL_SECONDS

    def __post_init__(self):
        """Validate cache settings."""
        if not self.path:
            raise ValueError("cache path cannot be empty")
        if self.ttl is not None and self.ttl <= 0:
            raise ValueError("cache ttl must be > 0")


@dataclass(frozen=True)
class SourceConfig:
    """Location of the exported remote statistics."""
    path: str

    def __post_init__(self):
        """Validate source settings."""
        if not self.path:
            raise ValueError("source path cannot be empty")


@dataclass(frozen=True)
class StatsConfig:
    """Complete statistics configuration."""
    scope: str
    cache: CacheConfig
    source: SourceConfig


def load_stats_config(path: str) -> StatsConfig:
    """Load and validate statistics configuration from YAML file.

    Unknown keys are rejected so that a typo never silently falls back
    to a default.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated StatsConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Statistics config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if not raw_config:
        raise ValueError("Configuration file is empty")
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a dictionary")

    allowed_top_keys = {'scope', 'cache', 'source'}
    unknown_keys = set(raw_config.keys()) - allowed_top_keys
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")

    # Parse and validate scope
    if 'scope' not in raw_config:
        raise ValueError("Missing required 'scope'")
    scope = raw_config['scope']
    if not isinstance(scope, str) or not scope.strip():
        raise ValueError("'scope' must be a non-empty string")

    cache = _parse_cache_config(raw_config.get('cache') or {})

    # Parse and validate source
    if 'source' not in raw_config:
        raise ValueError("Missing required 'source' section")
    source = _parse_source_config(raw_config['source'])

    return StatsConfig(
        scope=scope.strip(),
        cache=cache,
        source=source
    )


def _parse_cache_config(data: Dict) -> CacheConfig:
    """Parse and validate the cache section.

    Args:
        data: Cache configuration data

    Returns:
        Validated CacheConfig

    Raises:
        ValueError: If configuration is invalid
    """
    if not isinstance(data, dict):
        raise ValueError("'cache' must be a dictionary")

    allowed_keys = {'path', 'ttl'}
    unknown_keys = set(data.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown keys in cache: {unknown_keys}")

    db_path = data.get('path', DEFAULT_DB_PATH)
    if not isinstance(db_path, str) or not db_path.strip():
        raise ValueError("'path' in cache must be a non-empty string")

    ttl = data.get('ttl', DEFAULT_TTL_SECONDS)
    if ttl is not None:
        if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl <= 0:
            raise ValueError("'ttl' in cache must be a positive integer")

    return CacheConfig(path=db_path, ttl=ttl)


def _parse_source_config(data: Dict) -> SourceConfig:
    """Parse and validate the source section.

    Relative paths are kept as written and resolved against the working
    directory by the collector.
    """
    if not isinstance(data, dict):
        raise ValueError("'source' must be a dictionary")

    unknown_keys = set(data.keys()) - {'path'}
    if unknown_keys:
        raise ValueError(f"Unknown keys in source: {unknown_keys}")

    if 'path' not in data:
        raise ValueError("Missing required 'path' in source")
    source_path = data['path']
    if not isinstance(source_path, str) or not source_path.strip():
        raise ValueError("'path' in source must be a non-empty string")

    return SourceConfig(path=source_path)
