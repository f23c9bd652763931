"""
Usage statistics cache.

Serves previously collected snapshots and recollects them on a miss.
"""

import logging
from typing import Optional

from asset_usage.collectors.base import StatsCollector
from asset_usage.storage.cache_store import CacheStore, CacheUnavailableError, scoped_key
from asset_usage.storage.models import UsageSnapshot

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600
STATISTICS_NAME = "usageStatistics"
USAGE_PATTERN = "usage*"


class StatsCache:
    """Cache of usage snapshots keyed per module scope.

    Snapshots are stored whole under ``<scope>__usageStatistics``. Every
    entry of a scope named ``usage*`` belongs to the statistics namespace and
    is removed by invalidate_all.
    """

    def __init__(
        self,
        store: CacheStore,
        collector: StatsCollector,
        ttl: Optional[int] = DEFAULT_TTL_SECONDS
    ):
        """Initialize the cache.

        Args:
            store: Cache store holding serialized snapshots
            collector: Collector invoked on a cache miss
            ttl: Lifetime of a stored snapshot in seconds (None for no expiry)
        """
        if ttl is not None and ttl <= 0:
            raise ValueError("ttl must be > 0")
        self.store = store
        self.collector = collector
        self.ttl = ttl

    def get(self, module_scope: str) -> UsageSnapshot:
        """Return the cached snapshot for module_scope, collecting it on a miss.

        Store failures are not fatal: statistics are advisory, so an
        unreachable store means collecting directly.

        Args:
            module_scope: Name of the module owning the statistics

        Returns:
            Complete UsageSnapshot

        Raises:
            CollectionError: If the snapshot had to be collected and collection failed
        """
        key = scoped_key(module_scope, STATISTICS_NAME)

        try:
            cached = self.store.get(key)
        except CacheUnavailableError as e:
            logger.warning(f"Usage cache unavailable, collecting directly: {e}")
            return self.collector.collect(module_scope)

        if cached is not None:
            try:
                snapshot = UsageSnapshot.from_dict(cached)
                logger.debug(f"Usage statistics cache hit for {key}")
                return snapshot
            except ValueError as e:
                logger.warning(f"Ignoring invalid cached statistics for {key}: {e}")

        logger.debug(f"Usage statistics cache miss for {key}")
        snapshot = self.collector.collect(module_scope)

        try:
            self.store.set(key, snapshot.to_dict(), self.ttl)
        except CacheUnavailableError as e:
            logger.warning(f"Could not cache usage statistics for {key}: {e}")

        return snapshot

    def invalidate_all(self, module_scope: str) -> None:
        """Delete every ``usage*`` entry of module_scope.

        Raises:
            CacheUnavailableError: If the store cannot be reached
        """
        deleted = self.store.delete_by_pattern(module_scope, USAGE_PATTERN)
        logger.info(f"Usage statistics cache cleared for {module_scope}: {deleted} entries removed")

    def regenerate(self, module_scope: str) -> UsageSnapshot:
        """Clear the cached statistics of module_scope and collect them again."""
        self.invalidate_all(module_scope)
        return self.get(module_scope)
