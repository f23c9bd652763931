"""
Collector contract.
"""

from asset_usage.storage.models import UsageSnapshot


class CollectionError(Exception):
    """Raised when remote statistics cannot be collected."""


class StatsCollector:
    """Produces usage snapshots for a module scope."""

    def collect(self, module_scope: str) -> UsageSnapshot:
        """Collect a fresh snapshot.

        Args:
            module_scope: Name of the module the statistics belong to

        Returns:
            Complete UsageSnapshot

        Raises:
            CollectionError: If the statistics are unavailable
        """
        raise NotImplementedError
