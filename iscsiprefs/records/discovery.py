"""
SendTargets Discovery overlay

Discovery results accumulate in a single mapping. Each new record is merged
into it key by key, so targets seen earlier stay until the overlay is
cleared, and a target reported again replaces its previous entry.
"""

import copy
import logging
from typing import Optional

from ..cache import ConfigCache, Namespace
from ..config import DiscoveryRecord


class DiscoveryRecords:
    """Maintains the merged discovery overlay."""

    def __init__(self, cache: ConfigCache, logger=None):
        self.cache = cache
        self.logger = logger or logging.getLogger("iscsiprefs.records.discovery")

    def get_discovery(self, create_if_missing: bool = False):
        return self.cache.get(Namespace.DISCOVERY, create_if_missing)

    def add_discovery_record(self, record: DiscoveryRecord) -> None:
        """Merge ``record`` into the overlay, later values winning on collision."""
        if record is None:
            return

        overlay = self.get_discovery(True)
        for key, value in record.to_dict().items():
            overlay[key] = value

        self.logger.debug("Merged discovery record with %d target(s)", len(record.targets))
        self.cache.mark_modified(Namespace.DISCOVERY)

    def copy_discovery_record(self) -> Optional[DiscoveryRecord]:
        overlay = self.get_discovery()
        if overlay is None:
            return None
        return DiscoveryRecord.from_dict(copy.deepcopy(overlay))

    def clear_discovery_record(self) -> None:
        """Drop the overlay entirely; the next synchronize removes it from storage."""
        self.cache[Namespace.DISCOVERY].replace(None)
        self.cache.mark_modified(Namespace.DISCOVERY)
