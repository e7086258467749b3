"""
Configuration cache synchronization.

This module reconciles the in-memory configuration cache with the preference
store. Each namespace is handled on its own, with last-writer-wins semantics
and no merging:

1. Modified namespaces are written to the store, replacing whatever the
   store held for them.
2. A single commit makes those writes durable.
3. Unmodified namespaces are discarded and reloaded from the store, so that
   changes made by other processes become visible.
4. All modified flags are cleared.

There is no atomicity across namespaces. If a write or the commit fails,
the error propagates, writes already staged are not undone and the modified
flags stay set so the next synchronize retries them.
"""

import logging

from .cache import ConfigCache, Namespace
from .preferences import PreferenceStore


class Synchronizer:
    """Flushes or reloads each cached namespace against a preference store."""

    # Targets first, discovery last
    ORDER = (Namespace.TARGETS, Namespace.INITIATOR, Namespace.DISCOVERY)

    def __init__(self, cache: ConfigCache, preference_store: PreferenceStore, logger=None):
        self.cache = cache
        self.preference_store = preference_store
        self.logger = logger or logging.getLogger("iscsiprefs.sync")

    def synchronize(self) -> None:
        """Write modified namespaces, commit, then reload unmodified ones.

        Raises:
            PreferenceStoreError: If the store fails to write, commit or reload
        """
        modified = self.cache.modified_namespaces()
        self.logger.info(
            "Synchronizing configuration (modified: %s)",
            ", ".join(ns.preference_key for ns in self.ORDER if ns in modified) or "none",
        )

        for namespace in self.ORDER:
            if namespace in modified:
                self.logger.debug("Writing '%s' to preference store", namespace.preference_key)
                self.preference_store.set_value(
                    namespace.preference_key, self.cache[namespace].snapshot()
                )

        self.preference_store.synchronize()

        for namespace in self.ORDER:
            if namespace not in modified:
                self.logger.debug("Reloading '%s' from preference store", namespace.preference_key)
                self.cache[namespace].replace(
                    self.preference_store.copy_value(namespace.preference_key)
                )

        self.cache.clear_modified()
