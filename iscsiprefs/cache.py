"""
In-memory configuration cache.

The cache holds one nested mapping per namespace (targets, discovery,
initiator), each paired with a modified flag. A namespace starts out absent,
which is distinct from empty: absent means nothing has been loaded or
created yet.
"""

import copy
import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional

from .constants import ISCSIConstants
from .tree import empty_container


class Namespace(Enum):
    """Independently cached and synchronized configuration domains.

    The value of each member is its top-level key in the preference store.
    """

    TARGETS = ISCSIConstants.TARGETS_KEY
    DISCOVERY = ISCSIConstants.DISCOVERY_KEY
    INITIATOR = ISCSIConstants.INITIATOR_KEY

    @property
    def preference_key(self) -> str:
        return self.value


def empty_initiator() -> Dict[str, Any]:
    """Factory for a fresh initiator entry with empty name and alias."""
    return {
        ISCSIConstants.INITIATOR_ALIAS_KEY: ISCSIConstants.EMPTY_VALUE,
        ISCSIConstants.INITIATOR_IQN_KEY: ISCSIConstants.EMPTY_VALUE,
    }


class NamespaceCache:
    """A single namespace: its cached root node and its modified flag."""

    def __init__(self, namespace: Namespace, factory: Callable[[], Dict[str, Any]]):
        self.namespace = namespace
        self.factory = factory
        self.root: Optional[Dict[str, Any]] = None
        self.modified = False
        self.logger = logging.getLogger(__name__)

    def get(self, create_if_missing: bool = False) -> Optional[Dict[str, Any]]:
        """Return the cached root, materializing it if requested.

        Materializing does not set the modified flag; only explicit writes do.
        """
        if self.root is None and create_if_missing:
            self.root = self.factory()
            self.logger.debug("Materialized empty '%s' cache", self.namespace.preference_key)
        return self.root

    def replace(self, root: Optional[Dict[str, Any]]) -> None:
        """Discard the cached root and adopt ``root`` (None makes it absent)."""
        self.root = root

    def snapshot(self) -> Optional[Dict[str, Any]]:
        """Return a deep copy of the cached root for handing to a store."""
        return copy.deepcopy(self.root)

    def mark_modified(self) -> None:
        self.modified = True

    def clear_modified(self) -> None:
        self.modified = False


class ConfigCache:
    """Owns the three namespace caches of one configuration instance.

    Instances are independent: two ConfigCache objects never share state,
    which lets several property lists (or tests) coexist in one process.
    The cache has no internal lock; callers sharing one instance across
    threads must serialize access themselves.
    """

    def __init__(self):
        self.namespaces = {
            Namespace.TARGETS: NamespaceCache(Namespace.TARGETS, empty_container),
            Namespace.INITIATOR: NamespaceCache(Namespace.INITIATOR, empty_initiator),
            Namespace.DISCOVERY: NamespaceCache(Namespace.DISCOVERY, empty_container),
        }

    def __getitem__(self, namespace: Namespace) -> NamespaceCache:
        return self.namespaces[namespace]

    def get(self, namespace: Namespace, create_if_missing: bool = False) -> Optional[Dict[str, Any]]:
        return self.namespaces[namespace].get(create_if_missing)

    def mark_modified(self, namespace: Namespace) -> None:
        self.namespaces[namespace].mark_modified()

    def is_modified(self, namespace: Namespace) -> bool:
        return self.namespaces[namespace].modified

    def modified_namespaces(self):
        """Return the set of namespaces whose modified flag is set."""
        return {ns for ns, cache in self.namespaces.items() if cache.modified}

    def clear_modified(self) -> None:
        for cache in self.namespaces.values():
            cache.clear_modified()
