"""
Initiator Node accessors

The initiator namespace is a single flat record holding the local node's
qualified name, its alias and its authentication tag.
"""

import logging
from typing import Any, Dict, Optional

from ..cache import ConfigCache, Namespace
from ..config import Auth, AuthMethod, InitiatorRecord
from ..constants import ISCSIConstants
from .authentication import AuthenticationBoundary


class InitiatorRecords:
    """Reads and writes the local initiator's identity and authentication."""

    def __init__(self, cache: ConfigCache, auth: AuthenticationBoundary, logger=None):
        self.cache = cache
        self.auth = auth
        self.logger = logger or logging.getLogger("iscsiprefs.records.initiator")

    def get_initiator(self, create_if_missing: bool = False) -> Optional[Dict[str, Any]]:
        return self.cache.get(Namespace.INITIATOR, create_if_missing)

    def _set_field(self, key: str, value: str) -> None:
        initiator = self.get_initiator(True)
        initiator[key] = value
        self.cache.mark_modified(Namespace.INITIATOR)

    def copy_initiator_iqn(self) -> Optional[str]:
        initiator = self.get_initiator()
        if initiator is None:
            return None
        return initiator.get(ISCSIConstants.INITIATOR_IQN_KEY)

    def set_initiator_iqn(self, initiator_iqn: str) -> None:
        self._set_field(ISCSIConstants.INITIATOR_IQN_KEY, initiator_iqn)

    def copy_initiator_alias(self) -> Optional[str]:
        initiator = self.get_initiator()
        if initiator is None:
            return None
        return initiator.get(ISCSIConstants.INITIATOR_ALIAS_KEY)

    def set_initiator_alias(self, initiator_alias: str) -> None:
        self._set_field(ISCSIConstants.INITIATOR_ALIAS_KEY, initiator_alias)

    def copy_authentication_for_initiator(self) -> Optional[Auth]:
        """Return the initiator's authentication.

        The CHAP secret is looked up under the initiator name currently held
        in the cache, so renaming the initiator detaches it from its secret.
        """
        initiator = self.get_initiator()
        if initiator is None:
            return None
        return self.auth.copy_authentication(
            initiator, initiator.get(ISCSIConstants.INITIATOR_IQN_KEY, "")
        )

    def set_authentication_for_initiator(self, auth: Auth) -> None:
        initiator = self.get_initiator(True)
        initiator_iqn = initiator.get(ISCSIConstants.INITIATOR_IQN_KEY, "")
        if auth.method == AuthMethod.CHAP and not initiator_iqn:
            self.logger.warning("Storing initiator CHAP secret without an initiator name")
        self.auth.store_authentication(initiator, initiator_iqn, auth)
        self.cache.mark_modified(Namespace.INITIATOR)

    def copy_initiator_record(self) -> Optional[InitiatorRecord]:
        return InitiatorRecord.from_node(self.get_initiator())
