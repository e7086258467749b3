"""
Authentication boundary between cached records and the credential store.

Records only carry an authentication tag ("None" or "CHAP"). This module
turns that tag into an Auth value, fetching the CHAP user and secret from
the secret store when needed, and splits an Auth value back into a tag and
a secret-store write.
"""

import logging
from collections.abc import Mapping, MutableMapping
from typing import Optional

from ..config import Auth, AuthMethod
from ..constants import ISCSIConstants
from ..credentials import SecretStore
from ..exceptions import SecretStoreError


class AuthenticationBoundary:
    """Reads and writes node authentication for targets and the initiator."""

    def __init__(self, secret_store: SecretStore, logger=None):
        self.secret_store = secret_store
        self.logger = logger or logging.getLogger("iscsiprefs.records.authentication")

    def copy_authentication(self, node: Optional[Mapping], node_iqn: str) -> Optional[Auth]:
        """Rebuild the Auth value of a record.

        A CHAP tag triggers a secret-store lookup keyed by ``node_iqn``. Any
        secret-store failure degrades to no authentication instead of being
        raised; callers that need the failure reason should use
        SecretStore.copy_chap_secret() directly.

        Args:
            node: Record mapping holding the Authentication tag, or None
            node_iqn: Qualified name the CHAP secret is stored under

        Returns:
            Auth value, or None if the record itself does not exist
        """
        if node is None:
            return None

        method = AuthMethod.from_tag(node.get(ISCSIConstants.AUTH_KEY))
        if method == AuthMethod.NONE:
            return Auth.none()

        try:
            chap = self.secret_store.copy_chap_secret(node_iqn)
        except SecretStoreError as e:
            self.logger.warning(
                "CHAP secret unavailable for %s, using no authentication: %s", node_iqn, e
            )
            return Auth.none()

        try:
            return Auth.chap(chap.user, chap.secret)
        except ValueError as e:
            self.logger.warning(
                "Unusable CHAP secret for %s, using no authentication: %s", node_iqn, e
            )
            return Auth.none()

    def store_authentication(self, node: MutableMapping, node_iqn: str, auth: Auth) -> None:
        """Write the Auth tag into ``node`` and the CHAP secret into the store.

        Setting no authentication leaves any previously stored CHAP secret in
        place; it is neither read nor deleted.
        """
        node[ISCSIConstants.AUTH_KEY] = auth.tag

        if auth.method != AuthMethod.CHAP:
            return

        try:
            self.secret_store.set_chap_secret(node_iqn, auth.user, auth.secret)
            self.logger.debug("Updated CHAP secret for %s", node_iqn)
        except SecretStoreError as e:
            self.logger.warning("Failed to store CHAP secret for %s: %s", node_iqn, e)
