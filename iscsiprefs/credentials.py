"""
Secure credential storage for CHAP secrets.

CHAP user names and shared secrets are never written to the preference
store. They are kept in a secure credential store, one entry per node,
keyed by the node's qualified name and tagged with a fixed service name
so every entry can be attributed to the iSCSI initiator.

copy_chap_secret() is the raw secret-fetch primitive: it is the only
operation in the library that reports a missing or unreadable secret as an
error, so callers can tell "no secret" apart from "backend failure".
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict

import keyring
from keyring.errors import KeyringError

from .config import ISCSIErrorCode
from .constants import ISCSIConstants
from .exceptions import SecretStoreError


@dataclass
class CHAPSecret:
    """A CHAP user name and its shared secret."""

    user: str
    secret: str


class SecretStore(ABC):
    """Abstract secure credential store keyed by node qualified name."""

    service_name = ISCSIConstants.CHAP_SERVICE_NAME

    @abstractmethod
    def set_chap_secret(self, node_iqn: str, user: str, secret: str) -> None:
        """Create or update the CHAP entry for ``node_iqn``.

        Raises:
            SecretStoreError: If the backend refuses the write
        """

    @abstractmethod
    def copy_chap_secret(self, node_iqn: str) -> CHAPSecret:
        """Fetch the CHAP entry for ``node_iqn``.

        Raises:
            SecretStoreError: With code SECRET_NOT_FOUND, SECRET_MALFORMED
                or SECRET_BACKEND_FAILURE
        """


class InMemorySecretStore(SecretStore):
    """Secret store held in process memory.

    Attributes:
        write_count: Number of set_chap_secret() calls seen so far
    """

    def __init__(self):
        self._entries: Dict[str, CHAPSecret] = {}
        self.write_count = 0

    def set_chap_secret(self, node_iqn: str, user: str, secret: str) -> None:
        self._entries[node_iqn] = CHAPSecret(user, secret)
        self.write_count += 1

    def copy_chap_secret(self, node_iqn: str) -> CHAPSecret:
        entry = self._entries.get(node_iqn)
        if entry is None:
            raise SecretStoreError(
                f"No CHAP secret stored for {node_iqn}",
                code=ISCSIErrorCode.SECRET_NOT_FOUND,
                node_iqn=node_iqn,
            )
        return CHAPSecret(entry.user, entry.secret)

    def __contains__(self, node_iqn: str) -> bool:
        return node_iqn in self._entries


class KeyringSecretStore(SecretStore):
    """Secret store backed by the operating system keyring.

    Each node gets one generic-password entry: the service is the CHAP
    service name, the user name is the node's qualified name, and the
    password is a small JSON document holding the CHAP account and secret:

        {"account": "alice", "secret": "s3cret"}

    Unlocking the keyring may prompt the user; calls block until the
    backend returns.
    """

    ACCOUNT_FIELD = "account"
    SECRET_FIELD = "secret"

    def __init__(self, service_name: str = ISCSIConstants.CHAP_SERVICE_NAME):
        self.service_name = service_name
        self.logger = logging.getLogger(__name__)

    def set_chap_secret(self, node_iqn: str, user: str, secret: str) -> None:
        payload = json.dumps({self.ACCOUNT_FIELD: user, self.SECRET_FIELD: secret})
        try:
            keyring.set_password(self.service_name, node_iqn, payload)
        except KeyringError as e:
            raise SecretStoreError(
                f"Failed to store CHAP secret for {node_iqn}: {e}",
                code=ISCSIErrorCode.SECRET_BACKEND_FAILURE,
                node_iqn=node_iqn,
            )
        self.logger.debug("Stored CHAP secret for %s", node_iqn)

    def copy_chap_secret(self, node_iqn: str) -> CHAPSecret:
        try:
            payload = keyring.get_password(self.service_name, node_iqn)
        except KeyringError as e:
            raise SecretStoreError(
                f"Failed to read CHAP secret for {node_iqn}: {e}",
                code=ISCSIErrorCode.SECRET_BACKEND_FAILURE,
                node_iqn=node_iqn,
            )

        if payload is None:
            raise SecretStoreError(
                f"No CHAP secret stored for {node_iqn}",
                code=ISCSIErrorCode.SECRET_NOT_FOUND,
                node_iqn=node_iqn,
            )

        try:
            data = json.loads(payload)
            user, secret = data[self.ACCOUNT_FIELD], data[self.SECRET_FIELD]
        except (ValueError, KeyError, TypeError) as e:
            raise SecretStoreError(
                f"Malformed CHAP secret for {node_iqn}: {e}",
                code=ISCSIErrorCode.SECRET_MALFORMED,
                node_iqn=node_iqn,
            )

        if not isinstance(user, str) or not user or not isinstance(secret, str):
            raise SecretStoreError(
                f"Malformed CHAP secret for {node_iqn}: account must be a non-empty string and secret a string",
                code=ISCSIErrorCode.SECRET_MALFORMED,
                node_iqn=node_iqn,
            )

        return CHAPSecret(user, secret)
