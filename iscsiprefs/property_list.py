"""
High-level iSCSI initiator configuration interface.

This module provides the ISCSIPropertyList class, the single entry point
used by session setup, discovery and management tools to read and write
persistent initiator configuration. Callers never touch the preference store
or the credential store directly.
"""

import logging
from typing import List, Optional

from .cache import ConfigCache
from .config import (
    Auth, ConnectionConfig, DiscoveryRecord, InitiatorRecord, Portal,
    SessionConfig, Target, TargetRecord
)
from .constants import ISCSIConstants
from .credentials import KeyringSecretStore, SecretStore
from .preferences import PlistPreferenceStore, PreferenceStore
from .records import (
    AuthenticationBoundary, DiscoveryRecords, InitiatorRecords, TargetRecords
)
from .sync import Synchronizer


class ISCSIPropertyList:
    """Persistent iSCSI initiator configuration backed by a preference store.

    This class owns one configuration cache made of three namespaces
    (targets, initiator, discovery) and wires it to a preference store and
    a secure credential store. All reads and writes go to the cache; nothing
    reaches the preference store until synchronize() is called.

    Key capabilities:
    - Lazy, path-creating navigation through targets and portals
    - Typed getters and setters for session, connection, portal and target data
    - CHAP secrets delegated to the credential store, never stored inline
    - Merged discovery overlay
    - Per-namespace write-or-reload synchronization

    Instances are independent of each other and are not thread-safe.

    Example:
        plist = ISCSIPropertyList.open("/Library/Preferences")
        plist.set_target(Target("iqn.2020-01.com.example:target0"))
        plist.set_portal_for_target("iqn.2020-01.com.example:target0", Portal("10.0.0.1"))
        plist.synchronize()
    """

    def __init__(self, preference_store: Optional[PreferenceStore] = None,
                 secret_store: Optional[SecretStore] = None,
                 log_level: str = "WARNING", strict_removal: bool = False):
        if preference_store is None:
            preference_store = PlistPreferenceStore(
                ISCSIConstants.DEFAULT_PREFERENCES_DIR, ISCSIConstants.APP_ID
            )
        if secret_store is None:
            secret_store = KeyringSecretStore()

        self.preference_store = preference_store
        self.secret_store = secret_store
        self.cache = ConfigCache()

        # Create library-specific logger that doesn't interfere with calling app
        self.logger = logging.getLogger('iscsiprefs')
        self.logger.setLevel(getattr(logging, log_level.upper(), logging.WARNING))

        # Only add NullHandler if no handlers exist (prevents duplicate handlers)
        if not self.logger.handlers:
            self.logger.addHandler(logging.NullHandler())

        self.auth = AuthenticationBoundary(secret_store, self.logger)
        self.targets = TargetRecords(self.cache, self.auth, self.logger, strict_removal)
        self.initiator = InitiatorRecords(self.cache, self.auth, self.logger)
        self.discovery = DiscoveryRecords(self.cache, self.logger)
        self.synchronizer = Synchronizer(self.cache, preference_store, self.logger)

    @classmethod
    def open(cls, directory: str = ISCSIConstants.DEFAULT_PREFERENCES_DIR,
             app_id: str = ISCSIConstants.APP_ID,
             secret_store: Optional[SecretStore] = None,
             log_level: str = "WARNING",
             strict_removal: bool = False) -> "ISCSIPropertyList":
        """Create a plist-backed instance and load the stored configuration.

        Args:
            directory: Directory holding the preferences file
            app_id: Application id naming the preferences file
            secret_store: Credential store (default: system keyring)
            log_level: Logging level (default: "WARNING")
            strict_removal: Only mark namespaces modified on actual removal

        Returns:
            ISCSIPropertyList whose caches reflect the file on disk

        Raises:
            PreferenceStoreError: If the preferences file cannot be read
        """
        plist = cls(PlistPreferenceStore(directory, app_id), secret_store,
                    log_level=log_level, strict_removal=strict_removal)
        plist.synchronize()
        return plist

    # Namespace roots and navigation

    def get_targets(self, create_if_missing: bool = False):
        return self.targets.get_targets(create_if_missing)

    def get_target_info(self, target_iqn: str, create_if_missing: bool = False):
        return self.targets.get_target_info(target_iqn, create_if_missing)

    def get_portals_list(self, target_iqn: str, create_if_missing: bool = False):
        return self.targets.get_portals_list(target_iqn, create_if_missing)

    def get_portal_info(self, target_iqn: str, portal_address: str, create_if_missing: bool = False):
        return self.targets.get_portal_info(target_iqn, portal_address, create_if_missing)

    def get_initiator(self, create_if_missing: bool = False):
        return self.initiator.get_initiator(create_if_missing)

    def get_discovery(self, create_if_missing: bool = False):
        return self.discovery.get_discovery(create_if_missing)

    # Targets

    def copy_target(self, target_iqn: str) -> Optional[Target]:
        return self.targets.copy_target(target_iqn)

    def set_target(self, target: Target) -> None:
        self.targets.set_target(target)

    def remove_target(self, target_iqn: str) -> None:
        self.targets.remove_target(target_iqn)

    def contains_target(self, target_iqn: str) -> bool:
        return self.targets.contains_target(target_iqn)

    def copy_target_iqns(self) -> List[str]:
        return self.targets.copy_target_iqns()

    def copy_target_record(self, target_iqn: str) -> Optional[TargetRecord]:
        return self.targets.copy_target_record(target_iqn)

    def copy_session_config(self, target_iqn: str) -> Optional[SessionConfig]:
        return self.targets.copy_session_config(target_iqn)

    def set_session_config(self, target_iqn: str, session_config: SessionConfig) -> None:
        self.targets.set_session_config(target_iqn, session_config)

    def copy_authentication_for_target(self, target_iqn: str) -> Optional[Auth]:
        return self.targets.copy_authentication_for_target(target_iqn)

    def set_authentication_for_target(self, target_iqn: str, auth: Auth) -> None:
        self.targets.set_authentication_for_target(target_iqn, auth)

    # Portals

    def copy_portal_for_target(self, target_iqn: str, portal_address: str) -> Optional[Portal]:
        return self.targets.copy_portal_for_target(target_iqn, portal_address)

    def set_portal_for_target(self, target_iqn: str, portal: Portal) -> None:
        self.targets.set_portal_for_target(target_iqn, portal)

    def remove_portal_for_target(self, target_iqn: str, portal_address: str) -> None:
        self.targets.remove_portal_for_target(target_iqn, portal_address)

    def contains_portal_for_target(self, target_iqn: str, portal_address: str) -> bool:
        return self.targets.contains_portal_for_target(target_iqn, portal_address)

    def copy_portal_addresses(self, target_iqn: str) -> List[str]:
        return self.targets.copy_portal_addresses(target_iqn)

    def copy_connection_config(self, target_iqn: str, portal_address: str) -> Optional[ConnectionConfig]:
        return self.targets.copy_connection_config(target_iqn, portal_address)

    def set_connection_config(self, target_iqn: str, portal_address: str,
                              connection_config: ConnectionConfig) -> None:
        self.targets.set_connection_config(target_iqn, portal_address, connection_config)

    # Initiator

    def copy_initiator_iqn(self) -> Optional[str]:
        return self.initiator.copy_initiator_iqn()

    def set_initiator_iqn(self, initiator_iqn: str) -> None:
        self.initiator.set_initiator_iqn(initiator_iqn)

    def copy_initiator_alias(self) -> Optional[str]:
        return self.initiator.copy_initiator_alias()

    def set_initiator_alias(self, initiator_alias: str) -> None:
        self.initiator.set_initiator_alias(initiator_alias)

    def copy_authentication_for_initiator(self) -> Optional[Auth]:
        return self.initiator.copy_authentication_for_initiator()

    def set_authentication_for_initiator(self, auth: Auth) -> None:
        self.initiator.set_authentication_for_initiator(auth)

    def copy_initiator_record(self) -> Optional[InitiatorRecord]:
        return self.initiator.copy_initiator_record()

    # Discovery

    def add_discovery_record(self, record: DiscoveryRecord) -> None:
        self.discovery.add_discovery_record(record)

    def copy_discovery_record(self) -> Optional[DiscoveryRecord]:
        return self.discovery.copy_discovery_record()

    def clear_discovery_record(self) -> None:
        self.discovery.clear_discovery_record()

    # Persistence

    def synchronize(self) -> None:
        """Reconcile the cache with the preference store.

        Modified namespaces overwrite the stored values; unmodified ones are
        reloaded so that changes written by other processes become visible.

        Raises:
            PreferenceStoreError: On preference store failures
        """
        try:
            self.synchronizer.synchronize()
        except Exception as e:
            self.logger.error("Configuration synchronization failed: %s", e)
            raise
