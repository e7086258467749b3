"""
Target Nodes accessors

Handles get-or-create navigation through the Target Nodes namespace and the
typed getters and setters layered on top of it. The tree looks like:

    Target Nodes
        <target iqn>
            Target Data
            Session Configuration
            Authentication
            Portals
                <portal address>
                    Portal Data
                    Connection Configuration
                    Authentication
"""

import logging
from typing import Any, Dict, List, Optional

from ..cache import ConfigCache, Namespace
from ..config import (
    Auth, ConnectionConfig, Portal, SessionConfig, Target, TargetRecord
)
from ..constants import ISCSIConstants
from ..tree import empty_container, empty_portal, resolve
from .authentication import AuthenticationBoundary


class TargetRecords:
    """Reads and writes target and portal records in the configuration cache.

    Every lookup takes a ``create_if_missing`` flag. Reads pass False and
    never modify the cache; setters pass True, which inserts any missing
    ancestors and marks the namespace modified.
    """

    def __init__(self, cache: ConfigCache, auth: AuthenticationBoundary,
                 logger=None, strict_removal: bool = False):
        self.cache = cache
        self.auth = auth
        self.logger = logger or logging.getLogger("iscsiprefs.records.targets")
        self.strict_removal = strict_removal

    def _mark_modified(self) -> None:
        self.cache.mark_modified(Namespace.TARGETS)

    def _resolve(self, container, key: str, factory, create_if_missing: bool):
        child, inserted = resolve(container, key, factory if create_if_missing else None)
        if inserted:
            self.logger.debug("Created node '%s'", key)
            self._mark_modified()
        return child

    def get_targets(self, create_if_missing: bool = False) -> Optional[Dict[str, Any]]:
        """Return the Target Nodes root, materializing it if requested."""
        return self.cache.get(Namespace.TARGETS, create_if_missing)

    def get_target_info(self, target_iqn: str, create_if_missing: bool = False) -> Optional[Dict[str, Any]]:
        """Return the entry for a target; a new entry has no sub-keys."""
        return self._resolve(
            self.get_targets(create_if_missing), target_iqn, empty_container, create_if_missing
        )

    def get_portals_list(self, target_iqn: str, create_if_missing: bool = False) -> Optional[Dict[str, Any]]:
        """Return the portal mapping of a target."""
        return self._resolve(
            self.get_target_info(target_iqn, create_if_missing),
            ISCSIConstants.PORTALS_KEY,
            empty_container,
            create_if_missing,
        )

    def get_portal_info(self, target_iqn: str, portal_address: str,
                        create_if_missing: bool = False) -> Optional[Dict[str, Any]]:
        """Return a portal entry; a new entry has its sub-keys set to placeholders."""
        return self._resolve(
            self.get_portals_list(target_iqn, create_if_missing),
            portal_address,
            empty_portal,
            create_if_missing,
        )

    def _target_for_write(self, target_iqn: str) -> Optional[Dict[str, Any]]:
        target_info = self.get_target_info(target_iqn, True)
        if target_info is None:
            self.logger.warning("Target '%s' is not a record, leaving it unchanged", target_iqn)
        return target_info

    def _portal_for_write(self, target_iqn: str, portal_address: str) -> Optional[Dict[str, Any]]:
        portal_info = self.get_portal_info(target_iqn, portal_address, True)
        if portal_info is None:
            self.logger.warning(
                "Portal '%s' of target '%s' is not a record, leaving it unchanged",
                portal_address, target_iqn,
            )
        return portal_info

    def copy_target(self, target_iqn: str) -> Optional[Target]:
        target_info = self.get_target_info(target_iqn)
        if target_info is None:
            return None
        return Target.from_dict(target_info.get(ISCSIConstants.TARGET_DATA_KEY))

    def set_target(self, target: Target) -> None:
        """Store the domain target blob under the target's own qualified name."""
        target_info = self._target_for_write(target.iqn)
        if target_info is None:
            return
        target_info[ISCSIConstants.TARGET_DATA_KEY] = target.to_dict()
        self._mark_modified()

    def remove_target(self, target_iqn: str) -> None:
        """Remove a target and everything under it.

        The namespace is marked modified even when no such target exists,
        unless strict removal is enabled. An absent namespace is left alone.
        """
        targets = self.get_targets()
        if targets is None:
            return

        removed = targets.pop(target_iqn, None) is not None
        if removed or not self.strict_removal:
            self._mark_modified()

    def contains_target(self, target_iqn: str) -> bool:
        targets = self.get_targets()
        return targets is not None and target_iqn in targets

    def copy_target_iqns(self) -> List[str]:
        """Return the qualified names of all configured targets."""
        targets = self.get_targets()
        if targets is None:
            return []
        return list(targets)

    def copy_session_config(self, target_iqn: str) -> Optional[SessionConfig]:
        target_info = self.get_target_info(target_iqn)
        if target_info is None:
            return None
        return SessionConfig.from_dict(target_info.get(ISCSIConstants.SESSION_CONFIG_KEY))

    def set_session_config(self, target_iqn: str, session_config: SessionConfig) -> None:
        target_info = self._target_for_write(target_iqn)
        if target_info is None:
            return
        target_info[ISCSIConstants.SESSION_CONFIG_KEY] = session_config.to_dict()
        self._mark_modified()

    def copy_portal_for_target(self, target_iqn: str, portal_address: str) -> Optional[Portal]:
        portal_info = self.get_portal_info(target_iqn, portal_address)
        if portal_info is None:
            return None
        return Portal.from_dict(portal_info.get(ISCSIConstants.PORTAL_DATA_KEY))

    def set_portal_for_target(self, target_iqn: str, portal: Portal) -> None:
        """Store portal address data under the portal's own address."""
        portal_info = self._portal_for_write(target_iqn, portal.address)
        if portal_info is None:
            return
        portal_info[ISCSIConstants.PORTAL_DATA_KEY] = portal.to_dict()
        self._mark_modified()

    def remove_portal_for_target(self, target_iqn: str, portal_address: str) -> None:
        """Remove one portal of a target.

        Follows the same marking rules as remove_target(). A target without
        a portal mapping is left alone.
        """
        portals = self.get_portals_list(target_iqn)
        if portals is None:
            return

        removed = portals.pop(portal_address, None) is not None
        if removed or not self.strict_removal:
            self._mark_modified()

    def contains_portal_for_target(self, target_iqn: str, portal_address: str) -> bool:
        portals = self.get_portals_list(target_iqn)
        return portals is not None and portal_address in portals

    def copy_portal_addresses(self, target_iqn: str) -> List[str]:
        portals = self.get_portals_list(target_iqn)
        if portals is None:
            return []
        return list(portals)

    def copy_connection_config(self, target_iqn: str, portal_address: str) -> Optional[ConnectionConfig]:
        portal_info = self.get_portal_info(target_iqn, portal_address)
        if portal_info is None:
            return None
        return ConnectionConfig.from_dict(portal_info.get(ISCSIConstants.CONNECTION_CONFIG_KEY))

    def set_connection_config(self, target_iqn: str, portal_address: str,
                              connection_config: ConnectionConfig) -> None:
        portal_info = self._portal_for_write(target_iqn, portal_address)
        if portal_info is None:
            return
        portal_info[ISCSIConstants.CONNECTION_CONFIG_KEY] = connection_config.to_dict()
        self._mark_modified()

    def copy_authentication_for_target(self, target_iqn: str) -> Optional[Auth]:
        """Return the target's authentication, resolving CHAP secrets."""
        return self.auth.copy_authentication(self.get_target_info(target_iqn), target_iqn)

    def set_authentication_for_target(self, target_iqn: str, auth: Auth) -> None:
        target_info = self._target_for_write(target_iqn)
        if target_info is None:
            return
        self.auth.store_authentication(target_info, target_iqn, auth)
        self._mark_modified()

    def copy_target_record(self, target_iqn: str) -> Optional[TargetRecord]:
        """Return a typed snapshot of a target entry, or None if absent."""
        target_info = self.get_target_info(target_iqn)
        if target_info is None:
            return None
        return TargetRecord.from_node(target_iqn, target_info)
