"""
Configuration data structures for the iSCSI initiator.

This module defines the domain objects stored in the initiator configuration
(targets, portals, session and connection settings, authentication and
discovery results) together with their codecs. Every codec converts between
a dataclass and the generic string-keyed mapping persisted in the preference
store, so the on-disk schema is owned here and nowhere else.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .constants import ISCSIConstants


class ISCSIErrorCode(Enum):
    """Error codes for failures reported by the secure credential store.

    Attributes:
        SECRET_NOT_FOUND: No credential entry exists for the node
        SECRET_MALFORMED: An entry exists but its payload cannot be decoded
        SECRET_BACKEND_FAILURE: The credential store itself refused or failed
    """

    SECRET_NOT_FOUND = "ISCSI_SECRET_NOT_FOUND"
    SECRET_MALFORMED = "ISCSI_SECRET_MALFORMED"
    SECRET_BACKEND_FAILURE = "ISCSI_SECRET_BACKEND_FAILURE"


class AuthMethod(Enum):
    """Authentication methods a node can be configured with."""

    NONE = ISCSIConstants.AUTH_NONE
    CHAP = ISCSIConstants.AUTH_CHAP

    @classmethod
    def from_tag(cls, tag) -> "AuthMethod":
        """Decode a stored authentication tag.

        Only the exact CHAP tag selects CHAP; an absent tag, the empty
        placeholder and anything unrecognised all mean no authentication.
        """
        if tag == ISCSIConstants.AUTH_CHAP:
            return cls.CHAP
        return cls.NONE


def _is_unset(node) -> bool:
    """True for a missing node or the empty placeholder scalar."""
    return node is None or node == ISCSIConstants.EMPTY_VALUE


def _bool_to_str(value: bool) -> str:
    return "true" if value else "false"


def _str_to_bool(value) -> bool:
    return str(value).strip().lower() in ("true", "yes", "1")


@dataclass
class Auth:
    """Authentication settings for a target or the initiator.

    The CHAP secret is never written to the preference store. Only the
    method tag is persisted; user and secret travel through the secure
    credential store keyed by the owning node's qualified name.
    """

    method: AuthMethod = AuthMethod.NONE
    user: Optional[str] = None
    secret: Optional[str] = None

    def __post_init__(self):
        if self.method == AuthMethod.CHAP:
            if not self.user:
                raise ValueError("CHAP authentication requires a user name")
            if self.secret is None:
                raise ValueError("CHAP authentication requires a shared secret")

    @classmethod
    def none(cls) -> "Auth":
        return cls(AuthMethod.NONE)

    @classmethod
    def chap(cls, user: str, secret: str) -> "Auth":
        return cls(AuthMethod.CHAP, user=user, secret=secret)

    @property
    def tag(self) -> str:
        """Return the value stored under the Authentication key."""
        return self.method.value


@dataclass
class Portal:
    """A network address through which a target is reachable.

    The address is also the key of the portal inside its target's portal
    mapping, so it must be unique per target and cannot be empty.
    """

    ADDRESS_KEY = "Address"
    PORT_KEY = "Port"
    HOST_INTERFACE_KEY = "Host Interface"

    address: str
    port: str = ISCSIConstants.DEFAULT_PORT
    host_interface: str = ISCSIConstants.DEFAULT_HOST_INTERFACE

    def __post_init__(self):
        if not self.address:
            raise ValueError("Portal address cannot be empty")

    def to_dict(self) -> Dict[str, str]:
        return {
            self.ADDRESS_KEY: self.address,
            self.PORT_KEY: str(self.port),
            self.HOST_INTERFACE_KEY: self.host_interface,
        }

    @classmethod
    def from_dict(cls, node) -> Optional["Portal"]:
        """Create Portal from its stored mapping, or None if not configured."""
        if _is_unset(node) or not isinstance(node, Mapping):
            return None
        if not node.get(cls.ADDRESS_KEY):
            return None
        return cls(
            address=node[cls.ADDRESS_KEY],
            port=node.get(cls.PORT_KEY, ISCSIConstants.DEFAULT_PORT),
            host_interface=node.get(
                cls.HOST_INTERFACE_KEY, ISCSIConstants.DEFAULT_HOST_INTERFACE
            ),
        )


@dataclass
class Target:
    """Domain description of a remote target node.

    Example:
        Target(iqn="iqn.2020-01.com.example:target0", alias="backup")
    """

    IQN_KEY = "Target Name"
    ALIAS_KEY = "Target Alias"

    iqn: str
    alias: str = ""

    def __post_init__(self):
        if not self.iqn:
            raise ValueError("Target qualified name cannot be empty")

    def to_dict(self) -> Dict[str, str]:
        return {self.IQN_KEY: self.iqn, self.ALIAS_KEY: self.alias}

    @classmethod
    def from_dict(cls, node) -> Optional["Target"]:
        if _is_unset(node) or not isinstance(node, Mapping):
            return None
        if not node.get(cls.IQN_KEY):
            return None
        return cls(iqn=node[cls.IQN_KEY], alias=node.get(cls.ALIAS_KEY, ""))


@dataclass
class SessionConfig:
    """Session-wide negotiation settings for a target."""

    ERROR_RECOVERY_LEVEL_KEY = "Error Recovery Level"
    PORTAL_GROUP_TAG_KEY = "Target Portal Group Tag"
    MAX_CONNECTIONS_KEY = "Maximum Connections"

    error_recovery_level: int = 0
    target_portal_group_tag: int = 0
    max_connections: int = 1

    def to_dict(self) -> Dict[str, str]:
        return {
            self.ERROR_RECOVERY_LEVEL_KEY: str(self.error_recovery_level),
            self.PORTAL_GROUP_TAG_KEY: str(self.target_portal_group_tag),
            self.MAX_CONNECTIONS_KEY: str(self.max_connections),
        }

    @classmethod
    def from_dict(cls, node) -> Optional["SessionConfig"]:
        if _is_unset(node) or not isinstance(node, Mapping):
            return None
        return cls(
            error_recovery_level=int(node.get(cls.ERROR_RECOVERY_LEVEL_KEY, 0)),
            target_portal_group_tag=int(node.get(cls.PORTAL_GROUP_TAG_KEY, 0)),
            max_connections=int(node.get(cls.MAX_CONNECTIONS_KEY, 1)),
        )


@dataclass
class ConnectionConfig:
    """Per-portal connection settings."""

    HEADER_DIGEST_KEY = "Header Digest"
    DATA_DIGEST_KEY = "Data Digest"

    header_digest: bool = False
    data_digest: bool = False

    def to_dict(self) -> Dict[str, str]:
        return {
            self.HEADER_DIGEST_KEY: _bool_to_str(self.header_digest),
            self.DATA_DIGEST_KEY: _bool_to_str(self.data_digest),
        }

    @classmethod
    def from_dict(cls, node) -> Optional["ConnectionConfig"]:
        if _is_unset(node) or not isinstance(node, Mapping):
            return None
        return cls(
            header_digest=_str_to_bool(node.get(cls.HEADER_DIGEST_KEY, "false")),
            data_digest=_str_to_bool(node.get(cls.DATA_DIGEST_KEY, "false")),
        )


@dataclass
class DiscoveryRecord:
    """Result set of a SendTargets discovery operation.

    Targets map to portal groups, and each portal group tag maps to the
    portals advertised for it:

        {
            "iqn.2020-01.com.example:target0": {
                "1": [Portal("10.0.0.1"), Portal("10.0.0.2")]
            }
        }
    """

    targets: Dict[str, Dict[str, List[Portal]]] = field(default_factory=dict)

    def add_target(self, target_iqn: str) -> None:
        self.targets.setdefault(target_iqn, {})

    def add_portal(self, target_iqn: str, portal_group_tag: str, portal: Portal) -> None:
        """Record a portal under the given target and portal group tag."""
        group = self.targets.setdefault(target_iqn, {}).setdefault(
            str(portal_group_tag), []
        )
        group[:] = [p for p in group if p.address != portal.address]
        group.append(portal)

    def target_iqns(self) -> List[str]:
        return list(self.targets)

    def portal_group_tags(self, target_iqn: str) -> List[str]:
        return list(self.targets.get(target_iqn, {}))

    def portals(self, target_iqn: str, portal_group_tag: str) -> List[Portal]:
        return list(self.targets.get(target_iqn, {}).get(str(portal_group_tag), []))

    def to_dict(self) -> Dict[str, Dict]:
        return {
            target_iqn: {
                tag: {portal.address: portal.to_dict() for portal in portals}
                for tag, portals in groups.items()
            }
            for target_iqn, groups in self.targets.items()
        }

    @classmethod
    def from_dict(cls, node) -> Optional["DiscoveryRecord"]:
        if node is None or not isinstance(node, Mapping):
            return None
        record = cls()
        for target_iqn, groups in node.items():
            record.add_target(target_iqn)
            if not isinstance(groups, Mapping):
                continue
            for tag, portals in groups.items():
                record.targets[target_iqn].setdefault(tag, [])
                if not isinstance(portals, Mapping):
                    continue
                for portal_node in portals.values():
                    portal = Portal.from_dict(portal_node)
                    if portal:
                        record.add_portal(target_iqn, tag, portal)
        return record


@dataclass
class PortalRecord:
    """Typed snapshot of one portal entry of a target."""

    address: str
    portal: Optional[Portal] = None
    connection_config: Optional[ConnectionConfig] = None
    auth_method: AuthMethod = AuthMethod.NONE

    @classmethod
    def from_node(cls, address: str, node) -> "PortalRecord":
        node = node if isinstance(node, Mapping) else {}
        return cls(
            address=address,
            portal=Portal.from_dict(node.get(ISCSIConstants.PORTAL_DATA_KEY)),
            connection_config=ConnectionConfig.from_dict(
                node.get(ISCSIConstants.CONNECTION_CONFIG_KEY)
            ),
            auth_method=AuthMethod.from_tag(node.get(ISCSIConstants.AUTH_KEY)),
        )


@dataclass
class TargetRecord:
    """Typed snapshot of one entry of the Target Nodes namespace."""

    iqn: str
    target: Optional[Target] = None
    session_config: Optional[SessionConfig] = None
    auth_method: AuthMethod = AuthMethod.NONE
    portals: Dict[str, PortalRecord] = field(default_factory=dict)

    @classmethod
    def from_node(cls, iqn: str, node) -> "TargetRecord":
        node = node if isinstance(node, Mapping) else {}
        portals = node.get(ISCSIConstants.PORTALS_KEY)
        if not isinstance(portals, Mapping):
            portals = {}
        return cls(
            iqn=iqn,
            target=Target.from_dict(node.get(ISCSIConstants.TARGET_DATA_KEY)),
            session_config=SessionConfig.from_dict(
                node.get(ISCSIConstants.SESSION_CONFIG_KEY)
            ),
            auth_method=AuthMethod.from_tag(node.get(ISCSIConstants.AUTH_KEY)),
            portals={
                address: PortalRecord.from_node(address, portal_node)
                for address, portal_node in portals.items()
            },
        )


@dataclass
class InitiatorRecord:
    """Typed snapshot of the Initiator Node namespace.

    Name and alias may legitimately be empty strings; the CHAP secret for
    the initiator is looked up under ``name`` in the credential store.
    """

    name: str = ""
    alias: str = ""
    auth_method: AuthMethod = AuthMethod.NONE

    @classmethod
    def from_node(cls, node) -> Optional["InitiatorRecord"]:
        if node is None or not isinstance(node, Mapping):
            return None
        return cls(
            name=node.get(ISCSIConstants.INITIATOR_IQN_KEY, ""),
            alias=node.get(ISCSIConstants.INITIATOR_ALIAS_KEY, ""),
            auth_method=AuthMethod.from_tag(node.get(ISCSIConstants.AUTH_KEY)),
        )
