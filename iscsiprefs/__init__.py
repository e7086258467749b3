"""
iSCSI Initiator Configuration Library

This module provides persistent configuration storage for an iSCSI initiator:
remote targets and their portals, discovery results and the local initiator's
identity, with CHAP secrets delegated to a secure credential store.

Main Classes:
    ISCSIPropertyList: High-level configuration interface
    ConfigCache: Per-namespace in-memory cache with modified flags
    Synchronizer: Cache/preference store reconciliation
    PreferenceStore: Backing store interface (in-memory and plist implementations)
    SecretStore: Credential store interface (in-memory and keyring implementations)

Exceptions:
    ISCSIError: Base exception for iSCSI configuration operations

Enums:
    AuthMethod: Authentication methods
    Namespace: Configuration namespaces
    ISCSIErrorCode: Credential store error classification
"""

from .constants import ISCSIConstants
from .exceptions import ISCSIError, PreferenceStoreError, SecretStoreError
from .config import (
    Auth, AuthMethod, ConnectionConfig, DiscoveryRecord, ISCSIErrorCode,
    InitiatorRecord, Portal, PortalRecord, SessionConfig, Target, TargetRecord
)
from .cache import ConfigCache, Namespace
from .preferences import InMemoryPreferenceStore, PlistPreferenceStore, PreferenceStore
from .credentials import CHAPSecret, InMemorySecretStore, KeyringSecretStore, SecretStore
from .sync import Synchronizer
from .property_list import ISCSIPropertyList

__all__ = [
    'ISCSIPropertyList',
    'ConfigCache',
    'Namespace',
    'Synchronizer',
    'PreferenceStore',
    'InMemoryPreferenceStore',
    'PlistPreferenceStore',
    'SecretStore',
    'InMemorySecretStore',
    'KeyringSecretStore',
    'CHAPSecret',
    'ISCSIError',
    'PreferenceStoreError',
    'SecretStoreError',
    'ISCSIErrorCode',
    'ISCSIConstants',
    'Auth',
    'AuthMethod',
    'Portal',
    'PortalRecord',
    'Target',
    'TargetRecord',
    'SessionConfig',
    'ConnectionConfig',
    'DiscoveryRecord',
    'InitiatorRecord'
]
