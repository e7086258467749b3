"""
Constants for iSCSI initiator configuration persistence.

This module contains the preference keys, record keys and tag values that make
up the on-disk schema of the initiator configuration, along with the defaults
used to locate the backing stores.
"""


class ISCSIConstants:
    """Constants for iSCSI configuration storage."""

    # Preference store scope
    APP_ID = "com.github.iscsi-osx.iSCSIInitiator"
    DEFAULT_PREFERENCES_DIR = "/Library/Preferences"

    # Top-level preference keys, one per namespace
    TARGETS_KEY = "Target Nodes"
    DISCOVERY_KEY = "SendTargets Discovery"
    INITIATOR_KEY = "Initiator Node"

    # Keys inside a target entry
    TARGET_DATA_KEY = "Target Data"
    SESSION_CONFIG_KEY = "Session Configuration"
    PORTALS_KEY = "Portals"

    # Keys inside a portal entry
    PORTAL_DATA_KEY = "Portal Data"
    CONNECTION_CONFIG_KEY = "Connection Configuration"
    AUTH_KEY = "Authentication"

    # Keys inside the initiator entry
    INITIATOR_IQN_KEY = "Name"
    INITIATOR_ALIAS_KEY = "Alias"

    # Authentication tag values
    AUTH_NONE = "None"
    AUTH_CHAP = "CHAP"

    # Service tag for every CHAP entry in the secure credential store
    CHAP_SERVICE_NAME = "iSCSI CHAP"

    # Placeholder stored for portal sub-keys that have not been set yet
    EMPTY_VALUE = ""

    # Sub-keys every new portal entry is created with
    PORTAL_SUBKEYS = (AUTH_KEY, CONNECTION_CONFIG_KEY, PORTAL_DATA_KEY)

    DEFAULT_PORT = "3260"
    DEFAULT_HOST_INTERFACE = "default"
