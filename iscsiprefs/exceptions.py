"""
Exception classes for iSCSI configuration operations.

This module defines the exception hierarchy used throughout the iSCSI
preference library. Callers only need to catch ISCSIError to handle any
failure raised by a backing store.
"""


class ISCSIError(Exception):
    """Base exception class for all iSCSI configuration errors.

    Accessor reads never raise for missing configuration; they return None.
    This exception family is reserved for failures of the backing stores:
    - Preference file read, parse or write errors
    - Secure credential store lookups and writes
    """

    pass


class PreferenceStoreError(ISCSIError):
    """Raised when the preference store cannot load or persist a value."""

    pass


class SecretStoreError(ISCSIError):
    """Raised by the raw secret-fetch primitive and by secret writes.

    Attributes:
        code: ISCSIErrorCode classifying the failure
        node_iqn: Qualified name of the node the secret belongs to
    """

    def __init__(self, message: str, code=None, node_iqn: str = None):
        super().__init__(message)
        self.code = code
        self.node_iqn = node_iqn
