"""
iSCSI Configuration Record Accessors

This package provides the accessors for each namespace of the configuration cache:
- TargetRecords: Targets, portals, session and connection configuration
- InitiatorRecords: Local initiator name, alias and authentication
- DiscoveryRecords: Merged SendTargets discovery overlay
- AuthenticationBoundary: Authentication tags and CHAP secret delegation
"""

from .authentication import AuthenticationBoundary
from .target_records import TargetRecords
from .initiator_records import InitiatorRecords
from .discovery import DiscoveryRecords

__all__ = [
    'AuthenticationBoundary',
    'TargetRecords',
    'InitiatorRecords',
    'DiscoveryRecords'
]
