"""
Pytest configuration and shared fixtures for the iSCSI configuration library tests.
"""

import pytest
import sys
from pathlib import Path

# Add the package to Python path for testing
test_dir = Path(__file__).parent
package_root = test_dir.parent
sys.path.insert(0, str(package_root))

from iscsiprefs import (  # noqa: E402
    InMemoryPreferenceStore, InMemorySecretStore, ISCSIPropertyList, Portal, Target
)

TARGET_IQN = "iqn.2020-01.com.example:target0"
PORTAL_ADDRESS = "10.0.0.1:3260"
INITIATOR_IQN = "iqn.2015-01.com.example:initiator"


@pytest.fixture
def preference_store():
    """Empty in-memory preference store."""
    return InMemoryPreferenceStore()


@pytest.fixture
def secret_store():
    """Empty in-memory credential store."""
    return InMemorySecretStore()


@pytest.fixture
def plist(preference_store, secret_store):
    """Property list wired to the in-memory stores."""
    return ISCSIPropertyList(preference_store, secret_store)


@pytest.fixture
def sample_target():
    return Target(iqn=TARGET_IQN, alias="backup")


@pytest.fixture
def sample_portal():
    return Portal(address=PORTAL_ADDRESS, port="3260", host_interface="en0")


@pytest.fixture
def stored_targets():
    """Target Nodes value as written by an earlier process."""
    return {
        TARGET_IQN: {
            "Target Data": {"Target Name": TARGET_IQN, "Target Alias": "backup"},
            "Session Configuration": {
                "Error Recovery Level": "0",
                "Target Portal Group Tag": "1",
                "Maximum Connections": "2",
            },
            "Authentication": "None",
            "Portals": {
                PORTAL_ADDRESS: {
                    "Portal Data": {
                        "Address": PORTAL_ADDRESS,
                        "Port": "3260",
                        "Host Interface": "en0",
                    },
                    "Connection Configuration": {
                        "Header Digest": "true",
                        "Data Digest": "false",
                    },
                    "Authentication": "",
                }
            },
        }
    }
