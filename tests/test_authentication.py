"""
Tests for authentication storage and CHAP secret delegation.
"""

import json
from unittest.mock import Mock, patch

from iscsiprefs import ISCSIPropertyList, InMemorySecretStore, Namespace
from iscsiprefs.config import Auth, AuthMethod, ISCSIErrorCode, Portal
from iscsiprefs.credentials import CHAPSecret, KeyringSecretStore, SecretStore
from iscsiprefs.exceptions import SecretStoreError

from conftest import INITIATOR_IQN, PORTAL_ADDRESS, TARGET_IQN


class TestTargetAuthentication:
    def test_chap_round_trip_through_secret_store(self, plist, secret_store):
        plist.set_portal_for_target(TARGET_IQN, Portal(PORTAL_ADDRESS))
        plist.set_authentication_for_target(TARGET_IQN, Auth.chap("alice", "s3cret"))

        auth = plist.copy_authentication_for_target(TARGET_IQN)

        assert auth.method == AuthMethod.CHAP
        assert auth.user == "alice"
        assert auth.secret == "s3cret"
        assert secret_store.copy_chap_secret(TARGET_IQN).secret == "s3cret"

    def test_secret_is_never_stored_inline(self, plist):
        plist.set_authentication_for_target(TARGET_IQN, Auth.chap("alice", "s3cret"))

        target_info = plist.get_target_info(TARGET_IQN)
        assert target_info == {"Authentication": "CHAP"}
        assert "s3cret" not in repr(plist.get_targets())

    def test_set_authentication_creates_target(self, plist):
        plist.set_authentication_for_target(TARGET_IQN, Auth.none())
        assert plist.contains_target(TARGET_IQN)
        assert plist.cache.is_modified(Namespace.TARGETS)

    def test_missing_target_returns_none(self, plist):
        assert plist.copy_authentication_for_target(TARGET_IQN) is None

    def test_absent_tag_means_no_authentication(self, plist, secret_store):
        plist.get_target_info(TARGET_IQN, True)
        secret_store.copy_chap_secret = Mock()

        assert plist.copy_authentication_for_target(TARGET_IQN) == Auth.none()
        secret_store.copy_chap_secret.assert_not_called()

    def test_missing_secret_degrades_to_none(self, plist):
        plist.get_target_info(TARGET_IQN, True)["Authentication"] = "CHAP"
        assert plist.copy_authentication_for_target(TARGET_IQN) == Auth.none()

    def test_backend_failure_degrades_to_none(self, preference_store):
        secret_store = Mock(spec=SecretStore)
        secret_store.copy_chap_secret.side_effect = SecretStoreError(
            "locked", code=ISCSIErrorCode.SECRET_BACKEND_FAILURE, node_iqn=TARGET_IQN
        )
        plist = ISCSIPropertyList(preference_store, secret_store)
        plist.get_target_info(TARGET_IQN, True)["Authentication"] = "CHAP"

        assert plist.copy_authentication_for_target(TARGET_IQN) == Auth.none()
        secret_store.copy_chap_secret.assert_called_once_with(TARGET_IQN)

    def test_keyring_entry_with_empty_account_degrades_to_none(self, preference_store):
        payload = json.dumps({"account": "", "secret": "s"})
        plist = ISCSIPropertyList(preference_store, KeyringSecretStore())
        plist.get_target_info(TARGET_IQN, True)["Authentication"] = "CHAP"

        with patch("iscsiprefs.credentials.keyring.get_password", return_value=payload):
            assert plist.copy_authentication_for_target(TARGET_IQN) == Auth.none()

    def test_unusable_secret_from_store_degrades_to_none(self, preference_store):
        secret_store = Mock(spec=SecretStore)
        secret_store.copy_chap_secret.return_value = CHAPSecret("", "s")
        plist = ISCSIPropertyList(preference_store, secret_store)
        plist.get_target_info(TARGET_IQN, True)["Authentication"] = "CHAP"

        assert plist.copy_authentication_for_target(TARGET_IQN) == Auth.none()

    def test_none_auth_never_writes_secret(self, plist, secret_store):
        plist.set_authentication_for_target(TARGET_IQN, Auth.chap("alice", "s3cret"))
        assert secret_store.write_count == 1

        plist.set_authentication_for_target(TARGET_IQN, Auth.none())

        assert secret_store.write_count == 1
        assert plist.copy_authentication_for_target(TARGET_IQN) == Auth.none()
        # The old secret is left stale, not deleted
        assert secret_store.copy_chap_secret(TARGET_IQN).user == "alice"

    def test_chap_update_overwrites_secret(self, plist, secret_store):
        plist.set_authentication_for_target(TARGET_IQN, Auth.chap("alice", "s3cret"))
        plist.set_authentication_for_target(TARGET_IQN, Auth.chap("bob", "n3w"))

        assert plist.copy_authentication_for_target(TARGET_IQN) == Auth.chap("bob", "n3w")

    def test_secret_write_failure_still_sets_tag(self, preference_store):
        secret_store = Mock(spec=SecretStore)
        secret_store.set_chap_secret.side_effect = SecretStoreError(
            "denied", code=ISCSIErrorCode.SECRET_BACKEND_FAILURE
        )
        plist = ISCSIPropertyList(preference_store, secret_store)

        plist.set_authentication_for_target(TARGET_IQN, Auth.chap("alice", "s3cret"))

        assert plist.get_target_info(TARGET_IQN)["Authentication"] == "CHAP"
        assert plist.cache.is_modified(Namespace.TARGETS)


class TestInitiatorAuthentication:
    def test_chap_keyed_by_initiator_name(self, plist, secret_store):
        plist.set_initiator_iqn(INITIATOR_IQN)
        plist.set_authentication_for_initiator(Auth.chap("init", "pw"))

        assert INITIATOR_IQN in secret_store
        assert plist.copy_authentication_for_initiator() == Auth.chap("init", "pw")
        assert plist.cache.is_modified(Namespace.INITIATOR)
        assert not plist.cache.is_modified(Namespace.TARGETS)

    def test_renamed_initiator_loses_secret(self, plist):
        plist.set_initiator_iqn(INITIATOR_IQN)
        plist.set_authentication_for_initiator(Auth.chap("init", "pw"))
        plist.set_initiator_iqn("iqn.2015-01.com.example:renamed")

        assert plist.copy_authentication_for_initiator() == Auth.none()

    def test_absent_initiator(self, plist):
        assert plist.copy_authentication_for_initiator() is None

    def test_none_auth(self, plist, secret_store):
        plist.set_authentication_for_initiator(Auth.none())

        assert plist.get_initiator()["Authentication"] == "None"
        assert secret_store.write_count == 0
        assert plist.copy_authentication_for_initiator() == Auth.none()

    def test_separate_secret_stores_are_independent(self, preference_store):
        first = ISCSIPropertyList(preference_store, InMemorySecretStore())
        second = ISCSIPropertyList(preference_store, InMemorySecretStore())
        first.set_authentication_for_target(TARGET_IQN, Auth.chap("alice", "s3cret"))
        second.get_target_info(TARGET_IQN, True)["Authentication"] = "CHAP"

        assert second.copy_authentication_for_target(TARGET_IQN) == Auth.none()
