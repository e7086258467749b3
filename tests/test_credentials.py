"""
Tests for the credential store implementations.

The keyring backend is never touched: the keyring module functions used by
KeyringSecretStore are patched.
"""

import json

import pytest
from unittest.mock import patch
from keyring.errors import KeyringError, PasswordSetError

from iscsiprefs.config import ISCSIErrorCode
from iscsiprefs.credentials import CHAPSecret, InMemorySecretStore, KeyringSecretStore
from iscsiprefs.exceptions import ISCSIError, SecretStoreError

from conftest import TARGET_IQN


class TestInMemorySecretStore:
    def test_round_trip(self):
        store = InMemorySecretStore()
        store.set_chap_secret(TARGET_IQN, "alice", "s3cret")
        assert store.copy_chap_secret(TARGET_IQN) == CHAPSecret("alice", "s3cret")

    def test_missing_entry(self):
        with pytest.raises(SecretStoreError) as exc_info:
            InMemorySecretStore().copy_chap_secret(TARGET_IQN)
        assert exc_info.value.code == ISCSIErrorCode.SECRET_NOT_FOUND
        assert exc_info.value.node_iqn == TARGET_IQN
        assert isinstance(exc_info.value, ISCSIError)


class TestKeyringSecretStore:
    @patch("iscsiprefs.credentials.keyring.set_password")
    def test_set_writes_json_payload(self, mock_set):
        KeyringSecretStore().set_chap_secret(TARGET_IQN, "alice", "s3cret")

        service, username, payload = mock_set.call_args[0]
        assert service == "iSCSI CHAP"
        assert username == TARGET_IQN
        assert json.loads(payload) == {"account": "alice", "secret": "s3cret"}

    @patch("iscsiprefs.credentials.keyring.get_password")
    def test_copy_decodes_payload(self, mock_get):
        mock_get.return_value = json.dumps({"account": "alice", "secret": "s3cret"})

        secret = KeyringSecretStore().copy_chap_secret(TARGET_IQN)

        assert secret == CHAPSecret("alice", "s3cret")
        mock_get.assert_called_once_with("iSCSI CHAP", TARGET_IQN)

    @patch("iscsiprefs.credentials.keyring.get_password", return_value=None)
    def test_missing_entry(self, mock_get):
        with pytest.raises(SecretStoreError) as exc_info:
            KeyringSecretStore().copy_chap_secret(TARGET_IQN)
        assert exc_info.value.code == ISCSIErrorCode.SECRET_NOT_FOUND

    @pytest.mark.parametrize("payload", [
        "not json",
        json.dumps({"account": "alice"}),
        "[]",
        json.dumps({"account": "", "secret": "s"}),
        json.dumps({"account": 7, "secret": "s"}),
        json.dumps({"account": "alice", "secret": None}),
    ])
    def test_malformed_entry(self, payload):
        with patch("iscsiprefs.credentials.keyring.get_password", return_value=payload):
            with pytest.raises(SecretStoreError) as exc_info:
                KeyringSecretStore().copy_chap_secret(TARGET_IQN)
        assert exc_info.value.code == ISCSIErrorCode.SECRET_MALFORMED

    @patch("iscsiprefs.credentials.keyring.get_password", side_effect=KeyringError("locked"))
    def test_backend_failure_on_read(self, mock_get):
        with pytest.raises(SecretStoreError) as exc_info:
            KeyringSecretStore().copy_chap_secret(TARGET_IQN)
        assert exc_info.value.code == ISCSIErrorCode.SECRET_BACKEND_FAILURE

    @patch("iscsiprefs.credentials.keyring.set_password", side_effect=PasswordSetError("denied"))
    def test_backend_failure_on_write(self, mock_set):
        with pytest.raises(SecretStoreError) as exc_info:
            KeyringSecretStore().set_chap_secret(TARGET_IQN, "alice", "s3cret")
        assert exc_info.value.code == ISCSIErrorCode.SECRET_BACKEND_FAILURE

    def test_custom_service_name(self):
        with patch("iscsiprefs.credentials.keyring.get_password", return_value=None) as mock_get:
            with pytest.raises(SecretStoreError):
                KeyringSecretStore(service_name="test").copy_chap_secret(TARGET_IQN)
        mock_get.assert_called_once_with("test", TARGET_IQN)
