"""
Preference Store Interface Module

This module provides the backing stores for the initiator configuration. A
preference store persists named nested mappings for one application scope
and follows a stage-then-commit model:

- copy_value() returns a deep, mutable copy of a stored value
- set_value() stages a new value (None removes the key)
- synchronize() makes staged values durable

Two implementations are provided. InMemoryPreferenceStore keeps everything in
process memory and is used for tests and ephemeral configurations.
PlistPreferenceStore keeps one property-list file per application id.
"""

import copy
import logging
import os
import plistlib
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from .constants import ISCSIConstants
from .exceptions import PreferenceStoreError


class PreferenceStore(ABC):
    """Abstract preference store for one application scope."""

    @abstractmethod
    def copy_value(self, key: str) -> Optional[Dict[str, Any]]:
        """Return a mutable deep copy of the value stored under ``key``, or None."""

    @abstractmethod
    def set_value(self, key: str, value: Optional[Dict[str, Any]]) -> None:
        """Stage ``value`` under ``key``, overwriting any previous value.

        A value of None removes the key.
        """

    @abstractmethod
    def synchronize(self) -> None:
        """Commit staged values to durable storage."""


class InMemoryPreferenceStore(PreferenceStore):
    """Preference store held entirely in process memory.

    Several property lists may share one instance to simulate separate
    processes writing the same preferences.

    Attributes:
        commit_count: Number of synchronize() calls seen so far
    """

    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self._values = copy.deepcopy(values) if values else {}
        self.commit_count = 0
        self.logger = logging.getLogger(__name__)

    def copy_value(self, key: str) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._values.get(key))

    def set_value(self, key: str, value: Optional[Dict[str, Any]]) -> None:
        if value is None:
            self._values.pop(key, None)
        else:
            self._values[key] = copy.deepcopy(value)
        self.logger.debug("Staged preference '%s'", key)

    def synchronize(self) -> None:
        self.commit_count += 1

    def keys(self):
        return list(self._values)


class PlistPreferenceStore(PreferenceStore):
    """Preference store backed by a property-list file.

    Values live in ``<directory>/<app_id>.plist``. Staged changes are kept in
    memory until synchronize(), which re-reads the file, applies the staged
    changes on top and atomically replaces the file. Keys this process never
    staged are therefore preserved even if another process changed them.

    Attributes:
        path: Absolute path of the property-list file
    """

    _REMOVED = object()

    def __init__(self, directory: str = ISCSIConstants.DEFAULT_PREFERENCES_DIR,
                 app_id: str = ISCSIConstants.APP_ID):
        self.path = Path(directory) / f"{app_id}.plist"
        self._pending: Dict[str, Any] = {}
        self.logger = logging.getLogger(__name__)

    def _read_file(self) -> Dict[str, Any]:
        """Load the whole property list, treating a missing file as empty.

        Raises:
            PreferenceStoreError: On read or parse failures
        """
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "rb") as f:
                data = plistlib.load(f)
        except (OSError, plistlib.InvalidFileException, ValueError) as e:
            raise PreferenceStoreError(f"Error reading preferences from {self.path}: {e}")

        if not isinstance(data, dict):
            raise PreferenceStoreError(f"Preferences file {self.path} does not hold a dictionary")
        return data

    def _write_file(self, data: Dict[str, Any]) -> None:
        """Atomically replace the property-list file with ``data``."""
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", dir=str(self.path.parent)
            )
            with os.fdopen(fd, "wb") as f:
                plistlib.dump(data, f)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except (OSError, TypeError, OverflowError) as e:
            raise PreferenceStoreError(f"Error writing preferences to {self.path}: {e}")
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

    def copy_value(self, key: str) -> Optional[Dict[str, Any]]:
        if key in self._pending:
            value = self._pending[key]
            return None if value is self._REMOVED else copy.deepcopy(value)
        return self._read_file().get(key)

    def set_value(self, key: str, value: Optional[Dict[str, Any]]) -> None:
        self._pending[key] = self._REMOVED if value is None else copy.deepcopy(value)
        self.logger.debug("Staged preference '%s' for %s", key, self.path)

    def synchronize(self) -> None:
        if not self._pending:
            return

        data = self._read_file()
        for key, value in self._pending.items():
            if value is self._REMOVED:
                data.pop(key, None)
            else:
                data[key] = value

        self._write_file(data)
        self.logger.debug("Wrote %d preference key(s) to %s", len(self._pending), self.path)
        self._pending.clear()
