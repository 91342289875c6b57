"""
Identity Store

Durable device id and session counter, kept in a QSettings-style key-value store.
"""

import logging
import threading
import uuid
from typing import Any, Dict, Optional

from PyQt6.QtCore import QSettings

from .errors import StorageUnavailable

log = logging.getLogger(__name__)


class MemorySettings:
    """Dict-backed stand-in for QSettings (tests, throwaway sessions)"""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._values = dict(initial or {})
        self._status = QSettings.Status.NoError
        self.sync_count = 0

    def value(self, key: str, defaultValue: Any = None, type: Optional[type] = None) -> Any:
        if key not in self._values:
            return defaultValue
        raw = self._values[key]
        return type(raw) if type is not None else raw

    def setValue(self, key: str, value: Any):
        self._values[key] = value

    def contains(self, key: str) -> bool:
        return key in self._values

    def remove(self, key: str):
        self._values.pop(key, None)

    def sync(self):
        self.sync_count += 1

    def status(self) -> QSettings.Status:
        return self._status

    def set_status(self, status: QSettings.Status):
        """Force a status, e.g. QSettings.Status.AccessError to simulate a broken disk"""
        self._status = status


class IdentityStore:
    """Persisted client identity and first-open/session counter"""

    DEVICE_ID_KEY = "c2s_device_id"
    COUNTER_KEY = "c2s_counter"

    def __init__(self, settings):
        """
        Initialize identity store

        Args:
            settings: QSettings (or MemorySettings) holding the persisted keys
        """
        self.settings = settings
        self._lock = threading.RLock()

    def _check(self, action: str):
        status = self.settings.status()
        if status != QSettings.Status.NoError:
            raise StorageUnavailable(f"cannot {action} reporting state ({status.name})")

    def _write(self, key: str, value: Any):
        self.settings.setValue(key, value)
        self.settings.sync()
        self._check("write")

    def get_device_id(self) -> str:
        """Return the persisted device id, generating it on first use"""
        with self._lock:
            self._check("read")
            device_id = self.settings.value(self.DEVICE_ID_KEY, "", type=str)
            if not device_id:
                device_id = str(uuid.uuid4())
                self._write(self.DEVICE_ID_KEY, device_id)
                log.info("Generated device id: %s", device_id)
            return device_id

    def get_counter(self) -> int:
        with self._lock:
            self._check("read")
            return self.settings.value(self.COUNTER_KEY, 0, type=int)

    def set_counter(self, value: int):
        if value < 0:
            raise ValueError(f"session counter cannot be negative: {value}")
        with self._lock:
            self._write(self.COUNTER_KEY, value)

    def increment_counter(self) -> int:
        """
        Increment and persist the session counter as one step

        Returns:
            The counter value after the increment
        """
        with self._lock:
            value = self.get_counter() + 1
            self._write(self.COUNTER_KEY, value)
            return value
