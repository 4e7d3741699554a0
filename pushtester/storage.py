"""
Local persistence for the Web Push Tester.

KeyValueStore keeps named JSON records in a single file. SecureConfigStore
stores the PersistedConfig record in it with the VAPID private key encrypted.
"""

import os
import json
import logging
import tempfile
import threading
from typing import Any, Dict, Optional

from .crypto import CryptoManager
from .models import PersistedConfig
from .utils import restrict_to_owner
from . import config

logger = logging.getLogger(__name__)


def default_store_path() -> str:
    """Path of the key/value store file in the user's configuration directory."""
    return os.path.join(config.CONFIG_DIR, config.STORE_FILE_NAME)


class KeyValueStore:
    """Named JSON records in one file. Every write replaces the file atomically."""

    def __init__(self, filepath: Optional[str] = None):
        self.filepath = filepath or default_store_path()
        self._lock = threading.Lock()

    def _read_all(self) -> Dict[str, Any]:
        if not os.path.exists(self.filepath):
            return {}
        with open(self.filepath, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except ValueError as e:
                logger.warning(f"Store file {self.filepath} is not valid JSON, treating it as empty: {e}")
                return {}
        if not isinstance(data, dict):
            logger.warning(f"Store file {self.filepath} does not hold an object, treating it as empty")
            return {}
        return data

    def _write_all(self, data: Dict[str, Any]) -> None:
        directory = os.path.dirname(self.filepath)
        if directory:
            os.makedirs(directory, exist_ok=True)

        # Unique per writer and created 0600, so concurrent savers never share it
        fd, tmp_path = tempfile.mkstemp(
            dir=directory or None,
            prefix=os.path.basename(self.filepath) + '.',
            suffix='.tmp'
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
                f.flush()
                os.fsync(f.fileno())

            # Readers see either the old file or the new one
            os.replace(tmp_path, self.filepath)

            if not restrict_to_owner(self.filepath):
                logger.warning(f"Failed to set secure file permissions for store: {self.filepath}")
        except Exception as e:
            logger.error(f"Error writing store file {self.filepath}: {e}", exc_info=True)
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def get(self, name: str) -> Any:
        with self._lock:
            return self._read_all().get(name)

    def set(self, name: str, value: Any) -> None:
        with self._lock:
            data = self._read_all()
            data[name] = value
            self._write_all(data)

    def delete(self, name: str) -> None:
        with self._lock:
            data = self._read_all()
            if name in data:
                del data[name]
                self._write_all(data)


class SecureConfigStore:
    """
    Persists PersistedConfig with only vapid.privateKey encrypted.

    load() and save() never raise. A record whose private key cannot be
    decrypted is deleted and an empty config returned in its place.
    """

    def __init__(self, store: Optional[KeyValueStore] = None,
                 crypto: Optional[CryptoManager] = None,
                 record_name: str = config.CONFIG_RECORD_NAME):
        self.store = store or KeyValueStore()
        self.crypto = crypto or CryptoManager()
        self.record_name = record_name

    def load(self) -> PersistedConfig:
        """Read the stored config, decrypting the private key."""
        try:
            saved = self.store.get(self.record_name)
        except Exception as e:
            logger.error(f"Load: could not read config store: {e}", exc_info=True)
            return PersistedConfig()

        if saved is None:
            return PersistedConfig()
        if not isinstance(saved, dict):
            logger.warning("Load: stored config is not an object, resetting")
            self._reset()
            return PersistedConfig()

        vapid = saved.get('vapid')
        if isinstance(vapid, dict) and vapid.get('privateKey'):
            private_key = self.crypto.decrypt_field(vapid['privateKey'])
            if private_key is None:
                logger.warning("Load: stored private key could not be decrypted, resetting config")
                self._reset()
                return PersistedConfig()
            saved = dict(saved, vapid=dict(vapid, privateKey=private_key))

        try:
            return PersistedConfig.from_dict(saved)
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning(f"Load: stored config has an unexpected shape, resetting: {e}")
            self._reset()
            return PersistedConfig()

    def save(self, persisted: PersistedConfig) -> bool:
        """
        Replace the stored config with `persisted`. No field-level merge: a
        field absent from `persisted` is absent after the save.

        Returns:
            True if the record was written
        """
        data = persisted.to_dict()
        try:
            if persisted.vapid is not None and persisted.vapid.private_key:
                data['vapid']['privateKey'] = self.crypto.encrypt_field(persisted.vapid.private_key)
            self.store.set(self.record_name, data)
        except Exception as e:
            logger.error(f"Save: could not write config store: {e}")
            return False
        return True

    def clear(self) -> bool:
        """Delete the stored config."""
        return self._reset()

    def _reset(self) -> bool:
        try:
            self.store.delete(self.record_name)
        except Exception as e:
            logger.error(f"Could not delete stored config: {e}")
            return False
        return True
