"""
Namespaced JSON persistence over a key-value backend.
"""

import json
import warnings
from typing import Any, TypeVar

from tms.common.errors import PersistenceWarning
from tms.common.logging_utils import get_logger
from tms.storage.backends import KeyValueBackend

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_KEY_PREFIX = "logipro_tms_"


class PersistentStore:
    """
    Load and save whole collections under namespaced keys.

    ``load`` never raises: absent or corrupt data yields the caller's
    default. ``save`` never raises either: a failed write is logged,
    reported through a ``PersistenceWarning`` and signalled by returning
    ``False``, leaving the caller's in-memory state as it is.
    """

    def __init__(self, backend: KeyValueBackend, prefix: str = DEFAULT_KEY_PREFIX):
        self.backend = backend
        self.prefix = prefix

    def _full_key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def load(self, key: str, default: T) -> T | Any:
        """
        Decode the value stored under ``key``.

        Args:
            key: Unprefixed key, e.g. "shipments"
            default: Value returned when the key is absent or unreadable

        Returns:
            The decoded JSON value, or ``default``
        """
        full_key = self._full_key(key)
        try:
            raw = self.backend.get(full_key)
        except (OSError, ValueError) as e:
            logger.warning("Failed to read stored value", key=full_key, error=str(e))
            return default

        if raw is None or raw.strip() == "":
            return default

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Stored value is not valid JSON, using default", key=full_key, error=str(e))
            return default

    def save(self, key: str, value: Any) -> bool:
        """
        Encode ``value`` as JSON and write it under ``key``.

        Returns:
            True if the write succeeded, False otherwise
        """
        full_key = self._full_key(key)
        try:
            payload = json.dumps(value, default=str)
            self.backend.set(full_key, payload)
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Failed to persist value", key=full_key, error=str(e))
            warnings.warn(f"Could not save {full_key}: {e}", PersistenceWarning, stacklevel=2)
            return False

        logger.debug("Persisted value", key=full_key, size=len(payload))
        return True

    def remove(self, key: str) -> None:
        """Delete the value stored under ``key``; absent keys are ignored."""
        full_key = self._full_key(key)
        try:
            self.backend.delete(full_key)
        except OSError as e:
            logger.warning("Failed to remove stored value", key=full_key, error=str(e))
            warnings.warn(f"Could not remove {full_key}: {e}", PersistenceWarning, stacklevel=2)

    def keys(self) -> list[str]:
        """Unprefixed keys currently held in this namespace."""
        return [k[len(self.prefix):] for k in self.backend.keys() if k.startswith(self.prefix)]
