"""
Config Store
Keeps mark entry configs between the /config and /process calls
"""
import logging
import threading
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional, Tuple

from examflex.config import settings
from examflex.core import mark_entry_logger
from examflex.utils import generate_temp_id

logger = logging.getLogger(__name__)


class ConfigStore:
    """
    In-memory store of configs keyed by an opaque temp_id.

    Entries expire after ttl_seconds and are removed once processed.
    """

    def __init__(self, ttl_seconds: int = None, clock: Callable[[], datetime] = None):
        self.ttl = timedelta(seconds=ttl_seconds if ttl_seconds is not None else settings.CONFIG_TTL_SECONDS)
        self._clock = clock or datetime.now
        self._entries: Dict[str, Tuple[str, Dict[str, Any], datetime]] = {}
        self._lock = threading.Lock()

    def save(self, institute_id: str, config: Dict[str, Any]) -> Tuple[str, datetime]:
        """Store a config; returns (temp_id, expires_at)"""
        expires_at = self._clock() + self.ttl
        with self._lock:
            self._purge_expired()
            temp_id = generate_temp_id()
            while temp_id in self._entries:
                temp_id = generate_temp_id()
            self._entries[temp_id] = (institute_id, config, expires_at)

        mark_entry_logger.info(f"Config stored: temp_id={temp_id}, institute_id={institute_id}, expires_at={expires_at}")
        return temp_id, expires_at

    def get(self, temp_id: str) -> Optional[Dict[str, Any]]:
        """The stored config, or None if unknown or expired"""
        with self._lock:
            entry = self._entries.get(temp_id)
            if entry is None:
                return None
            _, config, expires_at = entry
            if expires_at <= self._clock():
                del self._entries[temp_id]
                return None
            return config

    def delete(self, temp_id: str) -> bool:
        with self._lock:
            return self._entries.pop(temp_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            self._purge_expired()
            return len(self._entries)

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [key for key, (_, _, expires_at) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.info(f"Purged {len(expired)} expired mark entry configs")


# Singleton instance
config_store = ConfigStore()
