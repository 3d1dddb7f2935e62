"""Key-value persistence port and its adapters."""

from __future__ import annotations

import logging
import threading
from typing import Dict, Mapping, Optional, Protocol

import redis

from clinic_backend.errors import StoreError
from clinic_backend.utils.config import Settings

LOGGER = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal text key-value API the record layer persists through."""

    def load(self, key: str) -> Optional[str]:
        ...

    def save(self, key: str, value: str) -> None:
        ...

    def save_many(self, values: Mapping[str, str]) -> None:
        """Write all keys as a single transaction."""
        ...


class RedisKeyValueStore:
    """Redis-backed store."""

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisKeyValueStore":
        return cls(redis.Redis.from_url(url, decode_responses=True))

    def load(self, key: str) -> Optional[str]:
        try:
            return self._client.get(name=key)
        except redis.RedisError as exc:
            LOGGER.error("Redis read failed for key=%s: %s", key, exc)
            raise StoreError(f"Unable to read '{key}' from the store") from exc

    def save(self, key: str, value: str) -> None:
        try:
            self._client.set(name=key, value=value)
        except redis.RedisError as exc:
            LOGGER.error("Redis write failed for key=%s: %s", key, exc)
            raise StoreError(f"Unable to write '{key}' to the store") from exc

    def save_many(self, values: Mapping[str, str]) -> None:
        if not values:
            return

        try:
            with self._client.pipeline(transaction=True) as pipe:
                for key, value in values.items():
                    pipe.set(name=key, value=value)
                pipe.execute()
        except redis.RedisError as exc:
            keys = ", ".join(values)
            LOGGER.error("Redis transaction failed for keys=%s: %s", keys, exc)
            raise StoreError(f"Unable to write {keys} to the store") from exc


class MemoryKeyValueStore:
    """Process-local store for development runs and tests."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def load(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def save(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def save_many(self, values: Mapping[str, str]) -> None:
        with self._lock:
            self._data.update(values)

    def snapshot(self) -> Dict[str, str]:
        """Return a copy of every stored key."""

        with self._lock:
            return dict(self._data)


def create_store(settings: Settings) -> KeyValueStore:
    """Build the store adapter selected by configuration."""

    if settings.store_backend == "memory":
        LOGGER.info("Using in-memory key-value store")
        return MemoryKeyValueStore()

    LOGGER.info("Using Redis key-value store at %s", settings.redis_url)
    return RedisKeyValueStore.from_url(settings.redis_url)
