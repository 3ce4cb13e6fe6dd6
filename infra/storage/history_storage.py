from __future__ import annotations

import os
from typing import Any

import redis
import structlog

from core.config import Settings
from domain.errors import StorageUnavailableError
from domain.history import HistoryStorage
from infra.cache.redis import make_redis_client


log = structlog.get_logger(__name__)


class MemoryHistoryStorage:
    def __init__(self, raw: str | None = None) -> None:
        self.raw = raw

    def load(self) -> str | None:
        return self.raw

    def save(self, raw: str) -> None:
        self.raw = raw

    def clear(self) -> None:
        self.raw = None


class FileHistoryStorage:
    """One JSON file per key under a local data directory."""

    def __init__(self, base_dir: str, key: str = "health_history") -> None:
        self.base_dir = os.path.abspath(base_dir)
        self.path = os.path.join(self.base_dir, f"{key}.json")

    def load(self) -> str | None:
        try:
            with open(self.path, encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            log.warning("history_read_failed", path=self.path, error=str(e))
            return None

    def save(self, raw: str) -> None:
        tmp = self.path + ".tmp"
        try:
            os.makedirs(self.base_dir, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(raw)
            os.replace(tmp, self.path)
        except OSError as e:
            raise StorageUnavailableError(f"cannot write {self.path}: {e}") from e

    def clear(self) -> None:
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageUnavailableError(f"cannot remove {self.path}: {e}") from e


class RedisHistoryStorage:
    def __init__(self, client: Any, key: str = "health_history") -> None:
        self.client = client
        self.key = key

    def load(self) -> str | None:
        try:
            return self.client.get(self.key)
        except redis.RedisError as e:
            log.warning("history_read_failed", key=self.key, error=str(e))
            return None

    def save(self, raw: str) -> None:
        try:
            self.client.set(self.key, raw)
        except redis.RedisError as e:
            raise StorageUnavailableError(f"redis set failed: {e}") from e

    def clear(self) -> None:
        try:
            self.client.delete(self.key)
        except redis.RedisError as e:
            raise StorageUnavailableError(f"redis delete failed: {e}") from e


def make_history_storage(settings: Settings) -> HistoryStorage:
    backend = settings.history_backend.lower().strip()
    if backend == "memory":
        return MemoryHistoryStorage()
    if backend == "redis":
        return RedisHistoryStorage(make_redis_client(settings.redis_url), key=settings.history_key)
    if backend != "file":
        log.warning("history_backend_unknown", backend=backend, fallback="file")
    return FileHistoryStorage(settings.history_dir, key=settings.history_key)
