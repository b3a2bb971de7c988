"""Full-replacement snapshots of users and maps for low-latency readers.

Each job reads one narrow projection and overwrites a single cache key with
the whole result as a JSON array. Nothing is merged: the last writer wins.
"""

from __future__ import annotations

import json
import time
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from logging_config import get_logger
from repositories.snapshot_repository import fetch_map_projection, fetch_user_projection

USERS_CACHE_KEY = "users"
MAPS_CACHE_KEY = "maps"

logger = get_logger(__name__)


@runtime_checkable
class CacheStore(Protocol):
    """The subset of a Redis client the snapshot jobs need."""

    def set(self, name: str, value: str) -> Any: ...


class SnapshotCache:
    """Project users and maps from storage into a key-value cache."""

    def __init__(self, *, session_factory: sessionmaker[Session], cache: CacheStore) -> None:
        self.session_factory = session_factory
        self.cache = cache

    def refresh(self) -> None:
        """Rebuild both snapshots."""
        self.save_users()
        self.save_maps()

    def try_refresh(self) -> bool:
        """Rebuild both snapshots, logging instead of raising on cache or database faults.

        Returns False when the refresh failed; ingestion carries on either way.
        """
        try:
            self.refresh()
        except (RedisError, SQLAlchemyError) as exc:
            logger.warning("snapshot_failed", error=type(exc).__name__, message=str(exc))
            return False
        return True

    def save_users(self) -> int:
        return self._save(USERS_CACHE_KEY, fetch_user_projection)

    def save_maps(self) -> int:
        return self._save(MAPS_CACHE_KEY, fetch_map_projection)

    def _save(self, key: str, fetch: Callable[[Session], list[dict[str, Any]]]) -> int:
        started = time.perf_counter()
        with self.session_factory() as session:
            rows = fetch(session)

        self.cache.set(key, json.dumps(rows, separators=(",", ":")))
        logger.info(
            "snapshot_saved",
            key=key,
            rows=len(rows),
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return len(rows)


__all__ = ["CacheStore", "MAPS_CACHE_KEY", "SnapshotCache", "USERS_CACHE_KEY"]
