"""Redis-backed advisory cache."""

import json
import logging
from typing import Any, Optional

import redis

logger = logging.getLogger(__name__)


class Cache:
    """
    Key/value cache with TTLs.

    Entries are advisory: every failure, including a missing Redis, reads as a
    miss and writes are dropped with a warning.
    """

    def __init__(self, client: Optional[redis.Redis]) -> None:
        self.client = client

    @classmethod
    def from_url(cls, url: Optional[str]) -> "Cache":
        """Build a cache from a Redis URL; no URL means no cache."""
        if not url:
            logger.info("No Redis URL configured, running without a cache")
            return cls(None)
        client = redis.Redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=5,
            socket_connect_timeout=5,
        )
        return cls(client)

    def get(self, key: str) -> Optional[str]:
        """Return the cached string, or None on miss or error."""
        if self.client is None:
            return None
        try:
            return self.client.get(key)
        except redis.RedisError as e:
            logger.warning("Redis cache error reading %s: %s", key, e)
            return None

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a string for ttl_seconds."""
        if self.client is None:
            return
        try:
            self.client.setex(key, ttl_seconds, value)
        except redis.RedisError as e:
            logger.warning("Redis cache error writing %s: %s", key, e)

    def get_json(self, key: str) -> Optional[Any]:
        raw = self.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Discarding undecodable cache entry %s: %s", key, e)
            return None

    def set_json(self, key: str, value: Any, ttl_seconds: int) -> None:
        self.set(key, json.dumps(value, default=str), ttl_seconds)

    def close(self) -> None:
        if self.client is not None:
            try:
                self.client.close()
            except redis.RedisError as e:
                logger.warning("Error closing Redis client: %s", e)
