"""Redis-backed JSON cache.

All operations are wrapped in try/except: a Redis failure never breaks planning,
it just turns into a cache miss.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

log = logging.getLogger(__name__)


class RedisCache:
    def __init__(self, client: Any):
        self._r = client

    @classmethod
    def from_url(cls, url: str) -> Optional["RedisCache"]:
        """Connect and ping.  Returns ``None`` if Redis is unavailable."""
        if not url:
            return None
        try:
            import redis

            client = redis.Redis.from_url(url, decode_responses=True, socket_connect_timeout=3)
            client.ping()
            log.info("Redis connected: %s", url)
            return cls(client)
        except Exception as exc:
            log.warning("Redis unavailable (%s), running without shared cache", exc)
            return None

    def get_json(self, key: str) -> Optional[Any]:
        try:
            raw = self._r.get(key)
            if raw is None:
                return None
            return json.loads(raw)
        except Exception as exc:
            log.debug("Redis get failed for %s: %s", key, exc)
            return None

    def set_json(self, key: str, value: Any, ttl: int) -> None:
        try:
            self._r.set(key, json.dumps(value), ex=ttl)
        except Exception as exc:
            log.debug("Redis set failed for %s: %s", key, exc)
