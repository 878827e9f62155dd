import json
from typing import Any, Optional

import redis

from app.core.logger import logger
from app.scripts.json_utils import json_serializer


class CacheManager:
    def __init__(self, prefix: str = "", client: Optional[redis.Redis] = None):
        self.prefix = prefix.rstrip(":")
        self._client = client

    @property
    def client(self) -> redis.Redis:
        # resolved lazily so importing a service never opens a connection
        if self._client is None:
            from app.core.redis_client import redis_client
            self._client = redis_client
        return self._client

    def _build_key(self, *parts: Any) -> str:
        """builds a cache key: quotes:AAPL or history:AAPL:30"""
        segments = [self.prefix]
        segments.extend(str(p) for p in parts if p is not None)
        return ":".join(segments)

    def get(self, *parts):
        key = self._build_key(*parts)
        try:
            data = self.client.get(key)
        except redis.RedisError as e:
            logger.warning(f"Cache read failed for {key}: {e}")
            return None
        if data:
            logger.debug(f"Cache hit: {key}")
            return json.loads(data)
        logger.debug(f"Cache miss: {key}")
        return None

    def set(self, data: Any, *parts, ttl: int = 300):
        key = self._build_key(*parts)
        try:
            self.client.set(key, json.dumps(data, default=json_serializer), ex=ttl)
        except redis.RedisError as e:
            logger.warning(f"Cache write failed for {key}: {e}")
            return
        logger.debug(f"Cache set: {key} (TTL={ttl}s)")
