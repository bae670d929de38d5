# SPDX-License-Identifier: Apache-2.0

"""
Redis counter store for rate limiting.

Every operation fails soft: when Redis is not configured or unreachable the
service logs and reports unavailability instead of raising, and the rate
limiter lets requests through.
"""

import os
from typing import Optional, Dict, Any
import redis
from opentelemetry import trace
import logging

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)

NO_EXPIRY = -1


class RedisService:
    """redis-py client wrapper exposing the counter operations the API needs."""

    def __init__(self, redis_url: Optional[str] = None, client: Optional[redis.Redis] = None):
        """
        Args:
            redis_url: Redis connection URL (redis://host:port/db), REDIS_URL when omitted
            client: Pre-built client, used as is
        """
        self.redis_url = redis_url or os.getenv("REDIS_URL")
        self.client = client if client is not None else self._connect()

    def _connect(self) -> Optional[redis.Redis]:
        if not self.redis_url:
            logger.warning("REDIS_URL not set, rate limiting disabled")
            return None

        client = redis.from_url(self.redis_url, decode_responses=True)
        try:
            client.ping()
        except redis.RedisError as e:
            logger.error(f"Redis unreachable at {self.redis_url}, rate limiting disabled: {e}")
            return None

        logger.info(f"Connected to Redis at {self.redis_url}")
        return client

    def is_available(self) -> bool:
        return self.client is not None

    def increment_with_ttl(self, key: str, ttl_seconds: int) -> Optional[int]:
        """
        Increment a window counter and make sure it expires.

        The TTL is applied whenever the key has none, which also repairs a
        counter whose first EXPIRE was lost.

        Returns:
            The counter value after incrementing, or None if Redis is unavailable
        """
        if not self.is_available():
            return None

        with tracer.start_as_current_span("redis.increment_with_ttl") as span:
            span.set_attributes({"redis.key": key, "redis.ttl": ttl_seconds})

            try:
                with self.client.pipeline() as pipe:
                    pipe.incr(key)
                    pipe.ttl(key)
                    count, ttl = pipe.execute()

                if ttl == NO_EXPIRY:
                    self.client.expire(key, ttl_seconds)
            except redis.RedisError as e:
                span.set_attribute("redis.result", "error")
                logger.error(f"Redis counter update failed for {key}: {e}")
                return None

            span.set_attribute("redis.result", "success")
            return int(count)

    def health_check(self) -> Dict[str, Any]:
        """Report ``unavailable`` when not configured, otherwise ping."""
        if not self.is_available():
            return {'status': 'unavailable', 'configured': bool(self.redis_url)}

        try:
            self.client.ping()
        except redis.RedisError as e:
            logger.error(f"Redis health check failed: {e}")
            return {'status': 'unhealthy', 'error': str(e)}
        return {'status': 'healthy'}
