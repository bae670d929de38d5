# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Rate limiting middleware for API endpoints.
Provides fixed-window rate limiting with a Redis counter backend.

A global limit applies to every request per client; individual endpoints can
add a stricter limit with the ``rate_limit`` decorator. Without Redis the
limiter fails open.
"""

from functools import wraps
from flask import Flask, current_app, request, g
from typing import Dict, Any, Optional, Callable
import time
import logging

from middleware.error_handler import RateLimitException

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE = "Too many requests, please try again later."


class RateLimiter:
    """Redis-based rate limiter with fixed window algorithm."""

    def __init__(self, redis_service, limit: int, window_seconds: int = 900,
                 endpoint: str = "global"):
        self.redis_service = redis_service
        self.limit = limit
        self.window_seconds = window_seconds
        self.endpoint = endpoint

    @staticmethod
    def get_client_identifier() -> str:
        """Identify the caller by remote address."""
        return f"ip:{request.remote_addr or 'unknown'}"

    def get_rate_limit_key(self, identifier: str, now: Optional[float] = None) -> str:
        """
        Generate Redis key for the current window.

        Args:
            identifier: Client identifier
            now: Current epoch seconds

        Returns:
            Redis key for rate limiting
        """
        window_start = int(now if now is not None else time.time()) // self.window_seconds
        return f"rate_limit:{identifier}:{self.endpoint}:{window_start}"

    def check_rate_limit(self, identifier: str) -> Dict[str, Any]:
        """
        Count this request and report whether it is within the limit.

        Args:
            identifier: Client identifier

        Returns:
            Dictionary with rate limit status
        """
        now = time.time()
        window_start = int(now) // self.window_seconds
        reset_time = (window_start + 1) * self.window_seconds

        count = None
        if self.redis_service is not None:
            count = self.redis_service.increment_with_ttl(
                self.get_rate_limit_key(identifier, now),
                self.window_seconds
            )

        if count is None:
            # Fail open - allow request if Redis is unavailable
            return {
                'allowed': True,
                'limit': self.limit,
                'remaining': self.limit,
                'reset_time': reset_time,
                'retry_after': 0,
                'enforced': False
            }

        allowed = count <= self.limit
        return {
            'allowed': allowed,
            'limit': self.limit,
            'remaining': max(0, self.limit - count),
            'reset_time': reset_time,
            'retry_after': 0 if allowed else max(1, reset_time - int(now)),
            'enforced': True
        }

    def enforce(self, message: str = DEFAULT_MESSAGE) -> Dict[str, Any]:
        """Check the current request; raise RateLimitException when over the limit."""
        identifier = self.get_client_identifier()
        info = self.check_rate_limit(identifier)
        _remember(info)

        logger.debug(
            "Rate limit check",
            extra={
                'identifier': identifier,
                'endpoint': self.endpoint,
                'limit': self.limit,
                'remaining': info['remaining'],
                'allowed': info['allowed']
            }
        )

        if not info['allowed']:
            logger.warning(
                "Rate limit exceeded",
                extra={
                    'identifier': identifier,
                    'endpoint': self.endpoint,
                    'limit': self.limit,
                    'retry_after': info['retry_after']
                }
            )
            raise RateLimitException(message, info['retry_after'])

        return info


def _remember(info: Dict[str, Any]) -> None:
    """Keep the tightest enforced limit of this request for the response headers."""
    if not info['enforced']:
        return
    current = g.get('rate_limit_info')
    if current is None or info['remaining'] <= current['remaining']:
        g.rate_limit_info = info


def add_rate_limit_headers(response, rate_limit_info: Dict[str, Any]):
    """
    Add rate limit headers to response.

    Args:
        response: Flask response object
        rate_limit_info: Rate limit information
    """
    response.headers['X-RateLimit-Limit'] = str(rate_limit_info['limit'])
    response.headers['X-RateLimit-Remaining'] = str(rate_limit_info['remaining'])
    response.headers['X-RateLimit-Reset'] = str(rate_limit_info['reset_time'])

    if rate_limit_info['retry_after'] > 0:
        response.headers['Retry-After'] = str(rate_limit_info['retry_after'])

    return response


def configure_rate_limiting(app: Flask, limit: int, window_seconds: int) -> None:
    """
    Apply a per-client limit to every request of the application.

    Args:
        app: Flask application
        limit: Maximum requests per window
        window_seconds: Window length in seconds
    """

    @app.before_request
    def enforce_global_rate_limit():
        if request.method == 'OPTIONS':
            return None
        limiter = RateLimiter(
            getattr(current_app, 'redis_service', None),
            limit,
            window_seconds
        )
        limiter.enforce()
        return None

    @app.after_request
    def add_rate_limit_headers_to_response(response):
        info = g.get('rate_limit_info')
        if info is not None:
            add_rate_limit_headers(response, info)
        return response


def rate_limit(
    limit: int,
    window_seconds: int = 900,
    endpoint: Optional[str] = None,
    message: str = DEFAULT_MESSAGE,
    config_key: Optional[str] = None
):
    """
    Decorator for rate limiting endpoints.

    Args:
        limit: Maximum requests allowed
        window_seconds: Time window in seconds
        endpoint: Custom endpoint identifier
        message: Error message for callers over the limit
        config_key: App config entry that overrides ``limit`` when set

    Returns:
        Decorator function
    """
    def decorator(f: Callable) -> Callable:
        @wraps(f)
        def decorated_function(*args, **kwargs):
            limiter = RateLimiter(
                getattr(current_app, 'redis_service', None),
                current_app.config.get(config_key, limit) if config_key else limit,
                window_seconds,
                endpoint or request.endpoint or f.__name__
            )
            limiter.enforce(message)
            return f(*args, **kwargs)

        return decorated_function
    return decorator
