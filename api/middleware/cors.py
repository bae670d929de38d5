# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
CORS (Cross-Origin Resource Sharing) for the browser quiz and admin clients.

Origins come from ``CORS_ALLOWED_ORIGINS`` (comma separated). ``*`` admits any
origin and a trailing ``*`` matches by prefix, e.g. ``https://*``.
"""

from flask import Flask, request, make_response
from typing import Dict, Iterable, List, Optional
import os
import logging

logger = logging.getLogger(__name__)

ANY_ORIGIN = '*'


def parse_origins(value: Optional[str]) -> List[str]:
    """Split a comma separated origin list, dropping blanks."""
    return [origin.strip() for origin in (value or '').split(',') if origin.strip()]


class CORSMiddleware:
    """Answers preflight requests and decorates responses for allowed origins."""

    def __init__(
        self,
        app: Flask,
        allowed_origins: Optional[List[str]] = None,
        allowed_methods: Optional[Iterable[str]] = None,
        allowed_headers: Optional[Iterable[str]] = None,
        expose_headers: Optional[Iterable[str]] = None,
        max_age: int = 86400
    ):
        self.app = app
        self.allowed_origins = allowed_origins or parse_origins(os.getenv('CORS_ALLOWED_ORIGINS', ANY_ORIGIN))
        self.static_headers: Dict[str, str] = {
            'Access-Control-Allow-Methods': ', '.join(allowed_methods or ('GET', 'POST', 'OPTIONS', 'HEAD')),
            'Access-Control-Allow-Headers': ', '.join(
                allowed_headers or ('Accept', 'Content-Type', 'X-Requested-With', 'X-Request-ID')
            ),
            'Access-Control-Expose-Headers': ', '.join(expose_headers or (
                'X-Trace-Id',
                'X-RateLimit-Limit',
                'X-RateLimit-Remaining',
                'X-RateLimit-Reset',
                'Retry-After'
            )),
            'Access-Control-Max-Age': str(max_age)
        }

        app.before_request(self.answer_preflight)
        app.after_request(self.decorate_response)

    @property
    def allows_any_origin(self) -> bool:
        return ANY_ORIGIN in self.allowed_origins

    def is_origin_allowed(self, origin: Optional[str]) -> bool:
        """True if ``origin`` matches an allowed origin exactly or by prefix."""
        if not origin:
            return False
        return any(
            allowed == ANY_ORIGIN
            or allowed == origin
            or (allowed.endswith('*') and origin.startswith(allowed[:-1]))
            for allowed in self.allowed_origins
        )

    def add_cors_headers(self, response, origin: str):
        if self.allows_any_origin:
            response.headers['Access-Control-Allow-Origin'] = ANY_ORIGIN
        else:
            response.headers['Access-Control-Allow-Origin'] = origin
            response.headers.add('Vary', 'Origin')
        response.headers.update(self.static_headers)
        return response

    def answer_preflight(self):
        """Short-circuit OPTIONS requests before routing and rate limiting."""
        if request.method != 'OPTIONS':
            return None

        origin = request.headers.get('Origin')
        if not self.is_origin_allowed(origin):
            logger.warning("CORS preflight rejected", extra={"origin": origin, "path": request.path})
            return make_response('', 403)

        return self.add_cors_headers(make_response('', 204), origin)

    def decorate_response(self, response):
        origin = request.headers.get('Origin')
        if not origin or request.method == 'OPTIONS':
            return response

        if self.is_origin_allowed(origin):
            self.add_cors_headers(response, origin)
        else:
            logger.warning("CORS origin not allowed", extra={"origin": origin, "path": request.path})
        return response


def configure_cors(app: Flask, **kwargs) -> CORSMiddleware:
    """Install CORS handling on ``app``; keyword arguments go to CORSMiddleware."""
    return CORSMiddleware(app, **kwargs)
