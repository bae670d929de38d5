# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Security response headers applied to every response.
"""

from flask import Flask
from typing import Dict, Optional

DEFAULT_SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'SAMEORIGIN',
    'X-DNS-Prefetch-Control': 'off',
    'X-Download-Options': 'noopen',
    'X-Permitted-Cross-Domain-Policies': 'none',
    'Referrer-Policy': 'no-referrer',
    'Strict-Transport-Security': 'max-age=15552000; includeSubDomains',
    'Cross-Origin-Opener-Policy': 'same-origin',
    'Cross-Origin-Resource-Policy': 'same-origin'
}


def configure_security_headers(app: Flask, headers: Optional[Dict[str, str]] = None) -> None:
    """
    Add security headers to all responses.

    Args:
        app: Flask application
        headers: Header overrides merged over the defaults
    """
    security_headers = {**DEFAULT_SECURITY_HEADERS, **(headers or {})}

    @app.after_request
    def add_security_headers(response):
        for name, value in security_headers.items():
            response.headers.setdefault(name, value)
        return response
