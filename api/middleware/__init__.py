# SPDX-License-Identifier: Apache-2.0

"""
Middleware package for request processing.

This package contains request validation, error handling, rate limiting,
CORS and security header components.
"""
