# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Error handling middleware with structured JSON responses.
Provides centralized error handling and formatting for Flask applications.

Every error body has the shape ``{"error": <message>}``. Unexpected
exceptions are logged with their traceback and reported with a generic
message only.
"""

from flask import Flask, request, jsonify
from werkzeug.exceptions import HTTPException
from typing import Tuple
from opentelemetry import trace
import logging

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Server error"


class CustomException(Exception):
    """Base class for custom application exceptions."""

    def __init__(self, message: str, status_code: int = 500, error_type: str = "application-error"):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_type = error_type


class ValidationException(CustomException):
    """Exception for validation errors."""

    def __init__(self, message: str, validation_errors: list = None):
        super().__init__(message, 400, "validation-error")
        self.validation_errors = validation_errors or []


class AuthenticationException(CustomException):
    """Exception for credential mismatches."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, 401, "authentication-failed")


class NotFoundException(CustomException):
    """Exception for resource not found errors."""

    def __init__(self, message: str):
        super().__init__(message, 404, "resource-not-found")


class ConflictException(CustomException):
    """Exception for uniqueness violations. Reported as a bad request."""

    def __init__(self, message: str):
        super().__init__(message, 400, "resource-conflict")


class RateLimitException(CustomException):
    """Exception for callers over their rate limit."""

    def __init__(self, message: str, retry_after: int = 0):
        super().__init__(message, 429, "rate-limit-exceeded")
        self.retry_after = retry_after


class ErrorHandlerMiddleware:
    """Centralized error handling middleware with JSON response formatting."""

    def __init__(self, app: Flask):
        self.app = app
        self.register_error_handlers()

    def register_error_handlers(self):
        """Register error handlers with Flask application."""

        @self.app.errorhandler(CustomException)
        def handle_custom_exception(error: CustomException):
            return self.handle_custom_error(error)

        @self.app.errorhandler(HTTPException)
        def handle_http_exception(error: HTTPException):
            return self.handle_http_error(error)

        # Handle generic exceptions
        @self.app.errorhandler(Exception)
        def handle_generic_exception(error: Exception):
            return self.handle_unexpected_error(error)

    def handle_custom_error(self, error: CustomException) -> Tuple[dict, int]:
        """
        Handle exceptions raised deliberately by route handlers.

        Args:
            error: Application exception carrying message and status

        Returns:
            Tuple of (response, status code)
        """
        with tracer.start_as_current_span("error_handler.custom_exception") as span:
            span.set_attributes({
                "error.type": error.error_type,
                "error.status": error.status_code,
                "http.method": request.method,
                "http.path": request.path
            })

            logger.warning(
                f"Custom exception: {error.error_type}",
                extra={
                    "error_type": error.error_type,
                    "status_code": error.status_code,
                    "detail": error.message,
                    "path": request.path,
                    "method": request.method
                }
            )

            response = jsonify({"error": error.message})
            if isinstance(error, RateLimitException) and error.retry_after > 0:
                response.headers['Retry-After'] = str(error.retry_after)
            return response, error.status_code

    def handle_http_error(self, error: HTTPException) -> Tuple[dict, int]:
        """
        Handle werkzeug HTTP errors (unknown route, wrong method, bad JSON).

        Args:
            error: HTTP exception

        Returns:
            Tuple of (response, status code)
        """
        status_code = error.code or 500
        if status_code >= 500:
            return self.handle_unexpected_error(error)

        logger.warning(
            f"Client error: {error.name}",
            extra={
                "status_code": status_code,
                "path": request.path,
                "method": request.method,
                "ip_address": request.remote_addr
            }
        )
        return jsonify({"error": error.name}), status_code

    def handle_unexpected_error(self, error: Exception) -> Tuple[dict, int]:
        """
        Handle unexpected exceptions not caught by specific handlers.

        Args:
            error: Unexpected exception

        Returns:
            Tuple of (response, status code)
        """
        with tracer.start_as_current_span("error_handler.unexpected_error") as span:
            span.set_attributes({
                "error.type": "unexpected-error",
                "error.class": error.__class__.__name__,
                "http.method": request.method,
                "http.path": request.path
            })
            span.record_exception(error)

            logger.error(
                f"Unexpected error: {error.__class__.__name__}",
                extra={
                    "error_type": "unexpected-error",
                    "error_class": error.__class__.__name__,
                    "error_message": str(error),
                    "path": request.path,
                    "method": request.method,
                    "ip_address": request.remote_addr
                },
                exc_info=error
            )

            return jsonify({"error": SERVER_ERROR_MESSAGE}), 500
