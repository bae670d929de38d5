# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Request validation middleware using Pydantic models.
Provides automatic request body validation and error formatting.
"""

from functools import wraps
from flask import request
from typing import Type, Callable, Dict, Any, List
from pydantic import BaseModel, ValidationError
from opentelemetry import trace
import logging

from middleware.error_handler import ValidationException

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing fields"


def format_validation_errors(validation_error: ValidationError) -> List[Dict[str, Any]]:
    """
    Format Pydantic validation errors for logging.

    Args:
        validation_error: Pydantic ValidationError

    Returns:
        List of formatted error dictionaries
    """
    errors = []

    for error in validation_error.errors():
        field_path = ".".join(str(loc) for loc in error["loc"])
        errors.append({
            "field": field_path,
            "message": error["msg"],
            "type": error["type"]
        })

    return errors


def error_message(validation_error: ValidationError) -> str:
    """
    Pick the client-facing message for a failed validation.

    Messages raised by our own validators are returned verbatim; a missing
    field reads "Missing fields"; anything else names the offending field.
    """
    errors = validation_error.errors()

    for error in errors:
        if error["type"] == "value_error":
            return str(error["ctx"]["error"])

    if any(error["type"] == "missing" for error in errors):
        return MISSING_FIELDS_MESSAGE

    # Body fields are top level; deeper loc entries are union or item tags
    location = errors[0]["loc"] if errors else ()
    if not location:
        return "Invalid request body"
    return f"Invalid value for {location[0]}"


def validate_json(model_class: Type[BaseModel]) -> Callable:
    """
    Decorator to validate JSON request body against a Pydantic model.

    The validated model is passed to the route handler as first argument.
    Invalid input raises ValidationException before the handler runs.

    Args:
        model_class: Pydantic model class for validation

    Returns:
        Decorator function
    """
    def decorator(f: Callable) -> Callable:
        @wraps(f)
        def decorated_function(*args, **kwargs):
            with tracer.start_as_current_span("validation.validate_json_body") as span:
                span.set_attributes({
                    "validation.model": model_class.__name__,
                    "http.method": request.method,
                    "http.path": request.path
                })

                json_data = request.get_json(silent=True)
                if not isinstance(json_data, dict):
                    span.set_attribute("validation.result", "invalid_json")
                    logger.warning(
                        "Request body is not a JSON object",
                        extra={"path": request.path, "content_type": request.content_type}
                    )
                    raise ValidationException(MISSING_FIELDS_MESSAGE)

                try:
                    validated_data = model_class.model_validate(json_data)
                except ValidationError as e:
                    span.set_attribute("validation.result", "validation_error")
                    validation_errors = format_validation_errors(e)

                    logger.warning(
                        "Request validation failed",
                        extra={
                            "model": model_class.__name__,
                            "path": request.path,
                            "method": request.method,
                            "errors": validation_errors
                        }
                    )
                    raise ValidationException(error_message(e), validation_errors)

                span.set_attribute("validation.result", "success")
                return f(validated_data, *args, **kwargs)

        return decorated_function
    return decorator
