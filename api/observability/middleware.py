"""
Observability Middleware

Flask middleware adding OpenTelemetry instrumentation and one log line per
HTTP request.
"""

import time
import logging
from flask import Flask, request, g
from opentelemetry import trace
from opentelemetry.instrumentation.flask import FlaskInstrumentor

logger = logging.getLogger(__name__)


def add_observability_middleware(app: Flask):
    """Add OpenTelemetry instrumentation and request logging to Flask app."""

    FlaskInstrumentor().instrument_app(app)

    @app.before_request
    def start_request_timer():
        """Start timing and capture the trace id for correlation."""
        g.start_time = time.perf_counter()
        g.trace_id = None

        span = trace.get_current_span()
        if span.is_recording():
            g.trace_id = format(span.get_span_context().trace_id, "032x")
            span.set_attribute("http.remote_addr", request.remote_addr or "")

    @app.after_request
    def log_request(response):
        """Log request completion and expose the trace id."""
        duration_ms = (time.perf_counter() - g.get('start_time', time.perf_counter())) * 1000

        span = trace.get_current_span()
        if span.is_recording():
            span.set_attribute("http.duration_ms", round(duration_ms, 2))

        logger.info(
            f"{request.method} {request.path} {response.status_code} {duration_ms:.1f}ms",
            extra={
                "method": request.method,
                "path": request.path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "remote_addr": request.remote_addr,
                "trace_id": g.get('trace_id')
            }
        )

        if g.get('trace_id'):
            response.headers['X-Trace-Id'] = g.trace_id

        return response
