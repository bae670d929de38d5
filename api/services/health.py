"""
Health Check Service

Reports the status of the service dependencies (MongoDB, Redis).
"""

import os
import time
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from opentelemetry import trace

from services.mongodb import MongoDBService
from services.redis import RedisService

tracer = trace.get_tracer(__name__)

SERVICE_VERSION = "1.0.0"


class HealthCheckService:
    """Service for dependency health monitoring."""

    def __init__(self, mongodb_service: MongoDBService, redis_service: Optional[RedisService] = None):
        self.mongodb_service = mongodb_service
        self.redis_service = redis_service
        self.service_version = SERVICE_VERSION

    def get_health(self) -> Dict[str, Any]:
        """Get health status of the service and its dependencies."""
        with tracer.start_as_current_span("health.check") as span:
            start_time = time.time()

            mongodb_health = self.mongodb_service.health_check()
            redis_health = (
                self.redis_service.health_check()
                if self.redis_service is not None
                else {'status': 'unavailable', 'configured': False}
            )

            overall_status = self._determine_overall_status(
                mongodb_health["status"],
                redis_health["status"]
            )
            response_time_ms = round((time.time() - start_time) * 1000, 2)

            span.set_attributes({
                "health.overall_status": overall_status,
                "health.response_time_ms": response_time_ms,
                "health.mongodb_status": mongodb_health["status"],
                "health.redis_status": redis_health["status"]
            })

            return {
                "status": overall_status,
                "service": "officer-subscription-api",
                "version": self.service_version,
                "environment": os.getenv('ENVIRONMENT', 'development'),
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "response_time_ms": response_time_ms,
                "dependencies": {
                    "mongodb": mongodb_health,
                    "redis": redis_health
                }
            }

    @staticmethod
    def _determine_overall_status(mongodb_status: str, redis_status: str) -> str:
        """MongoDB is required; Redis only backs rate limiting."""
        if mongodb_status != "healthy":
            return "unhealthy"
        if redis_status == "unhealthy":
            return "degraded"
        return "healthy"
