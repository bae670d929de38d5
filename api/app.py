"""
Officer Subscription API - Flask Application Entry Point

This module builds the Flask application with OpenAPI 3.0 support,
configures middleware, and wires the MongoDB, Redis and credential services
used by the officer registration and subscription workflow.
"""

import os
from typing import Any, Dict, Optional
from flask import jsonify
from flask_openapi3 import OpenAPI, Info, Tag
from observability.config import setup_observability
from observability.middleware import add_observability_middleware

# Import middleware and services
from middleware.cors import configure_cors, parse_origins
from middleware.error_handler import ErrorHandlerMiddleware
from middleware.rate_limit import configure_rate_limiting
from middleware.security_headers import configure_security_headers
from services.auth import AuthService
from services.bootstrap import ensure_default_admin
from services.health import HealthCheckService
from services.mongodb import MongoDBService
from services.redis import RedisService

# OpenAPI info
info = Info(
    title="Officer Subscription API",
    version="1.0.0",
    description="Officer registration, subscription activation and quiz results"
)

health_tag = Tag(name="Health", description="System health and status")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == 'true'


def load_config() -> Dict[str, Any]:
    """Read configuration from the environment."""
    return {
        'ENVIRONMENT': os.getenv('ENVIRONMENT', 'development'),
        'PORT': int(os.getenv('PORT', '3000')),

        # Database configuration
        'MONGODB_URI': os.getenv('MONGODB_URI', 'mongodb://localhost:27017/officer_subscriptions'),
        'MONGODB_DATABASE': os.getenv('MONGODB_DATABASE', 'officer_subscriptions'),
        'REDIS_URL': os.getenv('REDIS_URL'),

        # Security configuration
        'BCRYPT_ROUNDS': int(os.getenv('BCRYPT_ROUNDS', '10')),
        'CORS_ALLOWED_ORIGINS': os.getenv('CORS_ALLOWED_ORIGINS', '*'),

        # Rate limiting, per client address
        'RATE_LIMIT_WINDOW_SECONDS': int(os.getenv('RATE_LIMIT_WINDOW_SECONDS', '900')),
        'RATE_LIMIT_MAX_REQUESTS': int(os.getenv('RATE_LIMIT_MAX_REQUESTS', '100')),
        'TRANSACTION_RATE_LIMIT_MAX_REQUESTS': int(os.getenv('TRANSACTION_RATE_LIMIT_MAX_REQUESTS', '5')),

        # Startup
        'BOOTSTRAP_ADMIN': _env_flag('BOOTSTRAP_ADMIN', 'true'),
        'ADMIN_USERNAME': os.getenv('ADMIN_USERNAME', 'admin'),
        'DEFAULT_ADMIN_PASSWORD': os.getenv('DEFAULT_ADMIN_PASSWORD', 'admin123'),
    }


def create_app(
    config: Optional[Dict[str, Any]] = None,
    mongodb_service: Optional[MongoDBService] = None,
    redis_service: Optional[RedisService] = None,
    auth_service: Optional[AuthService] = None
) -> OpenAPI:
    """
    Build the application.

    Args:
        config: Overrides applied on top of the environment configuration
        mongodb_service: Persistence service; built from MONGODB_URI when omitted
        redis_service: Rate-limit counter store; built from REDIS_URL when omitted
        auth_service: Credential service; built from BCRYPT_ROUNDS when omitted
    """
    # Initialize observability first
    setup_observability()

    app = OpenAPI(__name__, info=info)
    app.config.update(load_config())
    if config:
        app.config.update(config)
    app.config['DEBUG'] = app.config['ENVIRONMENT'] == 'development'

    add_observability_middleware(app)

    # Make services available to routes
    app.mongodb_service = mongodb_service or MongoDBService(
        app.config['MONGODB_URI'],
        app.config['MONGODB_DATABASE']
    )
    app.redis_service = redis_service or RedisService(app.config['REDIS_URL'])
    app.auth_service = auth_service or AuthService(app.config['BCRYPT_ROUNDS'])
    app.health_service = HealthCheckService(app.mongodb_service, app.redis_service)

    # Initialize middleware
    ErrorHandlerMiddleware(app)
    configure_cors(
        app,
        allowed_origins=parse_origins(app.config['CORS_ALLOWED_ORIGINS'])
    )
    configure_security_headers(app)
    configure_rate_limiting(
        app,
        app.config['RATE_LIMIT_MAX_REQUESTS'],
        app.config['RATE_LIMIT_WINDOW_SECONDS']
    )

    # Register routes
    from routes.admin import admin_bp
    from routes.officers import officers_bp
    from routes.results import results_bp

    app.register_api(admin_bp)
    app.register_api(officers_bp)
    app.register_api(results_bp)

    @app.get('/api/healthz', tags=[health_tag])
    def health_check():
        """Dependency health check"""
        health_data = app.health_service.get_health()
        status_code = 503 if health_data["status"] == "unhealthy" else 200
        return jsonify(health_data), status_code

    # Uniqueness of usernames, mobiles, transaction IDs and the admin relies on these
    app.mongodb_service.create_indexes()

    if app.config['BOOTSTRAP_ADMIN']:
        ensure_default_admin(
            app.mongodb_service,
            app.auth_service,
            app.config['ADMIN_USERNAME'],
            app.config['DEFAULT_ADMIN_PASSWORD']
        )

    return app


if __name__ == '__main__':
    # Development server
    application = create_app()
    application.run(
        host='0.0.0.0',
        port=application.config['PORT'],
        debug=application.config['DEBUG']
    )
