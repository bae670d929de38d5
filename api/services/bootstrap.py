# SPDX-License-Identifier: Apache-2.0

"""
Startup routine that guarantees the single administrator account exists.
"""

import os
import logging
from typing import Optional
from opentelemetry import trace

from models.entities import Admin
from services.auth import AuthService
from services.mongodb import MongoDBService, DuplicateDocumentError, ADMINS

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)

DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "admin123"


class AdminCardinalityError(Exception):
    """Raised when more than one admin document is found."""

    def __init__(self, count: int):
        super().__init__(f"Expected exactly one admin record, found {count}")
        self.count = count


def ensure_default_admin(
    mongodb_service: MongoDBService,
    auth_service: AuthService,
    username: Optional[str] = None,
    password: Optional[str] = None
) -> bool:
    """
    Create the admin account if none exists.

    Safe to call on every start. Returns True when a new admin was written.

    Raises:
        AdminCardinalityError: if the store already holds several admins
    """
    username = username or os.getenv("ADMIN_USERNAME", DEFAULT_ADMIN_USERNAME)
    password = password or os.getenv("DEFAULT_ADMIN_PASSWORD", DEFAULT_ADMIN_PASSWORD)

    with tracer.start_as_current_span("bootstrap.ensure_default_admin") as span:
        count = mongodb_service.count(ADMINS)
        span.set_attribute("bootstrap.admin_count", count)

        if count > 1:
            logger.error("Admin cardinality violated", extra={"admin_count": count})
            raise AdminCardinalityError(count)

        if count == 1:
            # Admins written before the singleton marker existed lack the field
            if mongodb_service.find_one_and_update(ADMINS, {"singleton": {"$ne": True}}, {"singleton": True}):
                logger.info("Marked existing admin account as singleton")
            logger.debug("Admin account already present")
            return False

        admin = Admin(username=username, password=auth_service.hash_password(password))
        try:
            mongodb_service.create(ADMINS, admin.to_document())
        except DuplicateDocumentError:
            # Another process bootstrapped concurrently
            logger.info("Admin account created by another process")
            return False

        logger.info(f"Default admin created (username: {username})")
        return True
