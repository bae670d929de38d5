#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Prepare a MongoDB database for the officer subscription API.

Creates the unique indexes and the default admin account. Safe to re-run.
Exits non-zero if MongoDB is unreachable or holds more than one admin.
"""

import sys
import os
import logging

# Add the parent directory to the path so we can import from api
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.auth import AuthService
from services.bootstrap import AdminCardinalityError, ensure_default_admin
from services.mongodb import ADMINS, OFFICERS, get_mongodb_service, close_mongodb_connection

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def setup_database() -> int:
    mongodb_service = get_mongodb_service()

    health = mongodb_service.health_check()
    if health['status'] != 'healthy':
        logger.error(f"MongoDB unreachable: {health.get('error')}")
        return 1
    logger.info(f"Using database {health['database']} on MongoDB {health['version']}")

    mongodb_service.create_indexes()

    try:
        created = ensure_default_admin(mongodb_service, AuthService())
    except AdminCardinalityError as e:
        logger.error(f"{e}; remove the extra admin documents and re-run")
        return 2

    logger.info(
        f"Admin account {'created' if created else 'already present'}; "
        f"{mongodb_service.count(OFFICERS)} officers, {mongodb_service.count(ADMINS)} admin"
    )
    return 0


def main():
    try:
        exit_code = setup_database()
    finally:
        close_mongodb_connection()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
