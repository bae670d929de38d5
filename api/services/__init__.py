# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Services package - External integrations and side effects.
"""

from .mongodb import (
    MongoDBService,
    DuplicateDocumentError,
    get_mongodb_service,
    close_mongodb_connection
)
from .redis import RedisService
from .auth import AuthService

__all__ = [
    "MongoDBService",
    "DuplicateDocumentError",
    "get_mongodb_service",
    "close_mongodb_connection",
    "RedisService",
    "AuthService"
]
