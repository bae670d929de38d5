# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
MongoDB service layer: pooled client, document helpers and unique indexes.

Documents are returned with ``_id`` replaced by a string ``id``. Unique index
violations surface as :class:`DuplicateDocumentError` so callers never handle
pymongo errors directly.
"""

import os
import logging
from typing import List, Dict, Optional, Any
from pymongo import MongoClient, ASCENDING, DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, DuplicateKeyError, PyMongoError
from opentelemetry import trace

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)

ADMINS = "admins"
OFFICERS = "officers"
RESULTS = "results"

DEFAULT_URI = 'mongodb://localhost:27017/officer_subscriptions'
DEFAULT_DATABASE = 'officer_subscriptions'


class DuplicateDocumentError(Exception):
    """Raised when a write violates a unique index."""

    def __init__(self, collection: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Duplicate key in {collection}")
        self.collection = collection
        self.details = details or {}

    @property
    def key_pattern(self) -> Dict[str, Any]:
        return self.details.get("keyPattern", {})


def _serialize_id(document: Optional[Dict]) -> Optional[Dict]:
    """Expose the ObjectId as a string ``id`` field."""
    if document and "_id" in document:
        document["id"] = str(document.pop("_id"))
    return document


def _pool_options() -> Dict[str, int]:
    """Client pool settings, overridable through MONGODB_* variables."""
    return {
        'maxPoolSize': int(os.getenv('MONGODB_MAX_POOL_SIZE', '10')),
        'minPoolSize': int(os.getenv('MONGODB_MIN_POOL_SIZE', '1')),
        'maxIdleTimeMS': int(os.getenv('MONGODB_MAX_IDLE_TIME_MS', '30000')),
        'serverSelectionTimeoutMS': int(os.getenv('MONGODB_SERVER_SELECTION_TIMEOUT_MS', '5000')),
    }


class MongoDBService:
    """Access to the officer subscription database through one pooled client."""

    def __init__(self, connection_string: str = None, database_name: str = None):
        self.connection_string = connection_string or os.getenv('MONGODB_URI', DEFAULT_URI)
        self.database_name = database_name or os.getenv('MONGODB_DATABASE', DEFAULT_DATABASE)
        self.pool_options = _pool_options()
        self._client: Optional[MongoClient] = None

    @property
    def client(self) -> MongoClient:
        """Connect on first use; a failed connection is retried on the next call."""
        if self._client is None:
            client = MongoClient(
                self.connection_string,
                retryWrites=True,
                retryReads=True,
                tz_aware=True,
                **self.pool_options
            )
            try:
                client.admin.command('ping')
            except ConnectionFailure as e:
                logger.error(f"Failed to connect to MongoDB: {e}")
                client.close()
                raise
            logger.info(f"Connected to MongoDB database {self.database_name}")
            self._client = client
        return self._client

    @property
    def database(self) -> Database:
        return self.client[self.database_name]

    def get_collection(self, collection_name: str) -> Collection:
        return self.database[collection_name]

    def close_connection(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("MongoDB connection closed")

    def health_check(self) -> Dict[str, Any]:
        """Ping the server; never raises."""
        report: Dict[str, Any] = {'database': self.database_name}
        try:
            ping = self.client.admin.command('ping')
            report.update({
                'status': 'healthy',
                'ping': ping.get('ok') == 1,
                'version': self.client.server_info().get('version'),
                'connection_pool_size': self.pool_options['maxPoolSize']
            })
        except PyMongoError as e:
            logger.error(f"MongoDB health check failed: {e}")
            report.update({'status': 'unhealthy', 'error': str(e)})
        return report

    # Document operations

    def create(self, collection: str, document: Dict) -> str:
        """Insert a document and return its id."""
        with tracer.start_as_current_span("mongodb.create") as span:
            span.set_attribute("db.collection", collection)
            try:
                result = self.get_collection(collection).insert_one(document)
            except DuplicateKeyError as e:
                logger.warning(f"Duplicate key error in {collection}: {e}")
                raise DuplicateDocumentError(collection, e.details) from e

            logger.info(f"Created document in {collection}: {result.inserted_id}")
            # insert_one stamps _id onto the caller's dict
            document.pop("_id", None)
            return str(result.inserted_id)

    def find_one(self, collection: str, query: Dict,
                 projection: Optional[Dict] = None) -> Optional[Dict]:
        """Find a single document matching the query."""
        with tracer.start_as_current_span("mongodb.find_one") as span:
            span.set_attribute("db.collection", collection)
            document = self.get_collection(collection).find_one(query, projection)
            span.set_attribute("db.found", document is not None)
            return _serialize_id(document)

    def find_all(self, collection: str, query: Optional[Dict] = None,
                 projection: Optional[Dict] = None, sort_by: Optional[str] = None,
                 sort_order: int = DESCENDING) -> List[Dict]:
        """Find all documents matching the query, optionally sorted."""
        with tracer.start_as_current_span("mongodb.find_all") as span:
            span.set_attribute("db.collection", collection)
            cursor = self.get_collection(collection).find(query or {}, projection)
            if sort_by:
                cursor = cursor.sort(sort_by, sort_order)

            documents = [_serialize_id(doc) for doc in cursor]
            logger.debug(f"Found {len(documents)} documents in {collection}")
            return documents

    def exists(self, collection: str, query: Dict) -> bool:
        """Check whether any document matches the query."""
        return self.get_collection(collection).count_documents(query, limit=1) > 0

    def count(self, collection: str, query: Optional[Dict] = None) -> int:
        """Count documents matching the query."""
        return self.get_collection(collection).count_documents(query or {})

    def find_one_and_update(self, collection: str, query: Dict, updates: Dict,
                            projection: Optional[Dict] = None) -> Optional[Dict]:
        """Atomically ``$set`` fields on one document and return it after the update."""
        with tracer.start_as_current_span("mongodb.find_one_and_update") as span:
            span.set_attribute("db.collection", collection)
            try:
                document = self.get_collection(collection).find_one_and_update(
                    query,
                    {"$set": updates},
                    projection=projection,
                    return_document=ReturnDocument.AFTER
                )
            except DuplicateKeyError as e:
                logger.warning(f"Duplicate key error in {collection}: {e}")
                raise DuplicateDocumentError(collection, e.details) from e

            span.set_attribute("db.found", document is not None)
            if document is None:
                logger.debug(f"No document matched update in {collection}")
            return _serialize_id(document)

    # Index Management

    def create_indexes(self) -> None:
        """Create the unique indexes every collection relies on."""
        try:
            logger.info("Creating MongoDB indexes...")

            admins = self.get_collection(ADMINS)
            admins.create_index("username", unique=True)
            admins.create_index("singleton", unique=True)

            officers = self.get_collection(OFFICERS)
            officers.create_index("username", unique=True)
            officers.create_index("mobile", unique=True)
            officers.create_index(
                "transactionId",
                unique=True,
                partialFilterExpression={"transactionId": {"$type": "string"}}
            )
            officers.create_index([("createdAt", DESCENDING)])

            results = self.get_collection(RESULTS)
            results.create_index([("date", DESCENDING)])
            results.create_index([("username", ASCENDING)])

            logger.info("MongoDB indexes created successfully")

        except Exception as e:
            logger.error(f"Failed to create MongoDB indexes: {e}")
            raise


_mongodb_service: Optional[MongoDBService] = None


def get_mongodb_service() -> MongoDBService:
    """Process-wide service used by scripts."""
    global _mongodb_service
    if _mongodb_service is None:
        _mongodb_service = MongoDBService()
    return _mongodb_service


def close_mongodb_connection() -> None:
    global _mongodb_service
    if _mongodb_service is not None:
        _mongodb_service.close_connection()
        _mongodb_service = None
