# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Pytest configuration and fixtures.
"""

import copy
import os
import pytest
from typing import Any, Dict, List, Optional
from bson import ObjectId

# Set test environment
os.environ['ENVIRONMENT'] = 'test'
os.environ['OTEL_ENABLED'] = 'false'
os.environ['BOOTSTRAP_ADMIN'] = 'false'
os.environ['LOG_LEVEL'] = 'WARNING'
os.environ.pop('REDIS_URL', None)

from app import create_app  # noqa: E402
from services.auth import AuthService  # noqa: E402
from services.mongodb import (  # noqa: E402
    MongoDBService,
    DuplicateDocumentError,
    _serialize_id,
    ADMINS,
    OFFICERS,
    RESULTS
)


def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
    """Evaluate the subset of the MongoDB query language the service uses."""
    for key, condition in query.items():
        if key == "$or":
            if not any(_matches(document, sub) for sub in condition):
                return False
            continue

        value = document.get(key)
        if isinstance(condition, dict):
            if "$ne" in condition and value == condition["$ne"]:
                return False
            if condition.get("$type") == "string" and not isinstance(value, str):
                return False
        elif key not in document or value != condition:
            return False
    return True


def _project(document: Dict[str, Any], projection: Optional[Dict[str, int]]) -> Dict[str, Any]:
    if not projection:
        return document
    fields = {k: v for k, v in projection.items() if k != "_id"}
    inclusive = any(fields.values()) if fields else bool(projection.get("_id"))
    if inclusive:
        keep = {k for k, v in fields.items() if v}
        if projection.get("_id", 1):
            keep.add("_id")
        return {k: v for k, v in document.items() if k in keep}
    return {k: v for k, v in document.items() if projection.get(k, 1)}


def _sort_key(value: Any):
    # MongoDB orders missing fields before any value
    return (value is not None, value if value is not None else 0)


class InMemoryMongoDBService(MongoDBService):
    """In-memory stand-in for MongoDBService with the same unique indexes."""

    UNIQUE_FIELDS = {
        ADMINS: ("username", "singleton"),
        OFFICERS: ("username", "mobile", "transactionId"),
        RESULTS: ()
    }

    def __init__(self):
        super().__init__('mongodb://in-memory', 'officer_subscriptions_test')
        self.collections: Dict[str, List[Dict[str, Any]]] = {name: [] for name in self.UNIQUE_FIELDS}

    def _check_unique(self, collection: str, candidate: Dict[str, Any]) -> None:
        for field in self.UNIQUE_FIELDS[collection]:
            value = candidate.get(field)
            if value is None or (field == "transactionId" and not isinstance(value, str)):
                continue
            for existing in self.collections[collection]:
                if existing["_id"] != candidate.get("_id") and existing.get(field) == value:
                    raise DuplicateDocumentError(collection, {"keyPattern": {field: 1}})

    def create(self, collection: str, document: Dict) -> str:
        stored = copy.deepcopy(document)
        stored["_id"] = ObjectId()
        self._check_unique(collection, stored)
        self.collections[collection].append(stored)
        return str(stored["_id"])

    def find_one(self, collection: str, query: Dict, projection: Optional[Dict] = None) -> Optional[Dict]:
        for document in self.collections[collection]:
            if _matches(document, query):
                return _serialize_id(_project(copy.deepcopy(document), projection))
        return None

    def find_all(self, collection: str, query: Optional[Dict] = None, projection: Optional[Dict] = None,
                 sort_by: Optional[str] = None, sort_order: int = -1) -> List[Dict]:
        documents = [doc for doc in self.collections[collection] if _matches(doc, query or {})]
        if sort_by:
            documents = sorted(documents, key=lambda doc: _sort_key(doc.get(sort_by)), reverse=sort_order < 0)
        return [_serialize_id(_project(copy.deepcopy(doc), projection)) for doc in documents]

    def exists(self, collection: str, query: Dict) -> bool:
        return any(_matches(doc, query) for doc in self.collections[collection])

    def count(self, collection: str, query: Optional[Dict] = None) -> int:
        return sum(1 for doc in self.collections[collection] if _matches(doc, query or {}))

    def find_one_and_update(self, collection: str, query: Dict, updates: Dict,
                            projection: Optional[Dict] = None) -> Optional[Dict]:
        for document in self.collections[collection]:
            if _matches(document, query):
                updated = {**document, **copy.deepcopy(updates)}
                self._check_unique(collection, updated)
                document.update(copy.deepcopy(updates))
                return _serialize_id(_project(copy.deepcopy(document), projection))
        return None

    def create_indexes(self) -> None:
        return None

    def health_check(self) -> Dict[str, Any]:
        return {'status': 'healthy', 'ping': True, 'database': self.database_name}


@pytest.fixture
def mongodb_service():
    """Fresh in-memory MongoDB service."""
    return InMemoryMongoDBService()


@pytest.fixture
def auth_service():
    """Credential service with the cheapest bcrypt cost."""
    return AuthService(rounds=4)


@pytest.fixture
def app(mongodb_service, auth_service):
    """Application wired to the in-memory store, rate limiting disabled."""
    application = create_app(
        config={'TESTING': True, 'BOOTSTRAP_ADMIN': False},
        mongodb_service=mongodb_service,
        auth_service=auth_service
    )
    return application


@pytest.fixture
def client(app):
    """Create test client."""
    with app.test_client() as client:
        yield client


@pytest.fixture
def admin(mongodb_service, auth_service):
    """Bootstrapped admin account with the default password."""
    from services.bootstrap import ensure_default_admin
    ensure_default_admin(mongodb_service, auth_service, "admin", "admin123")
    return mongodb_service.find_one(ADMINS, {"username": "admin"})


@pytest.fixture
def sample_signup_data():
    """Sample signup payload."""
    return {
        "name": "A",
        "address": "X",
        "mobile": "1234567890",
        "username": "u1",
        "password": "p1"
    }


@pytest.fixture
def registered_officer(client, sample_signup_data):
    """Officer created through the signup endpoint."""
    response = client.post('/signup', json=sample_signup_data)
    assert response.status_code == 200
    return response.get_json()["officer"]
