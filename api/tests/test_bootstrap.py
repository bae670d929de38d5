# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the default admin bootstrap.
"""

import pytest
from unittest.mock import Mock

from app import create_app
from services.bootstrap import AdminCardinalityError, ensure_default_admin
from services.mongodb import ADMINS


class TestEnsureDefaultAdmin:
    """Test admin creation on startup."""

    def test_creates_admin_when_missing(self, mongodb_service, auth_service):
        created = ensure_default_admin(mongodb_service, auth_service, 'admin', 'admin123')

        assert created is True
        admin = mongodb_service.find_one(ADMINS, {"username": "admin"})
        assert admin['singleton'] is True
        assert auth_service.verify_password('admin123', admin['password'])

    def test_idempotent(self, mongodb_service, auth_service):
        ensure_default_admin(mongodb_service, auth_service, 'admin', 'admin123')

        assert ensure_default_admin(mongodb_service, auth_service, 'admin', 'other') is False
        assert mongodb_service.count(ADMINS) == 1

    def test_existing_password_is_kept(self, mongodb_service, auth_service):
        ensure_default_admin(mongodb_service, auth_service, 'admin', 'admin123')
        ensure_default_admin(mongodb_service, auth_service, 'admin', 'changed')

        admin = mongodb_service.find_one(ADMINS, {"username": "admin"})
        assert auth_service.verify_password('admin123', admin['password'])

    def test_backfills_singleton_marker(self, mongodb_service, auth_service):
        """Admins created before the singleton marker get it on the next start."""
        mongodb_service.create(ADMINS, {'username': 'legacy', 'password': auth_service.hash_password('x')})

        assert ensure_default_admin(mongodb_service, auth_service) is False
        assert mongodb_service.find_one(ADMINS, {"username": "legacy"})['singleton'] is True

    def test_multiple_admins_raise(self, mongodb_service, auth_service):
        mongodb_service.create(ADMINS, {'username': 'a', 'password': 'x'})
        mongodb_service.create(ADMINS, {'username': 'b', 'password': 'y'})

        with pytest.raises(AdminCardinalityError) as exc_info:
            ensure_default_admin(mongodb_service, auth_service)

        assert exc_info.value.count == 2

    def test_defaults_from_environment(self, mongodb_service, auth_service, monkeypatch):
        monkeypatch.setenv('ADMIN_USERNAME', 'chief')
        monkeypatch.setenv('DEFAULT_ADMIN_PASSWORD', 'letmein')

        ensure_default_admin(mongodb_service, auth_service)

        admin = mongodb_service.find_one(ADMINS, {"username": "chief"})
        assert auth_service.verify_password('letmein', admin['password'])


class TestAppBootstrap:
    """Test bootstrap wiring in the application factory."""

    def test_create_app_bootstraps_admin(self, mongodb_service, auth_service):
        app = create_app(
            config={'TESTING': True, 'BOOTSTRAP_ADMIN': True},
            mongodb_service=mongodb_service,
            auth_service=auth_service
        )

        response = app.test_client().post('/admin/login', json={'username': 'admin', 'password': 'admin123'})

        assert response.status_code == 200
        assert mongodb_service.count(ADMINS) == 1

    def test_create_app_indexes_without_admin_bootstrap(self, mongodb_service, auth_service):
        """Disabling admin seeding keeps the unique indexes."""
        mongodb_service.create_indexes = Mock()

        create_app(
            config={'TESTING': True, 'BOOTSTRAP_ADMIN': False},
            mongodb_service=mongodb_service,
            auth_service=auth_service
        )

        mongodb_service.create_indexes.assert_called_once_with()
        assert mongodb_service.count(ADMINS) == 0


class TestSetupDatabaseScript:
    """Test the database setup script against the in-memory store."""

    def test_setup_creates_admin(self, mongodb_service, monkeypatch):
        from scripts import setup_database

        monkeypatch.setattr(setup_database, 'get_mongodb_service', lambda: mongodb_service)
        mongodb_service.health_check = lambda: {'status': 'healthy', 'database': 'test', 'version': '7.0'}

        assert setup_database.setup_database() == 0
        assert mongodb_service.count(ADMINS) == 1

    def test_setup_reports_extra_admins(self, mongodb_service, monkeypatch):
        from scripts import setup_database

        monkeypatch.setattr(setup_database, 'get_mongodb_service', lambda: mongodb_service)
        mongodb_service.health_check = lambda: {'status': 'healthy', 'database': 'test', 'version': '7.0'}
        mongodb_service.create(ADMINS, {'username': 'a', 'password': 'x'})
        mongodb_service.create(ADMINS, {'username': 'b', 'password': 'y'})

        assert setup_database.setup_database() == 2

    def test_setup_unreachable_database(self, mongodb_service, monkeypatch):
        from scripts import setup_database

        monkeypatch.setattr(setup_database, 'get_mongodb_service', lambda: mongodb_service)
        mongodb_service.health_check = lambda: {'status': 'unhealthy', 'error': 'timeout'}

        assert setup_database.setup_database() == 1
