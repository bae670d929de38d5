# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Tests for administrator endpoints.
"""

import json
from datetime import datetime, timedelta, timezone

from services.mongodb import ADMINS, OFFICERS


def _submit(client, username, transaction_id):
    return client.post('/submit-transaction', json={'username': username, 'transactionId': transaction_id})


class TestAdminLogin:
    """Test cases for POST /admin/login."""

    def test_admin_login_success(self, client, admin):
        response = client.post('/admin/login', json={'username': 'admin', 'password': 'admin123'})

        assert response.status_code == 200
        assert json.loads(response.data) == {'message': 'Admin login successful'}

    def test_admin_login_wrong_password(self, client, admin):
        response = client.post('/admin/login', json={'username': 'admin', 'password': 'nope'})

        assert response.status_code == 401
        assert json.loads(response.data) == {'error': 'Invalid credentials'}

    def test_admin_login_unknown_username(self, client, admin):
        response = client.post('/admin/login', json={'username': 'root', 'password': 'admin123'})

        assert response.status_code == 401

    def test_officer_credentials_do_not_open_admin(self, client, admin, registered_officer):
        """Officer accounts live in a separate collection."""
        response = client.post('/admin/login', json={'username': 'u1', 'password': 'p1'})

        assert response.status_code == 401


class TestListOfficers:
    """Test cases for GET /admin/officers."""

    def test_list_officers_empty(self, client):
        response = client.get('/admin/officers')

        assert response.status_code == 200
        assert json.loads(response.data) == []

    def test_list_officers_newest_first_without_passwords(self, client, mongodb_service, auth_service):
        """Officers are sorted by creation time descending; hashes never leak."""
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        for index, username in enumerate(['first', 'second', 'third']):
            mongodb_service.create(OFFICERS, {
                'name': username.title(),
                'address': 'X',
                'mobile': f'{index:010d}',
                'username': username,
                'password': auth_service.hash_password('secret'),
                'subscribed': False,
                'createdAt': base + timedelta(days=index)
            })

        response = client.get('/admin/officers')

        assert response.status_code == 200
        officers = json.loads(response.data)
        assert [o['username'] for o in officers] == ['third', 'second', 'first']
        assert all('password' not in o for o in officers)
        assert all(o['id'] for o in officers)

    def test_legacy_officer_without_creation_time(self, client, mongodb_service, registered_officer):
        """Officers stored without createdAt are not given the listing time."""
        mongodb_service.create(OFFICERS, {
            'name': 'Legacy',
            'address': 'X',
            'mobile': '5555555555',
            'username': 'legacy',
            'password': 'hash',
            'subscribed': False
        })

        officers = json.loads(client.get('/admin/officers').data)

        assert [o['username'] for o in officers] == ['u1', 'legacy']
        assert 'createdAt' in officers[0]
        assert 'createdAt' not in officers[1]


class TestActivateSubscription:
    """Test cases for POST /admin/activate."""

    def test_activate_success(self, client, mongodb_service, registered_officer):
        _submit(client, 'u1', '123456789012')

        response = client.post('/admin/activate', json={'transactionId': '123456789012'})

        assert response.status_code == 200
        assert json.loads(response.data) == {'message': 'Subscription activated successfully'}

        stored = mongodb_service.find_one(OFFICERS, {"username": "u1"})
        assert stored['subscribed'] is True
        assert stored['subscriptionDate'] is not None

    def test_activate_twice_rejected(self, client, registered_officer):
        """Second identical activation is a conflict."""
        _submit(client, 'u1', '123456789012')
        client.post('/admin/activate', json={'transactionId': '123456789012'})

        response = client.post('/admin/activate', json={'transactionId': '123456789012'})

        assert response.status_code == 400
        assert json.loads(response.data) == {'error': 'Already subscribed'}

    def test_activate_unknown_transaction(self, client, registered_officer):
        response = client.post('/admin/activate', json={'transactionId': '999999999999'})

        assert response.status_code == 404
        assert json.loads(response.data) == {'error': 'Officer not found'}

    def test_activate_invalid_format(self, client):
        response = client.post('/admin/activate', json={'transactionId': '1234'})

        assert response.status_code == 400
        assert json.loads(response.data) == {'error': 'Invalid transaction ID'}

    def test_activate_missing_transaction_id(self, client):
        response = client.post('/admin/activate', json={})

        assert response.status_code == 400
        assert json.loads(response.data) == {'error': 'Invalid transaction ID'}

    def test_activate_only_touches_matching_officer(self, client, mongodb_service, sample_signup_data):
        client.post('/signup', json=sample_signup_data)
        client.post('/signup', json=dict(sample_signup_data, username='u2', mobile='0987654321'))
        _submit(client, 'u1', '123456789012')
        _submit(client, 'u2', '210987654321')

        client.post('/admin/activate', json={'transactionId': '210987654321'})

        assert mongodb_service.find_one(OFFICERS, {"username": "u1"})['subscribed'] is False
        assert mongodb_service.find_one(OFFICERS, {"username": "u2"})['subscribed'] is True


class TestAdminResetPassword:
    """Test cases for POST /admin/reset-password."""

    def test_reset_password_success(self, client, admin):
        response = client.post('/admin/reset-password', json={'password': 'fresh'})

        assert response.status_code == 200
        assert json.loads(response.data) == {'message': 'Admin password updated'}

        assert client.post('/admin/login', json={'username': 'admin', 'password': 'admin123'}).status_code == 401
        assert client.post('/admin/login', json={'username': 'admin', 'password': 'fresh'}).status_code == 200

    def test_reset_password_without_admin(self, client, mongodb_service):
        response = client.post('/admin/reset-password', json={'password': 'fresh'})

        assert response.status_code == 404
        assert json.loads(response.data) == {'error': 'Admin not found'}
        assert mongodb_service.count(ADMINS) == 0

    def test_reset_password_missing_password(self, client, admin):
        response = client.post('/admin/reset-password', json={})

        assert response.status_code == 400
        assert json.loads(response.data) == {'error': 'Missing fields'}
