# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Administrator endpoints: login, officer listing, subscription activation and
admin password reset.
"""

from flask import current_app, jsonify
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
from pymongo import DESCENDING
import logging

from domain.officers import activation_update, can_activate, public_officer
from middleware.error_handler import (
    AuthenticationException,
    ConflictException,
    NotFoundException
)
from middleware.validation import validate_json
from models.entities import Officer
from models.requests import (
    LoginRequest,
    ActivateSubscriptionRequest,
    AdminResetPasswordRequest
)
from services.mongodb import ADMINS, OFFICERS

# Set up logging and tracing
logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

admin_tag = Tag(name="Admin", description="Administrator operations")
admin_bp = APIBlueprint('admin', __name__, url_prefix='/admin', abp_tags=[admin_tag])


@admin_bp.post('/login')
@validate_json(LoginRequest)
def admin_login(credentials: LoginRequest):
    """Check administrator credentials."""
    with tracer.start_as_current_span("admin.login") as span:
        span.set_attribute("admin.username", credentials.username)

        admin_doc = current_app.mongodb_service.find_one(ADMINS, {"username": credentials.username})
        if not current_app.auth_service.authenticate(admin_doc, credentials.password):
            logger.warning("Admin login failed", extra={"username": credentials.username})
            raise AuthenticationException()

        logger.info("Admin logged in", extra={"username": credentials.username})
        return jsonify({"message": "Admin login successful"})


@admin_bp.get('/officers')
def list_officers():
    """List all officers, newest first, without password hashes."""
    officer_docs = current_app.mongodb_service.find_all(
        OFFICERS,
        projection={"password": 0},
        sort_by="createdAt",
        sort_order=DESCENDING
    )
    return jsonify([public_officer(doc) for doc in officer_docs])


@admin_bp.post('/activate')
@validate_json(ActivateSubscriptionRequest)
def activate_subscription(activation: ActivateSubscriptionRequest):
    """Activate the subscription of the officer who submitted this transaction ID."""
    with tracer.start_as_current_span("admin.activate_subscription") as span:
        mongodb_service = current_app.mongodb_service

        officer_doc = mongodb_service.find_one(
            OFFICERS,
            {"transactionId": activation.transaction_id},
            projection={"password": 0}
        )
        if officer_doc is None:
            raise NotFoundException("Officer not found")

        officer = Officer.from_document(officer_doc)
        span.set_attribute("officer.username", officer.username)
        if not can_activate(officer):
            raise ConflictException("Already subscribed")

        # subscribed=False in the filter keeps two concurrent activations from both succeeding
        updated = mongodb_service.find_one_and_update(
            OFFICERS,
            {"transactionId": activation.transaction_id, "subscribed": False},
            activation_update(),
            projection={"_id": 1}
        )
        if updated is None:
            raise ConflictException("Already subscribed")

        logger.info("Subscription activated", extra={"username": officer.username})
        return jsonify({"message": "Subscription activated successfully"})


@admin_bp.post('/reset-password')
@validate_json(AdminResetPasswordRequest)
def reset_admin_password(reset_request: AdminResetPasswordRequest):
    """Replace the administrator password."""
    admin_doc = current_app.mongodb_service.find_one_and_update(
        ADMINS,
        {"singleton": True},
        {"password": current_app.auth_service.hash_password(reset_request.password)},
        projection={"username": 1}
    )
    if admin_doc is None:
        logger.error("Admin password reset found no admin record")
        raise NotFoundException("Admin not found")

    logger.info("Admin password updated", extra={"username": admin_doc.get("username")})
    return jsonify({"message": "Admin password updated"})
