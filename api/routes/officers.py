# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Officer endpoints: signup, login, transaction submission, activation status
and password reset.
"""

from flask import current_app, jsonify
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
import logging

from domain.officers import build_new_officer, transaction_submission_update
from middleware.error_handler import (
    AuthenticationException,
    ConflictException,
    NotFoundException
)
from middleware.rate_limit import rate_limit
from middleware.validation import validate_json
from models.entities import Officer
from models.requests import (
    LoginRequest,
    SignupRequest,
    SubmitTransactionRequest,
    OfficerStatusRequest,
    OfficerResetPasswordRequest
)
from services.mongodb import DuplicateDocumentError, OFFICERS

# Set up logging and tracing
logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

officers_tag = Tag(name="Officers", description="Officer registration and subscription")
officers_bp = APIBlueprint('officers', __name__, abp_tags=[officers_tag])

WITHOUT_PASSWORD = {"password": 0}


@officers_bp.post('/login')
@validate_json(LoginRequest)
def login(credentials: LoginRequest):
    """Authenticate an officer and return the profile with subscription flag."""
    with tracer.start_as_current_span("officers.login") as span:
        span.set_attribute("officer.username", credentials.username)

        officer_doc = current_app.mongodb_service.find_one(
            OFFICERS, {"username": credentials.username}
        )
        if not current_app.auth_service.authenticate(officer_doc, credentials.password):
            logger.warning(
                "Officer login failed",
                extra={"username": credentials.username, "user_found": officer_doc is not None}
            )
            raise AuthenticationException()

        officer = Officer.from_document(officer_doc)
        logger.info("Officer logged in", extra={"username": officer.username})

        return jsonify({
            "message": "Login successful",
            "officer": officer.to_public(),
            "subscribed": officer.subscribed
        })


@officers_bp.post('/signup')
@validate_json(SignupRequest)
def signup(signup_request: SignupRequest):
    """Register a new officer."""
    with tracer.start_as_current_span("officers.signup") as span:
        span.set_attribute("officer.username", signup_request.username)
        mongodb_service = current_app.mongodb_service

        taken = mongodb_service.exists(OFFICERS, {"$or": [
            {"username": signup_request.username},
            {"mobile": signup_request.mobile}
        ]})
        if taken:
            raise ConflictException("Username or mobile number already exists")

        officer = build_new_officer(
            signup_request,
            current_app.auth_service.hash_password(signup_request.password)
        )

        try:
            officer.id = mongodb_service.create(OFFICERS, officer.to_document())
        except DuplicateDocumentError:
            # Lost a race with a concurrent signup
            raise ConflictException("Username or mobile number already exists")

        logger.info("Officer created", extra={"username": officer.username, "officer_id": officer.id})

        return jsonify({
            "message": "Officer created successfully",
            "officer": officer.to_public()
        })


@officers_bp.post('/submit-transaction')
@rate_limit(
    5,
    900,
    endpoint="submit-transaction",
    message="Too many transaction submissions, try again later",
    config_key="TRANSACTION_RATE_LIMIT_MAX_REQUESTS"
)
@validate_json(SubmitTransactionRequest)
def submit_transaction(submission: SubmitTransactionRequest):
    """Attach a payment transaction ID to an officer, pending admin activation."""
    with tracer.start_as_current_span("officers.submit_transaction") as span:
        span.set_attribute("officer.username", submission.username)
        mongodb_service = current_app.mongodb_service

        if mongodb_service.exists(OFFICERS, {"transactionId": submission.transaction_id}):
            logger.warning(
                "Transaction ID already used",
                extra={"username": submission.username}
            )
            raise ConflictException("Transaction ID already used")

        try:
            officer_doc = mongodb_service.find_one_and_update(
                OFFICERS,
                {"username": submission.username},
                transaction_submission_update(submission.transaction_id),
                projection=WITHOUT_PASSWORD
            )
        except DuplicateDocumentError:
            raise ConflictException("Transaction ID already used")

        if officer_doc is None:
            raise NotFoundException("Officer not found")

        logger.info("Transaction submitted", extra={"username": submission.username})

        return jsonify({
            "message": "Transaction submitted successfully",
            "transactionId": officer_doc["transactionId"]
        })


@officers_bp.post('/officer/status')
@validate_json(OfficerStatusRequest)
def officer_status(status_request: OfficerStatusRequest):
    """Report whether the officer's subscription is active."""
    officer_doc = current_app.mongodb_service.find_one(
        OFFICERS,
        {"username": status_request.username},
        projection={"subscribed": 1}
    )
    if officer_doc is None:
        raise NotFoundException("Officer not found")

    return jsonify({"activated": bool(officer_doc.get("subscribed", False))})


@officers_bp.post('/officer/reset-password')
@validate_json(OfficerResetPasswordRequest)
def reset_officer_password(reset_request: OfficerResetPasswordRequest):
    """Replace an officer's password; the registered mobile proves identity."""
    with tracer.start_as_current_span("officers.reset_password") as span:
        span.set_attribute("officer.username", reset_request.username)

        officer_doc = current_app.mongodb_service.find_one_and_update(
            OFFICERS,
            {"username": reset_request.username, "mobile": reset_request.mobile},
            {"password": current_app.auth_service.hash_password(reset_request.password)},
            projection={"_id": 1}
        )
        if officer_doc is None:
            logger.warning(
                "Password reset for unknown username/mobile pair",
                extra={"username": reset_request.username}
            )
            raise NotFoundException("Officer not found or mobile mismatch")

        logger.info("Officer password reset", extra={"username": reset_request.username})
        return jsonify({"message": "Password reset successful"})
