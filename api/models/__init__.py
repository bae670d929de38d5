# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Models package - Pydantic schemas for stored documents and request bodies.
"""

# Base models
from .base import BaseDocument, utcnow

# Core entities
from .entities import Admin, Officer, Result

# Request models
from .requests import (
    LoginRequest,
    SignupRequest,
    SubmitTransactionRequest,
    OfficerStatusRequest,
    OfficerResetPasswordRequest,
    ActivateSubscriptionRequest,
    AdminResetPasswordRequest,
    SubmitResultRequest
)

__all__ = [
    "BaseDocument",
    "utcnow",
    "Admin",
    "Officer",
    "Result",
    "LoginRequest",
    "SignupRequest",
    "SubmitTransactionRequest",
    "OfficerStatusRequest",
    "OfficerResetPasswordRequest",
    "ActivateSubscriptionRequest",
    "AdminResetPasswordRequest",
    "SubmitResultRequest"
]
