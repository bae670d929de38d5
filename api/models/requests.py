# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Request models for API endpoints.
"""

from datetime import datetime
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from domain.validation import is_valid_mobile, require_transaction_id


class RequestModel(BaseModel):
    """Base for JSON request bodies; accepts camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)


class LoginRequest(RequestModel):
    """Request model for admin and officer login."""

    username: str = Field(..., description="Account username")
    password: str = Field(..., description="Plain text password")


class SignupRequest(RequestModel):
    """Request model for officer self-registration."""

    name: str = Field(..., min_length=1, description="Officer full name")
    address: str = Field(..., min_length=1, description="Postal address")
    mobile: str = Field(..., description="10-digit mobile number")
    username: str = Field(..., min_length=1, description="Login name")
    password: str = Field(..., min_length=1, description="Plain text password")

    @field_validator('mobile')
    @classmethod
    def validate_mobile(cls, v):
        """Validate mobile number format."""
        if not is_valid_mobile(v):
            raise ValueError('Invalid mobile number')
        return v


class SubmitTransactionRequest(RequestModel):
    """Request model for submitting a payment transaction ID."""

    username: str = Field(..., description="Officer username")
    transaction_id: Optional[str] = Field(
        None,
        alias="transactionId",
        validate_default=True,
        description="12-digit payment reference"
    )

    @field_validator('transaction_id')
    @classmethod
    def validate_transaction_id(cls, v):
        """Transaction ID is mandatory here."""
        if not require_transaction_id(v):
            raise ValueError('Invalid or missing 12-digit transaction ID')
        return v


class OfficerStatusRequest(RequestModel):
    """Request model for checking activation status."""

    username: str = Field(..., description="Officer username")


class OfficerResetPasswordRequest(RequestModel):
    """Request model for an officer resetting their password."""

    username: str = Field(..., description="Officer username")
    mobile: str = Field(..., description="Registered mobile number")
    password: str = Field(..., min_length=1, description="New password")


class ActivateSubscriptionRequest(RequestModel):
    """Request model for admin activation by transaction ID."""

    transaction_id: Optional[str] = Field(
        None,
        alias="transactionId",
        validate_default=True,
        description="12-digit payment reference"
    )

    @field_validator('transaction_id')
    @classmethod
    def validate_transaction_id(cls, v):
        """Transaction ID is mandatory here."""
        if not require_transaction_id(v):
            raise ValueError('Invalid transaction ID')
        return v


class AdminResetPasswordRequest(RequestModel):
    """Request model for changing the admin password."""

    password: str = Field(..., min_length=1, description="New password")


class SubmitResultRequest(RequestModel):
    """Request model for a quiz result submission."""

    username: Optional[str] = Field(None, description="Officer username")
    name: Optional[str] = Field(None, description="Display name")
    phone: Optional[str] = Field(None, description="Contact phone, free text")
    score: Optional[Union[int, float]] = Field(None, description="Points scored")
    total: Optional[Union[int, float]] = Field(None, description="Points available")
    date: Optional[datetime] = Field(None, description="Submission time, defaults to now")

    @model_validator(mode='after')
    def validate_required(self):
        """username, score and total are required; zero is a valid score."""
        if not self.username or self.score is None or self.total is None:
            raise ValueError('Missing fields')
        return self
