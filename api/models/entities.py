# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Core entity models: administrator, officer and quiz result.
"""

from datetime import datetime
from typing import ClassVar, Optional, Set, Union
from pydantic import Field, field_validator

from domain.validation import is_valid_mobile, is_valid_transaction_id
from .base import BaseDocument


class Admin(BaseDocument):
    """The single administrator account."""

    private_fields: ClassVar[Set[str]] = {"password"}

    username: str = Field(..., min_length=1, description="Admin username")
    password: str = Field(..., description="bcrypt password hash")
    singleton: bool = Field(default=True, description="Uniquely indexed marker limiting admins to one")


class Officer(BaseDocument):
    """Registered officer who may hold a paid subscription."""

    private_fields: ClassVar[Set[str]] = {"password"}

    name: str = Field(..., description="Officer full name")
    address: str = Field(..., description="Postal address")
    mobile: str = Field(..., description="10-digit mobile number")
    username: str = Field(..., min_length=1, description="Login name")
    # Absent when the document was read with the password projected out
    password: Optional[str] = Field(None, description="bcrypt password hash")
    subscribed: bool = Field(default=False, description="Whether an admin activated the subscription")
    transaction_id: Optional[str] = Field(None, alias="transactionId", description="12-digit payment reference")
    subscription_date: Optional[datetime] = Field(None, alias="subscriptionDate")
    # Set on signup; officers stored before it was recorded have none
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    @field_validator('mobile')
    @classmethod
    def validate_mobile(cls, v):
        """Validate mobile number format."""
        if not is_valid_mobile(v):
            raise ValueError(f'{v} is not a valid 10-digit mobile number!')
        return v

    @field_validator('transaction_id')
    @classmethod
    def validate_transaction_id(cls, v):
        """Validate transaction ID format."""
        if not is_valid_transaction_id(v):
            raise ValueError(f'{v} is not a valid 12-digit transaction ID!')
        return v or None


class Result(BaseDocument):
    """Quiz result. Append-only."""

    username: str = Field(..., min_length=1, description="Officer username")
    name: Optional[str] = Field(None, description="Display name")
    phone: Optional[str] = Field(None, description="Contact number")
    score: Optional[Union[int, float]] = Field(None, description="Points scored")
    total: Optional[Union[int, float]] = Field(None, description="Points available")
    date: Optional[datetime] = Field(None, description="When the quiz was taken")
