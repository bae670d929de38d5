# SPDX-License-Identifier: Apache-2.0

"""
Officer and quiz-result domain logic.

Pure functions that build documents and updates for the subscription
workflow. No I/O; persistence happens in the route handlers.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from models.base import utcnow
from models.entities import Officer, Result
from models.requests import SignupRequest, SubmitResultRequest


def build_new_officer(signup: SignupRequest, password_hash: str,
                      now: Optional[datetime] = None) -> Officer:
    """Officer as created by signup: not subscribed, no transaction yet."""
    return Officer(
        name=signup.name,
        address=signup.address,
        mobile=signup.mobile,
        username=signup.username,
        password=password_hash,
        subscribed=False,
        created_at=now or utcnow()
    )


def transaction_submission_update(transaction_id: str,
                                  now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Fields set when an officer submits a payment transaction ID.

    Submitting again clears any previous activation; the new transaction has
    to be approved by an admin before the officer is subscribed.
    """
    return {
        "transactionId": transaction_id,
        "subscriptionDate": now or utcnow(),
        "subscribed": False
    }


def can_activate(officer: Officer) -> bool:
    """An officer can be activated once per submitted transaction."""
    return officer.transaction_id is not None and not officer.subscribed


def activation_update(now: Optional[datetime] = None) -> Dict[str, Any]:
    """Fields set when an admin activates a subscription."""
    return {
        "subscribed": True,
        "subscriptionDate": now or utcnow()
    }


def public_officer(document: Dict[str, Any]) -> Dict[str, Any]:
    """Stored officer document as returned to clients, without the password."""
    return Officer.from_document(document).to_public()


def build_result(submission: SubmitResultRequest, now: Optional[datetime] = None) -> Result:
    """Quiz result with the display defaults applied."""
    return Result(
        username=submission.username,
        name=submission.name or "Unknown",
        phone=submission.phone or "Not Provided",
        score=submission.score,
        total=submission.total,
        date=submission.date or now or utcnow()
    )
