# SPDX-License-Identifier: Apache-2.0

"""
Credential service: one-way password hashing with bcrypt.

The salt is generated per call and embedded in the digest, so hashing the
same plaintext twice yields different digests. Plaintext passwords are never
stored or logged.
"""

import os
import bcrypt
from typing import Any, Dict, Optional
from opentelemetry import trace
import logging

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 10

# bcrypt only reads the first 72 bytes of a secret
BCRYPT_MAX_BYTES = 72


def _utf8(value: str) -> bytes:
    return value.encode('utf-8')


def _secret(password: str) -> bytes:
    """Password bytes as bcrypt sees them, truncated to BCRYPT_MAX_BYTES."""
    return _utf8(password)[:BCRYPT_MAX_BYTES]


class AuthService:
    """bcrypt hashing and credential checks for admins and officers."""

    def __init__(self, rounds: Optional[int] = None):
        """
        Args:
            rounds: bcrypt cost factor; defaults to BCRYPT_ROUNDS or 10
        """
        self.rounds = rounds or int(os.getenv("BCRYPT_ROUNDS", str(DEFAULT_ROUNDS)))

    def hash_password(self, password: str) -> str:
        """Return the bcrypt digest of ``password`` as text."""
        with tracer.start_as_current_span("auth.hash_password") as span:
            span.set_attribute("auth.bcrypt_rounds", self.rounds)
            digest = bcrypt.hashpw(_secret(password), bcrypt.gensalt(rounds=self.rounds))
            return digest.decode('utf-8')

    def verify_password(self, password: str, hashed_password: Optional[str]) -> bool:
        """
        Compare ``password`` with a stored digest.

        Empty input and values that are not bcrypt digests never match.
        Passwords longer than BCRYPT_MAX_BYTES compare on their first 72 bytes.
        """
        with tracer.start_as_current_span("auth.verify_password") as span:
            if not password or not hashed_password:
                span.set_attribute("auth.verification_result", "empty")
                return False

            try:
                matched = bcrypt.checkpw(_secret(password), _utf8(hashed_password))
            except ValueError:
                span.set_attribute("auth.verification_result", "malformed_hash")
                logger.error("Stored password is not a bcrypt digest")
                return False

            span.set_attribute("auth.verification_result", "match" if matched else "mismatch")
            return matched

    def authenticate(self, account: Optional[Dict[str, Any]], password: str) -> bool:
        """True if ``account`` exists and its stored digest matches ``password``."""
        if account is None:
            # Unknown usernames cost one hash, like a mismatch
            self.hash_password(password or "")
            return False
        return self.verify_password(password, account.get("password"))
