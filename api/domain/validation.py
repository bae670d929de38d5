# SPDX-License-Identifier: Apache-2.0

"""
Format checks for officer input.

These run before any write and are shared by the create and update paths,
independent of how documents are stored.
"""

import re
from typing import Optional

MOBILE_PATTERN = re.compile(r'[0-9]{10}')
TRANSACTION_ID_PATTERN = re.compile(r'[0-9]{12}')


def is_valid_mobile(value: Optional[str]) -> bool:
    """True iff value is exactly 10 ASCII digits."""
    return isinstance(value, str) and MOBILE_PATTERN.fullmatch(value) is not None


def is_valid_transaction_id(value: Optional[str]) -> bool:
    """
    True iff value is exactly 12 ASCII digits, or absent/empty.

    The field is optional on a stored officer; endpoints that need one use
    :func:`require_transaction_id` instead.
    """
    if value is None or value == "":
        return True
    return isinstance(value, str) and TRANSACTION_ID_PATTERN.fullmatch(value) is not None


def require_transaction_id(value: Optional[str]) -> bool:
    """True iff value is present and exactly 12 ASCII digits."""
    return bool(value) and is_valid_transaction_id(value)
