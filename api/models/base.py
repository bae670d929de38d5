# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Base document model with common fields and (de)serialization helpers.
"""

from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, Optional, Set
from pydantic import BaseModel, Field, ConfigDict


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class BaseDocument(BaseModel):
    """Base model for documents stored in MongoDB.

    Python attributes are snake_case; stored documents and JSON responses use
    the camelCase aliases.
    """

    model_config = ConfigDict(
        # Allow population by field name or alias
        populate_by_name=True,
        # Validate assignment
        validate_assignment=True,
        # Ignore bookkeeping keys such as __v left by other writers
        extra="ignore"
    )

    # Fields never returned to API clients
    private_fields: ClassVar[Set[str]] = set()

    id: Optional[str] = Field(None, description="Document identifier")

    @classmethod
    def from_document(cls, document: Dict[str, Any]):
        """Build a model from a stored document (``_id`` already mapped to ``id``)."""
        return cls.model_validate(document)

    def to_document(self) -> Dict[str, Any]:
        """Document to insert. Unset optional fields are omitted, never stored as null."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude={"id"})

    def to_public(self) -> Dict[str, Any]:
        """JSON-safe representation with private fields removed."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude=self.private_fields
        )
