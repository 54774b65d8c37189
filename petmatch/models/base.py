# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Base record models with common configuration.
"""

import uuid
from datetime import datetime, timezone
from pydantic import BaseModel, Field, ConfigDict


def generate_record_id() -> str:
    """Generate a new opaque record identifier."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class BaseRecord(BaseModel):
    """Base for records read from the collaborator services."""

    model_config = ConfigDict(
        # Allow population by field name or alias
        populate_by_name=True,
        # Validate assignment
        validate_assignment=True,
        # Collaborators send extra fields we do not model
        extra="ignore"
    )

    id: str = Field(default_factory=generate_record_id, description="Opaque identifier")
