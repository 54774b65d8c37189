# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Request models for API endpoints.
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator

from .entities import DonationRequest, Pet


class EligibilityCheckRequest(BaseModel):
    """Request model for classifying a donor candidate."""

    pet: Pet = Field(..., description="Donor candidate")
    request: Optional[DonationRequest] = Field(
        None, description="Donation request to check the pet against"
    )


class CompatibilityCheckRequest(BaseModel):
    """Request model for a blood type compatibility check."""

    donor_blood_type: str = Field(..., min_length=1, description="Donor blood type")
    required_blood_type: str = Field(..., min_length=1, description="Recipient blood type")
    species: str = Field(..., min_length=1, description="Species (internal or collaborator label)")

    @field_validator('donor_blood_type', 'required_blood_type', 'species')
    @classmethod
    def validate_not_blank(cls, v):
        """Validate text fields are not blank."""
        if not v.strip():
            raise ValueError('Field cannot be blank')
        return v.strip()
