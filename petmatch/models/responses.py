# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Response models for API endpoints with HAL support.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


class HalLink(BaseModel):
    """HAL link representation."""

    href: str = Field(..., description="Link URL")
    method: Optional[str] = Field(None, description="HTTP method")
    type: Optional[str] = Field(None, description="Content type")
    title: Optional[str] = Field(None, description="Link title")
    templated: Optional[bool] = Field(None, description="Whether URL is templated")


class EligibilityResponse(BaseModel):
    """Donor eligibility classification."""

    pet_id: str = Field(..., description="Classified pet")
    request_id: Optional[str] = Field(None, description="Request the pet was checked against")
    eligible: bool = Field(..., description="Whether the pet may donate")
    reasons: List[str] = Field(default_factory=list, description="Reason codes for ineligibility")


class CompatibilityResponse(BaseModel):
    """Blood type compatibility answer."""

    donor_blood_type: str = Field(..., description="Donor blood type")
    required_blood_type: str = Field(..., description="Recipient blood type")
    species: str = Field(..., description="Species as sent by the caller")
    compatible: bool = Field(..., description="Whether the donor type may be used")
    compatible_donor_types: List[str] = Field(
        default_factory=list, description="Every donor type accepted by the recipient"
    )
