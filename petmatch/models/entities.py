# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Core entity models for the Pet Match platform.

Species, urgency, locality and status fields are normalized on validation,
so a record built from collaborator data already speaks the internal
vocabulary.
"""

from datetime import date, datetime
from typing import Dict, FrozenSet, Optional
from pydantic import Field, field_validator, model_validator

from .base import BaseRecord, utc_now
from .enums import Locality, RequestStatus, Species, Urgency
from ..domain.vocabulary import (
    normalize_blood_type, normalize_locality, normalize_species,
    normalize_status, normalize_urgency
)


# active <-> pending, active/pending -> completed, active -> cancelled
ALLOWED_STATUS_TRANSITIONS: Dict[RequestStatus, FrozenSet[RequestStatus]] = {
    RequestStatus.ACTIVE: frozenset({
        RequestStatus.PENDING, RequestStatus.COMPLETED, RequestStatus.CANCELLED
    }),
    RequestStatus.PENDING: frozenset({RequestStatus.ACTIVE, RequestStatus.COMPLETED}),
    RequestStatus.COMPLETED: frozenset(),
    RequestStatus.CANCELLED: frozenset(),
}


def _species_or_error(value):
    species = normalize_species(value)
    if species is None:
        raise ValueError(f"Unknown species: {value!r}")
    return species


def _blood_type_or_raw(value):
    if value is None:
        return None
    normalized = normalize_blood_type(value)
    if normalized is not None:
        return normalized
    return str(value).strip() or None


class DonationRequest(BaseRecord):
    """Blood donation request published by a veterinary clinic."""

    species: Species = Field(..., description="Recipient species")
    required_blood_type: Optional[str] = Field(None, description="Required blood type, species scoped")
    min_weight: float = Field(..., gt=0, description="Minimum donor weight in kg")
    urgency: Urgency = Field(..., description="Urgency level")
    locality: Locality = Field(..., description="Bogotá locality")
    status: RequestStatus = Field(default=RequestStatus.ACTIVE, description="Lifecycle status")
    created_at: datetime = Field(default_factory=utc_now, description="Publication timestamp")
    pet_name: Optional[str] = Field(None, max_length=200, description="Recipient pet name")
    clinic_name: Optional[str] = Field(None, max_length=200, description="Publishing clinic")
    location: Optional[str] = Field(None, max_length=500, description="Clinic address text")
    description: Optional[str] = Field(None, max_length=2000, description="Case description")
    vet_contact: Optional[str] = Field(None, description="Clinic contact phone")
    breed: Optional[str] = Field(None, description="Required donor breed, if any")

    @field_validator('species', mode='before')
    @classmethod
    def validate_species(cls, v):
        """Normalize species aliases."""
        return _species_or_error(v)

    @field_validator('urgency', mode='before')
    @classmethod
    def validate_urgency(cls, v):
        """Normalize urgency labels."""
        urgency = normalize_urgency(v)
        if urgency is None:
            raise ValueError(f"Unknown urgency: {v!r}")
        return urgency

    @field_validator('locality', mode='before')
    @classmethod
    def validate_locality(cls, v):
        """Normalize locality slugs and labels."""
        locality = normalize_locality(v)
        if locality is None:
            raise ValueError(f"Unknown locality: {v!r}")
        return locality

    @field_validator('status', mode='before')
    @classmethod
    def validate_status(cls, v):
        """Normalize status labels."""
        status = normalize_status(v)
        if status is None:
            raise ValueError(f"Unknown request status: {v!r}")
        return status

    @field_validator('required_blood_type', mode='before')
    @classmethod
    def validate_blood_type(cls, v):
        """Canonical blood type spelling."""
        return _blood_type_or_raw(v)

    @field_validator('breed', 'pet_name', 'clinic_name', 'location', mode='before')
    @classmethod
    def strip_text(cls, v):
        """Strip text fields, mapping blanks to None."""
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    def is_active(self) -> bool:
        """Check if the request is visible on the public feed."""
        return self.status == RequestStatus.ACTIVE

    def can_transition_to(self, new_status: RequestStatus) -> bool:
        """Check if the request may move to a new status."""
        return new_status in ALLOWED_STATUS_TRANSITIONS[self.status]

    def transition_to(self, new_status: RequestStatus) -> None:
        """Move the request to a new status."""
        if not self.can_transition_to(new_status):
            raise ValueError(
                f"Invalid status transition from {self.status.value} to {new_status.value}"
            )
        self.status = new_status


class Pet(BaseRecord):
    """Donor candidate registered by an owner."""

    owner_id: str = Field(..., description="Owning user identifier")
    name: Optional[str] = Field(None, max_length=200, description="Pet name")
    species: Species = Field(..., description="Pet species")
    breed: Optional[str] = Field(None, description="Pet breed")
    blood_type: Optional[str] = Field(None, description="Blood type, species scoped")
    weight: Optional[float] = Field(None, gt=0, description="Weight in kg")
    age: Optional[int] = Field(None, ge=0, description="Age in years")
    health_status: Optional[str] = Field(None, description="Free-text health status")
    last_vaccination_date: Optional[date] = Field(None, description="Last vaccination date")
    photo: Optional[str] = Field(None, description="Opaque photo reference")

    @field_validator('species', mode='before')
    @classmethod
    def validate_species(cls, v):
        """Normalize species aliases."""
        return _species_or_error(v)

    @field_validator('blood_type', mode='before')
    @classmethod
    def validate_blood_type(cls, v):
        """Canonical blood type spelling."""
        return _blood_type_or_raw(v)

    @field_validator('breed', 'name', mode='before')
    @classmethod
    def strip_text(cls, v):
        """Strip text fields, mapping blanks to None."""
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator('last_vaccination_date', mode='before')
    @classmethod
    def validate_vaccination_date(cls, v):
        """Accept dates, datetimes and ISO timestamps."""
        if v is None or v == "":
            return None
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str) and len(v) > 10:
            return v[:10]
        return v

    @model_validator(mode='after')
    def validate_identity(self):
        """Validate owner identifier."""
        if not self.owner_id.strip():
            raise ValueError('Owner identifier cannot be empty')
        return self
