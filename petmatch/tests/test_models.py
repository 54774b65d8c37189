# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Tests for Pydantic models.
"""

import pytest
from datetime import date, datetime, timezone
from pydantic import ValidationError

from petmatch.models.entities import DonationRequest, Pet
from petmatch.models.enums import Locality, RequestStatus, Species, Urgency
from petmatch.models.filters import FACETS, FilterState
from petmatch.models.enums import Facet
from petmatch.models.requests import CompatibilityCheckRequest, EligibilityCheckRequest


class TestDonationRequest:
    """Test DonationRequest model validation."""

    def test_normalizes_collaborator_vocabulary(self):
        """Test Spanish labels are mapped to internal members."""
        request = DonationRequest(
            species="Perro",
            required_blood_type="dea 1.1+",
            min_weight=25,
            urgency="Alta",
            locality="Suba",
            status="activa"
        )

        assert request.species == Species.CANINE
        assert request.required_blood_type == "DEA 1.1+"
        assert request.urgency == Urgency.HIGH
        assert request.locality == Locality.SUBA
        assert request.status == RequestStatus.ACTIVE
        assert request.id

    def test_defaults(self):
        request = DonationRequest(species="canine", min_weight=10, urgency="high", locality="bosa")

        assert request.status == RequestStatus.ACTIVE
        assert request.created_at.tzinfo is not None
        assert request.required_blood_type is None

    @pytest.mark.parametrize("field,value", [
        ("species", "horse"),
        ("urgency", "low"),
        ("locality", "medellin"),
        ("status", "archived"),
        ("min_weight", 0),
    ])
    def test_rejects_invalid_values(self, field, value):
        """Test unknown vocabulary values fail validation."""
        data = {"species": "canine", "min_weight": 10, "urgency": "high", "locality": "suba"}
        data[field] = value

        with pytest.raises(ValidationError):
            DonationRequest(**data)

    def test_blank_text_fields_become_none(self):
        request = DonationRequest(
            species="canine", min_weight=10, urgency="high", locality="suba",
            breed="  ", clinic_name=" Vet Uno "
        )

        assert request.breed is None
        assert request.clinic_name == "Vet Uno"

    def test_status_transitions(self, rocky_request):
        """Test allowed and rejected status moves."""
        assert rocky_request.can_transition_to(RequestStatus.PENDING)
        assert not rocky_request.can_transition_to(RequestStatus.ACTIVE)

        rocky_request.transition_to(RequestStatus.COMPLETED)
        assert rocky_request.status == RequestStatus.COMPLETED

        with pytest.raises(ValueError):
            rocky_request.transition_to(RequestStatus.ACTIVE)


class TestPet:
    """Test Pet model validation."""

    def test_optional_health_data(self):
        """Test a registry record may omit health data."""
        pet = Pet(owner_id="OWNER-1", species="gato")

        assert pet.species == Species.FELINE
        assert pet.weight is None
        assert pet.age is None
        assert pet.last_vaccination_date is None

    def test_vaccination_date_parsing(self):
        """Test ISO timestamps and datetimes become dates."""
        from_string = Pet(owner_id="o", species="canine", last_vaccination_date="2024-11-15T10:00:00Z")
        from_datetime = Pet(
            owner_id="o", species="canine",
            last_vaccination_date=datetime(2024, 11, 15, 8, tzinfo=timezone.utc)
        )

        assert from_string.last_vaccination_date == date(2024, 11, 15)
        assert from_datetime.last_vaccination_date == date(2024, 11, 15)

    def test_blank_owner_rejected(self):
        with pytest.raises(ValidationError):
            Pet(owner_id="   ", species="canine")

    def test_negative_weight_rejected(self):
        with pytest.raises(ValidationError):
            Pet(owner_id="o", species="canine", weight=-3)


class TestFilterState:
    """Test FilterState model."""

    def test_empty_by_default(self):
        state = FilterState()

        assert state.is_empty()
        assert state.tab == RequestStatus.ACTIVE

    def test_is_immutable(self):
        state = FilterState()

        with pytest.raises(ValidationError):
            state.free_text = "rocky"

    def test_facet_registry(self):
        """Test every facet maps a state field onto a record field."""
        assert set(FACETS) == set(Facet)
        assert FACETS[Facet.BLOOD_TYPE].state_field == "blood_types"
        assert FACETS[Facet.BLOOD_TYPE].record_field == "required_blood_type"


class TestRequestModels:
    """Test API request bodies."""

    def test_compatibility_fields_are_stripped(self):
        body = CompatibilityCheckRequest(
            donor_blood_type=" A ", required_blood_type="AB", species=" Gato "
        )

        assert body.donor_blood_type == "A"
        assert body.species == "Gato"

    def test_compatibility_rejects_blank(self):
        with pytest.raises(ValidationError):
            CompatibilityCheckRequest(donor_blood_type=" ", required_blood_type="A", species="feline")

    def test_eligibility_request_is_optional(self, healthy_dog):
        body = EligibilityCheckRequest(pet=healthy_dog.model_dump())

        assert body.request is None
        assert body.pet.id == healthy_dog.id
