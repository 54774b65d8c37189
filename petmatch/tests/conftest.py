# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Pytest configuration and fixtures.
"""

import os
import pytest
from datetime import date, datetime, timedelta, timezone
from typing import List

from petmatch.domain.debounce import ManualScheduler
from petmatch.middleware.error_handler import NotFoundException
from petmatch.models.entities import DonationRequest, Pet
from petmatch.models.enums import Locality, RequestStatus, Species, Urgency

# Set test environment
os.environ['ENVIRONMENT'] = 'test'
os.environ['OTEL_ENABLED'] = 'false'

FROZEN_NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class StubFeedClient:
    """Request Feed Supplier returning fixed records and recording calls."""

    def __init__(self, records: List[DonationRequest], error: Exception = None):
        self.records = records
        self.error = error
        self.calls = []

    def list_active(self, state):
        self.calls.append(("active", state))
        if self.error:
            raise self.error
        return list(self.records)

    def list_for_clinic(self, state):
        self.calls.append(("clinic", state))
        if self.error:
            raise self.error
        return list(self.records)

    def get_request(self, request_id):
        self.calls.append(("get", request_id))
        if self.error:
            raise self.error
        for record in self.records:
            if record.id == request_id:
                return record
        raise NotFoundException(f"Donation request {request_id} not found")


class StubPetRegistry:
    """Pet Registry returning fixed pets per owner."""

    def __init__(self, pets: List[Pet]):
        self.pets = pets

    def list_for_owner(self, owner_id):
        return [pet for pet in self.pets if pet.owner_id == owner_id]


class RecordingHistory:
    """Address bar double that records every replace."""

    def __init__(self):
        self.replaced = []

    def replace(self, query_string):
        self.replaced.append(query_string)


@pytest.fixture
def now():
    """Frozen reference time."""
    return FROZEN_NOW


@pytest.fixture
def rocky_request():
    """Canine, DEA 1.1+, high urgency request in Suba."""
    return DonationRequest(
        id="REQ-001",
        species=Species.CANINE,
        required_blood_type="DEA 1.1+",
        min_weight=25,
        urgency=Urgency.HIGH,
        locality=Locality.SUBA,
        status=RequestStatus.ACTIVE,
        created_at=FROZEN_NOW - timedelta(days=2),
        pet_name="Rocky",
        clinic_name="Veterinaria San Patricio",
        location="Clínica VetCentral, Av. Principal 123",
        vet_contact="+57 300 123 4567"
    )


@pytest.fixture
def luna_request():
    """Feline, type A, medium urgency request in Chapinero."""
    return DonationRequest(
        id="REQ-002",
        species=Species.FELINE,
        required_blood_type="A",
        min_weight=4,
        urgency=Urgency.MEDIUM,
        locality=Locality.CHAPINERO,
        created_at=FROZEN_NOW - timedelta(days=5),
        pet_name="Luna",
        clinic_name="Clínica Gatuna VIP",
        location="Hospital Felino, Calle Secundaria 456"
    )


@pytest.fixture
def completed_request():
    """Canine request that is no longer active."""
    return DonationRequest(
        id="REQ-003",
        species=Species.CANINE,
        required_blood_type="DEA 1.1+",
        min_weight=20,
        urgency=Urgency.HIGH,
        locality=Locality.SUBA,
        status=RequestStatus.COMPLETED,
        pet_name="Max",
        clinic_name="Veterinaria San Patricio",
        location="Calle 145 # 91-19"
    )


@pytest.fixture
def sample_requests(rocky_request, luna_request, completed_request):
    """Feed records in supplier order."""
    return [rocky_request, luna_request, completed_request]


@pytest.fixture
def healthy_dog():
    """Canine donor meeting every baseline criterion."""
    return Pet(
        id="PET-001",
        owner_id="OWNER-1",
        name="Thor",
        species=Species.CANINE,
        breed="Labrador",
        blood_type="DEA 1.1+",
        weight=30,
        age=4,
        health_status="Excelente estado de salud",
        last_vaccination_date=date(2025, 1, 15)
    )


@pytest.fixture
def healthy_cat():
    """Feline donor meeting every baseline criterion."""
    return Pet(
        id="PET-002",
        owner_id="OWNER-1",
        name="Misu",
        species=Species.FELINE,
        breed="Siamés",
        blood_type="A",
        weight=5.5,
        age=3,
        health_status="Saludable",
        last_vaccination_date=date(2025, 3, 1)
    )


@pytest.fixture
def scheduler():
    """Virtual clock starting at t=0."""
    return ManualScheduler()


@pytest.fixture
def history():
    return RecordingHistory()


@pytest.fixture
def feed_client(sample_requests):
    return StubFeedClient(sample_requests)


@pytest.fixture
def app(feed_client, healthy_dog, healthy_cat):
    """Flask application wired to stub collaborators."""
    from petmatch.app import create_app

    app = create_app(
        request_feed_client=feed_client,
        pet_registry=StubPetRegistry([healthy_dog, healthy_cat]),
        config={'TESTING': True, 'BASE_URL': 'https://api.example.com'},
        clock=lambda: FROZEN_NOW
    )
    return app


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()
