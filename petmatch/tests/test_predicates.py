# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the predicate compiler.
"""

import pytest

from petmatch.domain import filter_state as fs
from petmatch.domain.predicates import (
    compile_clinic_predicate, compile_predicate, filter_requests, free_text_predicate,
    location_predicate, searchable_fields
)
from petmatch.models.enums import Facet, Locality, RequestStatus, Species, Urgency
from petmatch.models.filters import FilterState


class TestCompilePredicate:
    """Facet and text matching on the public feed."""

    def test_empty_state_matches_every_active_request(self, rocky_request, luna_request):
        predicate = compile_predicate(FilterState())

        assert predicate(rocky_request)
        assert predicate(luna_request)

    def test_matching_facets(self, rocky_request):
        """Test a request matching every facet passes."""
        state = FilterState(
            species=(Species.CANINE,),
            blood_types=("DEA 1.1+",),
            urgency=(Urgency.HIGH,),
            localities=(Locality.SUBA,)
        )

        assert compile_predicate(state)(rocky_request)

    @pytest.mark.parametrize("facet,value", [
        (Facet.SPECIES, "feline"),
        (Facet.BLOOD_TYPE, "DEA 1.1-"),
        (Facet.URGENCY, "medium"),
        (Facet.LOCALITY, "chapinero"),
    ])
    def test_each_facet_can_reject(self, rocky_request, facet, value):
        state = fs.toggle_facet_value(FilterState(), facet, value)

        assert not compile_predicate(state)(rocky_request)

    def test_or_within_facet(self, rocky_request, luna_request):
        state = fs.set_facet_values(FilterState(), Facet.LOCALITY, ["suba", "chapinero"])
        predicate = compile_predicate(state)

        assert predicate(rocky_request)
        assert predicate(luna_request)

    def test_inactive_requests_never_match(self, completed_request):
        """Test the public feed ignores the status tab."""
        state = FilterState(tab=RequestStatus.COMPLETED)

        assert not compile_predicate(state)(completed_request)

    def test_free_text_matches_pet_name(self, rocky_request, luna_request):
        predicate = compile_predicate(fs.set_free_text(FilterState(), "rocky"))

        assert predicate(rocky_request)
        assert not predicate(luna_request)

    @pytest.mark.parametrize("term", ["perro", "dea 1.1", "principal", "san patricio", "SUBA"])
    def test_free_text_searchable_fields(self, rocky_request, term):
        assert free_text_predicate(term)(rocky_request)

    def test_free_text_blank_matches_all(self, rocky_request):
        assert free_text_predicate("   ")(rocky_request)

    def test_free_text_with_missing_fields(self):
        from petmatch.models.entities import DonationRequest
        bare = DonationRequest(species="feline", min_weight=3, urgency="medium", locality="bosa")

        assert free_text_predicate("gato")(bare)
        assert not free_text_predicate("rocky")(bare)

    def test_location_predicate(self, rocky_request, luna_request):
        predicate = location_predicate("vetcentral")

        assert predicate(rocky_request)
        assert not predicate(luna_request)

    def test_searchable_field_order(self, rocky_request):
        assert searchable_fields(rocky_request) == [
            "Perro",
            "DEA 1.1+",
            "Clínica VetCentral, Av. Principal 123",
            "Veterinaria San Patricio",
            "Suba",
            "Rocky",
        ]


class TestClinicPredicate:
    """Status tab filtering for the clinic view."""

    def test_tab_selects_status(self, rocky_request, completed_request):
        active = compile_clinic_predicate(FilterState())
        completed = compile_clinic_predicate(FilterState(tab=RequestStatus.COMPLETED))

        assert active(rocky_request)
        assert not active(completed_request)
        assert completed(completed_request)
        assert not completed(rocky_request)


class TestFilterRequests:
    """Test list filtering."""

    def test_keeps_input_order(self, sample_requests, rocky_request, luna_request):
        assert filter_requests(sample_requests, FilterState()) == [rocky_request, luna_request]

    def test_uses_given_predicate(self, sample_requests, completed_request):
        state = FilterState(tab=RequestStatus.COMPLETED)

        assert filter_requests(sample_requests, state, compile_clinic_predicate(state)) == [
            completed_request
        ]
