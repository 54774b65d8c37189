# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the filter state URL codec.
"""

import pytest
from werkzeug.datastructures import MultiDict

from petmatch.domain.url_codec import (
    decode, encode, from_query_string, to_query_string
)
from petmatch.models.enums import Locality, RequestStatus, Species, Urgency
from petmatch.models.filters import FilterState


@pytest.fixture
def full_state():
    return FilterState(
        species=(Species.CANINE,),
        blood_types=("DEA 1.1+", "DEA 4-"),
        urgency=(Urgency.HIGH,),
        localities=(Locality.SUBA, Locality.CHAPINERO),
        free_text="rocky",
        location="Av. Principal",
        tab=RequestStatus.COMPLETED
    )


class TestEncode:
    """Test encoding order and omissions."""

    def test_empty_state_encodes_to_nothing(self):
        assert encode(FilterState()) == []
        assert to_query_string(FilterState()) == ""

    def test_fixed_parameter_order(self, full_state):
        """Test facets come first, in fixed order, then text and tab."""
        assert encode(full_state) == [
            ("especie", "canine"),
            ("tipo_sangre", "DEA 1.1+"),
            ("tipo_sangre", "DEA 4-"),
            ("urgencia", "high"),
            ("localidad", "suba"),
            ("localidad", "chapinero"),
            ("busqueda", "rocky"),
            ("ubicacion", "Av. Principal"),
            ("estado", "completed"),
        ]

    def test_blank_text_and_default_tab_omitted(self):
        state = FilterState(free_text="   ", location="", tab=RequestStatus.ACTIVE)

        assert encode(state) == []

    def test_query_string_escapes_values(self):
        state = FilterState(blood_types=("DEA 1.1+",), free_text="san patricio")

        assert to_query_string(state) == "tipo_sangre=DEA+1.1%2B&busqueda=san+patricio"


class TestDecode:
    """Test decoding of malformed or hand-edited input."""

    def test_round_trip(self, full_state):
        """Test decode(encode(s)) == s for a canonical state."""
        assert decode(encode(full_state)) == full_state
        assert from_query_string(to_query_string(full_state)) == full_state

    def test_round_trip_empty(self):
        assert decode(encode(FilterState())) == FilterState()

    def test_unknown_params_and_values_dropped(self):
        state = decode([
            ("especie", "dragon"),
            ("urgencia", "low"),
            ("localidad", "medellin"),
            ("page", "2"),
            ("estado", "archived"),
        ])

        assert state == FilterState()

    def test_duplicates_dropped(self):
        state = decode([("urgencia", "high"), ("urgencia", "alta"), ("urgencia", "medium")])

        assert state.urgency == (Urgency.HIGH, Urgency.MEDIUM)

    def test_blood_types_narrowed_to_species(self):
        """Test a hand-edited link cannot break the domain invariant."""
        state = decode([("especie", "Gato"), ("tipo_sangre", "DEA 1.1+"), ("tipo_sangre", "ab")])

        assert state.species == (Species.FELINE,)
        assert state.blood_types == ("AB",)

    def test_single_params_use_first_value(self):
        state = decode([("busqueda", "luna"), ("busqueda", "rocky")])

        assert state.free_text == "luna"

    def test_accepts_multidict_and_mapping(self):
        multi = MultiDict([("especie", "canine"), ("localidad", "suba"), ("localidad", "bosa")])
        mapping = {"especie": "canine", "localidad": ["suba", "bosa"]}

        assert decode(multi) == decode(mapping)
        assert decode(multi).localities == (Locality.SUBA, Locality.BOSA)

    @pytest.mark.parametrize("garbage", [None, 42, [("especie",)], [(1, 2)], "%%%", [("busqueda", None)]])
    def test_never_raises(self, garbage):
        """Test malformed input decodes to a valid state."""
        assert isinstance(decode(garbage), FilterState)

    def test_from_query_string_with_question_mark(self):
        state = from_query_string("?especie=Perro&urgencia=alta&estado=pendiente")

        assert state.species == (Species.CANINE,)
        assert state.urgency == (Urgency.HIGH,)
        assert state.tab == RequestStatus.PENDING

    def test_blank_text_is_dropped(self):
        assert from_query_string("busqueda=+++").free_text == ""
