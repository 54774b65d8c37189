# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Filter state and facet definitions for the request feed.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field

from .enums import Facet, Locality, RequestStatus, Species, Urgency
from ..domain.vocabulary import (
    normalize_blood_type, normalize_locality, normalize_species, normalize_urgency
)


class FilterState(BaseModel):
    """
    Immutable snapshot of the feed filters.

    Multi-select facets are tuples without duplicates, in selection order.
    Transitions live in ``domain.filter_state``; instances are never
    modified in place.
    """

    model_config = ConfigDict(frozen=True)

    species: Tuple[Species, ...] = Field(default=(), description="Selected species")
    blood_types: Tuple[str, ...] = Field(default=(), description="Selected blood types")
    urgency: Tuple[Urgency, ...] = Field(default=(), description="Selected urgency levels")
    localities: Tuple[Locality, ...] = Field(default=(), description="Selected localities")
    free_text: str = Field(default="", description="Free-text search query")
    location: str = Field(default="", description="Address substring filter")
    tab: RequestStatus = Field(default=RequestStatus.ACTIVE, description="Status tab (clinic view)")

    def is_empty(self) -> bool:
        """Check if no filter is applied."""
        return self == FilterState()


@dataclass(frozen=True)
class FacetSpec:
    """A filterable dimension: where it lives and how its values are normalized."""
    facet: Facet
    state_field: str
    record_field: str
    normalize: Callable[[object], Optional[object]]


FACETS: Dict[Facet, FacetSpec] = {
    Facet.SPECIES: FacetSpec(Facet.SPECIES, "species", "species", normalize_species),
    Facet.BLOOD_TYPE: FacetSpec(Facet.BLOOD_TYPE, "blood_types", "required_blood_type", normalize_blood_type),
    Facet.URGENCY: FacetSpec(Facet.URGENCY, "urgency", "urgency", normalize_urgency),
    Facet.LOCALITY: FacetSpec(Facet.LOCALITY, "localities", "locality", normalize_locality),
}
