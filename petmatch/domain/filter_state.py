# SPDX-License-Identifier: Apache-2.0

"""
Filter state transitions.

Reducer-style pure functions: each takes a FilterState and returns a new one.
The species -> blood type invariant is enforced here: whenever species is
non-empty, every selected blood type belongs to the domain of the selected
species.
"""

from typing import Any, Iterable, Optional, Tuple, Union

from ..models.enums import Facet, RequestStatus, Species
from ..models.filters import FACETS, FilterState
from .vocabulary import blood_type_domain, normalize_species, normalize_status


def _unique(values: Iterable[Any]) -> Tuple[Any, ...]:
    """Drop duplicates, keeping first-seen order."""
    seen = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return tuple(seen)


def empty_state() -> FilterState:
    """The canonical empty filter state."""
    return FilterState()


def clear(state: Optional[FilterState] = None) -> FilterState:
    """
    Reset every filter.

    Args:
        state: Current state (ignored; accepted for reducer symmetry)

    Returns:
        The canonical empty state
    """
    return empty_state()


def narrow_blood_types(species: Tuple[Species, ...], blood_types: Tuple[str, ...]) -> Tuple[str, ...]:
    """Keep only blood types inside the domain of a species selection."""
    if not species:
        return blood_types
    domain = blood_type_domain(species)
    return tuple(value for value in blood_types if value in domain)


def set_species(state: FilterState, values: Iterable[Union[Species, str]]) -> FilterState:
    """
    Replace the species selection.

    Blood types outside the new domain are dropped in the same step. An empty
    selection widens the domain to every species, so blood types are kept.
    Unknown species values are ignored.
    """
    species = _unique(
        normalized for normalized in (normalize_species(value) for value in values)
        if normalized is not None
    )
    return state.model_copy(update={
        "species": species,
        "blood_types": narrow_blood_types(species, state.blood_types),
    })


def toggle_facet_value(state: FilterState, facet: Union[Facet, str], value: Any) -> FilterState:
    """
    Add a value to a facet selection if absent, remove it if present.

    Values outside the facet domain leave the state unchanged, as does a
    blood type outside the domain of the currently selected species.

    Args:
        state: Current state
        facet: Facet to toggle
        value: Raw facet value

    Returns:
        New filter state
    """
    try:
        definition = FACETS[Facet(facet)]
    except ValueError:
        return state

    normalized = definition.normalize(value)
    if normalized is None:
        return state

    current = getattr(state, definition.state_field)
    if normalized in current:
        updated = tuple(item for item in current if item != normalized)
    else:
        updated = current + (normalized,)

    if definition.facet == Facet.SPECIES:
        return set_species(state, updated)

    if definition.facet == Facet.BLOOD_TYPE and normalized not in current:
        if state.species and normalized not in blood_type_domain(state.species):
            return state

    return state.model_copy(update={definition.state_field: updated})


def set_facet_values(state: FilterState, facet: Union[Facet, str], values: Iterable[Any]) -> FilterState:
    """Replace a whole facet selection, dropping out-of-domain values."""
    try:
        definition = FACETS[Facet(facet)]
    except ValueError:
        return state

    if definition.facet == Facet.SPECIES:
        return set_species(state, values)

    normalized = _unique(
        item for item in (definition.normalize(value) for value in values) if item is not None
    )
    if definition.facet == Facet.BLOOD_TYPE:
        normalized = narrow_blood_types(state.species, normalized)
    return state.model_copy(update={definition.state_field: normalized})


def set_free_text(state: FilterState, text: Optional[str]) -> FilterState:
    """Replace the free-text query verbatim."""
    return state.model_copy(update={"free_text": text or ""})


def set_location(state: FilterState, text: Optional[str]) -> FilterState:
    """Replace the address filter verbatim."""
    return state.model_copy(update={"location": text or ""})


def set_tab(state: FilterState, status: Union[RequestStatus, str]) -> FilterState:
    """Select the status tab; unknown statuses leave the state unchanged."""
    normalized = normalize_status(status)
    if normalized is None:
        return state
    return state.model_copy(update={"tab": normalized})


def active_filter_count(state: FilterState) -> int:
    """Number of selected facet values plus non-blank text filters."""
    count = sum(len(getattr(state, definition.state_field)) for definition in FACETS.values())
    if state.free_text.strip():
        count += 1
    if state.location.strip():
        count += 1
    return count


def satisfies_domain_invariant(state: FilterState) -> bool:
    """Check that blood types lie inside the species domain."""
    if not state.species:
        return True
    domain = blood_type_domain(state.species)
    return all(value in domain for value in state.blood_types)
