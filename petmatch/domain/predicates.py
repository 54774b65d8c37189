# SPDX-License-Identifier: Apache-2.0

"""
Predicate compiler for the request feed.

Turns a FilterState into a single boolean function over DonationRequest.
Facets are OR within a selection and AND across facets; an empty selection
places no restriction.
"""

from typing import Callable, List, Optional, Sequence

from ..models.entities import DonationRequest
from ..models.enums import RequestStatus
from ..models.filters import FACETS, FilterState
from .vocabulary import locality_label, species_label

Predicate = Callable[[DonationRequest], bool]


def _always(request: DonationRequest) -> bool:
    return True


def searchable_fields(request: DonationRequest) -> List[Optional[str]]:
    """
    Fields matched by the free-text query, in order.

    Species label, blood type, address, clinic name, locality label, pet name.
    """
    return [
        species_label(request.species),
        request.required_blood_type,
        request.location,
        request.clinic_name,
        locality_label(request.locality),
        request.pet_name,
    ]


def facet_predicates(state: FilterState) -> List[Predicate]:
    """One membership predicate per non-empty facet selection."""
    predicates: List[Predicate] = []

    for spec in FACETS.values():
        selected = frozenset(getattr(state, spec.state_field))
        if not selected:
            continue

        def matches(request: DonationRequest, field=spec.record_field, allowed=selected) -> bool:
            return getattr(request, field, None) in allowed

        predicates.append(matches)

    return predicates


def free_text_predicate(text: str) -> Predicate:
    """Case-insensitive substring match against any searchable field."""
    term = (text or "").strip().lower()
    if not term:
        return _always

    def matches(request: DonationRequest) -> bool:
        return any(
            field is not None and term in field.lower()
            for field in searchable_fields(request)
        )

    return matches


def location_predicate(text: str) -> Predicate:
    """Case-insensitive substring match against the request address."""
    term = (text or "").strip().lower()
    if not term:
        return _always

    def matches(request: DonationRequest) -> bool:
        return request.location is not None and term in request.location.lower()

    return matches


def status_predicate(status: RequestStatus) -> Predicate:
    """Exact status match."""
    def matches(request: DonationRequest) -> bool:
        return request.status == status

    return matches


def _conjunction(predicates: Sequence[Predicate]) -> Predicate:
    checks = tuple(predicates)

    def matches(request: DonationRequest) -> bool:
        return all(check(request) for check in checks)

    return matches


def _compile(state: FilterState, status: RequestStatus) -> Predicate:
    predicates = [status_predicate(status)]
    predicates.extend(facet_predicates(state))
    predicates.append(free_text_predicate(state.free_text))
    predicates.append(location_predicate(state.location))
    return _conjunction(predicates)


def compile_predicate(state: FilterState) -> Predicate:
    """
    Compile the public feed predicate.

    The result is the AND of every facet predicate, the free-text and
    location predicates and an implicit ``status == active`` restriction
    that the filter state cannot override.

    Args:
        state: Filter state

    Returns:
        Predicate over DonationRequest
    """
    return _compile(state, RequestStatus.ACTIVE)


def compile_clinic_predicate(state: FilterState) -> Predicate:
    """Compile the clinic view predicate, restricting status to the selected tab."""
    return _compile(state, state.tab)


def filter_requests(
    requests: Sequence[DonationRequest],
    state: FilterState,
    predicate: Optional[Predicate] = None
) -> List[DonationRequest]:
    """
    Filter requests for the public feed, keeping input order.

    Args:
        requests: Requests to filter
        state: Filter state
        predicate: Precompiled predicate (defaults to ``compile_predicate(state)``)

    Returns:
        Matching requests
    """
    check = predicate or compile_predicate(state)
    return [request for request in requests if check(request)]
