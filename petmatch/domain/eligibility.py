# SPDX-License-Identifier: Apache-2.0

"""
Donor eligibility rules.

Eligibility is an ordered list of named rules combined with AND. Each rule
returns a reason code when it fails. Missing data fails closed: a pet with an
unknown weight, age, health status or vaccination date is not eligible.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, List, Optional, Sequence, Tuple, Union

from ..models.entities import DonationRequest, Pet
from ..models.enums import IneligibilityReason

ILLNESS_MARKER = "enferm"
VACCINATION_VALIDITY_DAYS = 365
MIN_DONOR_WEIGHT_KG = 5
MIN_DONOR_AGE = 1
MAX_DONOR_AGE = 8

Moment = Union[date, datetime]


@dataclass
class EligibilityResult:
    """Outcome of an eligibility check."""
    eligible: bool
    reasons: List[IneligibilityReason] = field(default_factory=list)

    @classmethod
    def from_reasons(cls, reasons: Sequence[IneligibilityReason]) -> "EligibilityResult":
        return cls(eligible=not reasons, reasons=list(reasons))


@dataclass(frozen=True)
class EligibilityRule:
    """A named baseline rule; ``check`` returns a reason code on failure."""
    name: str
    check: Callable[[Pet, date], Optional[IneligibilityReason]]


@dataclass(frozen=True)
class RequestRule:
    """A named request-scoped rule."""
    name: str
    check: Callable[[Pet, DonationRequest], Optional[IneligibilityReason]]


def _as_date(moment: Moment) -> date:
    if isinstance(moment, datetime):
        return moment.date()
    return moment


def check_health_status(pet: Pet, today: date) -> Optional[IneligibilityReason]:
    """Health status must be present and must not report an illness."""
    if not pet.health_status or not pet.health_status.strip():
        return IneligibilityReason.HEALTH_STATUS_MISSING
    if ILLNESS_MARKER in pet.health_status.lower():
        return IneligibilityReason.ILLNESS_REPORTED
    return None


def check_vaccination(pet: Pet, today: date) -> Optional[IneligibilityReason]:
    """Last vaccination must be within the past 365 days, boundary included."""
    if pet.last_vaccination_date is None:
        return IneligibilityReason.VACCINATION_MISSING
    elapsed = (today - pet.last_vaccination_date).days
    if elapsed < 0:
        return IneligibilityReason.VACCINATION_IN_FUTURE
    if elapsed > VACCINATION_VALIDITY_DAYS:
        return IneligibilityReason.VACCINATION_EXPIRED
    return None


def check_weight(pet: Pet, today: date) -> Optional[IneligibilityReason]:
    """Weight floor, independent of species."""
    if pet.weight is None:
        return IneligibilityReason.WEIGHT_MISSING
    if pet.weight < MIN_DONOR_WEIGHT_KG:
        return IneligibilityReason.WEIGHT_BELOW_MINIMUM
    return None


def check_age(pet: Pet, today: date) -> Optional[IneligibilityReason]:
    """Age between 1 and 8 years, inclusive."""
    if pet.age is None:
        return IneligibilityReason.AGE_MISSING
    if not MIN_DONOR_AGE <= pet.age <= MAX_DONOR_AGE:
        return IneligibilityReason.AGE_OUT_OF_RANGE
    return None


BASELINE_RULES: Tuple[EligibilityRule, ...] = (
    EligibilityRule("health_status", check_health_status),
    EligibilityRule("vaccination", check_vaccination),
    EligibilityRule("weight", check_weight),
    EligibilityRule("age", check_age),
)


def check_species(pet: Pet, request: DonationRequest) -> Optional[IneligibilityReason]:
    # Both sides were normalized to Species when the records were validated
    if pet.species != request.species:
        return IneligibilityReason.SPECIES_MISMATCH
    return None


def check_breed(pet: Pet, request: DonationRequest) -> Optional[IneligibilityReason]:
    if request.breed and pet.breed != request.breed:
        return IneligibilityReason.BREED_MISMATCH
    return None


def check_blood_type(pet: Pet, request: DonationRequest) -> Optional[IneligibilityReason]:
    if request.required_blood_type and pet.blood_type != request.required_blood_type:
        return IneligibilityReason.BLOOD_TYPE_MISMATCH
    return None


def check_request_weight(pet: Pet, request: DonationRequest) -> Optional[IneligibilityReason]:
    if pet.weight is None or pet.weight < request.min_weight:
        return IneligibilityReason.BELOW_REQUEST_MIN_WEIGHT
    return None


REQUEST_RULES: Tuple[RequestRule, ...] = (
    RequestRule("species", check_species),
    RequestRule("breed", check_breed),
    RequestRule("blood_type", check_blood_type),
    RequestRule("min_weight", check_request_weight),
)


def classify(pet: Pet, now: Moment) -> EligibilityResult:
    """
    Classify a pet against the baseline donation criteria.

    Every rule is evaluated so that all failing reasons are reported, in
    rule order.

    Args:
        pet: Donor candidate
        now: Reference moment for the vaccination window

    Returns:
        EligibilityResult with reason codes for each unmet rule
    """
    today = _as_date(now)
    reasons = [
        reason for reason in (rule.check(pet, today) for rule in BASELINE_RULES)
        if reason is not None
    ]
    return EligibilityResult.from_reasons(reasons)


def classify_for_request(pet: Pet, request: DonationRequest, now: Moment) -> EligibilityResult:
    """
    Classify a pet against the baseline criteria and one donation request.

    Adds species, breed (when the request names one), exact blood type (when
    the request names one) and the request minimum weight.
    """
    baseline = classify(pet, now)
    reasons = list(baseline.reasons)
    reasons.extend(
        reason for reason in (rule.check(pet, request) for rule in REQUEST_RULES)
        if reason is not None
    )
    return EligibilityResult.from_reasons(reasons)


def eligible_pets(pets: Sequence[Pet], now: Moment) -> List[Pet]:
    """Pets meeting the baseline criteria, in input order."""
    return [pet for pet in pets if classify(pet, now).eligible]


def eligible_pets_for_request(
    pets: Sequence[Pet],
    request: DonationRequest,
    now: Moment
) -> List[Pet]:
    """Pets that may donate for a given request, in input order."""
    return [pet for pet in pets if classify_for_request(pet, request, now).eligible]
