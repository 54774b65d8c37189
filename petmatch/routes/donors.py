# SPDX-License-Identifier: Apache-2.0

"""
Donor selection endpoints: eligibility classification, blood type
compatibility and the eligible pets of an owner.
"""

from flask import request, current_app
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
from pydantic import BaseModel, Field
import logging

from ..domain.compatibility import compatible_donor_types, is_compatible
from ..domain.eligibility import classify, classify_for_request
from ..domain.vocabulary import normalize_blood_type, normalize_species
from ..middleware.error_handler import ValidationException
from ..models.requests import CompatibilityCheckRequest, EligibilityCheckRequest
from ..models.responses import CompatibilityResponse, EligibilityResponse

# Set up logging and tracing
logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

donors_tag = Tag(name="Donors", description="Donor eligibility and blood compatibility")
donors_bp = APIBlueprint(
    'donors',
    __name__,
    url_prefix='/api',
    abp_tags=[donors_tag]
)


class OwnerPath(BaseModel):
    owner_id: str = Field(..., min_length=1, description="Owner identifier")


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationException(
            "Missing request body",
            [{"field": "body", "message": "A JSON object is required"}]
        )
    return data


@donors_bp.post('/donors/eligibility')
def check_eligibility():
    """
    Classify a donor candidate.

    Without a request the baseline criteria apply; with one, the species,
    breed, blood type and minimum weight of the request are checked too.
    """
    check = EligibilityCheckRequest(**_json_body())

    with tracer.start_as_current_span("donors.eligibility") as span:
        now = current_app.clock()
        if check.request is not None:
            result = classify_for_request(check.pet, check.request, now)
        else:
            result = classify(check.pet, now)

        span.set_attributes({
            "donor.eligible": result.eligible,
            "donor.reason_count": len(result.reasons),
            "donor.request_scoped": check.request is not None
        })
        span.set_status(Status(StatusCode.OK))

        logger.info(
            "Donor eligibility classified",
            extra={
                "pet_id": check.pet.id,
                "request_id": check.request.id if check.request else None,
                "eligible": result.eligible,
                "reasons": [reason.value for reason in result.reasons]
            }
        )

        response = EligibilityResponse(
            pet_id=check.pet.id,
            request_id=check.request.id if check.request else None,
            eligible=result.eligible,
            reasons=[reason.value for reason in result.reasons]
        )
        return response.model_dump(), 200


@donors_bp.post('/donors/compatibility')
def check_compatibility():
    """
    Check whether a donor blood type may be used for a recipient.

    Spelling is normalized first; unknown species or blood types are
    reported as incompatible.
    """
    check = CompatibilityCheckRequest(**_json_body())

    with tracer.start_as_current_span("donors.compatibility") as span:
        species = normalize_species(check.species)
        donor = normalize_blood_type(check.donor_blood_type) or check.donor_blood_type
        required = normalize_blood_type(check.required_blood_type) or check.required_blood_type

        compatible = is_compatible(donor, required, species)
        span.set_attributes({
            "donor.species": species.value if species else "unknown",
            "donor.compatible": compatible
        })

        response = CompatibilityResponse(
            donor_blood_type=donor,
            required_blood_type=required,
            species=check.species,
            compatible=compatible,
            compatible_donor_types=compatible_donor_types(required, species)
        )
        return response.model_dump(), 200


@donors_bp.get('/owners/<owner_id>/eligible-pets')
def list_eligible_pets(path: OwnerPath):
    """
    Classify every pet of an owner against the baseline criteria.
    """
    with tracer.start_as_current_span("donors.eligible_pets") as span:
        span.set_attribute("owner.id", path.owner_id)

        pets = current_app.pet_registry.list_for_owner(path.owner_id)
        now = current_app.clock()

        items = []
        for pet in pets:
            result = classify(pet, now)
            items.append({
                'pet': pet.model_dump(mode='json'),
                'eligible': result.eligible,
                'reasons': [reason.value for reason in result.reasons]
            })

        eligible_count = sum(1 for item in items if item['eligible'])
        span.set_attribute("owner.eligible_count", eligible_count)

        logger.info(
            "Owner pets classified",
            extra={"owner_id": path.owner_id, "pets": len(items), "eligible": eligible_count}
        )

        return {
            'owner_id': path.owner_id,
            'total': len(items),
            'eligible_count': eligible_count,
            '_embedded': {'pets': items}
        }, 200
