# SPDX-License-Identifier: Apache-2.0

"""
Donation request lifecycle rules.

Status workflow: active <-> pending, active -> completed, active -> cancelled,
pending -> completed. Completed and cancelled are terminal.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..models.entities import ALLOWED_STATUS_TRANSITIONS, DonationRequest
from ..models.enums import RequestStatus


@dataclass
class ValidationResult:
    """Result of a lifecycle validation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)


@dataclass
class TransitionResult:
    """Result of a status change."""
    success: bool
    request: Optional[DonationRequest] = None
    error_message: Optional[str] = None
    validation_errors: List[str] = field(default_factory=list)


def is_terminal(status: RequestStatus) -> bool:
    """Check if no transition leaves a status."""
    return not ALLOWED_STATUS_TRANSITIONS[status]


def validate_status_transition(
    current_status: RequestStatus,
    new_status: RequestStatus
) -> ValidationResult:
    """
    Validate a donation request status transition.

    Args:
        current_status: Current request status
        new_status: Desired new status

    Returns:
        ValidationResult with validation status and errors
    """
    errors = []

    if new_status not in ALLOWED_STATUS_TRANSITIONS.get(current_status, frozenset()):
        errors.append(
            f"Invalid status transition from {current_status.value} to {new_status.value}"
        )

    return ValidationResult(is_valid=len(errors) == 0, errors=errors)


def change_request_status(
    request: DonationRequest,
    new_status: RequestStatus
) -> TransitionResult:
    """
    Return a copy of the request moved to a new status.

    The original request is left untouched.
    """
    validation = validate_status_transition(request.status, new_status)
    if not validation.is_valid:
        return TransitionResult(
            success=False,
            error_message="Status transition rejected",
            validation_errors=validation.errors
        )

    updated = request.model_copy()
    updated.transition_to(new_status)
    return TransitionResult(success=True, request=updated)
