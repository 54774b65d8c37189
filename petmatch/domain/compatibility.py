# SPDX-License-Identifier: Apache-2.0

"""
Blood type compatibility between donor and recipient.

The relation is asymmetric and species specific:

- Canine: DEA 1.1- is the universal donor; otherwise types must match.
- Feline: AB is the universal recipient; otherwise types must match.

Anything outside the known vocabulary is incompatible.
"""

from typing import List, Optional, Union

from ..models.enums import Species
from .vocabulary import BLOOD_TYPES, is_known_blood_type, normalize_species

CANINE_UNIVERSAL_DONOR = "DEA 1.1-"
FELINE_UNIVERSAL_RECIPIENT = "AB"


def is_compatible(
    donor_blood_type: Optional[str],
    required_blood_type: Optional[str],
    species: Union[Species, str, None]
) -> bool:
    """
    Decide whether a donor blood type may be given to a recipient.

    Args:
        donor_blood_type: Donor pet blood type
        required_blood_type: Blood type named by the request
        species: Species of both pets

    Returns:
        True only when the pair is known to be compatible
    """
    normalized = normalize_species(species)
    if normalized is None:
        return False

    if not isinstance(donor_blood_type, str) or not isinstance(required_blood_type, str):
        return False

    if not (is_known_blood_type(donor_blood_type, normalized) and
            is_known_blood_type(required_blood_type, normalized)):
        return False

    if normalized == Species.CANINE and donor_blood_type == CANINE_UNIVERSAL_DONOR:
        return True

    if normalized == Species.FELINE and required_blood_type == FELINE_UNIVERSAL_RECIPIENT:
        return True

    return donor_blood_type == required_blood_type


def compatible_donor_types(
    required_blood_type: Optional[str],
    species: Union[Species, str, None]
) -> List[str]:
    """List the donor blood types a recipient accepts, in vocabulary order."""
    normalized = normalize_species(species)
    if normalized is None:
        return []
    return [
        donor for donor in BLOOD_TYPES[normalized]
        if is_compatible(donor, required_blood_type, normalized)
    ]
