# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Enumeration types for the Pet Match platform.
"""

from enum import Enum


class Species(str, Enum):
    """Donor/recipient species handled by the platform."""
    CANINE = "canine"
    FELINE = "feline"


class Urgency(str, Enum):
    """Donation request urgency levels."""
    HIGH = "high"
    MEDIUM = "medium"


class RequestStatus(str, Enum):
    """Donation request lifecycle status."""
    ACTIVE = "active"
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Locality(str, Enum):
    """Bogotá localities used to classify donation requests."""
    USAQUEN = "usaquen"
    CHAPINERO = "chapinero"
    SANTA_FE = "santa-fe"
    SAN_CRISTOBAL = "san-cristobal"
    USME = "usme"
    TUNJUELITO = "tunjuelito"
    BOSA = "bosa"
    KENNEDY = "kennedy"
    FONTIBON = "fontibon"
    ENGATIVA = "engativa"
    SUBA = "suba"
    BARRIOS_UNIDOS = "barrios-unidos"
    TEUSAQUILLO = "teusaquillo"
    LOS_MARTIRES = "los-martires"
    ANTONIO_NARINO = "antonio-narino"
    PUENTE_ARANDA = "puente-aranda"
    LA_CANDELARIA = "la-candelaria"
    RAFAEL_URIBE_URIBE = "rafael-uribe-uribe"
    CIUDAD_BOLIVAR = "ciudad-bolivar"
    SUMAPAZ = "sumapaz"


class Facet(str, Enum):
    """Filterable dimensions of the request feed."""
    SPECIES = "species"
    BLOOD_TYPE = "blood_type"
    URGENCY = "urgency"
    LOCALITY = "locality"


class IneligibilityReason(str, Enum):
    """Reason codes reported when a pet cannot donate."""
    HEALTH_STATUS_MISSING = "health_status_missing"
    ILLNESS_REPORTED = "illness_reported"
    VACCINATION_MISSING = "vaccination_missing"
    VACCINATION_IN_FUTURE = "vaccination_in_future"
    VACCINATION_EXPIRED = "vaccination_expired"
    WEIGHT_MISSING = "weight_missing"
    WEIGHT_BELOW_MINIMUM = "weight_below_minimum"
    AGE_MISSING = "age_missing"
    AGE_OUT_OF_RANGE = "age_out_of_range"
    SPECIES_MISMATCH = "species_mismatch"
    BREED_MISMATCH = "breed_mismatch"
    BLOOD_TYPE_MISMATCH = "blood_type_mismatch"
    BELOW_REQUEST_MIN_WEIGHT = "below_request_min_weight"
