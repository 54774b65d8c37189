# SPDX-License-Identifier: Apache-2.0

"""
Controlled vocabularies and boundary normalization.

Every value that crosses a boundary (URL, collaborator payload, collaborator
query) is normalized here exactly once. Internal code compares enum members
only.
"""

import unicodedata
from typing import Dict, FrozenSet, Iterable, Optional, Tuple, Union

from ..models.enums import Locality, RequestStatus, Species, Urgency


CANINE_BLOOD_TYPES: Tuple[str, ...] = (
    "DEA 1.1+", "DEA 1.1-",
    "DEA 3+", "DEA 3-",
    "DEA 4+", "DEA 4-",
    "DEA 5+", "DEA 5-",
)

FELINE_BLOOD_TYPES: Tuple[str, ...] = ("A", "B", "AB")

BLOOD_TYPES: Dict[Species, Tuple[str, ...]] = {
    Species.CANINE: CANINE_BLOOD_TYPES,
    Species.FELINE: FELINE_BLOOD_TYPES,
}

# Labels used by the external collaborators and shown to users
SPECIES_LABELS: Dict[Species, str] = {
    Species.CANINE: "Perro",
    Species.FELINE: "Gato",
}

URGENCY_LABELS: Dict[Urgency, str] = {
    Urgency.HIGH: "Alta urgencia",
    Urgency.MEDIUM: "Urgencia media",
}

STATUS_LABELS: Dict[RequestStatus, str] = {
    RequestStatus.ACTIVE: "Activa",
    RequestStatus.PENDING: "Pendiente",
    RequestStatus.COMPLETED: "Completada",
    RequestStatus.CANCELLED: "Cancelada",
}

LOCALITY_LABELS: Dict[Locality, str] = {
    Locality.USAQUEN: "Usaquén",
    Locality.CHAPINERO: "Chapinero",
    Locality.SANTA_FE: "Santa Fe",
    Locality.SAN_CRISTOBAL: "San Cristóbal",
    Locality.USME: "Usme",
    Locality.TUNJUELITO: "Tunjuelito",
    Locality.BOSA: "Bosa",
    Locality.KENNEDY: "Kennedy",
    Locality.FONTIBON: "Fontibón",
    Locality.ENGATIVA: "Engativá",
    Locality.SUBA: "Suba",
    Locality.BARRIOS_UNIDOS: "Barrios Unidos",
    Locality.TEUSAQUILLO: "Teusaquillo",
    Locality.LOS_MARTIRES: "Los Mártires",
    Locality.ANTONIO_NARINO: "Antonio Nariño",
    Locality.PUENTE_ARANDA: "Puente Aranda",
    Locality.LA_CANDELARIA: "La Candelaria",
    Locality.RAFAEL_URIBE_URIBE: "Rafael Uribe Uribe",
    Locality.CIUDAD_BOLIVAR: "Ciudad Bolívar",
    Locality.SUMAPAZ: "Sumapaz",
}

_SPECIES_ALIASES: Dict[str, Species] = {
    "canine": Species.CANINE,
    "perro": Species.CANINE,
    "feline": Species.FELINE,
    "gato": Species.FELINE,
}

_URGENCY_ALIASES: Dict[str, Urgency] = {
    "high": Urgency.HIGH,
    "alta": Urgency.HIGH,
    "medium": Urgency.MEDIUM,
    "media": Urgency.MEDIUM,
}

_STATUS_ALIASES: Dict[str, RequestStatus] = {
    "active": RequestStatus.ACTIVE,
    "activa": RequestStatus.ACTIVE,
    "pending": RequestStatus.PENDING,
    "pendiente": RequestStatus.PENDING,
    "completed": RequestStatus.COMPLETED,
    "completada": RequestStatus.COMPLETED,
    "cancelled": RequestStatus.CANCELLED,
    "cancelada": RequestStatus.CANCELLED,
}


def slugify(text: str) -> str:
    """Lowercase, strip diacritics and join words with hyphens."""
    decomposed = unicodedata.normalize("NFD", text)
    ascii_text = "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")
    cleaned = "".join(ch if ch.isalnum() else " " for ch in ascii_text.lower())
    return "-".join(cleaned.split())


def _key(value: object) -> Optional[str]:
    if isinstance(value, str):
        return value.strip().lower()
    return None


def normalize_species(value: Union[Species, str, None]) -> Optional[Species]:
    """
    Map any known species spelling onto the internal vocabulary.

    Accepts the internal values ("canine", "feline") and the collaborator
    labels ("Perro", "Gato"), ignoring case and surrounding whitespace.

    Returns:
        The Species member, or None when the value is unknown
    """
    if isinstance(value, Species):
        return value
    key = _key(value)
    if key is None:
        return None
    return _SPECIES_ALIASES.get(key)


def to_external_species(species: Union[Species, str]) -> Optional[str]:
    """Map a species onto the collaborator vocabulary ("Perro"/"Gato")."""
    normalized = normalize_species(species)
    if normalized is None:
        return None
    return SPECIES_LABELS[normalized]


def species_label(species: Species) -> str:
    """Human readable species label."""
    return SPECIES_LABELS[species]


def normalize_urgency(value: Union[Urgency, str, None]) -> Optional[Urgency]:
    """Map internal or Spanish urgency labels onto Urgency."""
    if isinstance(value, Urgency):
        return value
    key = _key(value)
    if key is None:
        return None
    return _URGENCY_ALIASES.get(key)


def normalize_status(value: Union[RequestStatus, str, None]) -> Optional[RequestStatus]:
    """Map internal or Spanish status labels onto RequestStatus."""
    if isinstance(value, RequestStatus):
        return value
    key = _key(value)
    if key is None:
        return None
    return _STATUS_ALIASES.get(key)


_LOCALITY_BY_SLUG: Dict[str, Locality] = {locality.value: locality for locality in Locality}
_LOCALITY_BY_SLUG.update({slugify(label): locality for locality, label in LOCALITY_LABELS.items()})


def normalize_locality(value: Union[Locality, str, None]) -> Optional[Locality]:
    """
    Map a locality slug or label onto Locality.

    "suba", "Suba", "Barrios Unidos" and "fontibón" are all accepted.
    """
    if isinstance(value, Locality):
        return value
    if not isinstance(value, str):
        return None
    return _LOCALITY_BY_SLUG.get(slugify(value))


def locality_label(locality: Locality) -> str:
    """Human readable locality label."""
    return LOCALITY_LABELS[locality]


def normalize_blood_type(value: Optional[str]) -> Optional[str]:
    """
    Canonical spelling of a blood type, or None when it is not in any vocabulary.

    Matching ignores case and surrounding whitespace ("dea 1.1+" -> "DEA 1.1+").
    """
    if not isinstance(value, str):
        return None
    key = " ".join(value.split()).upper()
    for vocabulary in BLOOD_TYPES.values():
        if key in vocabulary:
            return key
    return None


def blood_type_domain(species: Iterable[Species] = ()) -> FrozenSet[str]:
    """
    Blood types allowed for a species selection.

    An empty selection means "all species" and yields every known type.
    """
    selected = tuple(species)
    if not selected:
        selected = tuple(Species)
    domain = set()
    for item in selected:
        domain.update(BLOOD_TYPES[item])
    return frozenset(domain)


def ordered_blood_types(species: Iterable[Species] = ()) -> Tuple[str, ...]:
    """Blood type domain in vocabulary order, for option lists."""
    domain = blood_type_domain(species)
    ordered = CANINE_BLOOD_TYPES + FELINE_BLOOD_TYPES
    return tuple(value for value in ordered if value in domain)


def is_known_blood_type(blood_type: str, species: Species) -> bool:
    """Check membership of a blood type in one species' vocabulary."""
    return blood_type in BLOOD_TYPES.get(species, ())
