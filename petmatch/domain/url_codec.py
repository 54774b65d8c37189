# SPDX-License-Identifier: Apache-2.0

"""
URL codec for filter state.

Maps a FilterState to a flat, multi-valued list of query parameters and back.
Encoding is deterministic; decoding is defensive and never raises: unknown
parameters and out-of-domain values are dropped.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union
from urllib.parse import parse_qsl, urlencode

from ..models.enums import Facet, RequestStatus
from ..models.filters import FACETS, FilterState
from .filter_state import narrow_blood_types
from .vocabulary import normalize_status

ParamList = List[Tuple[str, str]]

PARAM_SPECIES = "especie"
PARAM_BLOOD_TYPE = "tipo_sangre"
PARAM_URGENCY = "urgencia"
PARAM_LOCALITY = "localidad"
PARAM_FREE_TEXT = "busqueda"
PARAM_LOCATION = "ubicacion"
PARAM_TAB = "estado"

# Fixed facet order used when encoding
FACET_PARAMS: Tuple[Tuple[Facet, str], ...] = (
    (Facet.SPECIES, PARAM_SPECIES),
    (Facet.BLOOD_TYPE, PARAM_BLOOD_TYPE),
    (Facet.URGENCY, PARAM_URGENCY),
    (Facet.LOCALITY, PARAM_LOCALITY),
)

DEFAULT_TAB = RequestStatus.ACTIVE

KNOWN_PARAMS = frozenset(
    [param for _, param in FACET_PARAMS] + [PARAM_FREE_TEXT, PARAM_LOCATION, PARAM_TAB]
)


def _value(item: Any) -> str:
    return item.value if hasattr(item, "value") else str(item)


def encode(state: FilterState) -> ParamList:
    """
    Encode a filter state as query parameters.

    Facets come in fixed order (especie, tipo_sangre, urgencia, localidad)
    with values in selection order; empty facets are omitted. Free text and
    location are included verbatim only when non-blank. The status tab is
    omitted when it is the default.

    Args:
        state: Filter state to encode

    Returns:
        Ordered list of (name, value) pairs
    """
    params: ParamList = []

    for facet, param in FACET_PARAMS:
        for item in getattr(state, FACETS[facet].state_field):
            params.append((param, _value(item)))

    if state.free_text.strip():
        params.append((PARAM_FREE_TEXT, state.free_text))

    if state.location.strip():
        params.append((PARAM_LOCATION, state.location))

    if state.tab != DEFAULT_TAB:
        params.append((PARAM_TAB, state.tab.value))

    return params


def _group(params: Any) -> Dict[str, List[str]]:
    """Collect raw values per parameter name from any supported container."""
    grouped: Dict[str, List[str]] = {}
    if params is None:
        return grouped

    if hasattr(params, "getlist") and hasattr(params, "keys"):
        # werkzeug MultiDict / ImmutableMultiDict
        pairs: Iterable[Tuple[Any, Any]] = (
            (key, value) for key in params.keys() for value in params.getlist(key)
        )
    elif isinstance(params, Mapping):
        pairs = []
        for key, values in params.items():
            if isinstance(values, (list, tuple)):
                pairs.extend((key, value) for value in values)
            else:
                pairs.append((key, values))
    else:
        try:
            pairs = list(params)
        except TypeError:
            return grouped

    for pair in pairs:
        try:
            key, value = pair
        except (TypeError, ValueError):
            continue
        if not isinstance(key, str) or key not in KNOWN_PARAMS:
            continue
        if not isinstance(value, str):
            continue
        grouped.setdefault(key, []).append(value)

    return grouped


def decode(params: Union[ParamList, Mapping[str, Any], Any]) -> FilterState:
    """
    Decode query parameters into a filter state.

    Accepts a list of pairs, a mapping of name to value(s) or a werkzeug
    MultiDict. Unknown names, unknown values and duplicates are dropped;
    blood types outside the decoded species domain are dropped; single-valued
    parameters use their first value.

    Args:
        params: Raw query parameters

    Returns:
        Filter state; never raises for malformed input
    """
    grouped = _group(params)
    update: Dict[str, Any] = {}

    for facet, param in FACET_PARAMS:
        spec = FACETS[facet]
        values = []
        for raw in grouped.get(param, []):
            normalized = spec.normalize(raw)
            if normalized is not None and normalized not in values:
                values.append(normalized)
        update[spec.state_field] = tuple(values)

    update["blood_types"] = narrow_blood_types(update["species"], update["blood_types"])

    free_text = _first(grouped.get(PARAM_FREE_TEXT))
    if free_text is not None and free_text.strip():
        update["free_text"] = free_text

    location = _first(grouped.get(PARAM_LOCATION))
    if location is not None and location.strip():
        update["location"] = location

    tab = normalize_status(_first(grouped.get(PARAM_TAB)))
    if tab is not None:
        update["tab"] = tab

    return FilterState(**update)


def _first(values: Optional[List[str]]) -> Optional[str]:
    if not values:
        return None
    return values[0]


def to_query_string(state: FilterState) -> str:
    """Encode a filter state as a query string (without the leading '?')."""
    return urlencode(encode(state))


def from_query_string(query_string: Optional[str]) -> FilterState:
    """Decode a query string, with or without the leading '?'."""
    if not query_string:
        return FilterState()
    try:
        pairs = parse_qsl(query_string.lstrip("?"), keep_blank_values=True)
    except (TypeError, ValueError):
        return FilterState()
    return decode(pairs)
