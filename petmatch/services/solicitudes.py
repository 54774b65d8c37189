# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Request Feed Supplier client.

Reads donation requests from the solicitudes service. Filters are sent in the
supplier's own form: one parameter per facet with comma-joined values and
species spelled Perro/Gato.
"""

import os
import logging
from typing import Any, Dict, Iterable, List, Optional

import requests
from opentelemetry import trace
from pydantic import ValidationError

from ..domain.vocabulary import to_external_species
from ..middleware.error_handler import NotFoundException, ServiceUnavailableException
from ..models.entities import DonationRequest
from ..models.filters import FilterState

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

DEFAULT_SOLICITUDES_API_URL = "https://solicitudes-service.fly.dev/api/v1"
DEFAULT_HTTP_TIMEOUT = 10.0

ACTIVE_FEED_PATH = "/solicitudes/user/activas/filtrar"
CLINIC_FEED_PATH = "/solicitudes/vet/filtrar"
REQUEST_PATH = "/solicitudes/user/{request_id}"

# Supplier payload key -> DonationRequest field
PAYLOAD_FIELDS = {
    "id": "id",
    "especie": "species",
    "tipo_sangre": "required_blood_type",
    "peso_minimo": "min_weight",
    "urgencia": "urgency",
    "localidad": "locality",
    "estado": "status",
    "fecha_creacion": "created_at",
    "nombre_mascota": "pet_name",
    "nombre_veterinaria": "clinic_name",
    "direccion": "location",
    "descripcion_solicitud": "description",
    "contacto": "vet_contact",
    "raza": "breed",
}


class FeedFetchError(ServiceUnavailableException):
    """The request feed could not be loaded."""

    def __init__(self, message: str):
        super().__init__(message)
        self.error_type = "feed-unavailable"


def http_timeout() -> float:
    """Collaborator timeout in seconds."""
    return float(os.getenv("PETMATCH_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT))


def _join(values: Iterable[Any]) -> str:
    return ",".join(str(getattr(value, "value", value)) for value in values)


def build_supplier_params(state: FilterState, include_status: bool = False) -> Dict[str, str]:
    """
    Serialize filter facets the way the supplier expects them.

    Empty facets are left out. Free text and location are filtered locally
    and never sent.
    """
    params = {}
    if state.species:
        params["especie"] = ",".join(
            label for label in (to_external_species(s) for s in state.species) if label
        )
    if state.blood_types:
        params["tipo_sangre"] = _join(state.blood_types)
    if state.urgency:
        params["urgencia"] = _join(state.urgency)
    if state.localities:
        params["localidad"] = _join(state.localities)
    if include_status:
        params["estado"] = state.tab.value
    return params


def request_from_payload(payload: Dict[str, Any]) -> DonationRequest:
    """
    Build a DonationRequest from a supplier record.

    Raises:
        ValidationError: if the record does not describe a valid request
    """
    data = {field: payload[key] for key, field in PAYLOAD_FIELDS.items() if payload.get(key) is not None}
    if "location" not in data and payload.get("ubicacion"):
        data["location"] = payload["ubicacion"]
    if "id" in data:
        data["id"] = str(data["id"])
    return DonationRequest(**data)


def _records(body: Any) -> List[Dict[str, Any]]:
    if isinstance(body, list):
        return body
    if isinstance(body, dict):
        for key in ("solicitudes", "data", "items"):
            if isinstance(body.get(key), list):
                return body[key]
    return []


class RequestFeedClient:
    """HTTP client for the solicitudes service."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None
    ):
        self.base_url = (base_url or os.getenv("SOLICITUDES_API_URL", DEFAULT_SOLICITUDES_API_URL)).rstrip("/")
        self.timeout = timeout if timeout is not None else http_timeout()
        self.session = session or requests.Session()

    def list_active(self, state: FilterState) -> List[DonationRequest]:
        """Active requests matching the facet filters."""
        return self._fetch(ACTIVE_FEED_PATH, build_supplier_params(state), user_type="owner")

    def list_for_clinic(self, state: FilterState) -> List[DonationRequest]:
        """Clinic requests matching the facet filters and the status tab."""
        return self._fetch(
            CLINIC_FEED_PATH,
            build_supplier_params(state, include_status=True),
            user_type="clinic"
        )

    def get_request(self, request_id: str) -> DonationRequest:
        """
        Fetch one donation request.

        Raises:
            NotFoundException: if the supplier does not know the request
            FeedFetchError: if the supplier cannot be reached or answers garbage
        """
        path = REQUEST_PATH.format(request_id=request_id)
        with tracer.start_as_current_span("feed.get_request") as span:
            span.set_attribute("feed.request_id", request_id)

            try:
                response = self.session.get(
                    f"{self.base_url}{path}",
                    headers={"X-User-Type": "owner"},
                    timeout=self.timeout
                )
                if response.status_code == 404:
                    raise NotFoundException(f"Donation request {request_id} not found")
                response.raise_for_status()
                body = response.json()
            except (requests.RequestException, ValueError) as e:
                span.record_exception(e)
                logger.error(
                    "Donation request fetch failed",
                    extra={"request_id": request_id, "error": str(e)}
                )
                raise FeedFetchError(f"Request feed unavailable: {e}") from e

            if isinstance(body, dict) and isinstance(body.get("solicitud"), dict):
                body = body["solicitud"]

            try:
                return request_from_payload(body)
            except (ValidationError, TypeError, AttributeError) as e:
                logger.error(
                    "Invalid donation request record",
                    extra={"request_id": request_id, "error": str(e)}
                )
                raise FeedFetchError(f"Supplier returned an invalid record for {request_id}") from e

    def _fetch(self, path: str, params: Dict[str, str], user_type: str) -> List[DonationRequest]:
        with tracer.start_as_current_span("feed.fetch") as span:
            span.set_attributes({
                "feed.path": path,
                "feed.filter_count": len(params)
            })

            try:
                response = self.session.get(
                    f"{self.base_url}{path}",
                    params=params,
                    headers={"X-User-Type": user_type},
                    timeout=self.timeout
                )
                response.raise_for_status()
                body = response.json()
            except (requests.RequestException, ValueError) as e:
                span.record_exception(e)
                logger.error(
                    "Request feed fetch failed",
                    extra={"path": path, "error": str(e)}
                )
                raise FeedFetchError(f"Request feed unavailable: {e}") from e

            requests_list = []
            for record in _records(body):
                try:
                    requests_list.append(request_from_payload(record))
                except (ValidationError, TypeError, AttributeError) as e:
                    logger.warning(
                        "Skipping invalid donation request record",
                        extra={"record_id": record.get("id") if isinstance(record, dict) else None,
                               "error": str(e)}
                    )

            span.set_attribute("feed.result_count", len(requests_list))
            logger.debug(
                "Request feed fetched",
                extra={"path": path, "count": len(requests_list)}
            )
            return requests_list
