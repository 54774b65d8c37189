# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Pet Registry client. Read-only access to the pets owned by a user.
"""

import os
import logging
from typing import Any, Dict, List, Optional

import requests
from opentelemetry import trace
from pydantic import ValidationError

from ..middleware.error_handler import NotFoundException, ServiceUnavailableException
from ..models.entities import Pet
from .solicitudes import http_timeout

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

DEFAULT_PETS_API_URL = "https://mascotas-service.fly.dev/api/v1"

# Registry payload keys, first match wins
PAYLOAD_FIELDS = {
    "id": ("id", "_id"),
    "owner_id": ("ownerId", "owner_id", "user_id"),
    "name": ("name", "nombre"),
    "species": ("species", "especie"),
    "breed": ("breed", "raza"),
    "blood_type": ("bloodType", "blood_type", "tipo_sangre"),
    "weight": ("weight", "peso"),
    "age": ("age", "edad"),
    "health_status": ("healthStatus", "health_status", "estado_salud"),
    "last_vaccination_date": ("lastVaccination", "last_vaccination_date", "ultima_vacunacion"),
    "photo": ("photo", "imageUrl", "foto"),
}


class PetRegistryError(ServiceUnavailableException):
    """The pet registry could not be reached."""

    def __init__(self, message: str):
        super().__init__(message)
        self.error_type = "pet-registry-unavailable"


def pet_from_payload(payload: Dict[str, Any], owner_id: Optional[str] = None) -> Pet:
    """
    Build a Pet from a registry record.

    ``owner_id`` fills in the owner when the record omits it.
    """
    data = {}
    for field, keys in PAYLOAD_FIELDS.items():
        for key in keys:
            if payload.get(key) not in (None, ""):
                data[field] = payload[key]
                break
    if "owner_id" not in data and owner_id is not None:
        data["owner_id"] = owner_id
    for key in ("id", "owner_id"):
        if key in data:
            data[key] = str(data[key])
    return Pet(**data)


class PetRegistryClient:
    """HTTP client for the pets service."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None
    ):
        self.base_url = (base_url or os.getenv("PETS_API_URL", DEFAULT_PETS_API_URL)).rstrip("/")
        self.timeout = timeout if timeout is not None else http_timeout()
        self.session = session or requests.Session()

    def list_for_owner(self, owner_id: str) -> List[Pet]:
        """Pets registered by an owner. Invalid records are skipped."""
        with tracer.start_as_current_span("pets.list_for_owner") as span:
            span.set_attribute("pets.owner_id", owner_id)
            body = self._get(f"/pets/user/{owner_id}")
            records = body if isinstance(body, list) else (body or {}).get("pets", [])

            pets = []
            for record in records:
                try:
                    pets.append(pet_from_payload(record, owner_id=owner_id))
                except (ValidationError, TypeError, AttributeError) as e:
                    logger.warning(
                        "Skipping invalid pet record",
                        extra={"owner_id": owner_id, "error": str(e)}
                    )

            span.set_attribute("pets.result_count", len(pets))
            return pets

    def get_pet(self, pet_id: str) -> Pet:
        """
        Fetch one pet.

        Raises:
            NotFoundException: if the registry does not know the pet
            PetRegistryError: if the registry cannot be reached or answers garbage
        """
        with tracer.start_as_current_span("pets.get_pet") as span:
            span.set_attribute("pets.pet_id", pet_id)
            body = self._get(f"/pets/{pet_id}")
            try:
                return pet_from_payload(body)
            except (ValidationError, TypeError, AttributeError) as e:
                logger.error("Invalid pet record", extra={"pet_id": pet_id, "error": str(e)})
                raise PetRegistryError(f"Pet registry returned an invalid record for {pet_id}") from e

    def _get(self, path: str) -> Any:
        try:
            response = self.session.get(f"{self.base_url}{path}", timeout=self.timeout)
            if response.status_code == 404:
                raise NotFoundException(f"Pet registry resource not found: {path}")
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error("Pet registry request failed", extra={"path": path, "error": str(e)})
            raise PetRegistryError(f"Pet registry unavailable: {e}") from e
