"""
HTTP client for an external patient store.

Endpoints (relative to ``settings.patient_store_url``):
  GET  /patients                 → NonSensitivePatient[]
  GET  /patients/{id}            → Patient
  POST /patients/{id}/entries    → Entry (body: EntryCreation)
  GET  /diagnoses                → Diagnosis[]

A rejected entry comes back as a 4xx with a plain-text (or JSON ``error``)
message; it is surfaced as ``SubmissionError`` with the store's boilerplate
prefix removed.
"""

import logging
from typing import Any, List, Optional

import httpx
from pydantic import TypeAdapter

from patientor.config import settings
from patientor.entries.models import Diagnosis, Entry, NonSensitivePatient, Patient
from patientor.exceptions import PatientNotFoundError, SubmissionError
from patientor.services.store.interface import PatientStore

logger = logging.getLogger(__name__)

_entry_adapter = TypeAdapter(Entry)
_patients_adapter = TypeAdapter(List[NonSensitivePatient])
_diagnoses_adapter = TypeAdapter(List[Diagnosis])


def extract_error_message(response: httpx.Response, prefix: Optional[str] = None) -> str:
    """Pull the display message out of a store error response."""
    prefix = settings.store_error_prefix if prefix is None else prefix
    message: Any = None
    try:
        body = response.json()
    except ValueError:
        body = response.text

    if isinstance(body, str):
        message = body
    elif isinstance(body, dict):
        message = body.get("error") or body.get("message")

    if not isinstance(message, str) or not message.strip():
        return f"Unrecognized store error (HTTP {response.status_code})"
    if prefix and message.startswith(prefix):
        message = message[len(prefix):]
    return message.strip()


class HttpPatientStore(PatientStore):
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (base_url or settings.patient_store_url).rstrip("/")
        self.client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or settings.patient_store_timeout,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        await self.client.aclose()

    async def _get(self, path: str) -> httpx.Response:
        response = await self.client.get(path)
        response.raise_for_status()
        return response

    async def list_patients(self) -> List[NonSensitivePatient]:
        response = await self._get("/patients")
        return _patients_adapter.validate_python(response.json())

    async def get_patient(self, patient_id: str) -> Patient:
        try:
            response = await self._get(f"/patients/{patient_id}")
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise PatientNotFoundError(patient_id) from e
            raise
        return Patient.model_validate(response.json())

    async def add_entry(self, patient_id: str, creation):
        payload = creation.model_dump(mode="json", exclude_none=True)
        try:
            response = await self.client.post(f"/patients/{patient_id}/entries", json=payload)
        except httpx.TransportError as e:
            logger.warning("Patient store unreachable while adding entry: %s", e)
            raise SubmissionError(f"Patient store unreachable: {e}") from e

        if response.status_code == 404:
            raise PatientNotFoundError(patient_id)
        if response.is_error:
            message = extract_error_message(response)
            logger.warning(
                "Patient store rejected %s entry for %s (HTTP %s): %s",
                payload.get("type"), patient_id, response.status_code, message,
            )
            raise SubmissionError(message, detail={"status_code": response.status_code})

        return _entry_adapter.validate_python(response.json())

    async def list_diagnoses(self) -> List[Diagnosis]:
        response = await self._get("/diagnoses")
        return _diagnoses_adapter.validate_python(response.json())
