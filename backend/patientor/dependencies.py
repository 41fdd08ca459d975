"""FastAPI dependency injection providers."""

from fastapi import HTTPException, Request, Security
from fastapi.security import APIKeyHeader

from patientor.config import settings
from patientor.services.diagnoses import DiagnosisCatalog
from patientor.services.entry_service import EntryService
from patientor.services.store.interface import PatientStore
from patientor.services.submission_guard import SubmissionGuard

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(
    api_key: str | None = Security(api_key_header),
) -> str:
    """Require the configured X-API-Key on endpoints that write patient records.

    Raises:
        HTTPException: 401 if key is missing or invalid.
    """
    if not api_key or api_key != settings.api_key:
        raise HTTPException(
            status_code=401,
            detail="Invalid or missing API key",
        )
    return api_key


def get_patient_store(request: Request) -> PatientStore:
    """Get the patient store singleton from application state."""
    return request.app.state.patient_store


async def get_diagnosis_catalog(request: Request) -> DiagnosisCatalog:
    """Diagnosis catalog for the session, fetched from the store on first use."""
    catalog = getattr(request.app.state, "diagnosis_catalog", None)
    if catalog is None:
        catalog = DiagnosisCatalog(await request.app.state.patient_store.list_diagnoses())
        request.app.state.diagnosis_catalog = catalog
    return catalog


async def get_entry_service(request: Request) -> EntryService:
    return EntryService(
        store=get_patient_store(request),
        catalog=await get_diagnosis_catalog(request),
        guard=SubmissionGuard(request.app.state.redis),
    )
