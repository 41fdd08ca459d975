from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Path, Security, status

from patientor.dependencies import get_entry_service, get_patient_store, verify_api_key
from patientor.entries.models import Entry, NonSensitivePatient, Patient
from patientor.entries.render import render_entry, summarize_entry
from patientor.services.entry_service import EntryService
from patientor.services.store.interface import PatientStore

router = APIRouter(
    tags=["patients"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=List[NonSensitivePatient])
async def list_patients(store: PatientStore = Depends(get_patient_store)):
    """
    List all patients without ssn or entries.
    """
    return await store.list_patients()


@router.get("/{patient_id}", response_model=Patient)
async def get_patient(
    patient_id: str = Path(..., description="Patient ID"),
    store: PatientStore = Depends(get_patient_store),
):
    """
    Fetch a patient with all entries in insertion order.
    """
    return await store.get_patient(patient_id)


@router.get("/{patient_id}/entries")
async def list_entry_cards(
    patient_id: str = Path(..., description="Patient ID"),
    store: PatientStore = Depends(get_patient_store),
) -> List[Dict[str, Any]]:
    """
    Entries of a patient as display cards, one per entry, in insertion order.
    """
    patient = await store.get_patient(patient_id)
    return [
        {**summarize_entry(entry), "lines": render_entry(entry)}
        for entry in patient.entries
    ]


@router.post("/{patient_id}/entries", response_model=Entry, status_code=status.HTTP_201_CREATED)
async def add_entry(
    draft: Dict[str, Any] = Body(...),
    patient_id: str = Path(..., description="Patient ID"),
    store: PatientStore = Depends(get_patient_store),
    entry_service: EntryService = Depends(get_entry_service),
    api_key: str = Security(verify_api_key),
):
    """
    Validate the submitted form values and add the entry to the patient.
    Returns the stored entry with its assigned id.
    """
    patient = await store.get_patient(patient_id)
    updated = await entry_service.submit_new_entry(patient, draft)
    return updated.entries[-1]
