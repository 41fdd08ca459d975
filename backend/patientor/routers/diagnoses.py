from typing import List

from fastapi import APIRouter, Depends

from patientor.dependencies import get_diagnosis_catalog
from patientor.entries.models import Diagnosis
from patientor.services.diagnoses import DiagnosisCatalog

router = APIRouter(tags=["diagnoses"])


@router.get("", response_model=List[Diagnosis])
async def list_diagnoses(catalog: DiagnosisCatalog = Depends(get_diagnosis_catalog)):
    """
    Diagnosis codes usable on entries.
    """
    return catalog.all()
