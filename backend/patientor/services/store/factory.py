from patientor.config import settings
from patientor.services.store.interface import PatientStore
from patientor.services.store.mock import MockPatientStore


def get_patient_store() -> PatientStore:
    """
    Factory function to return the patient store implementation.
    Defaults to the in-memory mock; set PATIENTOR_PATIENT_STORE_BACKEND=http
    to talk to an external store.
    """
    if settings.patient_store_backend == "http":
        from patientor.services.store.http import HttpPatientStore
        return HttpPatientStore()
    return MockPatientStore(extra_patients=settings.mock_extra_patients)
