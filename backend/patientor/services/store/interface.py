from abc import ABC, abstractmethod
from typing import List

from patientor.entries.models import Diagnosis, NonSensitivePatient, Patient


class PatientStore(ABC):
    """Abstract interface for the external patient store."""

    @abstractmethod
    async def list_patients(self) -> List[NonSensitivePatient]:
        """
        List all patients without sensitive fields (ssn, entries).
        """
        pass

    @abstractmethod
    async def get_patient(self, patient_id: str) -> Patient:
        """
        Fetch one patient with all entries.

        Raises PatientNotFoundError if the id is unknown.
        """
        pass

    @abstractmethod
    async def add_entry(self, patient_id: str, creation):
        """
        Submit a validated EntryCreation for a patient.
        Returns the stored Entry carrying its store-assigned id.

        Raises SubmissionError if the store rejects the entry.
        """
        pass

    @abstractmethod
    async def list_diagnoses(self) -> List[Diagnosis]:
        """
        List the diagnosis reference data.
        """
        pass

    async def close(self) -> None:
        """Release any connections held by the store."""
