import logging
import random
import uuid
from typing import List, Optional

from faker import Faker

from patientor.entries.models import Diagnosis, Gender, NonSensitivePatient, Patient, with_id
from patientor.entries.records import append_entry, replace_patient
from patientor.exceptions import PatientNotFoundError, SubmissionError
from patientor.services.store.interface import PatientStore
from patientor.services.store import seed

logger = logging.getLogger(__name__)


class MockPatientStore(PatientStore):
    """In-memory patient store seeded with the reference patients and diagnoses."""

    def __init__(self, extra_patients: int = 0, faker_seed: Optional[int] = None):
        self.diagnoses: List[Diagnosis] = [Diagnosis(**d) for d in seed.DIAGNOSES]
        self.patients: List[Patient] = [Patient(**p) for p in seed.PATIENTS]

        self._fake = Faker()
        if faker_seed is not None:
            self._fake.seed_instance(faker_seed)
        self._random = random.Random(faker_seed)
        self._seed_fake_patients(extra_patients)

    def _seed_fake_patients(self, count: int):
        for _ in range(count):
            gender = self._random.choice(list(Gender))
            if gender == Gender.MALE:
                name = self._fake.name_male()
            elif gender == Gender.FEMALE:
                name = self._fake.name_female()
            else:
                name = self._fake.name_nonbinary()
            birth = self._fake.date_of_birth(minimum_age=18, maximum_age=90)
            self.patients.append(Patient(
                id=str(uuid.uuid4()),
                name=name,
                dateOfBirth=birth,
                ssn=f"{birth.strftime('%d%m%y')}-{self._fake.bothify('###?').upper()}",
                gender=gender,
                occupation=self._fake.job(),
            ))

    def _find(self, patient_id: str) -> Patient:
        for patient in self.patients:
            if patient.id == patient_id:
                return patient
        raise PatientNotFoundError(patient_id)

    async def list_patients(self) -> List[NonSensitivePatient]:
        return [p.non_sensitive() for p in self.patients]

    async def get_patient(self, patient_id: str) -> Patient:
        return self._find(patient_id)

    async def add_entry(self, patient_id: str, creation):
        patient = self._find(patient_id)

        # Server-side check against the store's own reference data
        known = {d.code for d in self.diagnoses}
        unknown = [c for c in creation.diagnosisCodes or [] if c not in known]
        if unknown:
            raise SubmissionError(f"Incorrect diagnosis codes: {', '.join(unknown)}")

        entry = with_id(creation, str(uuid.uuid4()))
        self.patients = replace_patient(self.patients, append_entry(patient, entry))
        logger.info("Stored %s entry %s for patient %s", entry.type, entry.id, patient_id)
        return entry

    async def list_diagnoses(self) -> List[Diagnosis]:
        return list(self.diagnoses)
