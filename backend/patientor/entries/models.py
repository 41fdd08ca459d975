"""
Pydantic models for patients and their clinical entries.

Entries form a closed tagged union keyed on ``type``. Field names follow the
wire format used by the patient store (camelCase), the same way the store
serializes them.
"""

import datetime
from enum import Enum, IntEnum
from typing import Annotated, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator


NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class EntryType(str, Enum):
    HEALTH_CHECK = "HealthCheck"
    OCCUPATIONAL_HEALTHCARE = "OccupationalHealthcare"
    HOSPITAL = "Hospital"


class HealthCheckRating(IntEnum):
    HEALTHY = 0
    LOW_RISK = 1
    HIGH_RISK = 2
    CRITICAL_RISK = 3


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class Diagnosis(_Frozen):
    code: NonEmptyStr
    name: str
    latin: Optional[str] = None


class SickLeave(_Frozen):
    startDate: datetime.date
    endDate: datetime.date

    @model_validator(mode="after")
    def _ordered(self) -> "SickLeave":
        if self.startDate > self.endDate:
            raise ValueError("sickLeave startDate must not be after endDate")
        return self


class Discharge(_Frozen):
    date: datetime.date
    criteria: NonEmptyStr


# ---------------------------------------------------------------------------
# Entry creation payloads (no id yet)
# ---------------------------------------------------------------------------


class BaseEntryCreation(_Frozen):
    description: NonEmptyStr
    date: datetime.date
    specialist: NonEmptyStr
    diagnosisCodes: Optional[Tuple[str, ...]] = None


class HealthCheckEntryCreation(BaseEntryCreation):
    type: Literal["HealthCheck"] = "HealthCheck"
    healthCheckRating: HealthCheckRating


class OccupationalHealthcareEntryCreation(BaseEntryCreation):
    type: Literal["OccupationalHealthcare"] = "OccupationalHealthcare"
    employerName: NonEmptyStr
    sickLeave: Optional[SickLeave] = None


class HospitalEntryCreation(BaseEntryCreation):
    type: Literal["Hospital"] = "Hospital"
    discharge: Optional[Discharge] = None


EntryCreation = Annotated[
    Union[
        HealthCheckEntryCreation,
        OccupationalHealthcareEntryCreation,
        HospitalEntryCreation,
    ],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Stored entries (store-assigned id)
# ---------------------------------------------------------------------------


class HealthCheckEntry(HealthCheckEntryCreation):
    id: NonEmptyStr


class OccupationalHealthcareEntry(OccupationalHealthcareEntryCreation):
    id: NonEmptyStr


class HospitalEntry(HospitalEntryCreation):
    id: NonEmptyStr


Entry = Annotated[
    Union[HealthCheckEntry, OccupationalHealthcareEntry, HospitalEntry],
    Field(discriminator="type"),
]

# Creation payload class -> stored entry class, one per kind.
STORED_ENTRY_TYPES = {
    HealthCheckEntryCreation: HealthCheckEntry,
    OccupationalHealthcareEntryCreation: OccupationalHealthcareEntry,
    HospitalEntryCreation: HospitalEntry,
}


def with_id(creation: BaseEntryCreation, entry_id: str):
    """Turn an accepted creation payload into the stored entry with ``entry_id``."""
    stored_cls = STORED_ENTRY_TYPES[type(creation)]
    return stored_cls(id=entry_id, **creation.model_dump())


class NonSensitivePatient(_Frozen):
    id: NonEmptyStr
    name: str
    dateOfBirth: datetime.date
    gender: Gender
    occupation: str


class Patient(NonSensitivePatient):
    ssn: str
    entries: Tuple[Entry, ...] = ()

    def non_sensitive(self) -> NonSensitivePatient:
        return NonSensitivePatient(**self.model_dump(exclude={"ssn", "entries"}))
