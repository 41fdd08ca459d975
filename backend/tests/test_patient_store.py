import pytest

from patientor.entries.builder import build_entry
from patientor.entries.models import Diagnosis, HealthCheckEntry, Patient
from patientor.exceptions import PatientNotFoundError, SubmissionError
from patientor.services.diagnoses import DiagnosisCatalog
from patientor.services.store.mock import MockPatientStore

DANA_SCULLY = "d2773822-f723-11e9-8f0b-362b9e155667"
HANS_GRUBER = "d27736ec-f723-11e9-8f0b-362b9e155667"


@pytest.mark.asyncio
async def test_list_patients_hides_sensitive_fields(patient_store):
    patients = await patient_store.list_patients()
    assert len(patients) == 5
    dumped = patients[0].model_dump()
    assert "ssn" not in dumped
    assert "entries" not in dumped


@pytest.mark.asyncio
async def test_get_patient(patient_store):
    patient = await patient_store.get_patient(DANA_SCULLY)
    assert isinstance(patient, Patient)
    assert patient.name == "Dana Scully"
    assert [e.type for e in patient.entries] == ["HealthCheck", "OccupationalHealthcare", "HealthCheck"]


@pytest.mark.asyncio
async def test_get_unknown_patient(patient_store):
    with pytest.raises(PatientNotFoundError):
        await patient_store.get_patient("nope")


@pytest.mark.asyncio
async def test_add_entry_assigns_id_and_appends(patient_store, catalog, health_check_draft):
    creation = build_entry(health_check_draft, catalog)
    before = await patient_store.get_patient(HANS_GRUBER)

    entry = await patient_store.add_entry(HANS_GRUBER, creation)

    assert isinstance(entry, HealthCheckEntry)
    assert entry.id
    after = await patient_store.get_patient(HANS_GRUBER)
    assert [e.id for e in after.entries] == [entry.id]
    assert before.entries == ()


@pytest.mark.asyncio
async def test_fetched_patient_does_not_expose_store_entries(patient_store):
    patient = await patient_store.get_patient(DANA_SCULLY)
    with pytest.raises(AttributeError):
        patient.entries.append("garbage")

    again = await patient_store.get_patient(DANA_SCULLY)
    assert len(again.entries) == 3
    assert all(not isinstance(e, str) for e in again.entries)


@pytest.mark.asyncio
async def test_add_entry_unknown_patient(patient_store, catalog, health_check_draft):
    creation = build_entry(health_check_draft, catalog)
    with pytest.raises(PatientNotFoundError):
        await patient_store.add_entry("nope", creation)


@pytest.mark.asyncio
async def test_store_rejects_codes_it_does_not_know(patient_store, health_check_draft):
    """A catalog that drifted from the store passes locally but is rejected upstream."""
    drifted = DiagnosisCatalog([*patient_store.diagnoses, Diagnosis(code="Q99.9", name="Unlisted")])
    creation = build_entry({**health_check_draft, "diagnosisCodes": ["Q99.9"]}, drifted)

    with pytest.raises(SubmissionError, match="Q99.9"):
        await patient_store.add_entry(HANS_GRUBER, creation)
    assert (await patient_store.get_patient(HANS_GRUBER)).entries == ()


@pytest.mark.asyncio
async def test_list_diagnoses(patient_store):
    diagnoses = await patient_store.list_diagnoses()
    codes = [d.code for d in diagnoses]
    assert "M24.2" in codes and "H35.29" in codes
    assert len(codes) == len(set(codes))


def test_fake_patients_are_reproducible():
    first = MockPatientStore(extra_patients=3, faker_seed=42)
    second = MockPatientStore(extra_patients=3, faker_seed=42)
    assert len(first.patients) == 8
    assert [p.name for p in first.patients] == [p.name for p in second.patients]
