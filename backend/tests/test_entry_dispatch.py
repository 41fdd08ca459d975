"""Exhaustive dispatch: every kind has exactly one handler, unknown kinds fail loudly."""

import pytest

from patientor.entries import builder, render
from patientor.entries.dispatch import KNOWN_KINDS, EntryDispatcher, check_exhaustive, kind_of
from patientor.entries.models import (
    EntryType,
    HealthCheckEntry,
    HospitalEntry,
    OccupationalHealthcareEntry,
)
from patientor.exceptions import UnknownVariantError


@pytest.fixture
def entries():
    return {
        EntryType.HEALTH_CHECK: HealthCheckEntry(
            id="hc", description="Yearly control visit.", date="2019-10-20",
            specialist="MD House", healthCheckRating=2, diagnosisCodes=["J10.1"],
        ),
        EntryType.OCCUPATIONAL_HEALTHCARE: OccupationalHealthcareEntry(
            id="oh", description="Radiation poisoning.", date="2019-08-05",
            specialist="MD House", employerName="HyPD",
            sickLeave={"startDate": "2019-08-05", "endDate": "2019-08-28"},
        ),
        EntryType.HOSPITAL: HospitalEntry(
            id="ho", description="Broken thumb.", date="2015-01-02", specialist="MD House",
            discharge={"date": "2015-01-16", "criteria": "Thumb has healed."},
        ),
    }


def test_known_kinds_are_the_three_entry_types():
    assert {k.value for k in KNOWN_KINDS} == {"HealthCheck", "OccupationalHealthcare", "Hospital"}


@pytest.mark.parametrize("table", [
    render.render_entry.kinds,
    render.summarize_entry.kinds,
    frozenset(render.ENTRY_ICONS),
    frozenset(builder._VARIANT_FIELDS),
    frozenset(builder._CREATION_TYPES),
])
def test_registered_tables_cover_exactly_the_known_kinds(table):
    assert table == KNOWN_KINDS


def test_dispatch_selects_the_matching_handler(entries):
    seen = []
    dispatcher = EntryDispatcher({
        kind: (lambda entry, kind=kind: seen.append(kind) or kind)
        for kind in EntryType
    })
    for kind, entry in entries.items():
        assert dispatcher(entry) == kind
    assert seen == list(entries)


def test_missing_handler_fails_at_construction():
    with pytest.raises(TypeError, match="Hospital"):
        EntryDispatcher({
            EntryType.HEALTH_CHECK: str,
            EntryType.OCCUPATIONAL_HEALTHCARE: str,
        })


def test_unknown_key_fails_at_construction():
    table = {kind: str for kind in EntryType}
    table["Dental"] = str
    with pytest.raises(TypeError, match="Dental"):
        check_exhaustive(table, "test table")


def test_string_keys_accepted():
    dispatcher = EntryDispatcher({kind.value: str for kind in EntryType})
    assert dispatcher.kinds == KNOWN_KINDS


def test_unknown_variant_raises(entries):
    """A value with a fourth discriminant reaches the defect path, not a default render."""
    dental = HospitalEntry.model_construct(
        id="x", type="Dental", description="Cleaning", date=None, specialist="DDS",
    )
    with pytest.raises(UnknownVariantError) as exc_info:
        render.render_entry(dental)
    assert exc_info.value.kind == "Dental"

    with pytest.raises(UnknownVariantError):
        render.summarize_entry(dental)


def test_value_without_discriminant_raises():
    with pytest.raises(UnknownVariantError):
        render.render_entry(object())


def test_kind_of_narrows_strings():
    assert kind_of("Hospital") is EntryType.HOSPITAL
    with pytest.raises(UnknownVariantError):
        kind_of("hospital")


def test_unknown_variant_is_not_an_application_error():
    from patientor.exceptions import PatientorError
    assert not issubclass(UnknownVariantError, PatientorError)


# ---- shipped renderers ----


def test_render_health_check(entries):
    lines = render.render_entry(entries[EntryType.HEALTH_CHECK])
    assert lines == [
        "2019-10-20 [MedicalInformation]",
        "Yearly control visit.",
        "health: orange",
        "diagnoses: J10.1",
        "diagnose by MD House",
    ]


def test_render_occupational(entries):
    lines = render.render_entry(entries[EntryType.OCCUPATIONAL_HEALTHCARE])
    assert lines[0] == "2019-08-05 [MedicalServices] HyPD"
    assert "sick leave: 2019-08-05 - 2019-08-28" in lines
    assert lines[-1] == "diagnose by MD House"


def test_render_hospital(entries):
    lines = render.render_entry(entries[EntryType.HOSPITAL])
    assert lines[0] == "2015-01-02 [LocalHospital]"
    assert "health: red" in lines
    assert "discharged 2015-01-16: Thumb has healed." in lines


def test_summaries(entries):
    hc = render.summarize_entry(entries[EntryType.HEALTH_CHECK])
    assert hc["type"] == "HealthCheck"
    assert hc["healthCheckRating"] == 2
    assert hc["colour"] == "orange"

    oh = render.summarize_entry(entries[EntryType.OCCUPATIONAL_HEALTHCARE])
    assert oh["employerName"] == "HyPD"
    assert oh["sickLeave"] == {"startDate": "2019-08-05", "endDate": "2019-08-28"}
    assert "discharge" not in oh

    ho = render.summarize_entry(entries[EntryType.HOSPITAL])
    assert ho["discharge"]["criteria"] == "Thumb has healed."
    assert "employerName" not in ho


def test_dispatch_does_not_mutate_entry(entries):
    entry = entries[EntryType.OCCUPATIONAL_HEALTHCARE]
    before = entry.model_dump()
    render.summarize_entry(entry)
    render.render_entry(entry)
    assert entry.model_dump() == before
