"""Per-kind presentation of entries for the patient detail page."""

from typing import Any, Dict, List

from patientor.entries.dispatch import EntryDispatcher, check_exhaustive
from patientor.entries.models import (
    EntryType,
    HealthCheckEntry,
    HealthCheckRating,
    HospitalEntry,
    OccupationalHealthcareEntry,
)

ENTRY_ICONS = check_exhaustive({
    EntryType.HEALTH_CHECK: "MedicalInformation",
    EntryType.OCCUPATIONAL_HEALTHCARE: "MedicalServices",
    EntryType.HOSPITAL: "LocalHospital",
}, "entry icons")

RATING_COLOURS = {
    HealthCheckRating.HEALTHY: "green",
    HealthCheckRating.LOW_RISK: "yellow",
    HealthCheckRating.HIGH_RISK: "orange",
    HealthCheckRating.CRITICAL_RISK: "red",
}

OCCUPATIONAL_COLOUR = "yellow"
HOSPITAL_COLOUR = "red"


def _base_summary(entry: Any, colour: str) -> Dict[str, Any]:
    kind = EntryType(entry.type)
    return {
        "id": entry.id,
        "type": kind.value,
        "date": entry.date.isoformat(),
        "icon": ENTRY_ICONS[kind],
        "description": entry.description,
        "colour": colour,
        "specialist": entry.specialist,
        "diagnosisCodes": list(entry.diagnosisCodes or []),
    }


def _summarize_health_check(entry: HealthCheckEntry) -> Dict[str, Any]:
    summary = _base_summary(entry, RATING_COLOURS[entry.healthCheckRating])
    summary["healthCheckRating"] = int(entry.healthCheckRating)
    return summary


def _summarize_occupational(entry: OccupationalHealthcareEntry) -> Dict[str, Any]:
    summary = _base_summary(entry, OCCUPATIONAL_COLOUR)
    summary["employerName"] = entry.employerName
    if entry.sickLeave:
        summary["sickLeave"] = {
            "startDate": entry.sickLeave.startDate.isoformat(),
            "endDate": entry.sickLeave.endDate.isoformat(),
        }
    return summary


def _summarize_hospital(entry: HospitalEntry) -> Dict[str, Any]:
    summary = _base_summary(entry, HOSPITAL_COLOUR)
    if entry.discharge:
        summary["discharge"] = {
            "date": entry.discharge.date.isoformat(),
            "criteria": entry.discharge.criteria,
        }
    return summary


summarize_entry: EntryDispatcher[Dict[str, Any]] = EntryDispatcher({
    EntryType.HEALTH_CHECK: _summarize_health_check,
    EntryType.OCCUPATIONAL_HEALTHCARE: _summarize_occupational,
    EntryType.HOSPITAL: _summarize_hospital,
}, name="summarize_entry")


# ---------------------------------------------------------------------------
# Text cards
# ---------------------------------------------------------------------------


def _card(entry: Any, heading: str, colour: str, details: List[str]) -> List[str]:
    lines = [heading, entry.description, f"health: {colour}", *details]
    if entry.diagnosisCodes:
        lines.append(f"diagnoses: {', '.join(entry.diagnosisCodes)}")
    lines.append(f"diagnose by {entry.specialist}")
    return lines


def _render_health_check(entry: HealthCheckEntry) -> List[str]:
    heading = f"{entry.date.isoformat()} [{ENTRY_ICONS[EntryType.HEALTH_CHECK]}]"
    return _card(entry, heading, RATING_COLOURS[entry.healthCheckRating], [])


def _render_occupational(entry: OccupationalHealthcareEntry) -> List[str]:
    heading = (
        f"{entry.date.isoformat()} [{ENTRY_ICONS[EntryType.OCCUPATIONAL_HEALTHCARE]}] "
        f"{entry.employerName}"
    )
    details = []
    if entry.sickLeave:
        details.append(
            f"sick leave: {entry.sickLeave.startDate.isoformat()} - {entry.sickLeave.endDate.isoformat()}"
        )
    return _card(entry, heading, OCCUPATIONAL_COLOUR, details)


def _render_hospital(entry: HospitalEntry) -> List[str]:
    heading = f"{entry.date.isoformat()} [{ENTRY_ICONS[EntryType.HOSPITAL]}]"
    details = []
    if entry.discharge:
        details.append(f"discharged {entry.discharge.date.isoformat()}: {entry.discharge.criteria}")
    return _card(entry, heading, HOSPITAL_COLOUR, details)


render_entry: EntryDispatcher[List[str]] = EntryDispatcher({
    EntryType.HEALTH_CHECK: _render_health_check,
    EntryType.OCCUPATIONAL_HEALTHCARE: _render_occupational,
    EntryType.HOSPITAL: _render_hospital,
}, name="render_entry")
