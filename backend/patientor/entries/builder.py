"""
Entry builder: turns raw form values into a typed entry creation payload.

Validation is all-or-nothing: every field is checked, all problems are
collected, and either a complete ``EntryCreation`` is returned or a single
``EntryValidationError`` listing each offending field is raised.

Optional pairs (sick leave dates, discharge date + criteria) must be given
together. Supplying only one half of a pair is an error naming the missing
half; the pair is never dropped silently.
"""

import datetime
import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from patientor.entries.dispatch import check_exhaustive
from patientor.entries.models import (
    Discharge,
    EntryType,
    HealthCheckEntryCreation,
    HealthCheckRating,
    HospitalEntryCreation,
    OccupationalHealthcareEntryCreation,
    SickLeave,
)
from patientor.exceptions import EntryValidationError
from patientor.services.diagnoses import DiagnosisCatalog

logger = logging.getLogger(__name__)

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
INTEGER_RE = re.compile(r"^[+-]?\d+$")


class EntryDraft(BaseModel):
    """Unvalidated values as entered in the add-entry form.

    Only ``type`` selects the variant; fields belonging to other kinds are
    ignored.
    """

    model_config = ConfigDict(extra="forbid")

    type: Optional[str] = None
    description: Optional[str] = None
    date: Any = None
    specialist: Optional[str] = None
    diagnosisCodes: Union[List[str], str, None] = None

    # HealthCheck
    healthCheckRating: Any = None

    # OccupationalHealthcare
    employerName: Optional[str] = None
    sickLeaveStartDate: Any = None
    sickLeaveEndDate: Any = None

    # Hospital
    dischargeDate: Any = None
    dischargeCriteria: Optional[str] = None


def _field_errors(error: ValidationError) -> List[Dict[str, str]]:
    return [
        {"field": ".".join(str(p) for p in err["loc"]) or "entry", "message": err["msg"]}
        for err in error.errors()
    ]


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class _Errors:
    def __init__(self):
        self.items: List[Dict[str, str]] = []

    def add(self, field: str, message: str) -> None:
        self.items.append({"field": field, "message": message})

    def __bool__(self) -> bool:
        return bool(self.items)


class EntryBuilder:
    """Validates an ``EntryDraft`` against the diagnosis catalog."""

    def __init__(self, catalog: DiagnosisCatalog):
        self.catalog = catalog

    def build(self, draft: Union[EntryDraft, Mapping[str, Any]]):
        """Return the ``EntryCreation`` for ``draft`` (a draft or its raw values).

        Raises:
            EntryValidationError: one or more fields are missing or invalid.
        """
        if not isinstance(draft, EntryDraft):
            draft = parse_draft(draft)
        errors = _Errors()
        kind = self._kind(draft.type, errors)

        fields: Dict[str, Any] = {
            "description": self._text(draft.description, "description", errors),
            "date": self._date(draft.date, "date", errors, required=True),
            "specialist": self._text(draft.specialist, "specialist", errors),
        }
        codes = self._diagnosis_codes(draft.diagnosisCodes, errors)
        if codes:
            fields["diagnosisCodes"] = codes

        if kind is not None:
            fields.update(_VARIANT_FIELDS[kind](self, draft, errors))

        if errors:
            logger.info(
                "Rejected %s entry draft: %s",
                draft.type, ", ".join(e["field"] for e in errors.items),
            )
            raise EntryValidationError(errors.items)

        try:
            return _CREATION_TYPES[kind](**fields)
        except ValidationError as e:
            raise EntryValidationError(_field_errors(e)) from e

    # ── common fields ──────────────────────────────────────────────────────

    def _kind(self, value: Any, errors: _Errors) -> Optional[EntryType]:
        if _blank(value):
            errors.add("type", "type is required.")
            return None
        try:
            return EntryType(value)
        except ValueError:
            expected = ", ".join(k.value for k in EntryType)
            errors.add("type", f"Unknown entry type {value!r}; expected one of {expected}.")
            return None

    def _text(self, value: Any, field: str, errors: _Errors) -> Optional[str]:
        if _blank(value):
            errors.add(field, f"{field} is required.")
            return None
        return value.strip()

    def _date(
        self, value: Any, field: str, errors: _Errors, required: bool = False
    ) -> Optional[datetime.date]:
        if _blank(value):
            if required:
                errors.add(field, f"{field} is required.")
            return None
        if isinstance(value, datetime.datetime):
            return value.date()
        if isinstance(value, datetime.date):
            return value
        text = str(value).strip()
        if ISO_DATE_RE.match(text):
            try:
                return datetime.date.fromisoformat(text)
            except ValueError:
                pass
        errors.add(field, f"{field} must be a date in YYYY-MM-DD format, got {value!r}.")
        return None

    def _diagnosis_codes(self, value: Any, errors: _Errors) -> List[str]:
        if _blank(value):
            return []
        raw = value.split(",") if isinstance(value, str) else value
        codes = [c.strip() for c in raw if not _blank(c)]
        unknown = [c for c in codes if not self.catalog.lookup(c)]
        if unknown:
            errors.add("diagnosisCodes", f"Unknown diagnosis codes: {', '.join(unknown)}.")
            return []
        return codes

    def _pair(self, draft: EntryDraft, first: str, second: str, errors: _Errors) -> bool:
        """True if both fields are given; records an error if only one is."""
        has_first = not _blank(getattr(draft, first))
        has_second = not _blank(getattr(draft, second))
        if has_first and not has_second:
            errors.add(second, f"{second} is required when {first} is given.")
        elif has_second and not has_first:
            errors.add(first, f"{first} is required when {second} is given.")
        return has_first and has_second

    # ── variant fields ─────────────────────────────────────────────────────

    def _health_check(self, draft: EntryDraft, errors: _Errors) -> Dict[str, Any]:
        value = draft.healthCheckRating
        if _blank(value):
            errors.add("healthCheckRating", "healthCheckRating is required.")
            return {}

        rating: Optional[int] = None
        if isinstance(value, int) and not isinstance(value, bool):
            rating = value
        elif isinstance(value, str) and INTEGER_RE.match(value.strip()):
            rating = int(value.strip())

        allowed = ", ".join(str(r.value) for r in HealthCheckRating)
        if rating is None or rating not in {r.value for r in HealthCheckRating}:
            errors.add("healthCheckRating", f"healthCheckRating must be one of {allowed}, got {value!r}.")
            return {}
        return {"healthCheckRating": HealthCheckRating(rating)}

    def _occupational(self, draft: EntryDraft, errors: _Errors) -> Dict[str, Any]:
        fields: Dict[str, Any] = {
            "employerName": self._text(draft.employerName, "employerName", errors),
        }
        if self._pair(draft, "sickLeaveStartDate", "sickLeaveEndDate", errors):
            start = self._date(draft.sickLeaveStartDate, "sickLeaveStartDate", errors)
            end = self._date(draft.sickLeaveEndDate, "sickLeaveEndDate", errors)
            if start and end:
                if start > end:
                    errors.add(
                        "sickLeave",
                        f"Sick leave start date {start.isoformat()} is after end date {end.isoformat()}.",
                    )
                else:
                    fields["sickLeave"] = SickLeave(startDate=start, endDate=end)
        return fields

    def _hospital(self, draft: EntryDraft, errors: _Errors) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        if self._pair(draft, "dischargeDate", "dischargeCriteria", errors):
            discharged = self._date(draft.dischargeDate, "dischargeDate", errors)
            if discharged:
                fields["discharge"] = Discharge(date=discharged, criteria=draft.dischargeCriteria.strip())
        return fields


_VARIANT_FIELDS = check_exhaustive({
    EntryType.HEALTH_CHECK: EntryBuilder._health_check,
    EntryType.OCCUPATIONAL_HEALTHCARE: EntryBuilder._occupational,
    EntryType.HOSPITAL: EntryBuilder._hospital,
}, "entry builder")

_CREATION_TYPES = check_exhaustive({
    EntryType.HEALTH_CHECK: HealthCheckEntryCreation,
    EntryType.OCCUPATIONAL_HEALTHCARE: OccupationalHealthcareEntryCreation,
    EntryType.HOSPITAL: HospitalEntryCreation,
}, "entry creation types")


def parse_draft(values: Mapping[str, Any]) -> EntryDraft:
    """Read raw request values into an ``EntryDraft``.

    Raises:
        EntryValidationError: a field name is unknown or a value has the wrong type.
    """
    try:
        return EntryDraft.model_validate(values)
    except ValidationError as e:
        errors = _field_errors(e)
        logger.info("Rejected entry draft values: %s", ", ".join(err["field"] for err in errors))
        raise EntryValidationError(errors) from e


def build_entry(draft: Union[EntryDraft, Mapping[str, Any]], catalog: DiagnosisCatalog):
    """Shortcut for ``EntryBuilder(catalog).build(draft)``."""
    return EntryBuilder(catalog).build(draft)
