"""Pure record updates: every function returns new values, inputs are never mutated."""

from typing import Iterable, List

from pydantic import TypeAdapter

from patientor.entries.models import Entry, Patient

_entry_adapter = TypeAdapter(Entry)


def append_entry(patient: Patient, entry: Entry) -> Patient:
    """Return a copy of ``patient`` with ``entry`` appended as the last entry.

    Raises:
        pydantic.ValidationError: ``entry`` is not a stored entry.
    """
    entry = _entry_adapter.validate_python(entry)
    return patient.model_copy(update={"entries": (*patient.entries, entry)})


def replace_patient(patients: Iterable[Patient], updated: Patient) -> List[Patient]:
    """Return ``patients`` with the one sharing ``updated.id`` swapped for ``updated``.

    Order is preserved. If no patient has that id the result equals the input.
    """
    return [updated if p.id == updated.id else p for p in patients]
