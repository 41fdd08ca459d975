"""
Entry submission flow:

  draft → EntryBuilder (local validation) → SubmissionGuard → store.add_entry
        → append_entry on the caller's patient

Validation failures never reach the store. A rejected submission leaves the
caller's patient and draft untouched.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Mapping, Optional, Union

from patientor.entries.builder import EntryBuilder, EntryDraft
from patientor.entries.models import Patient
from patientor.entries.records import append_entry
from patientor.services.diagnoses import DiagnosisCatalog
from patientor.services.store.interface import PatientStore
from patientor.services.submission_guard import SubmissionGuard

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _unguarded(patient_id: str):
    yield None


class EntryService:
    def __init__(
        self,
        store: PatientStore,
        catalog: DiagnosisCatalog,
        guard: Optional[SubmissionGuard] = None,
    ):
        self.store = store
        self.catalog = catalog
        self.builder = EntryBuilder(catalog)
        self.guard = guard

    @classmethod
    async def from_store(cls, store: PatientStore, guard: Optional[SubmissionGuard] = None) -> "EntryService":
        """Build a service whose catalog is the store's current diagnosis list."""
        return cls(store, DiagnosisCatalog(await store.list_diagnoses()), guard)

    async def submit_new_entry(
        self, patient: Patient, draft: Union[EntryDraft, Mapping[str, Any]]
    ) -> Patient:
        """Validate ``draft``, submit it for ``patient`` and return the updated patient.

        Raises:
            EntryValidationError: the draft is invalid; nothing was submitted.
            SubmissionInProgressError: another submission for the patient is running.
            SubmissionError: the store rejected the entry.
        """
        creation = self.builder.build(draft)

        hold = self.guard.hold if self.guard else _unguarded
        async with hold(patient.id):
            entry = await self.store.add_entry(patient.id, creation)

        logger.info("Added %s entry %s to patient %s", entry.type, entry.id, patient.id)
        return append_entry(patient, entry)
