"""
Submission guard: at most one in-flight entry submission per patient.

A Redis key ``entry-submission:{patient_id}`` is set with NX and a TTL while
a submission is running and removed once it settles. The TTL bounds how long
a crashed worker can block a patient.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import redis.asyncio as redis

from patientor.config import settings
from patientor.exceptions import SubmissionInProgressError

logger = logging.getLogger(__name__)


class SubmissionGuard:
    def __init__(self, redis_client: redis.Redis, ttl_seconds: Optional[int] = None):
        self.redis = redis_client
        self.ttl_seconds = ttl_seconds or settings.submission_lock_ttl_seconds

    @staticmethod
    def key(patient_id: str) -> str:
        return f"entry-submission:{patient_id}"

    async def is_locked(self, patient_id: str) -> bool:
        return bool(await self.redis.exists(self.key(patient_id)))

    @asynccontextmanager
    async def hold(self, patient_id: str) -> AsyncIterator[str]:
        """Hold the per-patient slot for the duration of the block.

        Raises:
            SubmissionInProgressError: another submission holds the slot.
        """
        key = self.key(patient_id)
        token = uuid.uuid4().hex
        acquired = await self.redis.set(key, token, nx=True, ex=self.ttl_seconds)
        if not acquired:
            logger.info("Entry submission already in flight for patient %s", patient_id)
            raise SubmissionInProgressError(
                "An entry for this patient is already being submitted.",
                detail={"patient_id": patient_id},
            )
        try:
            yield token
        finally:
            await self._release(key, token)

    async def _release(self, key: str, token: str) -> None:
        # Only delete the key if it still holds our token (it may have expired
        # and been taken by another submission).
        current = await self.redis.get(key)
        if current in (token, token.encode()):
            await self.redis.delete(key)
