import pytest

from patientor.exceptions import SubmissionInProgressError
from patientor.services.submission_guard import SubmissionGuard


@pytest.fixture
def guard(redis_client):
    return SubmissionGuard(redis_client, ttl_seconds=5)


@pytest.mark.asyncio
async def test_hold_sets_and_releases_key(guard, redis_client):
    async with guard.hold("p1") as token:
        assert await guard.is_locked("p1")
        assert await redis_client.get(SubmissionGuard.key("p1")) == token
        assert 0 < await redis_client.ttl(SubmissionGuard.key("p1")) <= 5
    assert not await guard.is_locked("p1")


@pytest.mark.asyncio
async def test_second_submission_for_same_patient_rejected(guard):
    async with guard.hold("p1"):
        with pytest.raises(SubmissionInProgressError):
            async with guard.hold("p1"):
                pass
        # other patients are unaffected
        async with guard.hold("p2"):
            pass
    assert not await guard.is_locked("p1")


@pytest.mark.asyncio
async def test_released_when_block_raises(guard):
    with pytest.raises(RuntimeError):
        async with guard.hold("p1"):
            raise RuntimeError("store exploded")
    assert not await guard.is_locked("p1")


@pytest.mark.asyncio
async def test_does_not_release_someone_elses_hold(guard, redis_client):
    """After our key expired and another submission took it, leaving must not free theirs."""
    async with guard.hold("p1"):
        await redis_client.set(SubmissionGuard.key("p1"), "other-token")
    assert await redis_client.get(SubmissionGuard.key("p1")) == "other-token"
