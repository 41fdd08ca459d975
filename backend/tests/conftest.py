"""Shared test fixtures for the Patientor backend tests."""

import fakeredis.aioredis
import httpx
import pytest
import pytest_asyncio

from patientor.main import app
from patientor.services.diagnoses import DiagnosisCatalog
from patientor.services.store.mock import MockPatientStore


@pytest.fixture
def patient_store():
    return MockPatientStore()


@pytest.fixture
def catalog(patient_store):
    return DiagnosisCatalog(patient_store.diagnoses)


@pytest_asyncio.fixture
async def redis_client():
    """In-memory Redis shared by the guard and the health endpoints."""
    client = fakeredis.aioredis.FakeRedis(decode_responses=True)
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def client(redis_client, patient_store, catalog):
    """Async HTTP client against the app with fake Redis and the mock store."""
    app.state.redis = redis_client
    app.state.patient_store = patient_store
    app.state.diagnosis_catalog = catalog
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def valid_api_key():
    """Return the configured API key for authenticated requests."""
    from patientor.config import settings
    return settings.api_key


@pytest.fixture
def health_check_draft():
    return {
        "type": "HealthCheck",
        "description": "Annual check",
        "date": "2024-01-10",
        "specialist": "Dr. House",
        "healthCheckRating": 1,
        "diagnosisCodes": ["J10.1"],
    }
