"""Health check endpoints.

``/health`` answers for the API itself; ``/health/detailed`` also checks Redis
(submission guard) and the patient store, so an unreachable HTTP store shows
up as ``degraded``.
"""

import logging
import time

from fastapi import APIRouter, Request

from patientor.config import APP_VERSION

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


async def _check_redis(request: Request) -> dict:
    start = time.perf_counter()
    try:
        await request.app.state.redis.ping()
    except Exception as e:
        logger.warning("Redis health check failed: %s", e)
        return {"status": "disconnected"}
    return {"status": "connected", "latency_ms": _elapsed_ms(start)}


async def _check_patient_store(request: Request) -> dict:
    store = request.app.state.patient_store
    result = {"backend": type(store).__name__}
    start = time.perf_counter()
    try:
        diagnoses = await store.list_diagnoses()
    except Exception as e:
        logger.warning("Patient store health check failed: %s", e)
        return {**result, "status": "unreachable"}

    catalog = getattr(request.app.state, "diagnosis_catalog", None)
    return {
        **result,
        "status": "reachable",
        "latency_ms": _elapsed_ms(start),
        "diagnoses": len(diagnoses),
        "catalog_in_sync": catalog is not None and len(catalog) == len(diagnoses),
    }


@router.get("")
async def health(request: Request):
    """Basic health check with Redis status."""
    redis = await _check_redis(request)
    return {
        "status": "ok",
        "redis": redis["status"],
        "version": APP_VERSION,
    }


@router.get("/detailed")
async def health_detailed(request: Request):
    """Per-service status: Redis for the submission guard, the patient store for records."""
    services = {
        "api": {"status": "running"},
        "redis": await _check_redis(request),
        "patient_store": await _check_patient_store(request),
    }
    healthy = (
        services["redis"]["status"] == "connected"
        and services["patient_store"]["status"] == "reachable"
    )
    return {
        "status": "ok" if healthy else "degraded",
        "version": APP_VERSION,
        "services": services,
    }
