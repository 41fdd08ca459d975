"""Patientor API: main application entry point.

Creates FastAPI app with:
- Redis connection lifecycle (connect on startup, close on shutdown)
- Patient store and diagnosis catalog set up from configuration
- HIPAA audit logging middleware
- CORS middleware for the local front-end
- Uniform JSON error responses for application errors
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from redis.asyncio import Redis

from patientor.config import APP_VERSION, settings
from patientor.exceptions import EntryValidationError, PatientorError
from patientor.middleware.hipaa_audit import HIPAAAuditMiddleware
from patientor.routers import diagnoses, health, patients
from patientor.services.diagnoses import DiagnosisCatalog

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("patientor")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle: Redis connection and patient store."""
    # Startup
    app.state.redis = Redis.from_url(
        settings.redis_url,
        decode_responses=True,
    )
    try:
        await app.state.redis.ping()
        logger.info("Redis connected at %s", settings.redis_url)
    except Exception as e:
        logger.warning("Redis connection failed: %s (app will start anyway)", e)

    from patientor.services.store.factory import get_patient_store
    app.state.patient_store = get_patient_store()
    app.state.diagnosis_catalog = DiagnosisCatalog(await app.state.patient_store.list_diagnoses())
    logger.info(
        "Patient store %s initialized with %d diagnoses",
        type(app.state.patient_store).__name__, len(app.state.diagnosis_catalog),
    )
    yield

    # Shutdown
    await app.state.patient_store.close()
    await app.state.redis.close()
    logger.info("Redis disconnected")


app = FastAPI(
    title="Patientor API",
    version=APP_VERSION,
    description="Patient records and clinical entries",
    lifespan=lifespan,
)

# Middleware (LIFO order: last added runs first on request)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(HIPAAAuditMiddleware)


@app.exception_handler(PatientorError)
async def patientor_error_handler(request: Request, exc: PatientorError):
    body = {"code": exc.code, "message": exc.message}
    if exc.detail is not None:
        body["detail"] = exc.detail
    if not isinstance(exc, EntryValidationError):
        logger.warning("%s %s failed: %s %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(body, status_code=exc.http_status)


# Routes
app.include_router(health.router, prefix="/health", tags=["Health"])
app.include_router(patients.router, prefix="/api/patients", tags=["Patients"])
app.include_router(diagnoses.router, prefix="/api/diagnoses", tags=["Diagnoses"])


@app.get("/api/ping")
async def ping():
    """Liveness check used by the front-end on start-up."""
    return "pong"
