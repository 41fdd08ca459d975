"""HIPAA audit logging middleware.

Writes one structured JSON line per request to patient-data endpoints:
timestamp, caller, path, method, response status and duration.
"""

import json
import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from patientor.config import settings


logger = logging.getLogger("hipaa.audit")

# Paths that expose Protected Health Information
PHI_PATHS = (
    "/api/patients",
    "/api/diagnoses",
)


class HIPAAAuditMiddleware(BaseHTTPMiddleware):
    """Logs PHI access on the ``hipaa.audit`` logger.

    Entry writes are tagged ``phi_write``, everything else ``phi_access``.
    Disabled when ``settings.hipaa_audit_log`` is false.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start_time) * 1000

        if settings.hipaa_audit_log and request.url.path.startswith(PHI_PATHS):
            audit_entry = {
                "event": "phi_write" if request.method == "POST" else "phi_access",
                "timestamp": time.time(),
                "method": request.method,
                "path": str(request.url.path),
                "caller_ip": request.client.host if request.client else "unknown",
                "api_key": "present" if request.headers.get("X-API-Key") else "anonymous",
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            }
            logger.info(json.dumps(audit_entry))

        return response
