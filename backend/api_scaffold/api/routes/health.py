"""Health & Version — readiness probe and build metadata.

Invariants:
    - GET /healthcheck returns 204 if the database answers, 503 otherwise
    - GET /version returns the installed distribution version
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import Response

from api_scaffold.config import app_version

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/healthcheck")
async def healthcheck(request: Request):
    """Readiness probe — database connectivity."""
    db_manager = getattr(request.app.state, "db_manager", None)
    db_ok = await db_manager.health_check() if db_manager else False
    if not db_ok:
        return Response(status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/version")
async def version():
    return {"version": app_version()}
