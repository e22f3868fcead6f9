"""Health check endpoints."""

from __future__ import annotations

from datetime import datetime
from time import time
from typing import Any

from fastapi import APIRouter

from api.utils import get_supabase
from taskboard.cache import cache
from taskboard.settings import settings

# Track server start time for uptime metrics
start_time = time()

router = APIRouter(prefix="/api", tags=["Health"])


@router.get("/healthz", summary="Basic Health Check", response_description="Service health status")
async def healthz() -> dict[str, Any]:
    """
    Basic health check endpoint for load balancers and monitoring.

    **Example Response:**
    ```json
    {
        "status": "ok",
        "timestamp": "2025-12-04T13:45:00.000",
        "service": "taskboard"
    }
    ```
    """
    return {"status": "ok", "timestamp": datetime.now().isoformat(), "service": settings.service_name}


@router.get(
    "/health/detailed",
    summary="Detailed Health Check",
    response_description="Service health status with Supabase and cache checks",
)
async def health_detailed() -> dict[str, Any]:
    """
    Detailed health check.

    **Status Values:**
    - `healthy`: Supabase reachable
    - `degraded`: Supabase not configured or not reachable
    """
    checks: dict[str, Any] = {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "service": settings.service_name,
        "uptime_seconds": time() - start_time,
        "checks": {"cache": cache.stats()},
    }

    if settings.supabase_url and settings.supabase_anon_key:
        try:
            client = get_supabase()
            client.table("tasks").select("id").limit(1).execute()
            checks["checks"]["supabase"] = {"status": "ok", "message": "Connected"}
        except Exception as e:
            checks["checks"]["supabase"] = {"status": "error", "message": str(e)}
            checks["status"] = "degraded"
    else:
        checks["checks"]["supabase"] = {"status": "not_configured"}
        checks["status"] = "degraded"

    return checks
