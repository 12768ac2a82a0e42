"""Health check endpoints."""
from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse
from sqlalchemy import text

router = APIRouter()

_START_TIME = time.time()


@router.get("/health", response_class=ORJSONResponse)
async def health_check(request: Request) -> dict[str, Any]:
    """Liveness plus a database round-trip."""
    checks: dict[str, Any] = {}
    try:
        async with request.app.state.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        checks["database"] = {"status": "healthy"}
    except Exception as e:
        checks["database"] = {"status": "unhealthy", "error": str(e)}

    healthy = all(c["status"] == "healthy" for c in checks.values())
    return {
        "status": "healthy" if healthy else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": request.app.version,
        "uptime_seconds": round(time.time() - _START_TIME, 2),
        "checks": checks,
    }
