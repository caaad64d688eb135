import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy import text

router = APIRouter(prefix="/health", tags=["health"])


def database_healthy(request: Request) -> bool:
    try:
        with request.app.state.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logging.error("Database health check failed: %s", e, exc_info=True)
        return False


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("")
def check(request: Request):
    """
    Service health including database connectivity. 503 when the database is unreachable.
    """
    healthy = database_healthy(request)
    body = {
        "success": True,
        "message": "Service is healthy",
        "data": {
            "uptime": time.monotonic() - request.app.state.started_at,
            "timestamp": utc_timestamp(),
            "database": "connected" if healthy else "disconnected",
            "environment": request.app.state.settings.environment,
        },
    }
    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=body,
    )


@router.get("/ready")
def ready(request: Request):
    if database_healthy(request):
        return {"status": "ready"}
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"status": "not ready"})
