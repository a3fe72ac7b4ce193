from datetime import datetime, timezone

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from src.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/health",
    tags=["health"],
)


@router.get("")
def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/detailed")
def health_detailed(request: Request):
    """
    Liveness plus a database round trip. Answers 503 when the database
    cannot be reached.
    """
    checks = {"database": "ok"}
    try:
        request.app.state.database.ping()
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e!r}")
        checks["database"] = "unavailable"

    healthy = all(value == "ok" for value in checks.values())
    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ok" if healthy else "degraded",
            "environment": request.app.state.settings.environment,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "checks": checks,
        },
    )
