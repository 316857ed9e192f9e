from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.core.config import validate_ai_config, validate_analytics_config, validate_supabase_config

router = APIRouter()


@router.get("/health", tags=["health"])
def health():
    """Configuration status of each external dependency.

    Supabase is required (503 when it is unusable); the AI key and analytics
    are optional and only degrade the service.
    """
    checks = {
        "supabase": validate_supabase_config(),
        "ai": validate_ai_config(),
        "analytics": validate_analytics_config(),
    }
    if not checks["supabase"].ok:
        status = "unhealthy"
    elif not checks["ai"].ok:
        status = "degraded"
    else:
        status = "healthy"

    body = {
        "status": 503 if status == "unhealthy" else 200,
        "message": f"Service is {status}",
        "data": {
            "status": status,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "services": {name: check.model_dump() for name, check in checks.items()},
        },
    }
    return JSONResponse(body, status_code=body["status"])
