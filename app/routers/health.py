# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from core.registry import Section
from lib.supabase_client import SupabaseClient

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    ok: bool


class ChecksResponse(BaseModel):
    """Individual service checks."""
    database: str
    storage: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    checks: ChecksResponse
    environment: str
    timestamp: str


# =============================================================================
# Probes
# =============================================================================

def _probe(call) -> str:
    """Run one connectivity check: "healthy", or "unhealthy: <reason>"."""
    try:
        call(SupabaseClient.get_client())
    except Exception as e:
        return f"unhealthy: {str(e)[:50]}"
    return "healthy"


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Always answers {"ok": true} while the process is serving requests.
    """
    return HealthResponse(ok=True)


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check():
    """
    Readiness check endpoint.

    Returns whether the service is ready to accept requests.
    Checks database and storage connectivity.
    """
    checks = ChecksResponse(
        database=_probe(lambda client: client.table(Section.HOME.value).select("id").limit(1).execute()),
        storage=_probe(lambda client: client.storage.list_buckets()),
    )
    all_healthy = checks.database == "healthy" and checks.storage == "healthy"

    return ReadinessResponse(
        status="ready" if all_healthy else "degraded",
        checks=checks,
        environment=settings.ENVIRONMENT,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
