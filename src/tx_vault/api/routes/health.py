from fastapi import APIRouter, Request

from ...core.observability import metrics_snapshot
from ..models import HealthResponse

router = APIRouter()


@router.get("/", tags=["root"], summary="Root", description="Root endpoint to verify API is running.")
def read_root(request: Request):
    """Return the service name and version to confirm the API is live."""
    return {"message": f"{request.app.title} is running.", "version": request.app.version}


@router.get("/health", response_model=HealthResponse, tags=["health"], summary="Liveness probe", description="Simple liveness check endpoint.")
def health():
    """Return liveness status for health checks."""
    return HealthResponse(status="ok")


# PUBLIC_INTERFACE
@router.get(
    "/_metrics",
    tags=["health"],
    summary="Metrics (basic)",
    description="Basic in-process counters for observability.",
)
def metrics():
    """Return basic service metrics (process-local) for quick visibility."""
    return metrics_snapshot()
