"""Health check endpoints."""

from fastapi import APIRouter, Depends

from ... import __version__
from ...tools import ToolRegistry
from ...tracing import get_tracing_client
from ..dependencies import get_registry
from ..schemas import MODEL_ID, HealthResponse

router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the API server is running and healthy.",
)
def health_check(registry: ToolRegistry = Depends(get_registry)) -> HealthResponse:
    tracing_client = get_tracing_client()
    return HealthResponse(
        status="healthy",
        version=__version__,
        model=MODEL_ID,
        tools=len(registry),
        tracing=tracing_client is not None and tracing_client.enabled,
    )
