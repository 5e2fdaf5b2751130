"""
FastAPI application for multistep.

Provides an OpenAI-compatible REST API in front of the multi-step tool
calling loop.

Usage:
    # Development server with auto-reload
    uvicorn multistep.api.main:app --reload --host 0.0.0.0 --port 8000

    # Debug mode (verbose logging)
    LOG_LEVEL=DEBUG uvicorn multistep.api.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import config, configure_logging
from ..llm_call import LLMClient
from ..orchestration import ChatProposer, Proposer
from ..tools import ToolRegistry, build_default_registry
from ..tracing import init_tracing_client, shutdown_tracing
from .routes import chat, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Starting multistep API server")

    logger.info("=" * 60)
    logger.info("MODEL CONFIGURATION")
    logger.info("  Base URL: %s", config.model.base_url or "(SDK default)")
    logger.info("  Model: %s", config.model.model)
    logger.info("  Max Iterations: %d", config.model.max_iterations)

    logger.info("-" * 60)
    logger.info("REGISTERED TOOLS")
    for tool in app.state.registry:
        logger.info("  - %s: %s", tool.name, tool.description[:60])

    logger.info("-" * 60)
    logger.info("LANGFUSE OBSERVABILITY")
    tracing_client = init_tracing_client(config.langfuse)
    if tracing_client.enabled:
        logger.info("  Status: ENABLED")
        logger.info("  Host: %s", config.langfuse.host or "https://cloud.langfuse.com")
    else:
        logger.info("  Status: DISABLED")
        if tracing_client.error:
            logger.info("  Reason: %s", tracing_client.error)
    logger.info("=" * 60)

    yield

    logger.info("Shutting down multistep API server")
    llm_client = getattr(app.state.proposer, "llm_client", None)
    if llm_client is not None:
        await llm_client.close()
    shutdown_tracing()


def create_app(
    proposer: Optional[Proposer] = None,
    registry: Optional[ToolRegistry] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        proposer: Proposer shared by all requests. Defaults to a
            ``ChatProposer`` for the configured endpoint.
        registry: Tool catalog. Defaults to ``build_default_registry``.
    """
    app = FastAPI(
        title="multistep API",
        description=(
            "OpenAI-compatible REST API for bounded multi-step tool calling. "
            "Point any OpenAI client at the /v1 endpoint."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    if proposer is None:
        proposer = ChatProposer(LLMClient(config.model), config.model)
    app.state.proposer = proposer
    app.state.registry = registry if registry is not None else build_default_registry(config.tools)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router, tags=["Health"])
    app.include_router(chat.router, tags=["Chat"])

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Log validation errors before returning a 400 response."""
        logger.warning("Validation error on %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"detail": exc.errors()})

    return app


configure_logging()
app = create_app()


def run_server() -> None:
    """Serve ``app`` with uvicorn using the server section of the config."""
    import uvicorn

    uvicorn.run(
        "multistep.api.main:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.reload,
        workers=1 if config.server.reload else config.server.workers,
    )


if __name__ == "__main__":
    run_server()
