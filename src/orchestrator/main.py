"""Orchestrator - FastAPI Application.

HTTP surface over the same pipeline the interactive prompt uses:
- POST /query   one query, one response
- GET  /tools   the static tool catalog
- GET  /health  gateway reachability
"""

from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, status
from pydantic import BaseModel, Field

from shared.config import get_settings
from shared.errors import (
    MalformedIntentError,
    OrchestrationError,
    UnknownToolError,
)
from shared.logging import get_logger, setup_logging
from orchestrator.catalog import TOOL_CATALOG
from orchestrator.pipeline import Orchestrator
from orchestrator.runtime import open_orchestrator

logger = get_logger(__name__)


class QueryRequest(BaseModel):
    """Query from a client."""
    query: str = Field(..., description="Natural-language query")


class QueryResponse(BaseModel):
    """Answer to one query."""
    response: str
    tool_detected: bool
    tool_name: Optional[str] = None
    followed_up: bool = False


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    gateways: dict[str, str]


# Global instances
_orchestrator: Optional[Orchestrator] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    global _orchestrator

    settings = get_settings()
    setup_logging(settings.log_level, json_output=settings.environment == "production")
    logger.info("Starting Orchestrator")

    async with open_orchestrator(settings) as orchestrator:
        _orchestrator = orchestrator
        logger.info("Orchestrator started")
        yield
        logger.info("Shutting down Orchestrator")
        _orchestrator = None


app = FastAPI(
    title="Research Assistant Orchestrator",
    description="Routes natural-language queries to the directory and catalog gateways",
    version="0.1.0",
    lifespan=lifespan
)


def _require_orchestrator() -> Orchestrator:
    if _orchestrator is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Orchestrator not initialized"
        )
    return _orchestrator


def error_status(error: OrchestrationError) -> int:
    """HTTP status reported for a failed query."""
    if isinstance(error, (MalformedIntentError, UnknownToolError)):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    return status.HTTP_502_BAD_GATEWAY


@app.post("/query", response_model=QueryResponse, tags=["Query"])
async def query(request: QueryRequest):
    """Process one natural-language query."""
    orchestrator = _require_orchestrator()

    try:
        outcome = await orchestrator.run(request.query)
    except OrchestrationError as e:
        raise HTTPException(status_code=error_status(e), detail=str(e))

    return QueryResponse(
        response=outcome.text,
        tool_detected=outcome.tool_detected,
        tool_name=outcome.tool_name,
        followed_up=outcome.followed_up,
    )


@app.get("/tools", tags=["Tools"])
async def list_tools() -> dict[str, Any]:
    """List the static tool catalog."""
    tools = [entry.model_dump(mode="json") for entry in TOOL_CATALOG.values()]
    return {"tools": tools, "count": len(tools)}


@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """Report reachability of both gateways."""
    orchestrator = _require_orchestrator()

    gateways = {}
    for name, client in orchestrator.dispatcher.gateways.items():
        try:
            health = await client.health_check()
            gateways[name.value] = health.get("status", "unknown")
        except OrchestrationError:
            gateways[name.value] = "unreachable"

    healthy = all(value == "healthy" for value in gateways.values())
    return HealthResponse(status="healthy" if healthy else "degraded", gateways=gateways)


def main():
    """Run the Orchestrator server."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "orchestrator.main:app",
        host=settings.orchestrator.host,
        port=settings.orchestrator.port,
        reload=settings.environment == "development"
    )


if __name__ == "__main__":
    main()
