"""Gateway server - FastAPI application factory.

A gateway server exposes the operations of exactly one domain. It has no
LLM logic: only tool listing, argument validation and execution.
"""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from shared.errors import GatewayError, GatewayErrorCode
from shared.logging import get_logger
from shared.models import ResourceContent, ToolCallResult
from mcp_server.router import ToolRouter

logger = get_logger(__name__)

ERROR_STATUS = {
    GatewayErrorCode.INVALID_PARAMS: 400,
    GatewayErrorCode.METHOD_NOT_FOUND: 404,
    GatewayErrorCode.INTERNAL_ERROR: 500,
    GatewayErrorCode.INVALID_REQUEST: 400,
}


class ToolCallRequest(BaseModel):
    """Request to execute a tool."""
    name: str = Field(..., description="Tool name")
    arguments: dict[str, Any] = Field(default_factory=dict)


class ToolListResponse(BaseModel):
    """List of available tools."""
    tools: list[dict[str, Any]]


class ResourceListResponse(BaseModel):
    """List of usage resources."""
    resources: list[dict[str, Any]]


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    domain: str
    tool_count: int


def create_gateway_app(router: ToolRouter) -> FastAPI:
    """
    Build the FastAPI application for one domain.

    Args:
        router: Tool router wrapping the domain adapter

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting gateway", domain=router.domain, tool_count=len(router.registry))
        yield
        logger.info("Shutting down gateway", domain=router.domain)
        await router.adapter.close()

    app = FastAPI(
        title=f"{router.domain.title()} Gateway",
        description=f"Tool gateway for the {router.domain} domain",
        version="0.1.0",
        lifespan=lifespan
    )

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
        return JSONResponse(
            status_code=ERROR_STATUS[exc.code],
            content={"error": {"code": exc.code.value, "message": exc.message}}
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=ERROR_STATUS[GatewayErrorCode.INVALID_PARAMS],
            content={"error": {
                "code": GatewayErrorCode.INVALID_PARAMS.value,
                "message": f"Malformed tool call request: {exc.errors()}"
            }}
        )

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health_check():
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            domain=router.domain,
            tool_count=len(router.registry)
        )

    @app.get("/tools", response_model=ToolListResponse, tags=["Tools"])
    async def list_tools():
        """List the tools of this domain."""
        return ToolListResponse(tools=[
            tool.model_dump() for tool in router.registry.list_tools()
        ])

    @app.get("/resources", response_model=ResourceListResponse, tags=["Resources"])
    async def list_resources():
        """List the usage resources of this domain."""
        return ResourceListResponse(resources=[
            resource.model_dump() for resource in router.adapter.resources
        ])

    @app.get("/resources/{uri:path}", response_model=ResourceContent, tags=["Resources"])
    async def read_resource(uri: str):
        """Read one usage resource by URI."""
        return router.read_resource(uri)

    @app.post("/tools/call", response_model=ToolCallResult, tags=["Execution"])
    async def call_tool(request: ToolCallRequest):
        """Execute a tool and return its content items."""
        return await router.execute(request.name, request.arguments)

    return app
