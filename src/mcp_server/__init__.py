"""Gateway Server - one FastAPI process per backend domain.

The gateway server is the authoritative component for tool execution.
It has no LLM or UI logic - only tool listing, validation and routing.
"""

from mcp_server.app import create_gateway_app
from mcp_server.registry import ToolRegistry
from mcp_server.router import ToolRouter

__all__ = [
    "create_gateway_app",
    "ToolRegistry",
    "ToolRouter",
]
