"""Gateway client - request/response channel to one backend gateway.

The client is stateless apart from its HTTP connection pool and is
shared by the CLI and the HTTP surface of the orchestrator.
"""

from mcp_client.client import GatewayClient

__all__ = [
    "GatewayClient",
]
