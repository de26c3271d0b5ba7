"""Dispatcher - routes a tool call to the gateway that owns it."""

import asyncio
from typing import Mapping, Optional

from shared.errors import OrchestrationError, TransportError, UnknownToolError
from shared.logging import get_logger
from shared.models import GatewayName, ToolCall, ToolCatalogEntry
from mcp_client.client import GatewayClient
from orchestrator.catalog import TOOL_CATALOG

logger = get_logger(__name__)


class Dispatcher:
    """
    Executes catalog tools against their owning gateway.

    Names are matched exactly against the catalog; an unknown name fails
    before any gateway is contacted.
    """

    def __init__(
        self,
        gateways: Mapping[GatewayName, GatewayClient],
        catalog: Mapping[str, ToolCatalogEntry] = TOOL_CATALOG,
        timeout: Optional[float] = None
    ) -> None:
        missing = {entry.gateway for entry in catalog.values()} - set(gateways)
        if missing:
            raise ValueError(f"No gateway client for: {sorted(g.value for g in missing)}")
        self.gateways = gateways
        self.catalog = catalog
        self.timeout = timeout

    async def dispatch(self, call: ToolCall) -> str:
        """
        Execute a tool call and return its text output.

        Raises:
            UnknownToolError: If the tool is not in the catalog
            GatewayError: If the gateway rejected the call
            TransportError: If the gateway is unreachable or timed out
        """
        entry = self.catalog.get(call.name)
        if entry is None:
            raise UnknownToolError(call.name)
        gateway = self.gateways[entry.gateway]

        logger.info("Executing tool", tool=call.name, gateway=entry.gateway.value, arguments=call.arguments)

        try:
            result = await asyncio.wait_for(
                gateway.call_tool(call.name, call.arguments),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"Gateway '{entry.gateway.value}' timed out after {self.timeout}s",
                tool_name=call.name
            ) from e
        except OrchestrationError as e:
            if e.tool_name is None:
                e.tool_name = call.name
            raise

        return result.text
