"""Tool Router for a gateway server.

Routes tool calls to the domain adapter.
Handles lookup, validation, execution and result normalization.
"""

import time
from typing import Any, Optional

from shared.errors import GatewayError, GatewayErrorCode, InvalidArgumentsError
from shared.logging import get_logger
from shared.models import ContentItem, ResourceContent, ToolCallResult
from mcp_server.registry import ToolRegistry
from domains.base import BaseAdapter

logger = get_logger(__name__)


class ToolRouter:
    """
    Routes tool calls to a domain adapter.

    Every failure leaves the router as a GatewayError carrying one of the
    protocol error codes; the HTTP layer only has to serialize it.
    """

    def __init__(
        self,
        adapter: BaseAdapter,
        registry: Optional[ToolRegistry] = None
    ) -> None:
        self.adapter = adapter
        self.registry = registry or ToolRegistry()
        self.registry.register_many(adapter.tools)

    @property
    def domain(self) -> str:
        return self.adapter.domain

    async def execute(self, name: str, arguments: dict[str, Any]) -> ToolCallResult:
        """
        Execute a tool call.

        Args:
            name: Tool name
            arguments: Tool arguments

        Returns:
            Normalized tool result

        Raises:
            GatewayError: method_not_found, invalid_params or internal_error
        """
        start_time = time.time()

        if not self.registry.get(name):
            raise GatewayError(
                GatewayErrorCode.METHOD_NOT_FOUND,
                f"Unknown tool: {name}",
                tool_name=name
            )

        is_valid, errors = self.registry.validate_input(name, arguments)
        if not is_valid:
            logger.info("Invalid parameters", tool=name, errors=errors)
            raise GatewayError(
                GatewayErrorCode.INVALID_PARAMS,
                f"Invalid parameters for {name}: {'; '.join(errors)}",
                tool_name=name
            )

        try:
            output = await self.adapter.execute(name, arguments)
        except InvalidArgumentsError as e:
            raise GatewayError(
                GatewayErrorCode.INVALID_PARAMS, e.message, tool_name=name
            ) from e
        except Exception as e:
            logger.error("Tool execution failed", tool=name, error=str(e), exc_info=True)
            raise GatewayError(
                GatewayErrorCode.INTERNAL_ERROR,
                f"Error executing {name}: {e}",
                tool_name=name
            ) from e

        logger.info(
            "Tool executed",
            tool=name,
            execution_time_ms=round((time.time() - start_time) * 1000, 2)
        )
        return self._normalize(output)

    def read_resource(self, uri: str) -> ResourceContent:
        """
        Read one of the adapter's usage resources.

        Raises:
            GatewayError: invalid_request if the URI is not served here
        """
        text = self.adapter.read_resource(uri)
        if text is None:
            raise GatewayError(GatewayErrorCode.INVALID_REQUEST, f"Unknown resource: {uri}")
        return ResourceContent(uri=uri, text=text)

    @staticmethod
    def _normalize(output: Any) -> ToolCallResult:
        if isinstance(output, ToolCallResult):
            return output
        if isinstance(output, str):
            return ToolCallResult(content=[ContentItem(type="text", text=output)])
        return ToolCallResult(content=[ContentItem(type="text", text=str(output))])
