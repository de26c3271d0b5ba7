"""Tool Registry for a gateway server.

Holds the operations of one domain and validates their arguments.
"""

from typing import Any, Optional

from shared.logging import get_logger
from shared.models import ToolDefinition
from shared.schema import validate_schema

logger = get_logger(__name__)


class ToolRegistry:
    """
    Registry of the tools a gateway exposes.

    Responsibilities:
    - Register tools from a domain adapter
    - Lookup tools by name
    - Validate arguments against each tool's input schema
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolDefinition] = {}

    def register(self, tool: ToolDefinition) -> None:
        """
        Register a tool in the registry.

        Args:
            tool: Tool definition to register

        Raises:
            ValueError: If tool name is already registered
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")

        self._tools[tool.name] = tool
        logger.info("Tool registered", tool=tool.name, domain=tool.domain)

    def register_many(self, tools: list[ToolDefinition]) -> None:
        """Register multiple tools at once."""
        for tool in tools:
            self.register(tool)

    def get(self, tool_name: str) -> Optional[ToolDefinition]:
        """Get a tool by its exact name."""
        return self._tools.get(tool_name)

    def list_tools(self) -> list[ToolDefinition]:
        """List all registered tools in registration order."""
        return list(self._tools.values())

    def validate_input(
        self,
        tool_name: str,
        arguments: dict[str, Any]
    ) -> tuple[bool, list[str]]:
        """
        Validate arguments against the tool's input schema.

        Returns:
            Tuple of (is_valid, list of error messages)
        """
        tool = self.get(tool_name)
        if not tool:
            return False, [f"Tool '{tool_name}' not found"]

        return validate_schema(arguments, tool.input_schema)

    def __len__(self) -> int:
        return len(self._tools)
