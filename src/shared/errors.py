"""Error taxonomy shared by the orchestrator and the gateways.

Recoverable outcomes (blank search term, nothing found, no tool call in the
LLM output) are plain text results, not exceptions.
"""

from enum import Enum
from typing import Optional


class GatewayErrorCode(str, Enum):
    """Typed error codes returned by a backend gateway."""
    INVALID_PARAMS = "invalid_params"
    METHOD_NOT_FOUND = "method_not_found"
    INTERNAL_ERROR = "internal_error"
    INVALID_REQUEST = "invalid_request"


class OrchestrationError(Exception):
    """Base exception for everything that aborts a single query."""

    def __init__(self, message: str, tool_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.tool_name = tool_name

    def __str__(self) -> str:
        if self.tool_name:
            return f"{self.message} (tool: {self.tool_name})"
        return self.message


class TransportError(OrchestrationError):
    """Endpoint unreachable, timed out, or answered with a non-success status."""


class MalformedIntentError(OrchestrationError):
    """The LLM emitted a TOOL: marker whose argument object is not valid JSON."""

    def __init__(self, message: str, raw_text: str) -> None:
        super().__init__(message)
        self.raw_text = raw_text


class UnknownToolError(OrchestrationError):
    """The requested tool name is not in the static catalog."""

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Unknown tool '{tool_name}'", tool_name=tool_name)


class InvalidArgumentsError(OrchestrationError):
    """Arguments failed the per-tool schema."""


class GatewayError(OrchestrationError):
    """A gateway rejected or failed a call with a typed error."""

    def __init__(
        self,
        code: GatewayErrorCode,
        message: str,
        tool_name: Optional[str] = None
    ) -> None:
        super().__init__(message, tool_name=tool_name)
        self.code = code

    def __str__(self) -> str:
        return f"[{self.code.value}] {super().__str__()}"
