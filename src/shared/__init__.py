"""Shared models, configuration, errors and logging."""

from shared.models import (
    ContentItem,
    GatewayName,
    QueryOutcome,
    ToolCall,
    ToolCallResult,
    ToolCatalogEntry,
    ToolKind,
)
from shared.errors import (
    GatewayError,
    GatewayErrorCode,
    InvalidArgumentsError,
    MalformedIntentError,
    OrchestrationError,
    TransportError,
    UnknownToolError,
)
from shared.config import Settings, get_settings
from shared.logging import get_logger, setup_logging

__all__ = [
    "ContentItem",
    "GatewayName",
    "QueryOutcome",
    "ToolCall",
    "ToolCallResult",
    "ToolCatalogEntry",
    "ToolKind",
    "GatewayError",
    "GatewayErrorCode",
    "InvalidArgumentsError",
    "MalformedIntentError",
    "OrchestrationError",
    "TransportError",
    "UnknownToolError",
    "Settings",
    "get_settings",
    "get_logger",
    "setup_logging",
]
