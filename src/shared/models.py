"""Core data models.

This module defines the shared data structures passed between the
orchestrator, the gateway clients and the gateway servers.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class GatewayName(str, Enum):
    """The two backend gateways."""
    DIRECTORY = "directory"
    CATALOG = "catalog"


class ToolKind(str, Enum):
    """Search tools return lists with identifiers; detail tools take one."""
    SEARCH = "search"
    DETAIL = "detail"


class ToolCatalogEntry(BaseModel):
    """
    Static routing entry for a tool the LLM may call.

    Entries are frozen: the catalog is built at import time and
    never mutated afterwards.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    gateway: GatewayName
    kind: ToolKind
    description: str
    example_arguments: dict[str, Any] = Field(default_factory=dict)
    input_schema: dict[str, Any] = Field(default_factory=dict)
    detail_tool: Optional[str] = Field(
        default=None,
        description="Detail tool chained after this search tool"
    )


class ToolCall(BaseModel):
    """A single tool invocation extracted from LLM output."""
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class ContentItem(BaseModel):
    """One item of gateway output; only text items carry `text`."""
    type: str = "text"
    text: Optional[str] = None


class ToolCallResult(BaseModel):
    """Successful gateway response."""
    content: list[ContentItem] = Field(default_factory=list)

    @property
    def text(self) -> str:
        """Text items joined by newlines; other item types are dropped."""
        return "\n".join(
            item.text or "" for item in self.content if item.type == "text"
        )


class ToolDefinition(BaseModel):
    """Tool as advertised by a gateway server."""
    name: str
    domain: str
    description: str
    input_schema: dict[str, Any] = Field(default_factory=dict)


class ResourceDefinition(BaseModel):
    """Static usage resource advertised by a gateway."""
    uri: str
    name: str
    description: str
    mime_type: str = "text/plain"


class ResourceContent(BaseModel):
    """Body of one resource read."""
    uri: str
    mime_type: str = "text/plain"
    text: str


class ConversationMessage(BaseModel):
    """A single chat message sent to the LLM."""
    role: str = Field(..., description="Message role: system, user, assistant")
    content: str


class LLMResponse(BaseModel):
    """Response from the LLM layer.

    `raw` keeps the provider payload so callers can inspect
    missing fields instead of trusting `content` blindly.
    """
    content: Optional[str] = None
    raw: dict[str, Any] = Field(default_factory=dict)
    finish_reason: str = "stop"
    usage: dict[str, Any] = Field(default_factory=dict)


class QueryOutcome(BaseModel):
    """Final answer for one query."""
    text: str
    tool_detected: bool = False
    tool_name: Optional[str] = None
    followed_up: bool = False
