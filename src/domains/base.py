"""Base classes for domain adapters.

All adapters must:
- Translate tool calls to backend API requests
- Turn backend payloads into plain text
- Report "nothing found" as a normal text result
- Never make cross-domain calls
- Never depend on the LLM
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from shared.config import BackendSettings
from shared.errors import InvalidArgumentsError
from shared.logging import get_logger
from shared.models import ResourceDefinition, ToolDefinition

logger = get_logger(__name__)

HTML_TAG = re.compile(r"<[^>]*>")
WHITESPACE = re.compile(r"\s+")


def strip_html(text: Optional[str]) -> str:
    """Remove HTML tags and collapse whitespace."""
    if not text:
        return ""
    return WHITESPACE.sub(" ", HTML_TAG.sub("", text)).strip()


def truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."


def as_identifier(value: Any) -> int:
    """
    Convert a JSON number argument to a record ID.

    Raises:
        InvalidArgumentsError: If the number has a fractional part
    """
    if isinstance(value, float) and not value.is_integer():
        raise InvalidArgumentsError(f"ID must be a whole number, got {value}")
    return int(value)


class BaseAdapter(ABC):
    """
    Base class for domain adapters.

    Each adapter:
    - Handles one domain only
    - Owns the tool definitions of that domain
    - Has no LLM dependency
    """

    domain: str = ""

    @property
    @abstractmethod
    def tools(self) -> list[ToolDefinition]:
        """Return all tool definitions for this domain."""

    @abstractmethod
    async def execute(self, action: str, arguments: dict[str, Any]) -> str:
        """
        Execute a tool action.

        Arguments have already been validated against the tool's schema.

        Args:
            action: Tool name
            arguments: Tool arguments

        Returns:
            Text output of the tool
        """

    @property
    def resources(self) -> list[ResourceDefinition]:
        """Usage resources of this domain."""
        return []

    def read_resource(self, uri: str) -> Optional[str]:
        """Text of a resource, or None when the URI is not served here."""
        return None

    async def close(self) -> None:
        """Release backend connections."""


class RESTAdapter(BaseAdapter):
    """
    Base adapter for REST API backends.

    Provides a lazily created HTTP client against the upstream API.
    """

    def __init__(
        self,
        settings: BackendSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> None:
        self.base_url = settings.api_base_url.rstrip("/")
        self.timeout = settings.timeout_seconds
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def _get(self, path: str, allow_not_found: bool = False) -> Any:
        """
        GET a JSON document from the backend.

        Returns None for a 404 when allow_not_found is set.

        Raises:
            httpx.HTTPStatusError: For any other non-success status
        """
        client = self._get_client()
        logger.debug("Backend request", domain=self.domain, path=path)
        response = await client.get(path)
        if allow_not_found and response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
