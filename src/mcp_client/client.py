"""Gateway client.

One client per backend gateway. Provides a request/response channel for
named operations and maps every failure onto the shared error taxonomy.
"""

from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from shared.errors import GatewayError, GatewayErrorCode, TransportError
from shared.logging import get_logger
from shared.models import ResourceContent, ResourceDefinition, ToolCallResult, ToolDefinition

logger = get_logger(__name__)


class GatewayClient:
    """
    Client for one backend gateway server.

    Provides methods for:
    - Checking that the gateway is reachable
    - Listing the operations it exposes
    - Calling one operation with arguments

    Tool calls are never retried; only the startup health check is.
    """

    def __init__(
        self,
        name: str,
        server_url: str,
        timeout: float = 30.0,
        connect_attempts: int = 3,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> None:
        """
        Initialize gateway client.

        Args:
            name: Gateway name used in logs and errors
            server_url: Gateway base URL
            timeout: Per-request timeout in seconds
            connect_attempts: Health check attempts made by connect()
            transport: Optional httpx transport (in-process apps in tests)
        """
        self.name = name
        self.server_url = server_url.rstrip("/")
        self.timeout = timeout
        self.connect_attempts = connect_attempts
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.server_url,
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    @property
    def is_open(self) -> bool:
        return self._client is not None and not self._client.is_closed

    async def connect(self) -> dict[str, Any]:
        """
        Open the channel and confirm the gateway answers.

        Returns:
            Health payload reported by the gateway

        Raises:
            TransportError: If the gateway stays unreachable
        """
        checker = retry(
            stop=stop_after_attempt(self.connect_attempts),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
            retry=retry_if_exception_type(TransportError),
            reraise=True,
        )(self.health_check)
        health = await checker()
        logger.info(
            "Gateway connected",
            gateway=self.name,
            url=self.server_url,
            tool_count=health.get("tool_count", 0)
        )
        return health

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Gateway closed", gateway=self.name)
        self._client = None

    async def __aenter__(self) -> "GatewayClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request, translating httpx failures into TransportError."""
        client = self._get_client()
        try:
            return await client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise TransportError(
                f"Gateway '{self.name}' timed out after {self.timeout}s: {e}"
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Cannot reach gateway '{self.name}': {e}") from e

    async def health_check(self) -> dict[str, Any]:
        """
        Check gateway health.

        Raises:
            TransportError: If the gateway is unreachable or unhealthy
        """
        response = await self._request("GET", "/health")
        if response.status_code != 200:
            raise TransportError(
                f"Gateway '{self.name}' health check failed with status {response.status_code}"
            )
        return response.json()

    async def list_tools(self) -> list[ToolDefinition]:
        """List the operations exposed by the gateway."""
        response = await self._request("GET", "/tools")
        if response.status_code != 200:
            raise TransportError(
                f"Gateway '{self.name}' returned status {response.status_code} for /tools"
            )
        return [ToolDefinition(**tool) for tool in response.json().get("tools", [])]

    async def list_resources(self) -> list[ResourceDefinition]:
        """List the usage resources exposed by the gateway."""
        response = await self._request("GET", "/resources")
        if response.status_code != 200:
            raise TransportError(
                f"Gateway '{self.name}' returned status {response.status_code} for /resources"
            )
        return [ResourceDefinition(**r) for r in response.json().get("resources", [])]

    async def read_resource(self, uri: str) -> ResourceContent:
        """
        Read one usage resource.

        Raises:
            GatewayError: If the gateway does not serve the URI
            TransportError: If the gateway is unreachable
        """
        response = await self._request("GET", f"/resources/{quote(uri, safe='')}")
        body = _json_body(response)
        _raise_typed_error(body)
        if response.status_code != 200 or not isinstance(body, dict):
            raise TransportError(
                f"Gateway '{self.name}' returned status {response.status_code} for resource {uri}"
            )
        return ResourceContent(**body)

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> ToolCallResult:
        """
        Execute one operation on the gateway.

        Args:
            name: Operation name
            arguments: Operation arguments

        Returns:
            Content items produced by the operation

        Raises:
            GatewayError: If the gateway answered with a typed error
            TransportError: If the gateway is unreachable or the reply is unusable
        """
        logger.debug("Calling gateway", gateway=self.name, tool=name)

        response = await self._request(
            "POST",
            "/tools/call",
            json={"name": name, "arguments": arguments}
        )

        body = _json_body(response)
        _raise_typed_error(body, tool_name=name)

        if response.status_code != 200 or not isinstance(body, dict):
            raise TransportError(
                f"Gateway '{self.name}' returned status {response.status_code}",
                tool_name=name
            )

        try:
            return ToolCallResult(**body)
        except ValidationError as e:
            raise TransportError(
                f"Gateway '{self.name}' returned an invalid result: {e}",
                tool_name=name
            ) from e


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _raise_typed_error(body: Any, tool_name: Optional[str] = None) -> None:
    """Raise the GatewayError carried by an error body, if any."""
    if not (isinstance(body, dict) and isinstance(body.get("error"), dict)):
        return
    error = body["error"]
    try:
        code = GatewayErrorCode(error.get("code"))
    except ValueError:
        code = GatewayErrorCode.INTERNAL_ERROR
    raise GatewayError(code, error.get("message") or "Gateway error", tool_name=tool_name)
