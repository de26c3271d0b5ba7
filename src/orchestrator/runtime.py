"""Process wiring: build an Orchestrator with open gateway connections."""

from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncIterator, Optional

from shared.config import Settings
from shared.logging import get_logger
from shared.models import GatewayName
from mcp_client.client import GatewayClient
from orchestrator.dispatcher import Dispatcher
from orchestrator.intent import IntentResolver
from orchestrator.llm import LLMProvider, create_llm_provider
from orchestrator.pipeline import Orchestrator

logger = get_logger(__name__)


def create_gateway_clients(settings: Settings) -> dict[GatewayName, GatewayClient]:
    """One client per backend gateway, not yet connected."""
    urls = {
        GatewayName.DIRECTORY: settings.gateways.directory_url,
        GatewayName.CATALOG: settings.gateways.catalog_url,
    }
    return {
        name: GatewayClient(
            name=name.value,
            server_url=url,
            timeout=settings.gateways.timeout_seconds,
            connect_attempts=settings.gateways.connect_attempts,
        )
        for name, url in urls.items()
    }


@asynccontextmanager
async def open_orchestrator(
    settings: Settings,
    llm_provider: Optional[LLMProvider] = None,
    gateways: Optional[dict[GatewayName, GatewayClient]] = None
) -> AsyncIterator[Orchestrator]:
    """
    Connect both gateways and yield a wired orchestrator.

    Both gateway clients and the LLM provider are closed on exit,
    including when startup or a query fails.
    """
    llm = llm_provider or create_llm_provider(settings.llm)
    gateways = gateways or create_gateway_clients(settings)

    async with AsyncExitStack() as stack:
        stack.push_async_callback(llm.aclose)
        for client in gateways.values():
            stack.push_async_callback(client.close)
        for client in gateways.values():
            await client.connect()

        logger.info("Connected to both gateways", gateways=[g.value for g in gateways])

        dispatcher = Dispatcher(gateways, timeout=settings.gateways.timeout_seconds)
        resolver = IntentResolver(llm, settings.llm)
        yield Orchestrator(resolver, dispatcher)

        logger.info("Closing gateway connections")
