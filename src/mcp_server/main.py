"""Gateway server entry points.

Each backend domain runs as its own process:

    directory-gateway   # people lookup on BACKEND_DIRECTORY_PORT
    catalog-gateway     # publication lookup on BACKEND_CATALOG_PORT
"""

import argparse
from typing import Optional

from fastapi import FastAPI

from shared.config import Settings, get_settings
from shared.logging import get_logger, setup_logging
from domains import load_domain
from mcp_server.app import create_gateway_app
from mcp_server.router import ToolRouter

logger = get_logger(__name__)


def build_app(domain: str, settings: Optional[Settings] = None) -> FastAPI:
    """Create the gateway application for a domain."""
    settings = settings or get_settings()
    adapter = load_domain(domain, settings.backend)
    return create_gateway_app(ToolRouter(adapter))


def serve(domain: str, port: Optional[int] = None) -> None:
    """Run one gateway server."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings.log_level, json_output=settings.environment == "production")

    if port is None:
        port = {
            "directory": settings.backend.directory_port,
            "catalog": settings.backend.catalog_port,
        }[domain]

    logger.info("Serving gateway", domain=domain, host=settings.backend.host, port=port)
    uvicorn.run(build_app(domain, settings), host=settings.backend.host, port=port)


def main(argv: Optional[list[str]] = None) -> None:
    """Run a gateway server chosen on the command line."""
    parser = argparse.ArgumentParser(description="Run a backend gateway server")
    parser.add_argument("domain", choices=["directory", "catalog"])
    parser.add_argument("--port", type=int, default=None)
    args = parser.parse_args(argv)
    serve(args.domain, args.port)


def directory_main() -> None:
    serve("directory")


def catalog_main() -> None:
    serve("catalog")


if __name__ == "__main__":
    main()
