"""Application Domains.

Each domain contains:
- Tool definitions
- Adapter implementation over its upstream API

Domains are isolated: no cross-domain calls or shared state. Each one
is served by its own gateway process.
"""

from typing import TYPE_CHECKING

from shared.config import BackendSettings

if TYPE_CHECKING:
    from domains.base import BaseAdapter


def load_domain(name: str, settings: BackendSettings) -> "BaseAdapter":
    """
    Create the adapter for one domain.

    Raises:
        ValueError: If the domain is unknown
    """
    from domains.catalog import register_catalog_domain
    from domains.directory import register_directory_domain

    factories = {
        "directory": register_directory_domain,
        "catalog": register_catalog_domain,
    }

    factory = factories.get(name)
    if factory is None:
        raise ValueError(f"Unknown domain: {name}. Supported: {list(factories)}")
    return factory(settings)


__all__ = ["load_domain"]
