"""Static tool catalog.

The four tools the LLM may call, which gateway owns each one, and how
search tools chain into detail tools. Built once at import and read-only.
"""

import json
from types import MappingProxyType
from typing import Mapping

from shared.models import GatewayName, ToolCatalogEntry, ToolKind
from shared.schema import object_schema

_ENTRIES = (
    ToolCatalogEntry(
        name="searchPeopleByName",
        gateway=GatewayName.DIRECTORY,
        kind=ToolKind.SEARCH,
        description="Search people by name",
        example_arguments={"name": "Tam Chantem"},
        input_schema=object_schema(name=("string", "Name or partial name")),
        detail_tool="getPersonById",
    ),
    ToolCatalogEntry(
        name="getPersonById",
        gateway=GatewayName.DIRECTORY,
        kind=ToolKind.DETAIL,
        description="Get a person by ID",
        example_arguments={"id": 123},
        input_schema=object_schema(id=("number", "Person ID")),
    ),
    ToolCatalogEntry(
        name="searchPublicationsByAuthor",
        gateway=GatewayName.CATALOG,
        kind=ToolKind.SEARCH,
        description="Search publications by author name",
        example_arguments={"author": "John Smith"},
        input_schema=object_schema(author=("string", "Author name or partial name")),
        detail_tool="getPublicationById",
    ),
    ToolCatalogEntry(
        name="getPublicationById",
        gateway=GatewayName.CATALOG,
        kind=ToolKind.DETAIL,
        description="Get a publication by ID",
        example_arguments={"id": 456},
        input_schema=object_schema(id=("number", "Publication ID")),
    ),
)

TOOL_CATALOG: Mapping[str, ToolCatalogEntry] = MappingProxyType(
    {entry.name: entry for entry in _ENTRIES}
)


def tool_signatures() -> list[str]:
    """`TOOL:<name> <example json>` lines for the system prompt."""
    return [
        f"TOOL:{entry.name} {json.dumps(entry.example_arguments)}"
        for entry in TOOL_CATALOG.values()
    ]
