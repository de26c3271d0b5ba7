"""Catalog Domain - publication lookup.

Wraps the publications endpoint of the research portal API. The API has
no per-publication endpoint, so both tools read the full listing.
"""

import re
from typing import Any, Optional

from shared.config import BackendSettings
from shared.logging import get_logger
from shared.models import ResourceDefinition, ToolDefinition
from shared.schema import object_schema
from domains.base import RESTAdapter, as_identifier, strip_html

logger = get_logger(__name__)

YEAR = re.compile(r"\d{4}")

SEARCH_RESOURCE = ResourceDefinition(
    uri="publications://search",
    name="Search Publications",
    description="Search for publications by author name to get their IDs",
)

SEARCH_GUIDE = (
    "To search for publications:\n"
    "1. Use searchPublicationsByAuthor to find publications and get their IDs\n"
    "2. Use getPublicationById with the ID to get complete details"
)


def publication_authors(publication: dict[str, Any]) -> list[dict[str, Any]]:
    """Primary and secondary authors that have both name parts."""
    authors = (publication.get("authors") or []) + (publication.get("authors2") or [])
    return [a for a in authors if a and a.get("first_name") and a.get("last_name")]


def author_names(publication: dict[str, Any]) -> list[str]:
    return [f"{a['first_name']} {a['last_name']}" for a in publication_authors(publication)]


def publication_year(publication: dict[str, Any]) -> int:
    """First four-digit run of the publication date, 0 when absent."""
    date = publication.get("publication_date")
    if not isinstance(date, str):
        return 0
    match = YEAR.search(date)
    return int(match.group(0)) if match else 0


class CatalogAdapter(RESTAdapter):
    """Catalog Domain Adapter."""

    domain = "catalog"

    def __init__(self, settings: BackendSettings, transport=None) -> None:
        super().__init__(settings, transport=transport)
        self._tools = [
            ToolDefinition(
                name="searchPublicationsByAuthor",
                domain=self.domain,
                description="Search for publications by author name and return a list with IDs, names, categories, title, and basic info",
                input_schema=object_schema(
                    author=("string", "The name or partial name of the author to search for")
                ),
            ),
            ToolDefinition(
                name="getPublicationById",
                domain=self.domain,
                description="Get complete detailed information about a publication using its ID",
                input_schema=object_schema(
                    id=("number", "The ID of the publication to retrieve")
                ),
            ),
        ]

    @property
    def tools(self) -> list[ToolDefinition]:
        return self._tools

    @property
    def resources(self) -> list[ResourceDefinition]:
        return [SEARCH_RESOURCE]

    def read_resource(self, uri: str) -> Optional[str]:
        return SEARCH_GUIDE if uri == SEARCH_RESOURCE.uri else None

    async def execute(self, action: str, arguments: dict[str, Any]) -> str:
        if action == "searchPublicationsByAuthor":
            return await self.search_publications_by_author(arguments["author"])
        if action == "getPublicationById":
            return await self.get_publication_by_id(as_identifier(arguments["id"]))
        raise ValueError(f"Action '{action}' not found in domain '{self.domain}'")

    async def _fetch_all(self) -> list[dict[str, Any]]:
        data = await self._get("/publications")
        if not isinstance(data, list):
            raise ValueError("Publications API response is not a list")
        return data

    async def search_publications_by_author(self, author: str) -> str:
        term = author.strip().lower()
        if not term:
            return "Please provide a valid author search term."

        matches = [
            pub for pub in await self._fetch_all()
            if any(term in name.lower() for name in author_names(pub))
        ]
        logger.info("Publication search", term=term, matches=len(matches))

        if not matches:
            return f'No publications found matching author: "{author}"'

        entries = [
            "\n".join([
                f"{index}. Publication ID: {pub.get('id') or 0}",
                f"   Title: {pub.get('title') or 'Untitled'}",
                f"   Author(s): {', '.join(author_names(pub)) or 'Unknown Author'}",
                f"   Category: {pub.get('category') or 'Unknown'}",
                f"   Year: {publication_year(pub)}",
            ])
            for index, pub in enumerate(matches, start=1)
        ]
        return (
            f'Found {len(matches)} publication(s) matching "{author}":\n\n'
            + "\n\n".join(entries)
            + "\n\nUse the publication ID with getPublicationById to get complete details for any publication."
        )

    async def get_publication_by_id(self, publication_id: int) -> str:
        publication = self._find(await self._fetch_all(), publication_id)
        if publication is None:
            return f"No publication found with ID: {publication_id}"
        return self._details(publication)

    @staticmethod
    def _find(publications: list[dict[str, Any]], publication_id: int) -> Optional[dict[str, Any]]:
        return next((p for p in publications if p.get("id") == publication_id), None)

    @staticmethod
    def _details(publication: dict[str, Any]) -> str:
        authors = []
        for index, a in enumerate(publication_authors(publication), start=1):
            prefix = f"{a['prefix']} " if a.get("prefix") else ""
            orgs = ", ".join(o.get("organization_name", "") for o in a.get("organizations") or [])
            suffix = f" ({orgs})" if orgs else ""
            authors.append(f"  {index}. {prefix}{a['first_name']} {a['last_name']}{suffix}")

        projects = ", ".join(
            f"{p.get('project_title') or 'Untitled Project'} (ID: {p.get('id')})"
            for p in publication.get("projects") or []
        )

        def field(key: str, default: str = "N/A") -> str:
            return publication.get(key) or default

        lines = [
            "=== PUBLICATION DETAILS ===",
            f"Title: {field('title', 'Untitled')}",
            f"ID: {publication.get('id')}",
            f"Category: {field('category', 'Unknown')}",
            "",
            "AUTHORS:",
            *(authors or ["  No authors listed"]),
            "",
            "PUBLICATION INFORMATION:",
            f"Publication Date: {field('publication_date', 'Unknown')}",
            f"Publisher: {field('publisher')}",
            f"Event Name: {field('event_name')}",
            f"Location: {field('location')}",
            f"ISBN: {field('isbn')}",
            f"URL: {field('url')}",
            f"Report Number: {field('report_number')}",
            "",
            "CONTENT:",
            f"Abstract: {strip_html(publication.get('abstract')) or 'No abstract available'}",
            "",
            "ASSOCIATED PROJECTS:",
            projects or "No associated projects",
        ]
        return "\n".join(lines)


def register_catalog_domain(settings: BackendSettings) -> CatalogAdapter:
    """Create the catalog adapter."""
    return CatalogAdapter(settings)
