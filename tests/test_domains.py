"""Tests for domain adapters."""

import httpx
import pytest

from shared.config import BackendSettings
from shared.errors import InvalidArgumentsError

PEOPLE = [
    {
        "id": 42,
        "first_name": "Jane",
        "last_name": "Doe",
        "type": "Researcher",
        "organizations": [{"organization_name": "Stevens Institute"}],
        "emails": [{"email_address": "jane@example.edu"}],
    },
    {
        "id": 7,
        "prefix": "Dr.",
        "first_name": "John",
        "middle_name": "Q",
        "last_name": "Smith",
        "type": "Faculty",
    },
]

PERSON_42 = {
    "people": {
        "id": 42,
        "first_name": "Jane",
        "last_name": "Doe",
        "type": "Researcher",
        "biography": "<p>Systems   <b>engineer</b></p>",
        "emails": [{"email_address": "jane@example.edu", "email_type": "work"}],
        "titles": [{"job_title": "Research Scientist", "start_date": "2019", "current": "yes"}],
        "research_tasks": [{"task_name": "Digital Twins", "task_number": "RT-1", "abstract": "x" * 250}],
    }
}

PUBLICATIONS = [
    {
        "id": 456,
        "title": "Digital Engineering Practice",
        "category": "Journal Article",
        "publication_date": "2021-05-01",
        "publisher": "SERC",
        "authors": [{
            "first_name": "John",
            "last_name": "Smith",
            "organizations": [{"organization_name": "SERC"}],
        }],
        "authors2": [{"first_name": "Ann", "last_name": "Lee"}],
        "abstract": "<p>About <i>digital</i> engineering</p>",
        "projects": [{"id": 9, "project_title": "Mission Engineering"}],
    },
    {
        "id": 457,
        "title": None,
        "authors": [{"first_name": "Johnny", "last_name": "Smithers"}, {"first_name": "", "last_name": "Nobody"}],
        "publication_date": None,
    },
]


def backend_transport(routes: dict[str, object]) -> httpx.MockTransport:
    """Serve fixed JSON per path; anything else is a 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path in routes:
            return httpx.Response(200, json=routes[request.url.path])
        return httpx.Response(404, json={"detail": "not found"})

    return httpx.MockTransport(handler)


def settings() -> BackendSettings:
    return BackendSettings(api_base_url="https://portal.test/api")


def directory_adapter():
    from domains.directory import DirectoryAdapter

    return DirectoryAdapter(
        settings(),
        transport=backend_transport({"/api/people": PEOPLE, "/api/people/42": PERSON_42}),
    )


def catalog_adapter(publications=PUBLICATIONS):
    from domains.catalog import CatalogAdapter

    return CatalogAdapter(settings(), transport=backend_transport({"/api/publications": publications}))


class TestHelpers:
    """Tests for formatting helpers."""

    def test_strip_html(self):
        """Test tag removal and whitespace collapse."""
        from domains.base import strip_html

        assert strip_html("<p>Hello <b>world</b></p>\n\n") == "Hello world"
        assert strip_html(None) == ""

    def test_as_identifier(self):
        """Test that only whole numbers are IDs."""
        from domains.base import as_identifier

        assert as_identifier(42) == 42
        assert as_identifier(42.0) == 42

        with pytest.raises(InvalidArgumentsError):
            as_identifier(4.5)

    def test_full_name_skips_missing_parts(self):
        """Test name assembly."""
        from domains.directory import full_name

        assert full_name(PEOPLE[1]) == "Dr. John Q Smith"
        assert full_name({"first_name": "Jane", "last_name": None}) == "Jane"

    def test_publication_year(self):
        """Test year extraction from free-form dates."""
        from domains.catalog import publication_year

        assert publication_year({"publication_date": "May 2021"}) == 2021
        assert publication_year({"publication_date": None}) == 0
        assert publication_year({}) == 0


class TestDirectoryAdapter:
    """Tests for the directory adapter."""

    def test_tools(self):
        """Test the advertised tools."""
        adapter = directory_adapter()

        assert [t.name for t in adapter.tools] == ["searchPeopleByName", "getPersonById"]
        assert all(t.domain == "directory" for t in adapter.tools)

    @pytest.mark.asyncio
    async def test_search_lists_ids(self):
        """Test that every match carries an ID line."""
        adapter = directory_adapter()

        output = await adapter.execute("searchPeopleByName", {"name": "jane doe"})

        assert output.startswith('Found 1 people matching "jane doe":')
        assert "ID: 42" in output
        assert "Organization: Stevens Institute" in output
        assert "Email: jane@example.edu" in output

    @pytest.mark.asyncio
    async def test_search_matches_last_name(self):
        """Test case-insensitive partial matching."""
        adapter = directory_adapter()

        output = await adapter.execute("searchPeopleByName", {"name": "SMI"})

        assert "ID: 7" in output
        assert "Name: Dr. John Q Smith" in output
        assert "ID: 42" not in output

    @pytest.mark.asyncio
    async def test_search_no_match(self):
        """Test that nothing found is a normal result."""
        adapter = directory_adapter()

        output = await adapter.execute("searchPeopleByName", {"name": "Nobody"})

        assert output == 'No people found matching name: "Nobody"'

    @pytest.mark.asyncio
    async def test_blank_search_term(self):
        """Test that blank terms are answered without a backend call."""
        from domains.directory import DirectoryAdapter

        def handler(request):
            raise AssertionError("backend must not be called")

        adapter = DirectoryAdapter(settings(), transport=httpx.MockTransport(handler))

        output = await adapter.execute("searchPeopleByName", {"name": "   "})

        assert output == "Please provide a valid name search term."

    @pytest.mark.asyncio
    async def test_person_details(self):
        """Test the detail report sections."""
        adapter = directory_adapter()

        output = await adapter.execute("getPersonById", {"id": 42})

        assert output.startswith("PERSON DETAILS")
        assert "ID: 42" in output
        assert "Systems engineer" in output
        assert "  - jane@example.edu (work)" in output
        assert "  - Research Scientist (2019 - Present) [Current]" in output
        assert "  - Digital Twins (RT-1)" in output
        assert f"Abstract: {'x' * 200}..." in output

    @pytest.mark.asyncio
    async def test_person_not_found(self):
        """Test that a 404 is a normal not-found result."""
        adapter = directory_adapter()

        output = await adapter.execute("getPersonById", {"id": 999})

        assert output == "No person found with ID: 999"

    @pytest.mark.asyncio
    async def test_backend_failure_raises(self):
        """Test that a failing backend surfaces as an exception."""
        from domains.directory import DirectoryAdapter

        adapter = DirectoryAdapter(
            settings(),
            transport=httpx.MockTransport(lambda request: httpx.Response(500, json={})),
        )

        with pytest.raises(httpx.HTTPStatusError):
            await adapter.execute("searchPeopleByName", {"name": "Jane"})


class TestCatalogAdapter:
    """Tests for the catalog adapter."""

    def test_tools(self):
        """Test the advertised tools."""
        adapter = catalog_adapter()

        assert [t.name for t in adapter.tools] == ["searchPublicationsByAuthor", "getPublicationById"]

    @pytest.mark.asyncio
    async def test_search_by_primary_and_secondary_author(self):
        """Test that both author lists are searched."""
        adapter = catalog_adapter()

        by_primary = await adapter.execute("searchPublicationsByAuthor", {"author": "john smith"})
        by_secondary = await adapter.execute("searchPublicationsByAuthor", {"author": "Ann Lee"})

        assert by_primary.startswith('Found 1 publication(s) matching "john smith":')
        assert "1. Publication ID: 456" in by_primary
        assert "Author(s): John Smith, Ann Lee" in by_primary
        assert "Year: 2021" in by_primary
        assert "Publication ID: 456" in by_secondary

    @pytest.mark.asyncio
    async def test_search_defaults_for_missing_fields(self):
        """Test placeholders for incomplete records."""
        adapter = catalog_adapter()

        output = await adapter.execute("searchPublicationsByAuthor", {"author": "smithers"})

        assert "1. Publication ID: 457" in output
        assert "Title: Untitled" in output
        assert "Author(s): Johnny Smithers" in output
        assert "Category: Unknown" in output
        assert "Year: 0" in output

    @pytest.mark.asyncio
    async def test_search_no_match_and_blank(self):
        """Test recoverable search outcomes."""
        adapter = catalog_adapter()

        assert (
            await adapter.execute("searchPublicationsByAuthor", {"author": "Nobody Known"})
            == 'No publications found matching author: "Nobody Known"'
        )
        assert (
            await adapter.execute("searchPublicationsByAuthor", {"author": " "})
            == "Please provide a valid author search term."
        )

    @pytest.mark.asyncio
    async def test_publication_details(self):
        """Test the detail report sections."""
        adapter = catalog_adapter()

        output = await adapter.execute("getPublicationById", {"id": 456})

        assert output.startswith("=== PUBLICATION DETAILS ===")
        assert "ID: 456" in output
        assert "  1. John Smith (SERC)" in output
        assert "  2. Ann Lee" in output
        assert "Publisher: SERC" in output
        assert "ISBN: N/A" in output
        assert "Abstract: About digital engineering" in output
        assert "Mission Engineering (ID: 9)" in output

    @pytest.mark.asyncio
    async def test_publication_not_found(self):
        """Test that an unknown ID is a normal result."""
        adapter = catalog_adapter()

        output = await adapter.execute("getPublicationById", {"id": 1})

        assert output == "No publication found with ID: 1"

    @pytest.mark.asyncio
    async def test_unexpected_payload_raises(self):
        """Test that a non-list listing is an execution failure."""
        adapter = catalog_adapter(publications={"publications": []})

        with pytest.raises(ValueError, match="not a list"):
            await adapter.execute("getPublicationById", {"id": 456})


class TestLoadDomain:
    """Tests for domain loading."""

    def test_known_domains(self):
        """Test that both domains load."""
        from domains import load_domain
        from domains.catalog import CatalogAdapter
        from domains.directory import DirectoryAdapter

        assert isinstance(load_domain("directory", settings()), DirectoryAdapter)
        assert isinstance(load_domain("catalog", settings()), CatalogAdapter)

    def test_unknown_domain_raises(self):
        """Test that unknown domains are rejected."""
        from domains import load_domain

        with pytest.raises(ValueError, match="Unknown domain"):
            load_domain("hr", settings())
