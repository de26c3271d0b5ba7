"""Directory Domain - people lookup.

Wraps the people endpoints of the research portal API:
- searchPeopleByName: list matching people with their IDs
- getPersonById: full profile of one person
"""

from typing import Any, Optional

from shared.config import BackendSettings
from shared.logging import get_logger
from shared.models import ResourceDefinition, ToolDefinition
from shared.schema import object_schema
from domains.base import RESTAdapter, as_identifier, strip_html, truncate

logger = get_logger(__name__)

SEPARATOR = "=" * 50

SEARCH_RESOURCE = ResourceDefinition(
    uri="people://search",
    name="Search People",
    description="Search for people by name to get their IDs",
)

SEARCH_GUIDE = (
    "To search for people:\n"
    "1. Use searchPeopleByName to find people and get their IDs\n"
    "2. Use getPersonById with the ID to get complete details"
)


def full_name(person: dict[str, Any]) -> str:
    """Join the non-empty name parts of a person record."""
    parts = [
        person.get("prefix"),
        person.get("first_name"),
        person.get("middle_name"),
        person.get("last_name"),
        person.get("suffix"),
    ]
    return " ".join(p for p in parts if p).strip()


def matches_name(person: dict[str, Any], term: str) -> bool:
    """Case-insensitive substring match on full, first or last name."""
    term = term.lower()
    return any(
        term in (value or "").lower()
        for value in (full_name(person), person.get("first_name"), person.get("last_name"))
    )


class DirectoryAdapter(RESTAdapter):
    """
    Directory Domain Adapter.

    Search results carry an `ID: <n>` line per person so a follow-up
    lookup can pick the identifier out of the text.
    """

    domain = "directory"

    def __init__(self, settings: BackendSettings, transport=None) -> None:
        super().__init__(settings, transport=transport)
        self._tools = [
            ToolDefinition(
                name="searchPeopleByName",
                domain=self.domain,
                description="Search for people by name and return a list with IDs, names, types, and basic info",
                input_schema=object_schema(
                    name=("string", "The name or partial name to search for")
                ),
            ),
            ToolDefinition(
                name="getPersonById",
                domain=self.domain,
                description="Get complete detailed information about a person using their ID",
                input_schema=object_schema(
                    id=("number", "The ID of the person to retrieve")
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
        if action == "searchPeopleByName":
            return await self.search_people_by_name(arguments["name"])
        if action == "getPersonById":
            return await self.get_person_by_id(as_identifier(arguments["id"]))
        raise ValueError(f"Action '{action}' not found in domain '{self.domain}'")

    async def search_people_by_name(self, name: str) -> str:
        if not name.strip():
            return "Please provide a valid name search term."

        people = await self._get("/people") or []
        matches = [p for p in people if matches_name(p, name)]
        logger.info("People search", term=name, matches=len(matches))

        if not matches:
            return f'No people found matching name: "{name}"'

        entries = [self._summary(p) for p in matches]
        return f'Found {len(matches)} people matching "{name}":\n\n' + "\n---\n".join(entries)

    @staticmethod
    def _summary(person: dict[str, Any]) -> str:
        lines = [
            f"ID: {person.get('id')}",
            f"Name: {full_name(person)}",
            f"Type: {person.get('type') or 'Unknown'}",
        ]
        organization = _first(person.get("organizations"), "organization_name")
        if organization:
            lines.append(f"Organization: {organization}")
        email = _first(person.get("emails"), "email_address")
        if email:
            lines.append(f"Email: {email}")
        return "\n".join(lines) + "\n"

    async def get_person_by_id(self, person_id: int) -> str:
        data = await self._get(f"/people/{person_id}", allow_not_found=True)
        if not data or not data.get("people"):
            return f"No person found with ID: {person_id}"
        return self._details(data["people"])

    @staticmethod
    def _details(person: dict[str, Any]) -> str:
        lines = [
            "PERSON DETAILS",
            SEPARATOR,
            "",
            "BASIC INFORMATION",
            f"Name: {full_name(person)}",
            f"ID: {person.get('id')}",
            f"Type: {person.get('type') or 'Not specified'}",
        ]

        biography = strip_html(person.get("biography"))
        if biography:
            lines += ["", "Biography:", biography]

        emails = person.get("emails") or []
        if emails:
            lines += ["", "CONTACT INFORMATION", "Emails:"]
            for email in emails:
                kind = f" ({email['email_type']})" if email.get("email_type") else ""
                lines.append(f"  - {email.get('email_address')}{kind}")

        phones = [p for p in person.get("phones") or [] if p.get("phone")]
        if phones:
            lines.append("Phones:")
            for phone in phones:
                kind = f" ({phone['type']})" if phone.get("type") else ""
                lines.append(f"  - {phone['phone']}{kind}")

        titles = person.get("titles") or []
        if titles:
            lines += ["", "PROFESSIONAL INFORMATION", "Job Titles:"]
            for title in titles:
                entry = f"  - {title.get('job_title')}"
                if title.get("start_date") or title.get("end_date"):
                    entry += f" ({title.get('start_date') or 'Unknown'} - {title.get('end_date') or 'Present'})"
                if title.get("current") == "yes":
                    entry += " [Current]"
                lines.append(entry)

        organizations = person.get("organizations") or []
        if organizations:
            lines.append("Organizations:")
            for org in organizations:
                short = f" ({org['org_name_short']})" if org.get("org_name_short") else ""
                lines.append(f"  - {org.get('organization_name')}{short}")

        tasks = person.get("research_tasks") or []
        if tasks:
            lines += ["", "RESEARCH ACTIVITIES"]
            for task in tasks:
                number = f" ({task['task_number']})" if task.get("task_number") else ""
                lines.append(f"  - {task.get('task_name')}{number}")
                abstract = strip_html(task.get("abstract"))
                if abstract:
                    lines.append(f"    Abstract: {truncate(abstract, 200)}")

        return "\n".join(lines)


def _first(items: Optional[list[dict[str, Any]]], key: str) -> Optional[str]:
    if not items:
        return None
    return items[0].get(key)


def register_directory_domain(settings: BackendSettings) -> DirectoryAdapter:
    """Create the directory adapter."""
    return DirectoryAdapter(settings)
