"""Follow-up Controller - chains a detail lookup after a search."""

import re
from typing import Mapping, NamedTuple, Optional

from shared.logging import get_logger
from shared.models import ToolCall, ToolCatalogEntry, ToolKind
from orchestrator.catalog import TOOL_CATALOG
from orchestrator.dispatcher import Dispatcher

logger = get_logger(__name__)

ID_PATTERN = re.compile(r"ID:\s*(\d+)")


class FollowUpResult(NamedTuple):
    """Combined text and whether a detail call was made."""
    text: str
    followed_up: bool


def extract_identifier(text: str) -> Optional[int]:
    """First `ID: <digits>` in the text, or None."""
    match = ID_PATTERN.search(text)
    return int(match.group(1)) if match else None


class FollowUpController:
    """
    Issues the paired detail call for search results that carry an ID.

    Only the first identifier in the search text is followed. Errors from
    the detail call propagate; there is no fallback to the search text alone.
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        catalog: Mapping[str, ToolCatalogEntry] = TOOL_CATALOG
    ) -> None:
        self.dispatcher = dispatcher
        self.catalog = catalog

    def applies_to(self, tool_name: str) -> bool:
        entry = self.catalog.get(tool_name)
        return entry is not None and entry.kind is ToolKind.SEARCH and entry.detail_tool is not None

    async def maybe_follow_up(self, tool_name: str, text_output: str) -> FollowUpResult:
        """
        Combine a search result with the details of its first hit.

        Args:
            tool_name: Search tool that produced `text_output`
            text_output: Text returned by the search

        Returns:
            Labeled search and detail text, or the search text with a note
            when no identifier is present, and whether details were fetched
        """
        if not self.applies_to(tool_name):
            return FollowUpResult(f"Tool Output:\n{text_output}", followed_up=False)

        identifier = extract_identifier(text_output)
        if identifier is None:
            logger.info("No identifier in search result", tool=tool_name)
            return FollowUpResult(
                f"Search complete, but no valid ID found:\n{text_output}", followed_up=False
            )

        detail_tool = self.catalog[tool_name].detail_tool
        logger.info("Auto-following up", tool=detail_tool, id=identifier)

        details = await self.dispatcher.dispatch(
            ToolCall(name=detail_tool, arguments={"id": identifier})
        )
        return FollowUpResult(
            f"Search Result:\n{text_output}\n\nDetailed Info:\n{details}", followed_up=True
        )
