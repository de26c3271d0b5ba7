"""Intent Resolver - turns a user query into raw LLM text.

The system prompt restricts the model to the static catalog and to a
single `TOOL:<name> <json>` line.
"""

import asyncio
from typing import Optional

from shared.config import LLMSettings
from shared.errors import TransportError
from shared.logging import get_logger
from shared.models import ConversationMessage
from orchestrator.catalog import tool_signatures
from orchestrator.llm import LLMProvider

logger = get_logger(__name__)


def build_system_prompt() -> str:
    tools = "\n".join(f"- {signature}" for signature in tool_signatures())
    return f"""You are a helpful assistant using two tool servers. You must ONLY use the following tools:

{tools}

When a user asks for a person or publication, use the search tool first to get the ID, then call the get-by-ID tool.

ONLY respond with one tool call per message. Do NOT add explanation text or multiple TOOL lines. Format:
TOOL:toolName {{"param": "value"}}
"""


SYSTEM_PROMPT = build_system_prompt()


class IntentResolver:
    """Sends one query to the LLM and returns the raw completion text."""

    def __init__(
        self,
        llm: LLMProvider,
        settings: Optional[LLMSettings] = None,
        system_prompt: str = SYSTEM_PROMPT
    ) -> None:
        self.llm = llm
        self.settings = settings or llm.settings
        self.system_prompt = system_prompt

    def build_messages(self, query: str) -> list[ConversationMessage]:
        return [
            ConversationMessage(role="system", content=self.system_prompt),
            ConversationMessage(role="user", content=query),
        ]

    async def resolve(self, query: str) -> str:
        """
        Ask the LLM for a tool call.

        Returns:
            The first completion's text, or "" when the endpoint's response
            lacks it (logged as a warning)

        Raises:
            TransportError: On endpoint failure or timeout
        """
        try:
            response = await asyncio.wait_for(
                self.llm.complete(
                    self.build_messages(query),
                    temperature=self.settings.temperature,
                    max_tokens=self.settings.max_tokens,
                ),
                timeout=self.settings.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"LLM call timed out after {self.settings.timeout_seconds}s"
            ) from e

        if response.content is None:
            logger.warning(
                "LLM response missing completion content, using empty text",
                response_keys=sorted(response.raw)
            )
            return ""

        logger.debug("LLM output", output=response.content)
        return response.content
