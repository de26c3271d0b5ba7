"""Tool-call extraction from free-form LLM text.

Only the first `TOOL:<name> {...}` marker is used. The argument object may
not contain a nested object or a `}` inside a string value: the scan stops
at the first closing brace. Such output is reported as malformed rather
than guessed at.
"""

import json
import re
from typing import Optional

from shared.errors import MalformedIntentError
from shared.logging import get_logger
from shared.models import ToolCall

logger = get_logger(__name__)

TOOL_PATTERN = re.compile(r"TOOL:(\w+)\s+(\{[^}]*\})", re.ASCII)


def extract_tool_call(raw_text: str) -> Optional[ToolCall]:
    """
    Parse the first tool call out of LLM output.

    Args:
        raw_text: Text returned by the Intent Resolver

    Returns:
        The tool call, or None when the text has no marker

    Raises:
        MalformedIntentError: If the marker's argument object is not valid JSON
    """
    match = TOOL_PATTERN.search(raw_text)
    if not match:
        return None

    name = match.group(1).strip()
    raw_arguments = match.group(2).strip()

    try:
        arguments = json.loads(raw_arguments)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse tool arguments", tool=name, raw_arguments=raw_arguments)
        raise MalformedIntentError(
            f"Tool arguments for '{name}' are not valid JSON: {raw_arguments}",
            raw_text=raw_arguments,
        ) from e

    return ToolCall(name=name, arguments=arguments)
