"""Orchestrator.

Resolves a query to one tool call via the LLM, dispatches it to the
owning gateway and chains the detail lookup after a search.
"""

from orchestrator.llm import LLMProvider, create_llm_provider
from orchestrator.extractor import extract_tool_call
from orchestrator.intent import IntentResolver
from orchestrator.dispatcher import Dispatcher
from orchestrator.follow_up import FollowUpController
from orchestrator.pipeline import Orchestrator, QueryState

__all__ = [
    "LLMProvider",
    "create_llm_provider",
    "extract_tool_call",
    "IntentResolver",
    "Dispatcher",
    "FollowUpController",
    "Orchestrator",
    "QueryState",
]
