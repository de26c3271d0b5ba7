"""Orchestrator - core query pipeline.

The orchestrator sequences, per query:
1. Intent resolution through the LLM
2. Tool-call extraction from the LLM text
3. Dispatch to the owning gateway
4. The automatic detail follow-up for search tools

No state survives between queries; every query starts at IDLE.
"""

import uuid
from enum import Enum

from shared.logging import bind_context, clear_context, get_logger
from shared.models import QueryOutcome
from orchestrator.dispatcher import Dispatcher
from orchestrator.extractor import extract_tool_call
from orchestrator.follow_up import FollowUpController
from orchestrator.intent import IntentResolver

logger = get_logger(__name__)


class QueryState(str, Enum):
    """Per-query states, logged at debug level as the query advances."""
    IDLE = "idle"
    AWAITING_INTENT = "awaiting_intent"
    NO_TOOL_DETECTED = "no_tool_detected"
    TOOL_DETECTED = "tool_detected"
    DISPATCHING = "dispatching"
    FOLLOW_UP_PENDING = "follow_up_pending"
    COMPLETE = "complete"


class Orchestrator:
    """
    Turns one natural-language query into one response.

    Collaborators are injected; the orchestrator owns none of their
    lifecycles. Errors from any stage propagate to the caller.
    """

    def __init__(
        self,
        resolver: IntentResolver,
        dispatcher: Dispatcher,
        follow_up: FollowUpController | None = None
    ) -> None:
        self.resolver = resolver
        self.dispatcher = dispatcher
        self.follow_up = follow_up or FollowUpController(dispatcher)

    @staticmethod
    def _enter(state: QueryState) -> QueryState:
        logger.debug("Query state", state=state.value)
        return state

    async def run(self, query: str) -> QueryOutcome:
        """
        Process a query and describe how it was answered.

        Raises:
            OrchestrationError: Any subclass raised by a stage
        """
        bind_context(query_id=str(uuid.uuid4()))
        try:
            self._enter(QueryState.IDLE)
            logger.info("Processing query", query=query)

            self._enter(QueryState.AWAITING_INTENT)
            raw_text = await self.resolver.resolve(query)
            tool_call = extract_tool_call(raw_text)

            if tool_call is None:
                self._enter(QueryState.NO_TOOL_DETECTED)
                logger.info("No tool pattern detected")
                self._enter(QueryState.COMPLETE)
                return QueryOutcome(text=raw_text, tool_detected=False)

            self._enter(QueryState.TOOL_DETECTED)
            self._enter(QueryState.DISPATCHING)
            text_output = await self.dispatcher.dispatch(tool_call)

            if self.follow_up.applies_to(tool_call.name):
                self._enter(QueryState.FOLLOW_UP_PENDING)
            text, followed_up = await self.follow_up.maybe_follow_up(tool_call.name, text_output)

            self._enter(QueryState.COMPLETE)
            return QueryOutcome(
                text=text,
                tool_detected=True,
                tool_name=tool_call.name,
                followed_up=followed_up,
            )
        except Exception:
            logger.error("Query failed", exc_info=True)
            raise
        finally:
            clear_context()

    async def process_query(self, query: str) -> str:
        """Process a query and return the response text."""
        outcome = await self.run(query)
        return outcome.text
