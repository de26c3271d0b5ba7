"""LLM Integration Layer.

Supports:
- Any OpenAI-compatible chat completions endpoint (Together.ai and similar)
- OpenAI through LlamaIndex
- A mock provider for tests

The LLM has no direct gateway access: it only proposes a tool call in text.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from shared.config import LLMSettings
from shared.errors import TransportError
from shared.logging import get_logger
from shared.models import ConversationMessage, LLMResponse

logger = get_logger(__name__)


class LLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    Providers return the completion text together with the raw payload;
    they never decide which tool runs.
    """

    def __init__(self, settings: LLMSettings) -> None:
        self.settings = settings

    @abstractmethod
    async def complete(
        self,
        messages: list[ConversationMessage],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> LLMResponse:
        """
        Generate a completion from the LLM.

        Args:
            messages: Conversation to complete
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate

        Returns:
            LLM response with content and raw payload

        Raises:
            TransportError: If the endpoint is unreachable or fails
        """

    async def aclose(self) -> None:
        """Release provider resources."""


class ChatCompletionsProvider(LLMProvider):
    """Raw OpenAI-compatible `/chat/completions` endpoint over httpx."""

    def __init__(
        self,
        settings: LLMSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> None:
        super().__init__(settings)
        if not settings.api_key or not settings.api_base:
            raise ValueError("Missing LLM API key or base URL (LLM_API_KEY, LLM_API_BASE)")
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.settings.api_base.rstrip("/"),
                timeout=self.settings.timeout_seconds,
                headers={
                    "Authorization": f"Bearer {self.settings.api_key}",
                    "Content-Type": "application/json",
                },
                transport=self._transport,
            )
        return self._client

    async def complete(
        self,
        messages: list[ConversationMessage],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> LLMResponse:
        """Generate completion using the chat completions endpoint."""
        payload = {
            "model": self.settings.model,
            "messages": [m.model_dump() for m in messages],
            "temperature": self.settings.temperature if temperature is None else temperature,
            "max_tokens": max_tokens or self.settings.max_tokens,
        }

        try:
            response = await self._get_client().post("/chat/completions", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("LLM completion failed", status=e.response.status_code)
            raise TransportError(
                f"LLM endpoint returned status {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error("LLM completion failed", error=str(e))
            raise TransportError(f"Cannot reach LLM endpoint: {e}") from e
        except ValueError as e:
            raise TransportError(f"LLM endpoint returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            data = {}

        finish_reason = _first_choice(data).get("finish_reason")
        usage = data.get("usage")
        return LLMResponse(
            content=_first_choice_content(data),
            raw=data,
            finish_reason=finish_reason if isinstance(finish_reason, str) else "stop",
            usage=usage if isinstance(usage, dict) else {},
        )

    async def aclose(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None


def _first_choice(data: dict[str, Any]) -> dict[str, Any]:
    choices = data.get("choices")
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        return choices[0]
    return {}


def _first_choice_content(data: dict[str, Any]) -> Optional[str]:
    """`choices[0].message.content`, or None when any level is missing."""
    message = _first_choice(data).get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None


class OpenAIProvider(LLMProvider):
    """OpenAI LLM provider using LlamaIndex."""

    def __init__(self, settings: LLMSettings) -> None:
        super().__init__(settings)
        if not settings.api_key:
            raise ValueError("Missing LLM API key (LLM_API_KEY)")
        self._llm = None

    def _get_llm(self):
        """Lazy initialization of LlamaIndex LLM."""
        if self._llm is None:
            from llama_index.llms.openai import OpenAI

            self._llm = OpenAI(
                model=self.settings.model,
                api_key=self.settings.api_key,
                api_base=self.settings.api_base,
                temperature=self.settings.temperature,
                max_tokens=self.settings.max_tokens,
                timeout=self.settings.timeout_seconds,
            )
        return self._llm

    def _convert_messages(self, messages: list[ConversationMessage]) -> list:
        """Convert internal messages to LlamaIndex format."""
        from llama_index.core.llms import ChatMessage, MessageRole

        role_map = {
            "user": MessageRole.USER,
            "assistant": MessageRole.ASSISTANT,
            "system": MessageRole.SYSTEM,
        }
        return [
            ChatMessage(role=role_map.get(m.role, MessageRole.USER), content=m.content)
            for m in messages
        ]

    async def complete(
        self,
        messages: list[ConversationMessage],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> LLMResponse:
        """Generate completion using OpenAI."""
        llm = self._get_llm()

        if temperature is not None:
            llm.temperature = temperature
        if max_tokens is not None:
            llm.max_tokens = max_tokens

        try:
            response = await llm.achat(self._convert_messages(messages))
        except Exception as e:
            logger.error("LLM completion failed", error=str(e))
            raise TransportError(f"LLM completion failed: {e}") from e

        content = response.message.content if response.message else None
        raw = response.raw if isinstance(response.raw, dict) else {}
        return LLMResponse(content=content, raw=raw)


class MockLLMProvider(LLMProvider):
    """Mock LLM provider for testing without API calls."""

    def __init__(self, settings: Optional[LLMSettings] = None) -> None:
        super().__init__(settings or LLMSettings(provider="mock"))
        self.call_history: list[dict[str, Any]] = []
        self._responses: list[LLMResponse] = []

    def set_next_response(self, response: LLMResponse | str) -> None:
        """Queue the next response; plain strings become completion text."""
        if isinstance(response, str):
            response = LLMResponse(
                content=response,
                raw={"choices": [{"message": {"role": "assistant", "content": response}}]},
            )
        self._responses.append(response)

    async def complete(
        self,
        messages: list[ConversationMessage],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> LLMResponse:
        """Return the queued response or a canned one."""
        self.call_history.append({
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens
        })

        if self._responses:
            return self._responses.pop(0)

        content = "This is a mock response."
        return LLMResponse(
            content=content,
            raw={"choices": [{"message": {"role": "assistant", "content": content}}]},
            usage={"prompt_tokens": 10, "completion_tokens": 5}
        )


def create_llm_provider(settings: LLMSettings) -> LLMProvider:
    """
    Factory function to create appropriate LLM provider.

    Supports:
    - chat_completions: OpenAI-compatible endpoint (e.g. Together.ai)
    - openai: OpenAI API via LlamaIndex
    - mock: Mock provider for testing

    Raises:
        ValueError: If provider is not supported or credentials are missing
    """
    providers = {
        "chat_completions": ChatCompletionsProvider,
        "openai": OpenAIProvider,
        "mock": MockLLMProvider,
    }

    provider_class = providers.get(settings.provider)
    if not provider_class:
        raise ValueError(
            f"Unsupported LLM provider: {settings.provider}. "
            f"Supported: {list(providers.keys())}"
        )

    logger.info("Creating LLM provider", provider=settings.provider, model=settings.model)
    return provider_class(settings)
