# Async client for OpenAI-compatible chat-completion endpoints (Groq by default)
from typing import Any, Optional, Sequence
import httpx
from openai import AsyncOpenAI, APIStatusError, APIConnectionError # Groq exposes OpenAI's API schema

from .protocols import ChatCompletionProtocol, ProvidesProviderInfo, CompletionProvider
from portfolio_assistant.chat_service.types.knowledge import PromptMessage
from portfolio_assistant.chat_service.errors import CompletionRequestError
from portfolio_assistant.chat_service.prompting.system_prompts.portfolio_prompts import FALLBACK_ANSWER

from portfolio_assistant.common.logging.logger import logger

GROQ_BASE_URL = "https://api.groq.com/openai/v1"

class AsyncOpenAICompatibleClient(ChatCompletionProtocol, ProvidesProviderInfo):
    """
    Sends the assembled prompt to a hosted chat-completion endpoint and returns the answer text.
    - Exactly one attempt per call: the SDK's built-in retries are disabled.
    - Every call is bounded by `timeout` seconds.
    - Non-2xx responses raise CompletionRequestError carrying the raw response body.
    """
    def __init__(
        self,
        model_name: str = "llama-3.1-8b-instant",
        *,
        api_key: str,
        base_url: str = GROQ_BASE_URL,
        timeout: float = 20.0,
        provider: CompletionProvider = CompletionProvider.GROQ,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        # Create shared client in __init__ for FastAPI (ASGI)
        # FastAPI runs in a single event loop, so sharing the client is safe and enables connection pooling
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
            http_client=http_client,
        )
        self.model_name = model_name
        # Provider metadata for reporting
        self.provider = provider
        self.model = model_name

    async def acomplete(
        self,
        messages: Sequence[PromptMessage],
        *,
        temperature: float,
        max_tokens: int,
    ) -> str:
        """
        Helper to request one chat completion and extract the first choice's text.
        Falls back to the fixed "I don't know" sentence when the response carries no text.
        """
        try:
            resp = await self.client.chat.completions.create(
                model=self.model_name,
                messages=[message.model_dump() for message in messages], # type: ignore[misc]
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except APIStatusError as e:
            logger.error(f"Completion request failed with status {e.status_code}")
            raise CompletionRequestError("Completion request failed", details=e.response.text) from e
        except APIConnectionError as e:
            # includes timeouts
            logger.error(f"Completion request could not reach {self.provider.value}: {e}")
            raise CompletionRequestError("Completion request failed", details=str(e)) from e

        content = self._extract_answer(resp)
        if content is not None:
            return content

        logger.warning("Completion response had no answer text, using fallback answer")
        return FALLBACK_ANSWER

    @staticmethod
    def _extract_answer(resp: Any) -> Optional[str]:
        """
        First choice's message content, or None when the body does not have that shape.
        NOTE: the SDK builds response objects without validation, so a malformed body can carry any types here.
        """
        choices = getattr(resp, "choices", None)
        if not isinstance(choices, list) or not choices:
            return None

        message = getattr(choices[0], "message", None)
        if message is None and isinstance(choices[0], dict):
            message = choices[0].get("message")

        content = message.get("content") if isinstance(message, dict) else getattr(message, "content", None)
        if isinstance(content, str) and content.strip():
            return content
        return None

    async def aclose(self) -> None:
        await self.client.close()
