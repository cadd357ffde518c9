# dispatcher for completion clients, currently only OpenAI-compatible endpoints (Groq), but scalable to other providers

from typing import Sequence
from .protocols import ChatCompletionProtocol, CompletionProvider
from portfolio_assistant.chat_service.types.knowledge import PromptMessage

class ChatCompletionClient:
    def __init__(self, provider: CompletionProvider, client: ChatCompletionProtocol):
        self.provider = provider
        self.client = client

    async def acomplete(
        self,
        messages: Sequence[PromptMessage],
        *,
        temperature: float,
        max_tokens: int,
    ) -> str:
        return await self.client.acomplete(
            messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )
