# protocols for chat-completion clients

from typing import Protocol, Sequence, runtime_checkable
from enum import Enum

from portfolio_assistant.chat_service.types.knowledge import PromptMessage

# Ensures that all completion clients implement this protocol
class ChatCompletionProtocol(Protocol):
    async def acomplete(
        self,
        messages: Sequence[PromptMessage],
        *,
        temperature: float,
        max_tokens: int,
    ) -> str: ...

class CompletionProvider(str, Enum):
    """Enumeration of supported completion providers."""
    GROQ = "groq"
    OPENAI_COMPATIBLE = "openai_compatible"

@runtime_checkable
class ProvidesProviderInfo(Protocol):
    """Optional protocol for exposing provider/model metadata for reporting."""
    provider: CompletionProvider
    model: str
