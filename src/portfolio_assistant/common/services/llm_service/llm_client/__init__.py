# chat-completion clients

from portfolio_assistant.common.services.llm_service.llm_client.dispatcher import ChatCompletionClient
from portfolio_assistant.common.services.llm_service.llm_client.protocols import ChatCompletionProtocol, CompletionProvider

# NOTE: only supports the generic wrappers here
__all__ = ["ChatCompletionClient", "ChatCompletionProtocol", "CompletionProvider"]
