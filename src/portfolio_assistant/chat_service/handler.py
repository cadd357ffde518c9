# main chat request handler: validate -> retrieve -> merge/format -> assemble -> complete -> respond

import time
from datetime import datetime
from typing import Any, Optional, Sequence
from pydantic import ValidationError

from portfolio_assistant.chat_service.types.knowledge import ConversationTurn, PromptPolicy
from portfolio_assistant.chat_service.errors import InvalidMessageError, ConfigurationError
from portfolio_assistant.chat_service.retrieval.knowledge_retriever import KnowledgeRetrieverProtocol
from portfolio_assistant.chat_service.retrieval.merger import merge_rows
from portfolio_assistant.chat_service.prompting.prompt_assembler import build_prompt_messages
from portfolio_assistant.common.services.llm_service.llm_client import ChatCompletionProtocol

from portfolio_assistant.common.logging.logger import logger

def parse_history(raw_history: Any) -> list[ConversationTurn]:
    """
    Leniently parse client-supplied history.
    Anything that is not a {role: user|assistant, content: str} object is dropped instead of failing the request.
    """
    if not isinstance(raw_history, list):
        return []

    turns: list[ConversationTurn] = []
    for entry in raw_history:
        try:
            turns.append(ConversationTurn.model_validate(entry))
        except ValidationError:
            continue
    return turns

class ChatHandler():
    """
    Single-pass, stateless handler for one widget message.
    Every stage either succeeds or raises a ChatServiceError that the route turns into a JSON envelope:
        - validate: InvalidMessageError (400) / ConfigurationError (500), before any external call
        - retrieve: RetrievalError (500), the completion service is never called
        - complete: CompletionRequestError (500)
    Merging, formatting and prompt assembly cannot fail.

    `knowledge_retriever` / `completion_client` are None when their configuration is missing,
    which is reported per request rather than at start up.
    """

    def __init__(
        self,
        knowledge_retriever: Optional[KnowledgeRetrieverProtocol],
        completion_client: Optional[ChatCompletionProtocol],
        policy: PromptPolicy,
        *,
        subject_name: str,
        projects: Sequence[str],
        current_year: Optional[int] = None,
    ):
        self.knowledge_retriever = knowledge_retriever
        self.completion_client = completion_client
        self.policy = policy
        self.subject_name = subject_name
        self.projects = list(projects)
        # fixed year is only used by tests, otherwise resolved per request
        self._current_year = current_year

    def _validate(
        self, payload: Any
    ) -> tuple[str, list[ConversationTurn], KnowledgeRetrieverProtocol, ChatCompletionProtocol]:
        """
        Checks the body and the configured clients; returns the clients so later stages never see None.
        """
        if not isinstance(payload, dict):
            raise InvalidMessageError("Invalid JSON body.")

        message = payload.get("message")
        if not isinstance(message, str) or not message.strip():
            raise InvalidMessageError("Missing 'message'.")

        knowledge_retriever = self.knowledge_retriever
        if knowledge_retriever is None:
            raise ConfigurationError("Missing knowledge store configuration")
        completion_client = self.completion_client
        if completion_client is None:
            raise ConfigurationError("Missing COMPLETION_API_KEY")

        return message, parse_history(payload.get("conversationHistory")), knowledge_retriever, completion_client

    async def handle(self, payload: Any) -> str:
        """
        Runs the whole pipeline for one request body and returns the answer text.
        """
        start = time.perf_counter()
        message, history, knowledge_retriever, completion_client = self._validate(payload)

        # retrieve: essentials + keyword search, concurrently
        retrieved = await knowledge_retriever.fetch(message.strip())

        # merge/format + assemble
        rows = merge_rows(retrieved.search, retrieved.essentials)
        current_year = self._current_year or datetime.now().year
        messages = build_prompt_messages(
            rows,
            history,
            message,
            self.policy,
            subject_name=self.subject_name,
            projects=self.projects,
            current_year=current_year,
        )
        logger.info(
            f"Assembled prompt with {len(rows)} context rows, {len(history)} history turns, "
            f"policy '{self.policy.name}' (message length {len(message)})"
        )

        # complete
        answer = await completion_client.acomplete(
            messages,
            temperature=self.policy.temperature,
            max_tokens=self.policy.max_tokens,
        )

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"Chat request answered in {elapsed_ms:.2f}ms")
        return answer
