"""
Shared fixtures and fakes for the chat pipeline tests.
"""

from typing import Optional, Sequence

import pytest

from portfolio_assistant.chat_service.types.knowledge import KnowledgeRow, PromptMessage
from portfolio_assistant.chat_service.retrieval.knowledge_retriever import RetrievedRows
from portfolio_assistant.chat_service.errors import RetrievalError, CompletionRequestError
from portfolio_assistant.chat_service.prompting.system_prompts.portfolio_prompts import get_prompt_policy
from portfolio_assistant.chat_service.handler import ChatHandler

PROJECTS = ["UXLens-AI", "Moodly", "De Blaze", "ParkIQ", "Ghost Shooter"]


class FakeRetriever:
    """Records queries and returns canned rows, or raises a canned error."""

    def __init__(self, search=None, essentials=None, error: Optional[Exception] = None):
        self.search = search or []
        self.essentials = essentials or []
        self.error = error
        self.queries: list[str] = []

    async def fetch(self, query: str) -> RetrievedRows:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return RetrievedRows(search=self.search, essentials=self.essentials)


class FakeCompletionClient:
    """Records every prompt it receives."""

    def __init__(self, answer: str = "Manthan builds AI-assisted UX tools.", error: Optional[Exception] = None):
        self.answer = answer
        self.error = error
        self.calls: list[dict] = []

    async def acomplete(self, messages: Sequence[PromptMessage], *, temperature: float, max_tokens: int) -> str:
        self.calls.append({"messages": list(messages), "temperature": temperature, "max_tokens": max_tokens})
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture
def bio_row():
    return KnowledgeRow(type="bio", title="About", content="Manthan is a software engineer.", tags="about")


@pytest.fixture
def project_row():
    return KnowledgeRow(
        project="Moodly",
        type="project-description",
        title="Moodly",
        content="Moodly is a mood-tracking journal app.",
        tags="mobile",
    )


@pytest.fixture
def fake_retriever(bio_row, project_row):
    return FakeRetriever(search=[project_row], essentials=[bio_row])


@pytest.fixture
def fake_completion_client():
    return FakeCompletionClient()


@pytest.fixture
def make_handler():
    """Builds a ChatHandler around whichever fakes the test needs."""

    def _make(retriever=None, completion_client=None, policy_name: str = "concise") -> ChatHandler:
        return ChatHandler(
            knowledge_retriever=retriever,
            completion_client=completion_client,
            policy=get_prompt_policy(policy_name),
            subject_name="Manthan Rase",
            projects=PROJECTS,
            current_year=2025,
        )

    return _make


@pytest.fixture
def store_failure():
    return RetrievalError("Search query failed", details="relation \"portfolio_knowledge\" does not exist")


@pytest.fixture
def upstream_failure():
    return CompletionRequestError("Completion request failed", details='{"error": {"message": "invalid api key"}}')
