# retrieval layer: runs the essentials + keyword reads against the knowledge store concurrently

import asyncio
from typing import Protocol
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncEngine

from portfolio_assistant.chat_service.types.knowledge import KnowledgeRow
from portfolio_assistant.chat_service.errors import RetrievalError
from portfolio_assistant.common.db.crud.knowledge.portfolio_knowledge_crud import (
    get_essential_rows,
    search_rows,
    DEFAULT_READ_LIMIT,
)
from portfolio_assistant.common.logging.logger import logger

class RetrievedRows(BaseModel):
    """Raw output of the two reads, before merging."""
    search: list[KnowledgeRow]
    essentials: list[KnowledgeRow]

class KnowledgeRetrieverProtocol(Protocol):
    async def fetch(self, query: str) -> RetrievedRows: ...

def _unwrap(result: list[KnowledgeRow] | BaseException, label: str) -> list[KnowledgeRow]:
    if isinstance(result, Exception):
        raise RetrievalError(f"{label} query failed", details=str(result)) from result
    if isinstance(result, BaseException):
        # cancellation and interpreter exits are not retrieval failures
        raise result
    return result

class KnowledgeRetriever():
    """
    Wraps the read-only crud with the two lookups the chat pipeline needs.
    - Both reads run together with asyncio.gather, each in its own session.
    - Both must finish before the caller continues; there is no partial-result path.
    - A failed read raises RetrievalError naming which read failed; essentials are reported first when both fail.
    """

    def __init__(self, knowledge_db_engine: AsyncEngine, read_limit: int = DEFAULT_READ_LIMIT):
        self.knowledge_db_engine = knowledge_db_engine
        self.read_limit = read_limit

    async def fetch(self, query: str) -> RetrievedRows:
        essentials_result, search_result = await asyncio.gather(
            get_essential_rows(self.knowledge_db_engine, limit=self.read_limit),
            search_rows(query, self.knowledge_db_engine, limit=self.read_limit),
            return_exceptions=True,
        )

        essentials = _unwrap(essentials_result, "Essentials")
        search = _unwrap(search_result, "Search")
        logger.info(f"Retrieved {len(search)} search rows and {len(essentials)} essential rows")
        return RetrievedRows(search=search, essentials=essentials)
