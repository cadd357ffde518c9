# read-only crud for the portfolio knowledge table

# sqlalchemy
from sqlalchemy import select, or_, Select
from sqlalchemy.ext.asyncio import AsyncEngine

# ORM model and canonical DTO
from portfolio_assistant.common.db.models.knowledge.portfolio_knowledge import PortfolioKnowledge
from portfolio_assistant.chat_service.types.knowledge import KnowledgeRow
# async sessionmaker
from portfolio_assistant.common.db.session import get_async_session_maker
# logger
from portfolio_assistant.common.logging.logger import logger

# categories that are always sent to the model, regardless of the question
ESSENTIAL_TYPES: tuple[str, ...] = (
    "bio",
    "skills",
    "education",
    "certification",
    "philosophy",
    "personal",
    "contact",
)
DEFAULT_READ_LIMIT = 12
LIKE_ESCAPE_CHAR = "\\"

def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so the user's text is matched literally inside %...%."""
    return (
        value.replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", f"{LIKE_ESCAPE_CHAR}%")
        .replace("_", f"{LIKE_ESCAPE_CHAR}_")
    )

def build_essentials_stmt(limit: int = DEFAULT_READ_LIMIT) -> Select:
    return (
        select(PortfolioKnowledge)
        .where(PortfolioKnowledge.type.in_(ESSENTIAL_TYPES))
        .limit(limit)
    )

def build_search_stmt(query: str, limit: int = DEFAULT_READ_LIMIT) -> Select:
    """
    Case-insensitive substring match of `query` over title, content, tags, project and type.
    The pattern is a bound parameter; the query text never becomes part of the SQL string.
    """
    pattern = f"%{_escape_like(query)}%"
    searchable_columns = (
        PortfolioKnowledge.title,
        PortfolioKnowledge.content,
        PortfolioKnowledge.tags,
        PortfolioKnowledge.project,
        PortfolioKnowledge.type,
    )
    return (
        select(PortfolioKnowledge)
        .where(or_(*(column.ilike(pattern, escape=LIKE_ESCAPE_CHAR) for column in searchable_columns)))
        .limit(limit)
    )

async def get_essential_rows(
    knowledge_db_engine: AsyncEngine,
    limit: int = DEFAULT_READ_LIMIT,
) -> list[KnowledgeRow]:
    """
    Fetch the fixed "essentials" categories (bio, skills, education, ...).

    Args:
        knowledge_db_engine: Async database engine
        limit: Maximum number of rows to return

    Returns:
        List of KnowledgeRow, possibly empty
    """
    session_maker = get_async_session_maker(knowledge_db_engine)

    try:
        async with session_maker() as session:
            result = await session.execute(build_essentials_stmt(limit))
            rows = [KnowledgeRow.model_validate(orm_row) for orm_row in result.scalars().all()]
            logger.info(f"Fetched {len(rows)} essential knowledge rows")
            return rows
    except Exception as e:
        logger.error(f"Failed to fetch essential knowledge rows: {e}")
        raise

async def search_rows(
    query: str,
    knowledge_db_engine: AsyncEngine,
    limit: int = DEFAULT_READ_LIMIT,
) -> list[KnowledgeRow]:
    """
    Keyword search over the knowledge table.

    Args:
        query: Free-text search string, matched as a case-insensitive substring
        knowledge_db_engine: Async database engine
        limit: Maximum number of rows to return

    Returns:
        List of KnowledgeRow, possibly empty
    """
    session_maker = get_async_session_maker(knowledge_db_engine)

    try:
        async with session_maker() as session:
            result = await session.execute(build_search_stmt(query, limit))
            rows = [KnowledgeRow.model_validate(orm_row) for orm_row in result.scalars().all()]
            logger.info(f"Keyword search matched {len(rows)} knowledge rows")
            return rows
    except Exception as e:
        logger.error(f"Failed to search knowledge rows: {e}")
        raise
