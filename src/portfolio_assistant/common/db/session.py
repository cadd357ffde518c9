# async engine + session helpers for the knowledge db

from contextlib import asynccontextmanager
from enum import Enum, auto
from typing import AsyncIterator, Optional
from pydantic import BaseModel
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from portfolio_assistant.common.logging.logger import logger

# NOTE: only one db for now, kept as an enum so more stores can be registered the same way
class DBType(Enum):
    KnowledgeDB = auto()

class DBSettings(BaseModel):
    """
    Parsed connection + pool settings for a single database.
    """
    user: str
    password: str
    host: str
    port: int
    name: str
    ssl: bool = True
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 1800

    def async_url(self) -> URL:
        # URL.create escapes credentials, so passwords with special characters are safe
        return URL.create(
            drivername="postgresql+asyncpg",
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.name,
        )

def parse_db_settings_from_service(settings, db_type: DBType) -> Optional[DBSettings]:
    """
    Helper to parse db settings from the service settings, by db type.
    Returns None when the credentials are incomplete, so the caller decides how to report it.
    """
    if db_type is DBType.KnowledgeDB:
        if not settings.has_knowledge_db_config():
            return None
        return DBSettings(
            user=settings.KNOWLEDGE_DB_USER,
            password=settings.KNOWLEDGE_DB_PW,
            host=settings.KNOWLEDGE_DB_HOST,
            port=int(settings.KNOWLEDGE_DB_PORT),
            name=settings.KNOWLEDGE_DB_NAME,
            ssl=settings.KNOWLEDGE_DB_SSL,
            pool_size=settings.KNOWLEDGE_DB_POOL_SIZE,
            max_overflow=settings.KNOWLEDGE_DB_MAX_OVERFLOW,
            pool_timeout=settings.KNOWLEDGE_DB_POOL_TIMEOUT,
            pool_recycle=settings.KNOWLEDGE_DB_POOL_RECYCLE,
        )
    raise ValueError(f"Unsupported db type: {db_type}")

@asynccontextmanager
async def create_db_engine_context(db_settings: DBSettings) -> AsyncIterator[AsyncEngine]:
    """
    Creates the async engine for the service lifetime and disposes of it on exit.
    Meant to be entered through the lifespan's AsyncExitStack.
    """
    connect_args = {"ssl": "require"} if db_settings.ssl else {}
    engine = create_async_engine(
        db_settings.async_url(),
        pool_size=db_settings.pool_size,
        max_overflow=db_settings.max_overflow,
        pool_timeout=db_settings.pool_timeout,
        pool_recycle=db_settings.pool_recycle,
        pool_pre_ping=True,
        connect_args=connect_args,
    )
    logger.info(f"Created async engine for {db_settings.host}:{db_settings.port}/{db_settings.name}")
    try:
        yield engine
    finally:
        await engine.dispose()
        logger.info("Disposed async engine.")

def get_async_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Returns a session factory bound to the given engine.
    Sessions are read-only in practice; expire_on_commit is off so rows stay usable after the session closes.
    """
    return async_sessionmaker(engine, expire_on_commit=False)
