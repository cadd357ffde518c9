from typing import Any, Optional
from fastapi import FastAPI, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine
from portfolio_assistant.common.logging.logger import logger
from portfolio_assistant.config.app_config import get_service_settings
from portfolio_assistant.core.lifespan import lifespan
from portfolio_assistant.core.dependencies import get_knowledge_db_engine
from portfolio_assistant.common.db.session import get_async_session_maker
from portfolio_assistant.api.routes.chat_route import router as chat_router

# disable FastAPI docs for production/deployment
is_local = get_service_settings().INCLUDE_DOCS
logger.info(f"is_local (include FastAPI docs?): {is_local}")

docs_config: dict[str, Any] = {
    "docs_url": "/docs" if is_local else None,
    "redoc_url": "/redoc" if is_local else None,
    "openapi_url": "/openapi.json" if is_local else None,
}

# main app, asgi entrypoint
app = FastAPI(
    title="Portfolio Assistant Service",
    description="Chat backend for the portfolio widget, answers questions grounded in the portfolio knowledge table",
    version="0.1.0",
    lifespan=lifespan,
    **docs_config,
)

# NOTE: no CORSMiddleware; the chat route sets its own cross-origin headers, including on the 204 preflight

# test endpoint
@app.get("/")
async def root():
    return {"message": "Hello World"}

# health endpoint
@app.get("/health")
async def health(knowledge_db_engine: Optional[AsyncEngine] = Depends(get_knowledge_db_engine)):
    if not get_service_settings().HEALTH_CHECK_DB:
        return {"status": "ok", "database": "not checked"}

    if knowledge_db_engine is None:
        return {"status": "error", "database": "knowledge database is not configured"}

    session_maker = get_async_session_maker(knowledge_db_engine)
    try:
        # simple test query to verify db connection
        async with session_maker() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.info(f"error: {e}")
        return {"status": "error", "database": "unable to connect to knowledge database"}

    return {"status": "ok", "database": "connected to knowledge database"}

app.include_router(chat_router)
