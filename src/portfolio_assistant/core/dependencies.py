from typing import Optional
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine
from portfolio_assistant.chat_service.handler import ChatHandler

# This is the location to conveniently return any app lifetime dependencies to be used in routes
def get_knowledge_db_engine(request: Request) -> Optional[AsyncEngine]:
    """
    FastAPI dependency to get the shared knowledge DB engine from the application state.
    None when the store credentials are not configured.
    """
    return getattr(request.app.state, "knowledge_db_engine", None)

def get_chat_handler(request: Request) -> ChatHandler:
    """
    FastAPI dependency to get the chat handler built during start up.
    """
    return request.app.state.chat_handler
