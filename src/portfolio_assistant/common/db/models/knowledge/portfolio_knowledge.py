# ORM model for the portfolio knowledge table
from portfolio_assistant.common.db.models.base import KnowledgeDB_Base
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, Text, Index
from typing import Optional

class PortfolioKnowledge(KnowledgeDB_Base):
    """
    One fact about the portfolio owner (bio line, skill list, project description, etc).
    Owned and edited by an external content process; this service only reads it.

    Only `content` is expected to be filled in for a row to be useful, every other
    column may be NULL and is normalised to "" when converted to a KnowledgeRow.

    Retrieval possibilities:
        - Essentials:   WHERE type IN ('bio', 'skills', ...) LIMIT 12
        - Keyword:      WHERE title ILIKE :pattern OR content ILIKE :pattern OR ... LIMIT 12
    """
    __tablename__ = "portfolio_knowledge"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # short label of the project this fact belongs to, e.g. "Moodly"
    project: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    # category tag, e.g. "bio", "skills", "project-description"
    type: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    title: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # free-text keywords, comma separated by convention
    tags: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        # For the essentials lookup
        Index('idx_portfolio_knowledge_type', 'type'),
    )
