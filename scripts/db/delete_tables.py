from sqlalchemy.engine import Engine
from portfolio_assistant.common.db.models.base import KnowledgeDB_Base
# import all table models to register them with KnowledgeDB_Base.metadata
from portfolio_assistant.common.db.models.knowledge.portfolio_knowledge import PortfolioKnowledge # noqa: F401

def delete_all_tables(engine: Engine) -> None:
    KnowledgeDB_Base.metadata.drop_all(engine)
    print(f"Dropped tables: {list(KnowledgeDB_Base.metadata.tables.keys())}")
