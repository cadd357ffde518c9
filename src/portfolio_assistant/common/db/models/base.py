# declarative base for the knowledge db models
from sqlalchemy.orm import DeclarativeBase

class KnowledgeDB_Base(DeclarativeBase):
    """
    Base for every table living in the knowledge db.
    Scripts import models through here to register them with KnowledgeDB_Base.metadata.
    """
    pass
