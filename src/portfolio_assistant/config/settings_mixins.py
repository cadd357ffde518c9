# mixin settings for external services like the knowledge db and the completion llm
from typing import Optional
from pydantic import BaseModel, Field, field_validator

class KnowledgeDBSettingsMixin(BaseModel):
    """
    Model for the knowledge store (Postgres) connection and SQLAlchemy pool settings.
    Credentials are optional so a missing value surfaces per request as a configuration error,
    instead of crashing the service at start up.
    NOTE: use a read-only role here, the service never writes to the knowledge table.
    """
    KNOWLEDGE_DB_POOL_SIZE: int = Field(default=5, description="Number of connections to keep in the pool.")
    KNOWLEDGE_DB_MAX_OVERFLOW: int = Field(default=10, description="Max 'overflow' connections beyond pool_size.")
    KNOWLEDGE_DB_POOL_TIMEOUT: int = Field(default=30, description="Seconds to wait before giving up on getting a connection.")
    KNOWLEDGE_DB_POOL_RECYCLE: int = Field(default=1800, description="Recycle connections after this many seconds.")
    KNOWLEDGE_DB_SSL: bool = Field(default=True, description="Require SSL when connecting (hosted Postgres, e.g. Supabase).")

    KNOWLEDGE_DB_USER: Optional[str] = None
    KNOWLEDGE_DB_PW: Optional[str] = None
    KNOWLEDGE_DB_HOST: Optional[str] = None
    KNOWLEDGE_DB_PORT: Optional[str] = None
    KNOWLEDGE_DB_NAME: Optional[str] = None

    def has_knowledge_db_config(self) -> bool:
        """True only when every credential needed to build the connection url is present."""
        return all([
            self.KNOWLEDGE_DB_USER,
            self.KNOWLEDGE_DB_PW,
            self.KNOWLEDGE_DB_HOST,
            self.KNOWLEDGE_DB_PORT,
            self.KNOWLEDGE_DB_NAME,
        ])

class CompletionSettingsMixin(BaseModel):
    """
    Model for the hosted chat-completion client settings.
    Defaults target Groq's OpenAI-compatible endpoint.
    """
    COMPLETION_API_KEY: Optional[str] = None
    COMPLETION_BASE_URL: str = "https://api.groq.com/openai/v1"
    COMPLETION_MODEL: str = "llama-3.1-8b-instant"
    COMPLETION_TIMEOUT_SECONDS: float = Field(default=20.0, gt=0, description="Upper bound for one completion call.")

class ChatPolicySettingsMixin(BaseModel):
    """
    Model for the assistant persona and prompt policy selection.
    """
    CHAT_PROMPT_POLICY: str = Field(default="concise", description="Name of the prompt policy, 'concise' or 'detailed'.")
    ASSISTANT_SUBJECT_NAME: str = "Manthan Rase"
    PORTFOLIO_PROJECTS: list[str] = ["UXLens-AI", "Moodly", "De Blaze", "ParkIQ", "Ghost Shooter"]

    @field_validator("PORTFOLIO_PROJECTS")
    @classmethod
    def _exactly_five_projects(cls, value: list[str]) -> list[str]:
        cleaned = [name.strip() for name in value if name.strip()]
        if len(cleaned) != 5:
            raise ValueError(f"PORTFOLIO_PROJECTS must list exactly 5 project names, got {len(cleaned)}")
        return cleaned
