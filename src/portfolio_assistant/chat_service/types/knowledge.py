# canonical DTOs passed between the chat pipeline stages

from typing import Any, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator

class KnowledgeRow(BaseModel):
    """
    A single fact about the portfolio owner, converted once at the store boundary.
    Every field is a plain string; NULLs from the store become "" so no consumer has to check for None.
    """
    model_config = ConfigDict(from_attributes=True, frozen=True)

    project: str = ""
    type: str = ""
    title: str = ""
    content: str = ""
    tags: str = ""

    @field_validator("project", "type", "title", "content", "tags", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    def dedup_key(self) -> tuple[str, str, str, str]:
        """Composite identity used by the merger: (project, type, title, first 60 chars of content)."""
        return (self.project, self.type, self.title, self.content[:60])

class ConversationTurn(BaseModel):
    """One prior turn supplied by the widget. Untrusted, only used as prompt context."""
    role: Literal["user", "assistant"]
    content: str

class PromptMessage(BaseModel):
    """One message of the two-message prompt sent to the completion service."""
    role: Literal["system", "user"]
    content: str

class PromptPolicy(BaseModel):
    """
    Everything that differs between assistant variants: the system prompt template and the output budget.
    Selected by name from settings, so there is a single handler code path.
    """
    name: str
    system_template: str = Field(description="str.format template, see PortfolioPrompts for the placeholders.")
    max_tokens: int = Field(gt=0)
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
