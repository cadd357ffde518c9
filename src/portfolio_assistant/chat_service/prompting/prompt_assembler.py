# builds the [system, user] prompt for the completion service
# NOTE: pure transformation, no retrieval or network I/O happens here

from typing import Sequence
from portfolio_assistant.chat_service.types.knowledge import (
    KnowledgeRow,
    ConversationTurn,
    PromptMessage,
    PromptPolicy,
)
from portfolio_assistant.chat_service.prompting.context_formatter import format_context
from portfolio_assistant.chat_service.prompting.system_prompts.portfolio_prompts import FALLBACK_ANSWER

MAX_HISTORY_TURNS = 6

def render_system_prompt(
    policy: PromptPolicy,
    *,
    subject_name: str,
    projects: Sequence[str],
    current_year: int,
) -> str:
    return policy.system_template.format(
        subject_name=subject_name,
        project_list=", ".join(projects),
        current_year=current_year,
        fallback=FALLBACK_ANSWER,
    ).strip()

def render_history(history: Sequence[ConversationTurn], max_turns: int = MAX_HISTORY_TURNS) -> str:
    recent = list(history)[-max_turns:] if max_turns > 0 else []
    return "\n".join(f"{turn.role}: {turn.content}" for turn in recent)

def render_user_prompt(
    rows: Sequence[KnowledgeRow],
    history: Sequence[ConversationTurn],
    question: str,
) -> str:
    return (
        f"PORTFOLIO CONTEXT (rows: {len(rows)}):\n{format_context(rows)}\n\n"
        f"Conversation history (brief):\n{render_history(history)}\n\n"
        f"User question:\n{question}"
    )

def build_prompt_messages(
    rows: Sequence[KnowledgeRow],
    history: Sequence[ConversationTurn],
    question: str,
    policy: PromptPolicy,
    *,
    subject_name: str,
    projects: Sequence[str],
    current_year: int,
) -> list[PromptMessage]:
    """
    Assemble the two prompt messages for one request.
    - system: the policy's template rendered with the persona, project list and current year
    - user: context block (with row count), last 6 history turns, then the literal question
    """
    system_prompt = render_system_prompt(
        policy,
        subject_name=subject_name,
        projects=projects,
        current_year=current_year,
    )
    return [
        PromptMessage(role="system", content=system_prompt),
        PromptMessage(role="user", content=render_user_prompt(rows, history, question)),
    ]
