"""
Unit tests for the system/user prompt assembly.
"""

import re

import pytest

from portfolio_assistant.chat_service.types.knowledge import KnowledgeRow, ConversationTurn
from portfolio_assistant.chat_service.prompting.prompt_assembler import build_prompt_messages, render_history
from portfolio_assistant.chat_service.prompting.system_prompts.portfolio_prompts import (
    FALLBACK_ANSWER,
    PROMPT_POLICIES,
    get_prompt_policy,
)

PROJECTS = ["UXLens-AI", "Moodly", "De Blaze", "ParkIQ", "Ghost Shooter"]


def _build(rows=(), history=(), question="What does he do?", policy_name="concise", current_year=2025):
    return build_prompt_messages(
        list(rows),
        list(history),
        question,
        get_prompt_policy(policy_name),
        subject_name="Manthan Rase",
        projects=PROJECTS,
        current_year=current_year,
    )


def test_returns_system_then_user_message():
    system, user = _build()

    assert system.role == "system"
    assert user.role == "user"


def test_empty_context_still_contains_question():
    _, user = _build(question="Where did he study?")

    assert "PORTFOLIO CONTEXT (rows: 0):\n\n" in user.content
    assert user.content.endswith("User question:\nWhere did he study?")


def test_user_message_embeds_row_count_and_context():
    rows = [KnowledgeRow(type="bio", content="Manthan is a software engineer.")]

    _, user = _build(rows=rows)

    assert user.content.startswith("PORTFOLIO CONTEXT (rows: 1):\nSource 1 [bio]\nManthan is a software engineer.")


def test_only_last_six_history_turns_are_used():
    history = [ConversationTurn(role="user" if i % 2 == 0 else "assistant", content=f"turn {i}") for i in range(9)]

    _, user = _build(history=history)

    assert "turn 0" not in user.content
    assert "turn 2" not in user.content
    for i in range(3, 9):
        assert f"turn {i}" in user.content
    assert "user: turn 8" in user.content
    assert "assistant: turn 7" in user.content


def test_render_history_formats_role_content_lines():
    history = [ConversationTurn(role="user", content="hi"), ConversationTurn(role="assistant", content="Hello!")]
    assert render_history(history) == "user: hi\nassistant: Hello!"


@pytest.mark.parametrize("policy_name", list(PROMPT_POLICIES.keys()))
def test_system_prompt_lists_exactly_the_five_projects(policy_name):
    system, _ = _build(question="projects", policy_name=policy_name)

    match = re.search(r"List ONLY these when asked about projects: (.+)\.", system.content)
    assert match is not None
    listed = [name.strip() for name in match.group(1).split(",")]
    assert listed == PROJECTS
    assert len(listed) == 5


@pytest.mark.parametrize("policy_name", list(PROMPT_POLICIES.keys()))
def test_system_prompt_carries_behavioural_rules(policy_name):
    system, _ = _build(policy_name=policy_name, current_year=2025)

    assert "Manthan Rase" in system.content
    assert "third person" in system.content
    assert "1-2 sentences" in system.content
    assert "GREETING / SMALLTALK RULE" in system.content
    assert f'"{FALLBACK_ANSWER}"' in system.content
    assert '"Project:", "Tags:", "Content:"' in system.content
    assert "currently pursuing" in system.content
    assert "The current year is 2025." in system.content
    # every placeholder got rendered
    assert "{" not in system.content


def test_policies_only_differ_in_wording_and_budget():
    concise = get_prompt_policy("concise")
    detailed = get_prompt_policy("DETAILED")

    assert concise.max_tokens == 120
    assert detailed.max_tokens == 300
    assert concise.temperature == detailed.temperature == 0.3


def test_unknown_policy_is_rejected():
    with pytest.raises(ValueError, match="Unknown prompt policy"):
        get_prompt_policy("verbose")
