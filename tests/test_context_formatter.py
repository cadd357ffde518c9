"""
Unit tests for rendering knowledge rows into the prompt context block.
"""

from portfolio_assistant.chat_service.types.knowledge import KnowledgeRow
from portfolio_assistant.chat_service.prompting.context_formatter import format_context, format_row


def test_empty_rows_render_empty_string():
    assert format_context([]) == ""


def test_full_header_and_trimmed_content():
    row = KnowledgeRow(type=" skills ", title=" Core skills ", tags=" ai, backend ", content="  Python and FastAPI.  ")

    assert format_row(1, row) == "Source 1 [skills | Core skills | tags: ai, backend]\nPython and FastAPI."


def test_optional_title_and_tags_are_omitted():
    row = KnowledgeRow(type="bio", content="Manthan is a software engineer.")

    assert format_row(3, row) == "Source 3 [bio]\nManthan is a software engineer."


def test_blocks_are_numbered_from_one_and_separated_by_blank_line():
    rows = [
        KnowledgeRow(type="bio", content="First fact."),
        KnowledgeRow(type="contact", title="Contact", content="Second fact."),
    ]

    assert format_context(rows) == (
        "Source 1 [bio]\nFirst fact.\n\n"
        "Source 2 [contact | Contact]\nSecond fact."
    )


def test_store_field_labels_are_not_printed():
    row = KnowledgeRow(project="Moodly", type="project-description", title="Moodly", content="A journal app.", tags="mobile")

    rendered = format_context([row])

    for label in ("Project:", "Tags:", "Content:", "Title:", "Type:"):
        assert label not in rendered
