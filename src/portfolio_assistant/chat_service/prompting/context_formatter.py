# renders retrieved rows into the context block of the user prompt

from typing import Sequence
from portfolio_assistant.chat_service.types.knowledge import KnowledgeRow

def format_row(position: int, row: KnowledgeRow) -> str:
    """
    "Source {n} [type | title | tags: ...]" header followed by the content.
    NOTE: no "Project:" / "Content:" style labels, the model tends to echo those back to visitors.
    """
    row_type = row.type.strip()
    title = row.title.strip()
    tags = row.tags.strip()

    header = f"Source {position} [{row_type}"
    if title:
        header += f" | {title}"
    if tags:
        header += f" | tags: {tags}"
    header += "]"

    return f"{header}\n{row.content.strip()}".strip()

def format_context(rows: Sequence[KnowledgeRow]) -> str:
    # empty string when nothing was retrieved
    return "\n\n".join(format_row(idx + 1, row) for idx, row in enumerate(rows))
