# merges the two retrieval result sets into the rows that are sent to the model

from typing import Iterable
from portfolio_assistant.chat_service.types.knowledge import KnowledgeRow

MAX_CONTEXT_ROWS = 16

def merge_rows(
    search_rows: Iterable[KnowledgeRow],
    essentials_rows: Iterable[KnowledgeRow],
    limit: int = MAX_CONTEXT_ROWS,
) -> list[KnowledgeRow]:
    """
    Search hits first, then essentials; duplicates by KnowledgeRow.dedup_key keep their first occurrence.
    The result is capped at `limit` rows.
    """
    seen: set[tuple[str, str, str, str]] = set()
    merged: list[KnowledgeRow] = []

    for row in [*search_rows, *essentials_rows]:
        key = row.dedup_key()
        if key in seen:
            continue
        seen.add(key)
        merged.append(row)
        if len(merged) >= limit:
            break

    return merged
