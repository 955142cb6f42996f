"""Document and topic filters shared by all search types."""

from src.models.chunk import Chunk
from src.models.search import SearchFilters


def matches_filters(chunk: Chunk, filters: SearchFilters | None) -> bool:
    """True if the chunk passes the document and topic filters.

    The two filters are conjunctive. A chunk without a topic never passes
    a non-empty topic filter. The relevance threshold is not applied here.
    """
    if filters is None:
        return True

    if filters.document_ids and chunk.document_id not in filters.document_ids:
        return False

    if filters.topics:
        topic = chunk.metadata.topic
        if not topic or not any(allowed in topic for allowed in filters.topics):
            return False

    return True


def apply_filters(chunks: list[Chunk], filters: SearchFilters | None) -> list[Chunk]:
    """Keep chunks passing the document and topic filters, preserving order."""
    return [chunk for chunk in chunks if matches_filters(chunk, filters)]
