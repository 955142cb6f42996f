"""Chunk store interface and an in-memory implementation."""

from abc import ABC, abstractmethod

from src.models.chunk import Chunk


class ChunkStore(ABC):
    """Per-user, append-only collection of embedded chunks.

    The search engine only reads from the store. ``list_by_user`` returns a
    user's whole working set; an indexed store may replace the linear scan
    later as long as ranking semantics are unchanged.
    """

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[Chunk]:
        """Return every chunk owned by ``user_id``, in insertion order."""
        ...

    @abstractmethod
    def list_by_document(self, user_id: str, document_id: str) -> list[Chunk]:
        """Return the chunks of one user's document, in insertion order."""
        ...

    @abstractmethod
    def add_chunks(self, chunks: list[Chunk]) -> int:
        """Append chunks. Returns the number of chunks added."""
        ...

    def has_document(self, user_id: str, document_id: str) -> bool:
        return bool(self.list_by_document(user_id, document_id))

    @property
    @abstractmethod
    def count(self) -> int:
        """Return the number of chunks in the store."""
        ...


class InMemoryChunkStore(ChunkStore):
    """Dict-backed store for tests and local runs.

    Chunks are keyed by ``(user_id, chunk_id)``, so two users may hold
    documents with the same id.
    """

    def __init__(self, chunks: list[Chunk] | None = None):
        self._chunks: dict[tuple[str, str], Chunk] = {}
        if chunks:
            self.add_chunks(chunks)

    def list_by_user(self, user_id: str) -> list[Chunk]:
        return [c for c in self._chunks.values() if c.user_id == user_id]

    def list_by_document(self, user_id: str, document_id: str) -> list[Chunk]:
        return [
            c for c in self._chunks.values()
            if c.user_id == user_id and c.document_id == document_id
        ]

    def add_chunks(self, chunks: list[Chunk]) -> int:
        for chunk in chunks:
            if (chunk.user_id, chunk.chunk_id) in self._chunks:
                raise ValueError(f"Duplicate chunk_id for user {chunk.user_id}: {chunk.chunk_id}")
        for chunk in chunks:
            self._chunks[(chunk.user_id, chunk.chunk_id)] = chunk
        return len(chunks)

    @property
    def count(self) -> int:
        return len(self._chunks)
