"""Ingestion pipeline: chunk → embed → store."""

import logging
from dataclasses import replace

from src.embedding.provider import EmbeddingProvider
from src.ingestion.chunker import chunk_text
from src.vectorstore.chunk_store import ChunkStore

logger = logging.getLogger(__name__)

# Titan is throttled per request; embed in small batches
EMBED_BATCH_SIZE = 5


def ingest_document(
    text: str,
    document_id: str,
    user_id: str,
    store: ChunkStore,
    embedding_provider: EmbeddingProvider,
    chunk_size: int = 512,
    chunk_overlap: int = 50,
    topic: str | None = None,
    document_name: str | None = None,
    batch_size: int = EMBED_BATCH_SIZE,
) -> dict:
    """Chunk, embed and store one document for one user.

    A document the user already has in the store is skipped. Other users
    may hold documents with the same id.

    Returns a summary dict with counts.
    """
    if store.has_document(user_id, document_id):
        logger.info("Skipping already ingested document %s for user %s", document_id, user_id)
        return {"document_id": document_id, "skipped": True, "chunks_stored": 0}

    chunks = chunk_text(
        text,
        document_id=document_id,
        user_id=user_id,
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        topic=topic,
        document_name=document_name,
    )
    logger.info("Chunked %s into %d chunks", document_id, len(chunks))

    embedded = []
    for i in range(0, len(chunks), batch_size):
        batch = chunks[i:i + batch_size]
        embeddings = embedding_provider.embed([c.text for c in batch])
        if len(embeddings) != len(batch):
            raise ValueError(
                f"Embedding provider returned {len(embeddings)} vectors for {len(batch)} texts"
            )
        for chunk, embedding in zip(batch, embeddings):
            embedded.append(replace(chunk, embedding=tuple(float(x) for x in embedding)))

    stored = store.add_chunks(embedded)
    logger.info("Stored %d chunks for document %s", stored, document_id)
    return {"document_id": document_id, "skipped": False, "chunks_stored": stored}
