"""ChromaDB-backed chunk store."""

import logging

import chromadb
from chromadb.config import Settings as ChromaSettings

from src.models.chunk import Chunk, ChunkMetadata
from src.vectorstore.chunk_store import ChunkStore

logger = logging.getLogger(__name__)

COLLECTION_NAME = "tutor_chunks"

_METADATA_FIELDS = (
    "topic", "page_number", "section", "document_name",
    "position", "start_char", "end_char", "word_count",
)


class ChromaChunkStore(ChunkStore):
    """Chunk store persisted in a single ChromaDB collection.

    Ownership (``user_id``, ``document_id``) and chunk metadata are stored
    as flat Chroma metadata; unset fields are omitted because Chroma does
    not accept null values. Chroma ids are ``"{user_id}/{chunk_id}"`` so
    chunk ids only need to be unique per user. An ``ingest_order`` counter
    keeps list results in insertion order.
    """

    def __init__(self, path: str = "./data/chroma"):
        if path == ":memory:":
            self._client = chromadb.Client()
        else:
            self._client = chromadb.PersistentClient(
                path=path,
                settings=ChromaSettings(anonymized_telemetry=False),
            )
        self._collection = self._client.get_or_create_collection(
            name=COLLECTION_NAME,
            metadata={"hnsw:space": "cosine"},
        )

    def add_chunks(self, chunks: list[Chunk]) -> int:
        """Add embedded chunks to the collection.

        Returns the number of chunks added.
        """
        if not chunks:
            return 0

        ids = []
        embeddings = []
        documents = []
        metadatas = []
        start = self._collection.count()

        for offset, chunk in enumerate(chunks):
            if not chunk.embedding:
                raise ValueError(f"Chunk {chunk.chunk_id} has no embedding")
            ids.append(_record_id(chunk.user_id, chunk.chunk_id))
            embeddings.append(list(chunk.embedding))
            documents.append(chunk.text)
            metadatas.append(self._to_chroma_metadata(chunk, start + offset))

        self._collection.add(
            ids=ids,
            embeddings=embeddings,
            documents=documents,
            metadatas=metadatas,
        )
        logger.info("Stored %d chunks in %s", len(ids), COLLECTION_NAME)
        return len(ids)

    def list_by_user(self, user_id: str) -> list[Chunk]:
        return self._get_where({"user_id": user_id})

    def list_by_document(self, user_id: str, document_id: str) -> list[Chunk]:
        return self._get_where(_owned_document(user_id, document_id))

    def has_document(self, user_id: str, document_id: str) -> bool:
        results = self._collection.get(
            where=_owned_document(user_id, document_id),
            limit=1,
        )
        return len(results["ids"]) > 0

    @property
    def count(self) -> int:
        """Return the number of chunks in the collection."""
        return self._collection.count()

    def _get_where(self, where: dict) -> list[Chunk]:
        results = self._collection.get(
            where=where,
            include=["documents", "metadatas", "embeddings"],
        )
        documents = results.get("documents")
        metadatas = results.get("metadatas")
        embeddings = results.get("embeddings")

        rows = []
        for i, record_id in enumerate(results["ids"]):
            metadata = metadatas[i] if metadatas is not None else {}
            chunk_id = metadata.get("chunk_id", record_id)
            embedding = embeddings[i] if embeddings is not None else []
            chunk = Chunk(
                chunk_id=chunk_id,
                document_id=metadata["document_id"],
                user_id=metadata["user_id"],
                text=documents[i] if documents is not None else "",
                embedding=tuple(float(x) for x in embedding),
                metadata=ChunkMetadata.from_dict(metadata),
            )
            rows.append((metadata.get("ingest_order", i), chunk))

        rows.sort(key=lambda row: row[0])
        return [chunk for _, chunk in rows]

    @staticmethod
    def _to_chroma_metadata(chunk: Chunk, ingest_order: int) -> dict:
        metadata = {
            "chunk_id": chunk.chunk_id,
            "user_id": chunk.user_id,
            "document_id": chunk.document_id,
            "ingest_order": ingest_order,
        }
        for name in _METADATA_FIELDS:
            value = getattr(chunk.metadata, name)
            if value is not None:
                metadata[name] = value
        return metadata


def _record_id(user_id: str, chunk_id: str) -> str:
    return f"{user_id}/{chunk_id}"


def _owned_document(user_id: str, document_id: str) -> dict:
    return {"$and": [{"user_id": user_id}, {"document_id": document_id}]}
