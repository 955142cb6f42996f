"""Unit tests for the in-memory and ChromaDB chunk stores."""

import pytest

from src.models.chunk import Chunk, ChunkMetadata
from src.vectorstore.chroma_store import COLLECTION_NAME, ChromaChunkStore
from src.vectorstore.chunk_store import InMemoryChunkStore


def _chunk(chunk_id, document_id="doc-1", user_id="user-1", embedding=(0.1, 0.2, 0.3), **metadata):
    return Chunk(
        chunk_id=chunk_id,
        document_id=document_id,
        user_id=user_id,
        text=f"Text for {chunk_id}",
        embedding=embedding,
        metadata=ChunkMetadata(**metadata),
    )


class TestInMemoryChunkStore:
    def test_list_by_user_in_insertion_order(self):
        store = InMemoryChunkStore([_chunk("b"), _chunk("x", user_id="user-2"), _chunk("a")])
        assert [c.chunk_id for c in store.list_by_user("user-1")] == ["b", "a"]

    def test_list_by_document(self):
        store = InMemoryChunkStore([_chunk("a", "doc-1"), _chunk("b", "doc-2")])
        assert [c.chunk_id for c in store.list_by_document("user-1", "doc-2")] == ["b"]

    def test_unknown_user_is_empty(self):
        assert InMemoryChunkStore([_chunk("a")]).list_by_user("nobody") == []

    def test_has_document(self):
        store = InMemoryChunkStore([_chunk("a", "doc-1")])
        assert store.has_document("user-1", "doc-1") is True
        assert store.has_document("user-1", "doc-2") is False
        assert store.has_document("user-2", "doc-1") is False

    def test_duplicate_chunk_id_rejected(self):
        store = InMemoryChunkStore([_chunk("a")])
        with pytest.raises(ValueError, match="Duplicate"):
            store.add_chunks([_chunk("a")])
        assert store.count == 1

    def test_same_chunk_id_for_different_users(self):
        store = InMemoryChunkStore([_chunk("notes_chunk_0", "notes", "alice")])
        store.add_chunks([_chunk("notes_chunk_0", "notes", "bob")])

        assert store.count == 2
        [alice_chunk] = store.list_by_document("alice", "notes")
        [bob_chunk] = store.list_by_document("bob", "notes")
        assert alice_chunk.user_id == "alice"
        assert bob_chunk.user_id == "bob"


@pytest.fixture
def chroma_store():
    """ChromaDB in-memory store with a clean collection."""
    store = ChromaChunkStore(path=":memory:")
    store._client.delete_collection(COLLECTION_NAME)
    store._collection = store._client.get_or_create_collection(
        name=COLLECTION_NAME, metadata={"hnsw:space": "cosine"}
    )
    return store


class TestChromaChunkStore:
    def test_round_trip(self, chroma_store):
        chunk = _chunk("a", topic="algebra", page_number=2, section="Chapter 1", document_name="alg.pdf")
        assert chroma_store.add_chunks([chunk]) == 1

        [loaded] = chroma_store.list_by_user("user-1")
        assert loaded.chunk_id == "a"
        assert loaded.document_id == "doc-1"
        assert loaded.text == "Text for a"
        assert loaded.embedding == pytest.approx((0.1, 0.2, 0.3))
        assert loaded.metadata.topic == "algebra"
        assert loaded.metadata.page_number == 2
        assert loaded.metadata.section == "Chapter 1"
        assert loaded.metadata.document_name == "alg.pdf"

    def test_unset_metadata_stays_unset(self, chroma_store):
        chroma_store.add_chunks([_chunk("a")])
        [loaded] = chroma_store.list_by_user("user-1")
        assert loaded.metadata == ChunkMetadata()

    def test_scoped_by_user_and_document(self, chroma_store):
        chroma_store.add_chunks([
            _chunk("a", "doc-1", "user-1"),
            _chunk("b", "doc-2", "user-1"),
            _chunk("c", "doc-3", "user-2"),
        ])
        assert {c.chunk_id for c in chroma_store.list_by_user("user-1")} == {"a", "b"}
        assert [c.chunk_id for c in chroma_store.list_by_document("user-2", "doc-3")] == ["c"]
        assert chroma_store.list_by_document("user-1", "doc-3") == []

    def test_insertion_order_preserved(self, chroma_store):
        chroma_store.add_chunks([_chunk("z"), _chunk("m")])
        chroma_store.add_chunks([_chunk("a")])
        assert [c.chunk_id for c in chroma_store.list_by_user("user-1")] == ["z", "m", "a"]

    def test_has_document(self, chroma_store):
        assert chroma_store.has_document("user-1", "doc-1") is False
        chroma_store.add_chunks([_chunk("a", "doc-1")])
        assert chroma_store.has_document("user-1", "doc-1") is True
        assert chroma_store.has_document("user-2", "doc-1") is False

    def test_same_chunk_id_for_different_users(self, chroma_store):
        chroma_store.add_chunks([_chunk("notes_chunk_0", "notes", "alice")])
        chroma_store.add_chunks([_chunk("notes_chunk_0", "notes", "bob")])

        assert chroma_store.count == 2
        [bob_chunk] = chroma_store.list_by_document("bob", "notes")
        assert bob_chunk.chunk_id == "notes_chunk_0"
        assert bob_chunk.user_id == "bob"

    def test_count(self, chroma_store):
        assert chroma_store.count == 0
        chroma_store.add_chunks([_chunk("a"), _chunk("b")])
        assert chroma_store.count == 2

    def test_add_empty_list(self, chroma_store):
        assert chroma_store.add_chunks([]) == 0

    def test_unembedded_chunk_rejected(self, chroma_store):
        with pytest.raises(ValueError, match="no embedding"):
            chroma_store.add_chunks([_chunk("a", embedding=())])
