"""Unit tests for chunk and search request/response models."""

import pytest

from src.models.chunk import Chunk, ChunkMetadata
from src.models.enums import MatchType, SearchType
from src.models.search import (
    DEFAULT_MAX_RESULTS,
    SearchFilters,
    SearchRequest,
    SearchResponse,
    SearchResult,
)
from src.retrieval.errors import InvalidRequest


class TestChunk:
    def test_embedding_coerced_to_tuple(self):
        chunk = Chunk("c1", "d1", "u1", "text", embedding=[1, 2.5])
        assert chunk.embedding == (1.0, 2.5)

    @pytest.mark.parametrize("field", ["chunk_id", "document_id", "user_id", "text"])
    def test_required_fields_not_empty(self, field):
        kwargs = {"chunk_id": "c1", "document_id": "d1", "user_id": "u1", "text": "text"}
        kwargs[field] = ""
        with pytest.raises(ValueError):
            Chunk(**kwargs)

    def test_metadata_round_trips_camel_case(self):
        metadata = ChunkMetadata(topic="algebra", page_number=3, document_name="notes.pdf")
        data = metadata.to_dict()
        assert data == {"topic": "algebra", "pageNumber": 3, "documentName": "notes.pdf"}
        assert ChunkMetadata.from_dict(data) == metadata

    def test_metadata_from_none(self):
        assert ChunkMetadata.from_dict(None) == ChunkMetadata()


class TestSearchRequestFromDict:
    def test_defaults(self):
        request = SearchRequest.from_dict({"userId": "u1", "query": "cell division"})
        assert request.max_results == DEFAULT_MAX_RESULTS
        assert request.search_type is SearchType.HYBRID
        assert request.filters == SearchFilters()

    def test_full_payload(self):
        request = SearchRequest.from_dict({
            "userId": "u1",
            "query": "cell division",
            "maxResults": 3,
            "searchType": "keyword",
            "filters": {"documentIds": ["d1", "d2"], "topics": ["bio"], "minRelevance": 0.2},
        })
        assert request.max_results == 3
        assert request.search_type is SearchType.KEYWORD
        assert request.filters.document_ids == frozenset({"d1", "d2"})
        assert request.filters.topics == ("bio",)
        assert request.filters.min_relevance == 0.2

    @pytest.mark.parametrize("payload", [
        {"query": "x y z"},
        {"userId": "u1"},
        {"userId": "", "query": "photosynthesis"},
        {"userId": "u1", "query": "   "},
    ])
    def test_missing_required_fields(self, payload):
        with pytest.raises(InvalidRequest):
            SearchRequest.from_dict(payload)

    @pytest.mark.parametrize("max_results", [0, -1, 2.5, "10", True])
    def test_invalid_max_results(self, max_results):
        with pytest.raises(InvalidRequest):
            SearchRequest.from_dict({"userId": "u1", "query": "q", "maxResults": max_results})

    def test_unknown_search_type(self):
        with pytest.raises(InvalidRequest, match="Unknown searchType"):
            SearchRequest.from_dict({"userId": "u1", "query": "q", "searchType": "fuzzy"})

    def test_invalid_filters(self):
        with pytest.raises(InvalidRequest):
            SearchRequest.from_dict({"userId": "u1", "query": "q", "filters": {"documentIds": "d1"}})
        with pytest.raises(InvalidRequest):
            SearchRequest.from_dict({"userId": "u1", "query": "q", "filters": {"minRelevance": "high"}})

    def test_non_object_body(self):
        with pytest.raises(InvalidRequest):
            SearchRequest.from_dict(["not", "a", "dict"])

    def test_invalid_request_has_client_status(self):
        with pytest.raises(InvalidRequest) as exc_info:
            SearchRequest.from_dict({})
        assert exc_info.value.status_code == 400


class TestSearchFiltersFromLists:
    def test_empty(self):
        assert SearchFilters.from_lists() == SearchFilters()

    def test_lists_converted(self):
        filters = SearchFilters.from_lists(["doc-1", "doc-1", "doc-2"], ["physics"], 0.25)
        assert filters.document_ids == frozenset({"doc-1", "doc-2"})
        assert filters.topics == ("physics",)
        assert filters.min_relevance == 0.25


class TestSearchResponse:
    def _result(self):
        return SearchResult(
            chunk_id="c1",
            document_id="d1",
            text="Mitosis has four phases.",
            relevance_score=0.8,
            metadata=ChunkMetadata(topic="biology"),
            match_type=MatchType.BOTH,
        )

    def test_to_dict(self):
        response = SearchResponse(
            results=[self._result()],
            search_type=SearchType.HYBRID,
            query_embedding=[0.1, 0.2],
        )
        body = response.to_dict()
        assert body["totalResults"] == 1
        assert body["searchType"] == "hybrid"
        assert body["queryEmbedding"] == [0.1, 0.2]
        assert body["results"][0] == {
            "chunkId": "c1",
            "documentId": "d1",
            "text": "Mitosis has four phases.",
            "relevanceScore": 0.8,
            "metadata": {"topic": "biology"},
            "matchType": "both",
        }

    def test_keyword_response_omits_embedding(self):
        response = SearchResponse(results=[], search_type=SearchType.KEYWORD, query_embedding=[0.1])
        assert "queryEmbedding" not in response.to_dict()

    def test_empty_response(self):
        response = SearchResponse(results=[], search_type=SearchType.SEMANTIC)
        assert response.total_results == 0
        assert response.to_dict()["results"] == []
