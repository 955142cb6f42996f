"""Search request and response data models."""

from dataclasses import dataclass, field

from src.models.chunk import Chunk, ChunkMetadata
from src.models.enums import MatchType, SearchType
from src.retrieval.errors import InvalidRequest

DEFAULT_MAX_RESULTS = 10


@dataclass(frozen=True)
class SearchFilters:
    """Optional restrictions applied to every search type.

    Empty ``document_ids`` / ``topics`` mean "no restriction".
    ``min_relevance`` applies to final (merged, pre-boost) scores.
    """

    document_ids: frozenset[str] = frozenset()
    topics: tuple[str, ...] = ()
    min_relevance: float | None = None

    @classmethod
    def from_lists(
        cls,
        document_ids: list[str] | None = None,
        topics: list[str] | None = None,
        min_relevance: float | None = None,
    ) -> "SearchFilters":
        """Build filters from optional plain lists, as given on the command line."""
        return cls(
            document_ids=frozenset(document_ids or []),
            topics=tuple(topics or []),
            min_relevance=min_relevance,
        )

    @classmethod
    def from_dict(cls, data: dict | None) -> "SearchFilters":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise InvalidRequest("filters must be an object")

        document_ids = data.get("documentIds") or []
        topics = data.get("topics") or []
        min_relevance = data.get("minRelevance")

        if not isinstance(document_ids, list) or not all(isinstance(d, str) for d in document_ids):
            raise InvalidRequest("filters.documentIds must be a list of strings")
        if not isinstance(topics, list) or not all(isinstance(t, str) for t in topics):
            raise InvalidRequest("filters.topics must be a list of strings")
        if min_relevance is not None and (
            isinstance(min_relevance, bool) or not isinstance(min_relevance, (int, float))
        ):
            raise InvalidRequest("filters.minRelevance must be a number")

        return cls(
            document_ids=frozenset(document_ids),
            topics=tuple(topics),
            min_relevance=float(min_relevance) if min_relevance is not None else None,
        )


@dataclass(frozen=True)
class SearchRequest:
    """A single user's search query."""

    user_id: str
    query: str
    max_results: int = DEFAULT_MAX_RESULTS
    search_type: SearchType = SearchType.HYBRID
    filters: SearchFilters = field(default_factory=SearchFilters)

    def validate(self) -> None:
        """Raise InvalidRequest if the request cannot be served."""
        if not isinstance(self.user_id, str) or not self.user_id.strip():
            raise InvalidRequest("Missing required field: userId")
        if not isinstance(self.query, str) or not self.query.strip():
            raise InvalidRequest("Missing required field: query")
        if isinstance(self.max_results, bool) or not isinstance(self.max_results, int):
            raise InvalidRequest("maxResults must be an integer")
        if self.max_results <= 0:
            raise InvalidRequest(f"maxResults must be positive, got {self.max_results}")
        if not isinstance(self.search_type, SearchType):
            raise InvalidRequest(f"Unknown searchType: {self.search_type}")

    @classmethod
    def from_dict(cls, payload: dict) -> "SearchRequest":
        """Parse a camelCase JSON-like request body."""
        if not isinstance(payload, dict):
            raise InvalidRequest("Request body must be an object")

        user_id = payload.get("userId")
        query = payload.get("query")
        if not user_id or not query:
            raise InvalidRequest("Missing required fields: userId, query")

        max_results = payload.get("maxResults")
        if max_results is None:
            max_results = DEFAULT_MAX_RESULTS

        raw_type = payload.get("searchType") or SearchType.HYBRID.value
        try:
            search_type = SearchType(raw_type)
        except ValueError:
            raise InvalidRequest(f"Unknown searchType: {raw_type}") from None

        request = cls(
            user_id=user_id,
            query=query,
            max_results=max_results,
            search_type=search_type,
            filters=SearchFilters.from_dict(payload.get("filters")),
        )
        request.validate()
        return request


@dataclass
class SearchResult:
    """One ranked chunk. ``relevance_score`` is unbounded after boosting."""

    chunk_id: str
    document_id: str
    text: str
    relevance_score: float
    metadata: ChunkMetadata
    match_type: MatchType

    @classmethod
    def from_chunk(cls, chunk: Chunk, score: float, match_type: MatchType) -> "SearchResult":
        return cls(
            chunk_id=chunk.chunk_id,
            document_id=chunk.document_id,
            text=chunk.text,
            relevance_score=score,
            metadata=chunk.metadata,
            match_type=match_type,
        )

    def to_dict(self) -> dict:
        return {
            "chunkId": self.chunk_id,
            "documentId": self.document_id,
            "text": self.text,
            "relevanceScore": self.relevance_score,
            "metadata": self.metadata.to_dict(),
            "matchType": self.match_type.value,
        }


@dataclass
class SearchResponse:
    """Ranked results, most relevant first."""

    results: list[SearchResult]
    search_type: SearchType
    query_embedding: list[float] | None = None

    @property
    def total_results(self) -> int:
        return len(self.results)

    def to_dict(self) -> dict:
        body = {
            "results": [r.to_dict() for r in self.results],
            "totalResults": self.total_results,
            "searchType": self.search_type.value,
        }
        if self.search_type is not SearchType.KEYWORD and self.query_embedding is not None:
            body["queryEmbedding"] = list(self.query_embedding)
        return body
