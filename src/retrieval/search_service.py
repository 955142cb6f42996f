"""Search entry point: validation, dispatch by search type, ranking.

The service keeps no per-request state. Its only side effects are the two
external calls (query embedding, chunk listing), which run on a short-lived
thread pool so they can proceed concurrently and honor a timeout. Both must
finish before any scoring starts; a failure of either aborts the request.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import TYPE_CHECKING

from src.models.enums import MatchType, SearchType
from src.models.search import SearchRequest, SearchResponse, SearchResult
from src.retrieval.errors import DimensionMismatch, EmbeddingFailure, RetrievalFailure
from src.retrieval.filters import apply_filters
from src.retrieval.keyword import KeywordScorer
from src.retrieval.ranker import HybridRanker, RankingWeights, sort_by_relevance
from src.retrieval.vector import VectorScorer

if TYPE_CHECKING:
    from src.embedding.provider import EmbeddingProvider
    from src.models.chunk import Chunk
    from src.vectorstore.chunk_store import ChunkStore

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_OVERFETCH = 2


class SearchService:
    """Hybrid semantic + keyword search over one user's chunks.

    Every chunk of the user is scored on every query (brute-force scan).
    """

    def __init__(
        self,
        store: ChunkStore,
        embedding_provider: EmbeddingProvider,
        weights: RankingWeights | None = None,
        overfetch: int = DEFAULT_OVERFETCH,
        timeout: float | None = DEFAULT_TIMEOUT_SECONDS,
    ):
        self._store = store
        self._embedding_provider = embedding_provider
        self._weights = weights or RankingWeights()
        self._ranker = HybridRanker(self._weights)
        self._keyword_scorer = KeywordScorer(self._weights.keyword_presence_bonus)
        self._vector_scorer = VectorScorer()
        self._overfetch = overfetch
        self._timeout = timeout

    @classmethod
    def from_settings(cls, store: ChunkStore, embedding_provider: EmbeddingProvider, settings) -> SearchService:
        return cls(
            store=store,
            embedding_provider=embedding_provider,
            weights=RankingWeights.from_settings(settings),
            overfetch=settings.tutor_hybrid_overfetch,
            timeout=settings.tutor_external_timeout,
        )

    def search(self, request: SearchRequest, timeout: float | None = None) -> SearchResponse:
        """Run a search request end to end.

        Args:
            request: The search request. Validated before any external call.
            timeout: Per-call limit in seconds for the embedding and store
                calls. Defaults to the service timeout.

        Raises:
            InvalidRequest: The request is malformed.
            EmbeddingFailure: The embedding provider failed or timed out.
            RetrievalFailure: The chunk store failed or timed out.
        """
        request.validate()
        timeout = self._timeout if timeout is None else timeout
        search_type = request.search_type
        filters = request.filters

        logger.info(
            "Performing %s search for user %s (max_results=%d)",
            search_type.value, request.user_id, request.max_results,
        )

        needs_embedding = search_type is not SearchType.KEYWORD
        query_embedding, chunks = self._fetch(request, needs_embedding, timeout)
        chunks = apply_filters(chunks, filters)

        if search_type is SearchType.SEMANTIC:
            semantic = self._semantic_results(query_embedding, chunks)
            results = self._ranker.rank(semantic, request.max_results, filters.min_relevance)
        elif search_type is SearchType.KEYWORD:
            keyword = self._keyword_results(request.query, chunks)
            results = self._ranker.rank(keyword, request.max_results, filters.min_relevance)
        else:
            candidate_limit = request.max_results * self._overfetch
            semantic = self._semantic_results(query_embedding, chunks)[:candidate_limit]
            keyword = self._keyword_results(request.query, chunks)[:candidate_limit]
            results = self._ranker.combine(
                semantic, keyword, request.max_results, filters.min_relevance
            )

        logger.info("Search returned %d results", len(results))
        return SearchResponse(
            results=results,
            search_type=search_type,
            query_embedding=query_embedding,
        )

    def _fetch(
        self,
        request: SearchRequest,
        needs_embedding: bool,
        timeout: float | None,
    ) -> tuple[list[float] | None, list[Chunk]]:
        """Embed the query and list the user's chunks concurrently.

        Both waits share one deadline, so the request blocks for at most
        ``timeout`` seconds in total.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="search")
        try:
            embedding_future = None
            if needs_embedding:
                embedding_future = executor.submit(
                    self._embedding_provider.embed_query, [request.query]
                )
            chunks_future = executor.submit(self._store.list_by_user, request.user_id)

            query_embedding = None
            if embedding_future is not None:
                query_embedding = self._await_embedding(embedding_future, timeout, deadline)
            chunks = self._await_chunks(chunks_future, timeout, deadline)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        return query_embedding, chunks

    def _await_embedding(self, future: Future, timeout: float | None, deadline: float | None) -> list[float]:
        try:
            vectors = future.result(timeout=_remaining(deadline))
        except FutureTimeout as e:
            raise EmbeddingFailure(f"Query embedding timed out after {timeout}s", cause=e) from e
        except Exception as e:
            raise EmbeddingFailure(f"Query embedding failed: {e}", cause=e) from e

        if not vectors or not vectors[0]:
            raise EmbeddingFailure("Embedding provider returned no vector for the query")
        return [float(x) for x in vectors[0]]

    def _await_chunks(self, future: Future, timeout: float | None, deadline: float | None) -> list[Chunk]:
        try:
            return list(future.result(timeout=_remaining(deadline)))
        except FutureTimeout as e:
            raise RetrievalFailure(f"Chunk retrieval timed out after {timeout}s", cause=e) from e
        except Exception as e:
            raise RetrievalFailure(f"Chunk retrieval failed: {e}", cause=e) from e

    def _semantic_results(self, query_embedding: list[float], chunks: list[Chunk]) -> list[SearchResult]:
        """Cosine-score every chunk, skipping chunks of the wrong dimension."""
        results = []
        skipped = 0
        for chunk in chunks:
            try:
                score = self._vector_scorer.similarity(query_embedding, chunk.embedding)
            except DimensionMismatch as e:
                skipped += 1
                logger.warning(
                    "Skipping chunk %s: embedding has %d dimensions, query has %d",
                    chunk.chunk_id, e.actual, e.expected,
                )
                continue
            results.append(SearchResult.from_chunk(chunk, score, MatchType.SEMANTIC))

        if skipped:
            logger.warning("Skipped %d of %d chunks with mismatched embeddings", skipped, len(chunks))
        return sort_by_relevance(results)

    def _keyword_results(self, query: str, chunks: list[Chunk]) -> list[SearchResult]:
        """Keyword-score every chunk, dropping chunks with no match."""
        keywords = self._keyword_scorer.extract_keywords(query)
        if not keywords:
            logger.info("Query has no significant keywords; keyword path is empty")
            return []

        results = []
        for chunk in chunks:
            score = self._keyword_scorer.score(chunk.text, keywords)
            if score > 0:
                results.append(SearchResult.from_chunk(chunk, score, MatchType.KEYWORD))
        return sort_by_relevance(results)


def _remaining(deadline: float | None) -> float | None:
    """Seconds left before ``deadline``, never negative. None means no limit."""
    if deadline is None:
        return None
    return max(0.0, deadline - time.monotonic())
