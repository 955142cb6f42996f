"""Hybrid ranking of semantic and keyword result sets.

The merge is a weighted heuristic, not a normalized blend: cosine scores
live in [-1, 1] while keyword density is unbounded, so the weights express
relative trust in each signal. The constants are tunable via settings.
"""

import logging
from dataclasses import dataclass, replace

from src.models.enums import MatchType
from src.models.search import SearchResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankingWeights:
    """Tunable ranking constants."""

    semantic_weight: float = 0.7
    keyword_weight: float = 0.3
    hybrid_boost: float = 1.2
    keyword_presence_bonus: float = 0.5

    @classmethod
    def from_settings(cls, settings) -> "RankingWeights":
        return cls(
            semantic_weight=settings.tutor_semantic_weight,
            keyword_weight=settings.tutor_keyword_weight,
            hybrid_boost=settings.tutor_hybrid_boost,
            keyword_presence_bonus=settings.tutor_keyword_presence_bonus,
        )


def sort_by_relevance(results: list[SearchResult]) -> list[SearchResult]:
    """Sort descending by score. Stable, so equal scores keep input order."""
    return sorted(results, key=lambda r: r.relevance_score, reverse=True)


class HybridRanker:
    """Merges, thresholds, boosts, sorts and truncates result sets."""

    def __init__(self, weights: RankingWeights | None = None):
        self.weights = weights or RankingWeights()

    def merge(
        self,
        semantic_results: list[SearchResult],
        keyword_results: list[SearchResult],
    ) -> list[SearchResult]:
        """Weighted merge keyed by chunk id, in insertion order.

        Semantic entries come first in their original order, followed by
        keyword-only entries in theirs. A chunk found by both paths gets the
        sum of its weighted scores and ``MatchType.BOTH``.
        """
        combined: dict[str, SearchResult] = {}

        for result in semantic_results:
            combined[result.chunk_id] = replace(
                result,
                relevance_score=result.relevance_score * self.weights.semantic_weight,
                match_type=MatchType.SEMANTIC,
            )

        for result in keyword_results:
            weighted = result.relevance_score * self.weights.keyword_weight
            existing = combined.get(result.chunk_id)
            if existing is not None:
                existing.relevance_score += weighted
                existing.match_type = MatchType.BOTH
            else:
                combined[result.chunk_id] = replace(
                    result,
                    relevance_score=weighted,
                    match_type=MatchType.KEYWORD,
                )

        return list(combined.values())

    def rank(
        self,
        results: list[SearchResult],
        max_results: int,
        min_relevance: float | None = None,
    ) -> list[SearchResult]:
        """Threshold, boost, sort and truncate already-merged results.

        The relevance threshold sees pre-boost scores. Entries matched by
        both strategies are then multiplied by ``hybrid_boost``.
        """
        if min_relevance is not None:
            before = len(results)
            results = [r for r in results if r.relevance_score >= min_relevance]
            logger.debug(
                "Relevance threshold %.4f kept %d of %d results",
                min_relevance, len(results), before,
            )

        ranked = []
        for result in results:
            if result.match_type is MatchType.BOTH:
                result = replace(
                    result,
                    relevance_score=result.relevance_score * self.weights.hybrid_boost,
                )
            ranked.append(result)

        return sort_by_relevance(ranked)[:max_results]

    def combine(
        self,
        semantic_results: list[SearchResult],
        keyword_results: list[SearchResult],
        max_results: int,
        min_relevance: float | None = None,
    ) -> list[SearchResult]:
        """Full hybrid ranking: merge, then rank."""
        merged = self.merge(semantic_results, keyword_results)
        return self.rank(merged, max_results, min_relevance)
