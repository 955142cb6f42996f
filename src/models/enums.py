"""Enumeration types for search data models."""

from enum import Enum


class SearchType(str, Enum):
    SEMANTIC = "semantic"
    KEYWORD = "keyword"
    HYBRID = "hybrid"


class MatchType(str, Enum):
    SEMANTIC = "semantic"
    KEYWORD = "keyword"
    BOTH = "both"
