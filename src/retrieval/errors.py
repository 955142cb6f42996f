"""Exceptions raised by the retrieval engine.

Callers distinguish bad input (``InvalidRequest``, 4xx-equivalent) from
dependency failures (``DependencyFailure`` subclasses, 5xx-equivalent) via
the ``status_code`` attribute. Nothing here is retried by the engine.
"""


class SearchError(Exception):
    """Base exception for all search errors."""

    status_code = 500
    error_code = "search_error"


class InvalidRequest(SearchError):
    """The search request is malformed. No external call was made."""

    status_code = 400
    error_code = "invalid_request"


class DimensionMismatch(SearchError, ValueError):
    """Two vectors of different length were compared."""

    error_code = "dimension_mismatch"

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Vector dimension mismatch: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class DependencyFailure(SearchError):
    """An external collaborator failed or timed out."""

    status_code = 502
    error_code = "dependency_failure"

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class EmbeddingFailure(DependencyFailure):
    """The embedding provider failed or timed out."""

    error_code = "embedding_failure"


class RetrievalFailure(DependencyFailure):
    """The chunk store failed or timed out."""

    error_code = "retrieval_failure"
