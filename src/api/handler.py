"""JSON request/response boundary for the search engine.

Maps a JSON-like request body to a SearchService call and every outcome to
a status code and body: 200 on success, 400 for invalid requests, 502 when
the embedding provider or chunk store fails.
"""

import logging

from src.models.search import SearchRequest
from src.retrieval.errors import DependencyFailure, InvalidRequest
from src.retrieval.search_service import SearchService

logger = logging.getLogger(__name__)


def handle_search_request(payload: dict, service: SearchService, timeout: float | None = None) -> tuple[int, dict]:
    """Serve one search request. Never raises for request or dependency errors."""
    try:
        request = SearchRequest.from_dict(payload)
        response = service.search(request, timeout=timeout)
    except InvalidRequest as e:
        logger.info("Rejected search request: %s", e)
        return e.status_code, {"error": e.error_code, "message": str(e)}
    except DependencyFailure as e:
        logger.exception("Search failed: %s", e)
        return e.status_code, {"error": e.error_code, "message": str(e)}

    return 200, response.to_dict()
