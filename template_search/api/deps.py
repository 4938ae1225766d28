from fastapi import HTTPException, Request

from ..errors import (
    DocumentNotFoundError,
    InvalidSearchRequest,
    SearchServiceError,
    TransportError,
)
from ..services.search_service import SearchService


def get_search_service(request: Request) -> SearchService:
    """The process-wide service created at startup."""
    return request.app.state.search_service


def to_http_error(exc: SearchServiceError) -> HTTPException:
    if isinstance(exc, InvalidSearchRequest):
        return HTTPException(status_code=422, detail=f"invalid_request: {exc}")
    if isinstance(exc, DocumentNotFoundError):
        return HTTPException(status_code=404, detail=f"not_found: {exc}")
    if isinstance(exc, TransportError):
        # OpenSearch is down, unreachable or answered garbage
        return HTTPException(status_code=503, detail=f"opensearch_unavailable: {exc}")
    return HTTPException(status_code=500, detail=f"search_service_error: {exc}")
