import logging

from fastapi import APIRouter, Depends

from ..errors import SearchServiceError
from ..schemas.documents import SuggestionDocument, TemplateDocument
from ..schemas.search import SearchRequest, SearchResults
from ..services.search_service import SearchService
from .deps import get_search_service, to_http_error

router = APIRouter()
logger = logging.getLogger("template_search.api.search")


@router.post("/templates/search", response_model=SearchResults[TemplateDocument])
async def search_templates(
    req: SearchRequest, service: SearchService = Depends(get_search_service)
):
    """
    Template search.

    A query shaped like a template code (ABC-12-34) returns that template
    when it exists; anything else is a weighted text search, optionally
    narrowed to templates carrying every tag in `filter`.
    """
    try:
        results = await service.search_templates(req)
    except SearchServiceError as e:
        logger.warning("Template search failed: %s", e)
        raise to_http_error(e)

    logger.info(
        "Template search",
        extra={
            "query_length": len(req.query or ""),
            "total": results.total_count,
            "elapsed_ms": results.elapsed_ms,
        },
    )
    return results


@router.post("/suggestions/search", response_model=SearchResults[SuggestionDocument])
async def search_suggestions(
    req: SearchRequest, service: SearchService = Depends(get_search_service)
):
    """Autocomplete suggestions, best prefix match first."""
    try:
        return await service.search_suggestions(req)
    except SearchServiceError as e:
        logger.warning("Suggestion search failed: %s", e)
        raise to_http_error(e)
