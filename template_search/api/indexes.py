import logging
from typing import Literal

from fastapi import APIRouter, Depends

from ..errors import SearchServiceError
from ..services.search_service import SearchService
from .deps import get_search_service, to_http_error

router = APIRouter(prefix="/indexes")
logger = logging.getLogger("template_search.api.indexes")

Kind = Literal["templates", "suggestions"]


@router.post("/{kind}/recreate")
async def recreate_index(kind: Kind, service: SearchService = Depends(get_search_service)):
    """
    Drop the index and create it again with the current schema.

    All documents in it are gone afterwards; run a sync to refill it.
    """
    try:
        await service.recreate_index(kind)
    except SearchServiceError as e:
        raise to_http_error(e)

    logger.warning("Index for %s recreated via API", kind)
    return {"index": service.index_name(kind), "result": "recreated"}


@router.post("/{kind}/optimize")
async def optimize_index(kind: Kind, service: SearchService = Depends(get_search_service)):
    try:
        await service.optimize_index(kind)
    except SearchServiceError as e:
        raise to_http_error(e)
    return {"index": service.index_name(kind), "result": "optimized"}
