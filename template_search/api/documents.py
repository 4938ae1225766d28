from typing import Literal

from fastapi import APIRouter, Depends, HTTPException

from ..errors import SearchServiceError
from ..schemas.documents import Document, SuggestionDocument, TemplateDocument
from ..services.search_service import SearchService
from .deps import get_search_service, to_http_error

router = APIRouter()

Kind = Literal["templates", "suggestions"]


async def _index(service: SearchService, doc_id: str, document: Document) -> dict:
    if document.id != doc_id:
        raise HTTPException(
            status_code=422,
            detail=f"id_mismatch: path {doc_id!r} != body {document.id!r}",
        )
    try:
        await service.index(document)
    except SearchServiceError as e:
        raise to_http_error(e)
    return {"id": doc_id, "result": "indexed"}


@router.put("/templates/{doc_id}")
async def index_template(
    doc_id: str,
    document: TemplateDocument,
    service: SearchService = Depends(get_search_service),
):
    return await _index(service, doc_id, document)


@router.put("/suggestions/{doc_id}")
async def index_suggestion(
    doc_id: str,
    document: SuggestionDocument,
    service: SearchService = Depends(get_search_service),
):
    return await _index(service, doc_id, document)


@router.get("/{kind}/{doc_id}")
async def get_document(
    kind: Kind, doc_id: str, service: SearchService = Depends(get_search_service)
):
    try:
        document = await service.get(kind, doc_id)
    except SearchServiceError as e:
        raise to_http_error(e)

    if document is None:
        raise HTTPException(status_code=404, detail=f"not_found: {kind}/{doc_id}")
    return document


@router.get("/{kind}/{doc_id}/exists")
async def document_exists(
    kind: Kind, doc_id: str, service: SearchService = Depends(get_search_service)
):
    try:
        return {"id": doc_id, "exists": await service.exists(kind, doc_id)}
    except SearchServiceError as e:
        raise to_http_error(e)


@router.delete("/{kind}/{doc_id}")
async def delete_document(
    kind: Kind, doc_id: str, service: SearchService = Depends(get_search_service)
):
    try:
        await service.delete(kind, doc_id)
    except SearchServiceError as e:
        raise to_http_error(e)
    return {"id": doc_id, "result": "deleted"}
