import time
from typing import Any, Dict, List, Type

from ..schemas.documents import Document
from ..schemas.search import DocumentT, SearchResults
from .gateway import RawSearchResponse


def hit_to_document(hit: Dict[str, Any], document_type: Type[DocumentT]) -> DocumentT:
    """Stored document with this hit's score and highlights attached."""
    src = dict(hit.get("_source") or {})
    src.setdefault("id", hit.get("_id"))
    # score/highlights are never stored, drop stale copies if any
    src.pop("score", None)
    src.pop("highlights", None)

    document = document_type.model_validate(src)
    return document.model_copy(
        update={
            "score": hit.get("_score"),
            "highlights": hit.get("highlight") or {},
        }
    )


def assemble_results(
    raw: RawSearchResponse,
    document_type: Type[DocumentT],
    started_at: float,
) -> SearchResults[DocumentT]:
    """
    Build the caller-facing page.

    `started_at` is a `time.perf_counter()` reading taken when the request
    arrived, so the elapsed time covers every engine call it needed.
    """
    results: List[Document] = [hit_to_document(h, document_type) for h in raw.hits]

    return SearchResults[document_type](
        results=results,
        total_count=raw.total,
        elapsed_ms=round((time.perf_counter() - started_at) * 1000, 3),
        raw_query=raw.raw_query,
    )
