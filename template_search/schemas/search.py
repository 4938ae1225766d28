from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

from .documents import Document

DocumentT = TypeVar("DocumentT", bound=Document)


class SearchRequest(BaseModel):
    """
    Request body for template and suggestion search.
    """

    query: Optional[str] = Field(
        "",
        description="Free text, or a template code such as ABC-12-34.",
    )
    filter: Optional[str] = Field(
        default=None,
        description="Whitespace separated tags; every tag must be present.",
    )
    page_size: int = Field(20, ge=1, description="Hits per page.")
    current_page: int = Field(0, ge=0, description="Zero-based page number.")
    min_score: float = Field(
        0.0,
        ge=0.0,
        description="Hits scoring below this are dropped by the engine.",
    )

    @property
    def offset(self) -> int:
        return self.page_size * self.current_page


class SearchResults(BaseModel, Generic[DocumentT]):
    """
    One page of hits plus the diagnostics of the call that produced it.
    """

    results: List[DocumentT]
    total_count: int
    elapsed_ms: float
    raw_query: Optional[str] = None
