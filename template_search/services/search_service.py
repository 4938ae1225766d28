import logging
import time
from typing import Dict, Optional, Type

from ..config import FieldBoosts, IndexNames, OpenSearchSettings
from ..schemas.documents import Document, SuggestionDocument, TemplateDocument
from ..schemas.search import SearchRequest, SearchResults
from ..search.dsl import render_plan
from ..search.mappings import SUGGESTIONS, TEMPLATES, build_index_definitions
from ..search.planner import plan_code_lookup, plan_suggestions, plan_templates
from ..search.schema_manager import IndexSchemaManager
from .gateway import SearchGateway, get_os_client
from .results import assemble_results

logger = logging.getLogger("template_search.search")

DOCUMENT_TYPES: Dict[str, Type[Document]] = {
    TEMPLATES: TemplateDocument,
    SUGGESTIONS: SuggestionDocument,
}


def kind_of(document: Document) -> str:
    for kind, document_type in DOCUMENT_TYPES.items():
        if isinstance(document, document_type):
            return kind
    raise ValueError(f"Unsupported document type {type(document).__name__}")


class SearchService:
    """
    Caller-facing API: search, index, delete, get and exists for both
    document kinds, plus index maintenance.

    Holds no per-request state, so one instance serves concurrent requests.
    """

    def __init__(
        self,
        gateway: SearchGateway,
        indexes: Optional[IndexNames] = None,
        boosts: Optional[FieldBoosts] = None,
        refresh: bool = False,
    ):
        self.gateway = gateway
        self.indexes = indexes or IndexNames()
        self.boosts = boosts or FieldBoosts()
        # wait for a refresh on writes; handy for tests and small setups
        self.refresh = refresh
        self.schema = IndexSchemaManager(gateway, build_index_definitions(self.indexes))

    @classmethod
    def from_settings(cls, settings: OpenSearchSettings) -> "SearchService":
        return cls(
            SearchGateway(get_os_client(settings)),
            indexes=settings.indexes,
            boosts=settings.boosts,
        )

    def index_name(self, kind: str) -> str:
        try:
            return self.indexes.for_kind(kind)
        except KeyError:
            raise ValueError(f"Unknown document kind {kind!r}")

    async def bootstrap(self) -> Dict[str, bool]:
        """Create missing indexes. Must finish before serving queries."""
        created = await self.schema.ensure_all()
        logger.info("Indexes ready: %s", {k: self.index_name(k) for k in created})
        return created

    # --- search -----------------------------------------------------------

    async def search_templates(self, request: SearchRequest) -> SearchResults[TemplateDocument]:
        started_at = time.perf_counter()
        index = self.indexes.template

        code_plan = plan_code_lookup(request)
        if code_plan is not None:
            raw = await self.gateway.search(index, render_plan(code_plan))
            # decided on the total, not the page, so later pages stay exact
            if raw.total > 0:
                logger.info("Exact code match for %r (%d total)", request.query, raw.total)
                return assemble_results(raw, TemplateDocument, started_at)
            logger.info("No template with code %r, falling back to text search", request.query)

        plan = plan_templates(request, self.boosts)
        raw = await self.gateway.search(index, render_plan(plan))
        return assemble_results(raw, TemplateDocument, started_at)

    async def search_suggestions(
        self, request: SearchRequest
    ) -> SearchResults[SuggestionDocument]:
        started_at = time.perf_counter()
        plan = plan_suggestions(request)
        raw = await self.gateway.search(self.indexes.suggestion, render_plan(plan))
        return assemble_results(raw, SuggestionDocument, started_at)

    # --- documents --------------------------------------------------------

    async def index(self, document: Document) -> None:
        index = self.index_name(kind_of(document))
        await self.gateway.index_document(
            index, document.id, document.to_source(), refresh=self.refresh
        )

    async def delete(self, kind: str, doc_id: str) -> None:
        await self.gateway.delete_document(self.index_name(kind), doc_id, refresh=self.refresh)

    async def exists(self, kind: str, doc_id: str) -> bool:
        return await self.gateway.document_exists(self.index_name(kind), doc_id)

    async def get(self, kind: str, doc_id: str) -> Optional[Document]:
        source = await self.gateway.get_document(self.index_name(kind), doc_id)
        if source is None:
            return None
        return DOCUMENT_TYPES[kind].model_validate({"id": doc_id, **source})

    # --- maintenance ------------------------------------------------------

    async def recreate_index(self, kind: str) -> None:
        self.index_name(kind)
        await self.schema.recreate(kind)

    async def optimize_index(self, kind: str) -> None:
        await self.gateway.force_merge(self.index_name(kind))

    async def close(self) -> None:
        await self.gateway.close()
