import json
import logging
from typing import Any, Awaitable, Dict, List, Optional, TypeVar

from opensearchpy import AsyncOpenSearch, exceptions as os_exceptions
from pydantic import BaseModel

from ..config import OpenSearchSettings
from ..errors import DocumentNotFoundError, TransportError

logger = logging.getLogger("template_search.gateway")

T = TypeVar("T")


class RawSearchResponse(BaseModel):
    """Hits exactly as OpenSearch returned them, plus what we sent."""

    hits: List[Dict[str, Any]]
    total: int
    raw_query: str


def get_os_client(settings: OpenSearchSettings) -> AsyncOpenSearch:
    """
    Shared OpenSearch client constructor.

    One client per process; it pools connections across all configured
    nodes and is safe to share between concurrent requests.
    """
    return AsyncOpenSearch(
        hosts=settings.hosts,
        http_auth=(settings.username, settings.password),
        use_ssl=settings.use_ssl,
        verify_certs=settings.verify_certs,
        ssl_show_warn=False,
        timeout=settings.timeout,
    )


def _parse_total(total_raw: Any) -> int:
    # OpenSearch total can be dict or int depending on version
    if isinstance(total_raw, dict):
        return int(total_raw.get("value", 0))
    if total_raw is None:
        return 0
    return int(total_raw)


class SearchGateway:
    """
    Thin async wrapper over the OpenSearch client.

    Every engine failure comes out as a TransportError (or
    DocumentNotFoundError for a missing id) naming the operation and index.
    Nothing is retried here.
    """

    def __init__(self, client: AsyncOpenSearch):
        self.client = client

    async def _call(self, operation: str, index: str, awaitable: Awaitable[T]) -> T:
        try:
            return await awaitable
        except os_exceptions.NotFoundError as e:
            if e.error == "index_not_found_exception":
                logger.error("%s failed, index %r does not exist", operation, index)
                raise TransportError(f"index_not_found: {e}", operation, index) from e
            raise DocumentNotFoundError(f"document_not_found: {e}", operation, index) from e
        except os_exceptions.ConnectionError as e:
            # OpenSearch is down or unreachable
            logger.error("%s failed, opensearch unreachable: %s", operation, e)
            raise TransportError(f"opensearch_unreachable: {e}", operation, index) from e
        except os_exceptions.OpenSearchException as e:
            logger.error("%s failed on %r: %s", operation, index, e)
            raise TransportError(f"{operation}_error: {e}", operation, index) from e

    async def info(self) -> Dict[str, Any]:
        return await self._call("info", "", self.client.info())

    async def index_exists(self, index: str) -> bool:
        return bool(
            await self._call("index_exists", index, self.client.indices.exists(index=index))
        )

    async def create_index(self, index: str, body: Dict[str, Any]) -> bool:
        """
        Create an index. Returns False when it already existed.

        Two processes bootstrapping at once may both see the index missing;
        the loser gets resource_already_exists_exception, which is fine.
        """
        try:
            await self.client.indices.create(index=index, body=body)
        except os_exceptions.RequestError as e:
            if "resource_already_exists_exception" in str(e):
                logger.info("Index %r already exists (race)", index)
                return False
            raise TransportError(f"create_index_error: {e}", "create_index", index) from e
        except os_exceptions.OpenSearchException as e:
            raise TransportError(f"create_index_error: {e}", "create_index", index) from e

        logger.info("Created index %r", index)
        return True

    async def delete_index(self, index: str) -> None:
        await self._call(
            "delete_index",
            index,
            self.client.indices.delete(index=index, ignore_unavailable=True),
        )

    async def force_merge(self, index: str) -> None:
        await self._call("force_merge", index, self.client.indices.forcemerge(index=index))

    async def index_document(
        self, index: str, doc_id: str, body: Dict[str, Any], refresh: bool = False
    ) -> Dict[str, Any]:
        resp = await self._call(
            "index_document",
            index,
            self.client.index(index=index, id=doc_id, body=body, refresh=refresh),
        )
        logger.debug("Indexed %s into %s: %s", doc_id, index, resp.get("result"))
        return resp

    async def delete_document(self, index: str, doc_id: str, refresh: bool = False) -> None:
        await self._call(
            "delete_document",
            index,
            self.client.delete(index=index, id=doc_id, refresh=refresh),
        )

    async def get_document(self, index: str, doc_id: str) -> Optional[Dict[str, Any]]:
        try:
            resp = await self._call(
                "get_document", index, self.client.get(index=index, id=doc_id)
            )
        except DocumentNotFoundError:
            return None
        if not resp.get("found", True):
            return None
        return resp.get("_source")

    async def document_exists(self, index: str, doc_id: str) -> bool:
        return bool(
            await self._call(
                "document_exists", index, self.client.exists(index=index, id=doc_id)
            )
        )

    async def search(self, index: str, body: Dict[str, Any]) -> RawSearchResponse:
        raw_query = json.dumps(body, sort_keys=True)
        resp = await self._call("search", index, self.client.search(index=index, body=body))

        hits_section = resp.get("hits") if isinstance(resp, dict) else None
        if not isinstance(hits_section, dict):
            raise TransportError("invalid_response: no hits section", "search", index)

        return RawSearchResponse(
            hits=hits_section.get("hits") or [],
            total=_parse_total(hits_section.get("total")),
            raw_query=raw_query,
        )

    async def close(self) -> None:
        await self.client.close()
