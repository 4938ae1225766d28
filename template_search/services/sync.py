# template_search/services/sync.py

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Protocol

import httpx
from pydantic import BaseModel, ValidationError

from ..config import get_opensearch_settings, get_sync_settings
from ..errors import TransportError
from ..search.mappings import KINDS
from .search_service import DOCUMENT_TYPES, SearchService

logger = logging.getLogger("template_search.sync")


class DocumentSource(Protocol):
    async def changed_since(self, kind: str, since: datetime) -> List[Dict[str, Any]]:
        ...


class HttpDocumentSource:
    """
    Pulls changed records from the document store's HTTP feed:

        GET {base_url}/{kind}?since=<epoch seconds>

    The feed answers with a JSON list of records.
    """

    def __init__(self, base_url: str, client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        # only a client created here is closed here
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=10.0)

    async def changed_since(self, kind: str, since: datetime) -> List[Dict[str, Any]]:
        url = f"{self.base_url}/{kind}"
        params = {"since": int(since.timestamp())}

        try:
            resp = await self.client.get(url, params=params)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Document source request failed for %s: %s", kind, exc)
            raise TransportError(f"document_source_error: {exc}", "changed_since", kind) from exc

        data = resp.json()
        if not isinstance(data, list):
            raise TransportError(
                "document_source_error: expected a JSON list", "changed_since", kind
            )
        return data

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()


class SyncReport(BaseModel):
    since: datetime
    indexed: Dict[str, int]


async def sync_recent_changes(
    source: DocumentSource,
    service: SearchService,
    window: timedelta = timedelta(minutes=20),
    now: Optional[datetime] = None,
) -> SyncReport:
    """
    Re-index every document changed within the trailing window.

    Soft-deleted records are indexed like any other; search filters them.
    The first record that fails to convert or index aborts the run.
    """
    now = now or datetime.now(timezone.utc)
    since = now - window
    indexed: Dict[str, int] = {}

    for kind in KINDS:
        records = await source.changed_since(kind, since)
        document_type = DOCUMENT_TYPES[kind]
        count = 0

        for record in records:
            try:
                document = document_type.model_validate(record)
            except ValidationError:
                logger.error(
                    "Unconvertible %s record: %r",
                    kind,
                    record.get("id") if isinstance(record, dict) else record,
                )
                raise
            await service.index(document)
            count += 1

        logger.info("Synced %d %s changed since %s", count, kind, since.isoformat())
        indexed[kind] = count

    return SyncReport(since=since, indexed=indexed)


async def main() -> SyncReport:
    sync_settings = get_sync_settings()
    service = SearchService.from_settings(get_opensearch_settings())
    source = HttpDocumentSource(sync_settings.source_url)

    try:
        await service.bootstrap()
        return await sync_recent_changes(
            source, service, window=timedelta(minutes=sync_settings.window_minutes)
        )
    finally:
        await source.close()
        await service.close()


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    )
    report = asyncio.run(main())
    logger.info("Sync finished: %s", report.indexed)
