import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from .api.deps import get_search_service
from .api.documents import router as documents_router
from .api.indexes import router as indexes_router
from .api.search import router as search_router
from .config import get_opensearch_settings
from .errors import SearchServiceError
from .services.search_service import SearchService

# --- Logging config ---
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)

logger = logging.getLogger("template_search")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # No traffic until both indexes exist; a failure here aborts startup.
    settings = get_opensearch_settings()
    service = SearchService.from_settings(settings)
    try:
        await service.bootstrap()
    except SearchServiceError:
        logger.exception("Failed to ensure indexes")
        await service.close()
        raise

    app.state.search_service = service
    try:
        yield
    finally:
        await service.close()


app = FastAPI(
    title="Template search-service",
    description="Template and suggestion search over OpenSearch",
    version="0.1.0",
    lifespan=lifespan,
)


# Simple HTTP request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000

    logger.info(
        "HTTP request",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
        },
    )
    return response


@app.get("/health", tags=["health"])
async def health(service: SearchService = Depends(get_search_service)):
    """
    Simple health check that verifies we can talk to OpenSearch.
    """
    try:
        info = await service.gateway.info()
    except SearchServiceError as e:
        return JSONResponse(
            status_code=502,
            content={"status": "error", "reason": str(e)},
        )

    return {
        "status": "ok",
        "opensearch": {
            "cluster_name": info.get("cluster_name"),
            "cluster_uuid": info.get("cluster_uuid"),
            "version": info.get("version", {}).get("number"),
            "indexes": service.indexes.model_dump(),
        },
    }


app.include_router(search_router, tags=["search"])
app.include_router(indexes_router, tags=["indexes"])
app.include_router(documents_router, tags=["documents"])
