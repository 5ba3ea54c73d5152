from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import StreamingResponse

from agentcart.api.dependencies import get_search_service, get_search_session
from agentcart.core.security import limiter, search_rate_limit
from agentcart.domain.models import CacheStats, HistoryResponse, SearchBatch, SearchRequest
from agentcart.domain.ports import InvalidSearchError
from agentcart.services.search_service import SearchService, resolve_queries
from agentcart.services.search_session import SearchSession

router = APIRouter(prefix="/search", tags=["Search"])

ServiceDep = Annotated[SearchService, Depends(get_search_service)]
SessionDep = Annotated[SearchSession, Depends(get_search_session)]


def _queries_or_400(payload: SearchRequest) -> list[str]:
    try:
        return resolve_queries(payload)
    except InvalidSearchError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("", response_model=SearchBatch)
@limiter.limit(search_rate_limit)
async def search_products(
    request: Request, payload: SearchRequest, service: ServiceDep
) -> SearchBatch:
    """
    Sucht Produkte (Cache zuerst) und liefert das vollständige, sortierte Ergebnis.
    """
    queries = _queries_or_400(payload)
    return await service.search(
        queries,
        user_context=payload.user_context,
        preferences=payload.preferences,
        sort_by=payload.sort_by,
    )


@router.post("/stream")
@limiter.limit(search_rate_limit)
async def stream_search(
    request: Request, payload: SearchRequest, service: ServiceDep
) -> StreamingResponse:
    """
    Wie POST /search, liefert aber jede Zwischenstufe als eigene NDJSON-Zeile.
    """
    queries = _queries_or_400(payload)

    async def batches() -> AsyncIterator[str]:
        async for batch in service.iter_search(
            queries,
            user_context=payload.user_context,
            preferences=payload.preferences,
            sort_by=payload.sort_by,
        ):
            yield batch.model_dump_json() + "\n"

    return StreamingResponse(batches(), media_type="application/x-ndjson")


@router.get("/history", response_model=HistoryResponse)
async def get_history(
    session: SessionDep,
    limit: int = Query(8, ge=1, le=30),
) -> HistoryResponse:
    return HistoryResponse(queries=session.history.get_recent(limit))


@router.delete("/history", status_code=status.HTTP_204_NO_CONTENT)
async def clear_history(session: SessionDep) -> None:
    session.history.clear()


@router.get("/cache", response_model=CacheStats)
async def get_cache_stats(
    session: SessionDep,
    frequent_limit: int = Query(5, ge=1, le=50),
    recent_limit: int = Query(10, ge=1, le=50),
) -> CacheStats:
    return session.cache.stats(frequent_limit=frequent_limit, recent_limit=recent_limit)


@router.delete("/cache", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cache(session: SessionDep) -> None:
    session.cache.clear()
