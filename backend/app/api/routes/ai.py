"""Diagnostics for the AI service: response cache and model availability."""

from fastapi import APIRouter, status

from app.api.deps import LLMClientDep, ResponseCacheDep
from app.config import get_settings
from app.schemas.ai import CacheStatsResponse, ModelProbeResponse

router = APIRouter(prefix="/ai", tags=["ai"])
settings = get_settings()


@router.get("/cache", response_model=CacheStatsResponse)
async def cache_stats(cache: ResponseCacheDep):
    """Number of cached responses and their fingerprints."""
    return CacheStatsResponse(**cache.stats())


@router.delete("/cache", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cache(cache: ResponseCacheDep):
    """Drop every cached response."""
    cache.clear()
    return None


@router.get("/models", response_model=list[ModelProbeResponse])
async def probe_models(llm: LLMClientDep):
    """
    Ping each configured model with a tiny prompt.

    Models are tried one after another, so this can take up to
    (number of models x probe timeout).
    """
    results = await llm.probe_models(timeout=settings.llm_probe_timeout_seconds)
    return [ModelProbeResponse(**r) for r in results]
