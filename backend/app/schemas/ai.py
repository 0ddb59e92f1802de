"""Pydantic schemas for AI service diagnostics."""

from app.schemas.base import BaseSchema


class CacheStatsResponse(BaseSchema):
    """Response cache occupancy."""

    size: int
    keys: list[str]


class ModelProbeResponse(BaseSchema):
    """Result of pinging one model."""

    model: str
    ok: bool
    latency_ms: int | None = None
    error: str | None = None
