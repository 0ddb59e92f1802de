"""Pytest configuration and fixtures."""

import json
import os

# Settings are read at import time; provide what the app requires first.
os.environ.setdefault("OPENROUTER_API_KEY", "test-key")
os.environ.setdefault("ENVIRONMENT", "development")

import httpx
import pytest
from collections.abc import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.deps import (
    get_chat_service,
    get_llm_client,
    get_response_cache,
    get_summary_service,
)
from app.api.rate_limit import limiter
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.services.chat_service import ChatService
from app.services.llm_client import ModelFallbackClient
from app.services.response_cache import ResponseCache, TTLPolicy
from app.services.summary_service import SummaryService

TEST_MODELS = ["model-a", "model-b", "model-c"]
BASE_URL = "https://llm.test/v1"


class FakeModelAPI:
    """Stands in for the chat-completion endpoint behind httpx.MockTransport."""

    def __init__(self):
        self.calls: list[dict] = []
        self.headers: list[httpx.Headers] = []
        self.failing: set[str] = set()
        self.replies: dict[str, str] = {}
        self.default_reply = "Here is a mock explanation."

    def fail(self, *models: str) -> None:
        self.failing.update(models)

    def fail_all(self) -> None:
        self.failing.update(TEST_MODELS)

    @property
    def models_called(self) -> list[str]:
        return [call["model"] for call in self.calls]

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.calls.append(payload)
        self.headers.append(request.headers)
        model = payload["model"]
        if model in self.failing:
            return httpx.Response(503, json={"error": {"message": f"{model} is unavailable"}})
        content = self.replies.get(model, self.default_reply)
        return httpx.Response(
            200,
            json={"choices": [{"message": {"role": "assistant", "content": content}}]},
        )


def make_llm_client(model_api: FakeModelAPI, models: list[str] | None = None) -> ModelFallbackClient:
    return ModelFallbackClient(
        models or TEST_MODELS,
        api_key="test-key",
        base_url=BASE_URL,
        timeout=5.0,
        referer="http://localhost:5173",
        app_title="MentorAI",
        top_p=0.9,
        transport=httpx.MockTransport(model_api.handler),
    )


@pytest.fixture
def model_api() -> FakeModelAPI:
    return FakeModelAPI()


@pytest.fixture
def llm_client(model_api: FakeModelAPI) -> ModelFallbackClient:
    return make_llm_client(model_api)


@pytest.fixture
def llm_factory(model_api: FakeModelAPI):
    """Build a client for a custom model list against the fake API."""
    return lambda models: make_llm_client(model_api, models)


@pytest.fixture
def response_cache() -> ResponseCache:
    return ResponseCache(TTLPolicy(300))


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """In-memory SQLite database with the full schema."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    await engine.dispose()


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(
    session_factory,
    llm_client: ModelFallbackClient,
    response_cache: ResponseCache,
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints."""

    async def _get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_llm_client] = lambda: llm_client
    app.dependency_overrides[get_response_cache] = lambda: response_cache
    chat_service = ChatService(llm_client, response_cache)
    summary_service = SummaryService(llm_client, response_cache)
    app.dependency_overrides[get_chat_service] = lambda: chat_service
    app.dependency_overrides[get_summary_service] = lambda: summary_service
    limiter.reset()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
