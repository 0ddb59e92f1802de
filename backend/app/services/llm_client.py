"""Chat-completion client that walks a prioritized list of models."""

import logging
import time
from dataclasses import dataclass, field

import httpx
import openai
from openai import AsyncOpenAI

from app.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class LLMResponseError(Exception):
    """The API answered but the body has no usable completion."""


@dataclass
class ModelAttempt:
    """One call to one model."""

    model: str
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class CompletionSuccess:
    text: str
    model: str
    attempts: list[ModelAttempt] = field(default_factory=list)


@dataclass
class AllModelsFailed:
    last_error: Exception | None
    attempts: list[ModelAttempt] = field(default_factory=list)


CompletionResult = CompletionSuccess | AllModelsFailed

# Errors that mean "this model did not answer", not "the request was wrong"
MODEL_ERRORS = (openai.APIError, LLMResponseError)


def _describe_error(error: Exception) -> str:
    """Prefer the provider's error message over the SDK's generic one."""
    if isinstance(error, openai.APIStatusError):
        body = error.body
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            body = body["error"]
        message = body.get("message") if isinstance(body, dict) else None
        return f"HTTP {error.status_code}: {message or error.message}"
    return str(error) or error.__class__.__name__


def _extract_content(completion) -> str:
    try:
        content = completion.choices[0].message.content
    except (AttributeError, IndexError, TypeError) as e:
        raise LLMResponseError(f"Malformed completion body: {e!r}") from e
    if not isinstance(content, str):
        raise LLMResponseError("Completion content is not text")
    return content


class ModelFallbackClient:
    """
    Calls an OpenAI-compatible chat-completion endpoint, one model at a time.

    Each model gets a single attempt per request; the first success wins.
    There is no health tracking across requests, so every request starts
    again from the top of the list.
    """

    def __init__(
        self,
        models: list[str],
        *,
        api_key: str,
        base_url: str,
        timeout: float,
        referer: str | None = None,
        app_title: str | None = None,
        top_p: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not models:
            raise ValueError("At least one model is required")
        self.models = list(models)
        self.timeout = timeout
        self.top_p = top_p

        headers = {}
        if referer:
            headers["HTTP-Referer"] = referer
        if app_title:
            headers["X-Title"] = app_title

        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
            default_headers=headers,
            http_client=httpx.AsyncClient(transport=transport) if transport else None,
        )

    async def _call_model(
        self,
        model: str,
        messages: list[dict],
        *,
        temperature: float | None,
        max_tokens: int,
        timeout: float | None = None,
    ) -> str:
        options: dict = {"max_tokens": max_tokens}
        if temperature is not None:
            options["temperature"] = temperature
        if self.top_p is not None:
            options["top_p"] = self.top_p
        if timeout is not None:
            options["timeout"] = timeout

        completion = await self._client.chat.completions.create(
            model=model,
            messages=messages,
            **options,
        )
        return _extract_content(completion)

    async def complete(
        self,
        messages: list[dict],
        *,
        temperature: float,
        max_tokens: int,
    ) -> CompletionResult:
        """
        Ask each model in order until one answers.

        Args:
            messages: Chat messages (list of dicts with 'role' and 'content')
            temperature: Sampling temperature
            max_tokens: Completion token limit

        Returns:
            CompletionSuccess with the first model's text, or AllModelsFailed
            carrying the last error when every model failed.
        """
        attempts: list[ModelAttempt] = []
        last_error: Exception | None = None

        for model in self.models:
            logger.info("Trying model %s", model)
            try:
                text = await self._call_model(
                    model,
                    messages,
                    temperature=temperature,
                    max_tokens=max_tokens,
                )
            except MODEL_ERRORS as e:
                last_error = e
                attempts.append(ModelAttempt(model=model, error=_describe_error(e)))
                logger.warning("Model %s failed: %s", model, _describe_error(e))
                continue

            attempts.append(ModelAttempt(model=model))
            logger.info("Model %s answered (%d chars)", model, len(text))
            return CompletionSuccess(text=text, model=model, attempts=attempts)

        logger.error("All %d models failed", len(self.models))
        return AllModelsFailed(last_error=last_error, attempts=attempts)

    async def probe_models(self, timeout: float | None = None) -> list[dict]:
        """
        Ping every model with a one-word prompt.

        Returns:
            One dict per model with 'model', 'ok', 'latency_ms' and 'error'.
        """
        results = []
        probe = [{"role": "user", "content": 'Say "ok" in one word'}]

        for model in self.models:
            start = time.perf_counter()
            try:
                await self._call_model(
                    model, probe, temperature=None, max_tokens=5, timeout=timeout or self.timeout
                )
            except MODEL_ERRORS as e:
                results.append({"model": model, "ok": False, "latency_ms": None, "error": _describe_error(e)})
                continue
            latency_ms = int((time.perf_counter() - start) * 1000)
            results.append({"model": model, "ok": True, "latency_ms": latency_ms, "error": None})

        return results


def build_llm_client(transport: httpx.AsyncBaseTransport | None = None) -> ModelFallbackClient:
    """Create a client from application settings."""
    return ModelFallbackClient(
        settings.llm_models,
        api_key=settings.openrouter_api_key,
        base_url=settings.llm_base_url,
        timeout=settings.llm_timeout_seconds,
        referer=settings.llm_referer,
        app_title=settings.llm_app_title,
        top_p=settings.llm_top_p,
        transport=transport,
    )
