"""Structured study-summary generation from extracted file text."""

import json
import logging
from dataclasses import dataclass

from pydantic import ValidationError

from app.config import get_settings
from app.schemas.files import StudySummary
from app.services.llm_client import AllModelsFailed, ModelFallbackClient
from app.services.response_cache import MISS, ResponseCache, summary_fingerprint

logger = logging.getLogger(__name__)
settings = get_settings()

SUMMARY_SYSTEM_PROMPT = (
    "You are a summarizer. Generate structured summaries with unit-wise topics, "
    "key points, and exam priorities. Return valid JSON only."
)

SUMMARY_FORMAT = (
    '{ "unitWiseTopics": [{ "unit": "string", "topics": ["string"], "importance": "High/Medium/Low" }], '
    '"keyPoints": ["string"], '
    '"examPriority": [{ "topic": "string", "reason": "string", "weightage": "string" }] }'
)

PLACEHOLDER_SUMMARY = {
    "unitWiseTopics": [
        {
            "unit": "Main Topics",
            "topics": ["Content analysis in progress"],
            "importance": "High",
        }
    ],
    "keyPoints": [
        "Summary generation in progress",
        "Please try again for detailed analysis",
    ],
    "examPriority": [
        {
            "topic": "Key Concepts",
            "reason": "Fundamental to understanding",
            "weightage": "High",
        }
    ],
}

_decoder = json.JSONDecoder()


def extract_json_object(text: str) -> dict | None:
    """
    Find a JSON object in model output.

    Tries the whole text first, then the first ``{`` from which a complete
    object can be decoded (covers prose or markdown fences around it).
    """
    try:
        value = json.loads(text)
    except ValueError:
        value = None
    if isinstance(value, dict):
        return value

    start = text.find("{")
    while start != -1:
        try:
            value, _ = _decoder.raw_decode(text, start)
        except ValueError:
            value = None
        if isinstance(value, dict):
            return value
        start = text.find("{", start + 1)
    return None


def parse_summary(text: str) -> StudySummary | None:
    """Parse model output into a StudySummary, or None if no usable object is found."""
    payload = extract_json_object(text)
    if payload is None:
        return None
    try:
        return StudySummary.model_validate(payload)
    except ValidationError as e:
        logger.warning("Summary JSON has unexpected shape: %s", e)
        return None


def placeholder_summary() -> StudySummary:
    return StudySummary.model_validate(PLACEHOLDER_SUMMARY)


@dataclass
class SummaryOutcome:
    """A summary plus whether it is the stand-in placeholder."""

    summary: StudySummary
    placeholder: bool = False


class SummaryService:
    """Generates summaries through the response cache and model fallback client."""

    def __init__(self, llm: ModelFallbackClient, cache: ResponseCache):
        self.llm = llm
        self.cache = cache

    @staticmethod
    def build_messages(content: str) -> list[dict]:
        excerpt = content[: settings.summary_input_max_chars]
        return [
            {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": (
                    "Summarize this content for exam preparation. "
                    f"Return JSON with format: {SUMMARY_FORMAT}\n\nContent: {excerpt}"
                ),
            },
        ]

    async def generate(self, content: str) -> SummaryOutcome:
        """
        Summarize file content.

        Never raises for model problems: if no model answers, or the answer
        holds no usable JSON object, the placeholder summary is returned with
        ``placeholder=True``. Only real summaries are cached.
        """
        fingerprint = summary_fingerprint(content)
        cached = self.cache.lookup(fingerprint)
        if cached is not MISS:
            logger.info("Cache hit for summary")
            return SummaryOutcome(summary=cached.model_copy(deep=True))

        result = await self.llm.complete(
            self.build_messages(content),
            temperature=settings.summary_temperature,
            max_tokens=settings.summary_max_tokens,
        )
        if isinstance(result, AllModelsFailed):
            logger.error("Summary generation failed on all models: %s", result.last_error)
            return SummaryOutcome(summary=placeholder_summary(), placeholder=True)

        summary = parse_summary(result.text)
        if summary is None:
            logger.error("Model %s returned no parseable summary, using placeholder", result.model)
            return SummaryOutcome(summary=placeholder_summary(), placeholder=True)

        self.cache.store(fingerprint, summary)
        return SummaryOutcome(summary=summary.model_copy(deep=True))
