"""Services for external integrations."""

from app.config import get_settings
from app.services.chat_service import ChatService
from app.services.llm_client import build_llm_client
from app.services.response_cache import build_cache
from app.services.summary_service import SummaryService
from app.services.text_extraction import text_extractor

_settings = get_settings()

# Shared by chat and summary generation; one cache per process
response_cache = build_cache(
    _settings.response_cache_ttl_seconds,
    _settings.response_cache_max_entries,
)
llm_client = build_llm_client()
chat_service = ChatService(llm_client, response_cache)
summary_service = SummaryService(llm_client, response_cache)

__all__ = [
    "response_cache",
    "llm_client",
    "chat_service",
    "summary_service",
    "text_extractor",
]
