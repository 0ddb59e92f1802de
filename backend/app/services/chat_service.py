"""Chat orchestration: context building, cached model replies, persistence."""

import asyncio
import logging
import weakref
from collections.abc import Iterable
from typing import Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.db.models import ChatMode, ChatRole, Conversation
from app.services.llm_client import AllModelsFailed, ModelFallbackClient
from app.services.response_cache import MISS, ResponseCache, chat_fingerprint

logger = logging.getLogger(__name__)
settings = get_settings()

SYSTEM_PROMPTS = {
    ChatMode.EXAM: """You are MentorAI, an exam-oriented academic mentor.
Provide concise, structured answers focused on:
- Key definitions and concepts
- Important points for exams
- Clear examples
- Quick revision notes
Keep answers crisp and exam-relevant.""",
    ChatMode.CODING: """You are MentorAI, a coding mentor specializing in programming and DSA.
Provide step-by-step explanations:
- Break down the logic
- Show code with proper syntax
- Explain time and space complexity
- Include edge cases and optimizations
- Use examples to illustrate concepts""",
    ChatMode.SYLLABUS: """You are MentorAI, a syllabus summarizer.
Generate structured summaries:
- Unit-wise breakdown
- Important topics for each unit
- Key points to focus on
- Study priority (High/Medium/Low)
- Quick revision notes for exams""",
}

FALLBACK_REPLY = (
    "I'm having trouble connecting to the AI service right now. "
    "Please try again in a moment. If the issue persists, check your OpenRouter API key."
)

TITLE_MAX_CHARS = 50


class FileText(Protocol):
    file_name: str
    content: str


def derive_title(message: str) -> str:
    """First 50 characters of the opening message, with an ellipsis if cut."""
    if len(message) > TITLE_MAX_CHARS:
        return message[:TITLE_MAX_CHARS] + "..."
    return message


def build_context(file_context: Iterable[FileText]) -> str:
    """Concatenate file names and contents into a preamble for the prompt."""
    files = list(file_context)
    if not files:
        return ""
    parts = ["Based on the uploaded files:\n"]
    for item in files:
        parts.append(f"File: {item.file_name}\nContent: {item.content}\n\n")
    return "".join(parts)


class ChatService:
    """Answers user turns through the response cache and the model fallback client."""

    def __init__(self, llm: ModelFallbackClient, cache: ResponseCache):
        self.llm = llm
        self.cache = cache
        # One lock per conversation being written; entries vanish once unused
        self._locks: weakref.WeakValueDictionary[UUID, asyncio.Lock] = weakref.WeakValueDictionary()

    def _lock_for(self, conversation_id: UUID) -> asyncio.Lock:
        lock = self._locks.get(conversation_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[conversation_id] = lock
        return lock

    @staticmethod
    async def _reload_turns(db: AsyncSession, conversation: Conversation) -> None:
        """Lock the conversation row and reload its turns so new positions follow the latest one."""
        await db.execute(
            select(Conversation.id).where(Conversation.id == conversation.id).with_for_update()
        )
        await db.refresh(conversation, ["messages"])

    @staticmethod
    def build_messages(message: str, mode: ChatMode, context: str = "") -> list[dict]:
        user_content = f"{context}\n\nUser query: {message}" if context else message
        return [
            {"role": "system", "content": SYSTEM_PROMPTS[mode]},
            {"role": "user", "content": user_content},
        ]

    async def generate_reply(self, message: str, mode: ChatMode, context: str = "") -> str:
        """
        Get a reply for one user turn.

        Cached replies are reused within the cache TTL. When every model
        fails the fixed apology text is returned and nothing is cached.
        """
        fingerprint = chat_fingerprint(mode.value, message, context)
        cached = self.cache.lookup(fingerprint)
        if cached is not MISS:
            logger.info("Cache hit for %s reply", mode.value)
            return cached

        result = await self.llm.complete(
            self.build_messages(message, mode, context),
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
        )
        if isinstance(result, AllModelsFailed):
            logger.error(
                "No model could answer (%d attempts), using fallback reply: %s",
                len(result.attempts),
                result.last_error,
            )
            return FALLBACK_REPLY

        self.cache.store(fingerprint, result.text)
        return result.text

    async def send_message(
        self,
        db: AsyncSession,
        message: str,
        *,
        conversation: Conversation | None = None,
        mode: ChatMode | None = None,
        file_context: Iterable[FileText] = (),
    ) -> tuple[Conversation, str]:
        """
        Append a user turn and the assistant reply, then persist.

        Args:
            db: Database session
            message: User message text
            conversation: Existing conversation, or None to start a new one
            mode: Requested mode; falls back to the conversation's mode
            file_context: File texts to prepend to the prompt

        Returns:
            The saved conversation and the reply text
        """
        if conversation is None:
            conversation = Conversation(mode=(mode or ChatMode.EXAM).value, messages=[], file_context=[])
            db.add(conversation)
            reply = await self._record_exchange(db, conversation, message, mode or ChatMode.EXAM, file_context)
            return conversation, reply

        # Concurrent sends to one conversation append in turn rather than
        # colliding on the same positions
        async with self._lock_for(conversation.id):
            await self._reload_turns(db, conversation)
            reply = await self._record_exchange(
                db, conversation, message, mode or ChatMode(conversation.mode), file_context
            )
        return conversation, reply

    async def _record_exchange(
        self,
        db: AsyncSession,
        conversation: Conversation,
        message: str,
        mode: ChatMode,
        file_context: Iterable[FileText],
    ) -> str:
        conversation.append_message(ChatRole.USER, message)
        reply = await self.generate_reply(message, mode, build_context(file_context))
        conversation.append_message(ChatRole.ASSISTANT, reply)

        # Title is fixed once, when the first exchange completes
        if len(conversation.messages) == 2:
            conversation.title = derive_title(message)

        conversation.touch()
        await db.commit()
        return reply
