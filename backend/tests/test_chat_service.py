"""Tests for chat orchestration."""

from types import SimpleNamespace

from app.db.models import ChatMode, Conversation
from app.services.chat_service import (
    FALLBACK_REPLY,
    SYSTEM_PROMPTS,
    ChatService,
    build_context,
    derive_title,
)


def test_derive_title_truncates_long_messages():
    message = "Explain the difference between processes and threads in operating systems"
    assert derive_title(message) == message[:50] + "..."
    assert derive_title("Short question") == "Short question"
    assert derive_title("x" * 50) == "x" * 50


def test_build_context_lists_each_file():
    files = [
        SimpleNamespace(file_name="unit1.pdf", content="Sorting"),
        SimpleNamespace(file_name="unit2.txt", content="Graphs"),
    ]
    assert build_context(files) == (
        "Based on the uploaded files:\n"
        "File: unit1.pdf\nContent: Sorting\n\n"
        "File: unit2.txt\nContent: Graphs\n\n"
    )
    assert build_context([]) == ""


def test_build_messages_uses_mode_prompt_and_context():
    messages = ChatService.build_messages("What is BFS?", ChatMode.CODING, "CTX")
    assert messages[0] == {"role": "system", "content": SYSTEM_PROMPTS[ChatMode.CODING]}
    assert messages[1]["content"] == "CTX\n\nUser query: What is BFS?"

    plain = ChatService.build_messages("What is BFS?", ChatMode.EXAM)
    assert plain[1]["content"] == "What is BFS?"


async def test_generate_reply_caches_successes(llm_client, response_cache, model_api):
    service = ChatService(llm_client, response_cache)

    first = await service.generate_reply("Define entropy", ChatMode.EXAM)
    second = await service.generate_reply("Define entropy", ChatMode.EXAM)

    assert first == second == model_api.default_reply
    assert len(model_api.calls) == 1


async def test_generate_reply_does_not_cache_fallback(llm_client, response_cache, model_api):
    model_api.fail_all()
    service = ChatService(llm_client, response_cache)

    assert await service.generate_reply("Define entropy", ChatMode.EXAM) == FALLBACK_REPLY
    assert len(response_cache) == 0


async def test_send_message_appends_turns_and_sets_title_once(db, llm_client, response_cache):
    service = ChatService(llm_client, response_cache)

    conversation, _ = await service.send_message(db, "What is a heap?", mode=ChatMode.CODING)
    assert conversation.title == "What is a heap?"
    assert conversation.mode == "coding"
    assert [m.role for m in conversation.messages] == ["user", "assistant"]

    conversation, _ = await service.send_message(db, "And a stack?", conversation=conversation)
    assert conversation.title == "What is a heap?"
    assert [m.position for m in conversation.messages] == [0, 1, 2, 3]
    assert [m.content for m in conversation.messages[::2]] == ["What is a heap?", "And a stack?"]


async def test_send_message_uses_conversation_mode_when_none_given(db, llm_client, response_cache, model_api):
    service = ChatService(llm_client, response_cache)
    conversation = Conversation(mode=ChatMode.SYLLABUS.value, messages=[], file_context=[])
    db.add(conversation)
    await db.commit()

    await service.send_message(db, "Outline unit 3", conversation=conversation)

    system_prompt = model_api.calls[0]["messages"][0]["content"]
    assert system_prompt == SYSTEM_PROMPTS[ChatMode.SYLLABUS]
