"""Tests for summary parsing and generation."""

import json

from app.schemas.files import StudySummary
from app.services.summary_service import (
    PLACEHOLDER_SUMMARY,
    SummaryService,
    extract_json_object,
    parse_summary,
)

SUMMARY_PAYLOAD = {
    "unitWiseTopics": [
        {"unit": "Unit 1: Sorting", "topics": ["Merge sort", "Quick sort"], "importance": "High"},
        {"unit": "Unit 2: Graphs", "topics": ["BFS", "DFS"], "importance": "Medium"},
    ],
    "keyPoints": ["Divide and conquer", "Stable vs unstable sorts"],
    "examPriority": [
        {"topic": "Quick sort", "reason": "Asked every year", "weightage": "High"},
    ],
}


def dump(summary: StudySummary) -> dict:
    return summary.model_dump(by_alias=True, exclude_none=True)


def test_valid_payload_round_trips():
    summary = parse_summary(json.dumps(SUMMARY_PAYLOAD))
    assert summary is not None
    assert dump(summary) == SUMMARY_PAYLOAD


def test_payload_wrapped_in_prose_is_extracted():
    text = f"Sure! Here is your summary:\n```json\n{json.dumps(SUMMARY_PAYLOAD, indent=2)}\n```\nGood luck!"
    summary = parse_summary(text)
    assert summary is not None
    assert dump(summary) == SUMMARY_PAYLOAD


def test_stray_brace_before_payload_is_skipped():
    text = "Use {braces} wisely. " + json.dumps(SUMMARY_PAYLOAD)
    assert extract_json_object(text) == SUMMARY_PAYLOAD


def test_unknown_keys_and_numbers_are_kept():
    payload = {
        "unitWiseTopics": [{"unit": "Unit 3", "topics": ["Heaps"], "importance": "High", "hours": 3}],
        "keyPoints": ["Heapify is O(n)"],
        "examPriority": [{"topic": "Heaps", "reason": "Frequent", "weightage": 30}],
        "studyTips": ["sleep"],
    }

    summary = parse_summary(json.dumps(payload))

    assert summary is not None
    assert dump(summary) == payload


def test_numeric_unit_and_list_revision_are_accepted():
    payload = {
        "unitWiseTopics": [{"unit": 1, "topics": ["Stacks", 2]}],
        "keyPoints": [],
        "examPriority": [],
        "quickRevision": ["LIFO", "FIFO"],
    }

    summary = parse_summary(json.dumps(payload))

    assert summary is not None
    assert dump(summary) == payload


def test_no_json_anywhere_yields_none():
    assert parse_summary("I could not summarize this content.") is None
    assert parse_summary("{ not json at all }") is None


def test_top_level_array_is_not_a_summary():
    assert extract_json_object("[1, 2, 3]") is None


def test_wrong_shape_yields_none():
    assert parse_summary(json.dumps({"unitWiseTopics": "everything"})) is None


def test_missing_sections_default_to_empty():
    summary = parse_summary('{"keyPoints": ["only this"]}')
    assert summary.key_points == ["only this"]
    assert summary.unit_wise_topics == []
    assert summary.exam_priority == []


async def test_generate_returns_model_summary(llm_client, response_cache, model_api):
    model_api.default_reply = json.dumps(SUMMARY_PAYLOAD)
    service = SummaryService(llm_client, response_cache)

    outcome = await service.generate("Sorting algorithms and graph traversal " * 10)

    assert outcome.placeholder is False
    assert dump(outcome.summary) == SUMMARY_PAYLOAD
    assert model_api.calls[0]["temperature"] == 0.3
    assert model_api.calls[0]["max_tokens"] == 1000


async def test_generate_truncates_content_in_prompt(llm_client, response_cache, model_api):
    model_api.default_reply = json.dumps(SUMMARY_PAYLOAD)
    service = SummaryService(llm_client, response_cache)

    await service.generate("a" * 5000 + "TAIL")

    prompt = model_api.calls[0]["messages"][1]["content"]
    assert "a" * 3000 in prompt
    assert "a" * 3001 not in prompt
    assert "TAIL" not in prompt


async def test_unparseable_output_gives_flagged_placeholder(llm_client, response_cache, model_api):
    model_api.default_reply = "Sorry, I cannot help with that."
    service = SummaryService(llm_client, response_cache)

    outcome = await service.generate("some content")

    assert outcome.placeholder is True
    assert dump(outcome.summary) == PLACEHOLDER_SUMMARY
    assert len(response_cache) == 0


async def test_all_models_failing_gives_flagged_placeholder(llm_client, response_cache, model_api):
    model_api.fail_all()
    service = SummaryService(llm_client, response_cache)

    outcome = await service.generate("some content")

    assert outcome.placeholder is True
    assert dump(outcome.summary) == PLACEHOLDER_SUMMARY


async def test_repeat_summary_served_from_cache(llm_client, response_cache, model_api):
    model_api.default_reply = json.dumps(SUMMARY_PAYLOAD)
    service = SummaryService(llm_client, response_cache)

    first = await service.generate("chapter one")
    second = await service.generate("chapter one")

    assert len(model_api.calls) == 1
    assert dump(first.summary) == dump(second.summary)
