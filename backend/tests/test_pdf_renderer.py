"""Tests for PDF layout and rendering."""

from app.services.pdf_renderer import (
    DEFAULT_NOTES_TITLE,
    PRIORITY_COLORS,
    PRIORITY_DEFAULT,
    clean_text,
    notes_blocks,
    render_notes,
    render_summary,
    safe_filename,
    summary_blocks,
)


def kinds(blocks):
    return [(b.kind, b.text) for b in blocks if b.kind != "gap"]


def test_clean_text_strips_emoji():
    assert clean_text("  Study hard \U0001F4DA✅ ") == "Study hard"
    assert clean_text(None) == ""


def test_safe_filename():
    assert safe_filename("My notes (v2).md") == "My_notes__v2__md"
    assert safe_filename(None) == "notes"
    assert safe_filename("", default="file") == "file"


def test_notes_blocks():
    content = "# Graphs\n\n\n\n- BFS\n• DFS\n```python\nvisit(node)\n```\nPlain line"

    blocks = notes_blocks(content, "Week 3")

    assert kinds(blocks) == [
        ("title", "Week 3"),
        ("heading", "Graphs"),
        ("bullet", "BFS"),
        ("bullet", "DFS"),
        ("code", "python"),
        ("text", "visit(node)"),
        ("text", "Plain line"),
    ]
    # title gap plus a single gap for the run of blank lines
    assert [b.kind for b in blocks].count("gap") == 2


def test_notes_blocks_default_title():
    assert notes_blocks("", None)[0].text == DEFAULT_NOTES_TITLE


def test_summary_blocks():
    summary = {
        "unitWiseTopics": [{"unit": "Unit 1", "topics": ["Arrays"], "importance": "High"}],
        "keyPoints": ["Indexing is O(1)"],
        "examPriority": [{"topic": "Hashing", "reason": "Asked every year", "weightage": "Low"}],
        "quickRevision": "Revise collisions",
    }

    blocks = summary_blocks(summary, "ds.pdf")

    assert kinds(blocks) == [
        ("title", "Study Summary"),
        ("subtitle", "File: ds.pdf"),
        ("heading", "Unit 1"),
        ("bullet", "Arrays"),
        ("label", "Importance: High"),
        ("heading", "Key Points"),
        ("bullet", "Indexing is O(1)"),
        ("heading", "Exam Priority"),
        ("subheading", "Hashing"),
        ("text", "Asked every year"),
        ("label", "Weightage: Low"),
        ("heading", "Quick Revision"),
        ("text", "Revise collisions"),
    ]
    labels = [b for b in blocks if b.kind == "label"]
    assert labels[0].color == PRIORITY_COLORS["High"]
    assert labels[1].color == PRIORITY_DEFAULT


def test_summary_blocks_skip_empty_sections():
    blocks = summary_blocks({}, None)
    assert kinds(blocks) == [("title", "Study Summary"), ("subtitle", "File: Untitled")]


def test_render_outputs_pdf():
    assert render_notes("# Title\nSome <b>markup</b> & text").startswith(b"%PDF")
    assert render_summary({"keyPoints": ["One"]}, "a.txt").startswith(b"%PDF")


def test_summary_blocks_accept_numbers_and_revision_list():
    summary = {
        "unitWiseTopics": [{"unit": 4, "topics": [], "importance": 30}],
        "quickRevision": ["LIFO", "", "FIFO"],
    }

    blocks = summary_blocks(summary, "q.txt")

    assert kinds(blocks)[2:] == [
        ("heading", "4"),
        ("label", "Importance: 30"),
        ("heading", "Quick Revision"),
        ("bullet", "LIFO"),
        ("bullet", "FIFO"),
    ]
    assert blocks[-1].kind == "bullet"
