"""
PDF export for chat notes and study summaries.

Content is first turned into a flat list of ``Block``s (heading, bullet,
code line, ...) and then laid out by ReportLab on dark A4 pages. Keeping
the two steps apart lets the block list be checked without parsing PDFs.
"""

import logging
import re
from dataclasses import dataclass
from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

logger = logging.getLogger(__name__)

DEFAULT_NOTES_TITLE = "MentorAI Notes"
AUTHOR = "MentorAI"

PAGE_MARGIN = 50

BACKGROUND = colors.HexColor("#1a1a1a")
ACCENT = colors.HexColor("#818cf8")
TEXT = colors.HexColor("#e5e5e5")
CODE = colors.HexColor("#10b981")
PRIORITY_COLORS = {
    "High": colors.HexColor("#ef4444"),
    "Medium": colors.HexColor("#f59e0b"),
}
PRIORITY_DEFAULT = colors.HexColor("#10b981")

_EMOJI = re.compile(
    "["
    "\U0001F300-\U0001FAFF"  # pictographs, emoticons, transport, supplemental symbols
    "\U00002600-\U000027BF"  # misc symbols, dingbats
    "\U0001F1E6-\U0001F1FF"  # regional indicators
    "\uFE0F\u200D"  # variation selector, zero-width joiner
    "]"
)


@dataclass
class Block:
    """One laid-out line of the document."""

    kind: str  # title | subtitle | heading | subheading | bullet | code | text | label | gap
    text: str = ""
    color: colors.Color | None = None
    size: float = 0.5  # gap height in lines, only for kind == "gap"


def clean_text(text) -> str:
    """Trim and drop emoji, which the built-in PDF fonts cannot draw. Numbers are stringified."""
    if text is None:
        return ""
    return _EMOJI.sub("", str(text)).strip()


def priority_color(level: str | int | float | None) -> colors.Color:
    return PRIORITY_COLORS.get(level or "", PRIORITY_DEFAULT)


def safe_filename(name: str | None, default: str = "notes") -> str:
    """Replace everything except ASCII letters and digits with underscores."""
    return re.sub(r"[^a-zA-Z0-9]", "_", name or default)


# =============================================================================
# CONTENT -> BLOCKS
# =============================================================================


def notes_blocks(content: str | None, title: str | None = None) -> list[Block]:
    """
    Lay out markdown-ish notes.

    ``#`` lines become headings, ``-``/``•`` lines bullets, lines holding a
    code fence are set in monospace, and runs of blank lines collapse to one
    gap.
    """
    blocks = [Block("title", clean_text(title) or DEFAULT_NOTES_TITLE), Block("gap", size=1.5)]

    lines = clean_text(content).split("\n")
    previous_blank = False
    for line in lines:
        stripped = line.strip()
        if not stripped:
            if not previous_blank:
                blocks.append(Block("gap"))
            previous_blank = True
            continue
        previous_blank = False

        if stripped.startswith("#"):
            blocks.append(Block("heading", stripped.replace("#", "").strip()))
        elif stripped.startswith("-") or stripped.startswith("•"):
            blocks.append(Block("bullet", stripped[1:].strip()))
        elif "```" in stripped:
            code = stripped.replace("```", "").strip()
            if code:
                blocks.append(Block("code", code))
        else:
            blocks.append(Block("text", stripped))

    return blocks


def summary_blocks(summary: dict, file_name: str | None) -> list[Block]:
    """Lay out a stored summary (camelCase keys as persisted)."""
    blocks = [
        Block("title", "Study Summary"),
        Block("subtitle", f"File: {file_name or 'Untitled'}"),
        Block("gap", size=1.5),
    ]

    for unit in summary.get("unitWiseTopics") or []:
        blocks.append(Block("heading", clean_text(unit.get("unit"))))
        for topic in unit.get("topics") or []:
            blocks.append(Block("bullet", clean_text(topic)))
        importance = unit.get("importance")
        if importance:
            blocks.append(Block("label", f"Importance: {importance}", priority_color(importance)))
        blocks.append(Block("gap", size=1))

    key_points = summary.get("keyPoints") or []
    if key_points:
        blocks.append(Block("heading", "Key Points"))
        for point in key_points:
            blocks.append(Block("bullet", clean_text(point)))
        blocks.append(Block("gap", size=1))

    priorities = summary.get("examPriority") or []
    if priorities:
        blocks.append(Block("heading", "Exam Priority"))
        for item in priorities:
            blocks.append(Block("subheading", clean_text(item.get("topic"))))
            if item.get("reason"):
                blocks.append(Block("text", clean_text(item["reason"])))
            weightage = item.get("weightage")
            if weightage:
                blocks.append(Block("label", f"Weightage: {weightage}", priority_color(weightage)))
            blocks.append(Block("gap"))

    quick_revision = summary.get("quickRevision")
    if isinstance(quick_revision, list):
        points = [clean_text(p) for p in quick_revision if clean_text(p)]
        if points:
            blocks.append(Block("heading", "Quick Revision"))
            blocks.extend(Block("bullet", p) for p in points)
    elif clean_text(quick_revision):
        blocks.append(Block("heading", "Quick Revision"))
        blocks.append(Block("text", clean_text(quick_revision)))

    return blocks


# =============================================================================
# BLOCKS -> PDF
# =============================================================================


def _styles() -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()["Normal"]

    def style(name: str, **kwargs) -> ParagraphStyle:
        return ParagraphStyle(name=name, parent=base, alignment=TA_LEFT, **kwargs)

    return {
        "title": style("Title", fontName="Helvetica-Bold", fontSize=24, leading=30, textColor=ACCENT),
        "subtitle": style("Subtitle", fontName="Helvetica", fontSize=14, leading=18, textColor=TEXT),
        "heading": style(
            "Heading", fontName="Helvetica-Bold", fontSize=16, leading=20, textColor=ACCENT,
            spaceBefore=6, spaceAfter=3,
        ),
        "subheading": style("Subheading", fontName="Helvetica-Bold", fontSize=12, leading=15, textColor=TEXT, leftIndent=12),
        "bullet": style("Bullet", fontName="Helvetica", fontSize=12, leading=15, textColor=TEXT, leftIndent=12),
        "code": style("Code", fontName="Courier", fontSize=10, leading=13, textColor=CODE),
        "text": style("Body", fontName="Helvetica", fontSize=12, leading=15, textColor=TEXT),
        "label": style("Label", fontName="Helvetica", fontSize=11, leading=14, textColor=TEXT, leftIndent=12),
    }


def _escape(text: str) -> str:
    """Escape characters that ReportLab's paragraph markup treats specially."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _paint_background(canvas, doc) -> None:
    canvas.saveState()
    canvas.setFillColor(BACKGROUND)
    canvas.rect(0, 0, doc.pagesize[0], doc.pagesize[1], stroke=0, fill=1)
    canvas.restoreState()


def render_document(blocks: list[Block], title: str) -> bytes:
    """Render blocks to PDF bytes on dark A4 pages."""
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=PAGE_MARGIN,
        rightMargin=PAGE_MARGIN,
        topMargin=PAGE_MARGIN,
        bottomMargin=PAGE_MARGIN,
        title=title,
        author=AUTHOR,
    )
    styles = _styles()
    story = []

    for block in blocks:
        if block.kind == "gap":
            story.append(Spacer(1, styles["text"].leading * block.size))
            continue
        style = styles[block.kind]
        if block.color is not None:
            style = ParagraphStyle(name=f"{style.name}-colored", parent=style, textColor=block.color)
        text = _escape(block.text)
        if block.kind == "bullet":
            text = f"• {text}"
        story.append(Paragraph(text, style))

    doc.build(story, onFirstPage=_paint_background, onLaterPages=_paint_background)
    logger.debug("Rendered PDF '%s' with %d blocks", title, len(blocks))
    return buffer.getvalue()


def render_notes(content: str | None, title: str | None = None) -> bytes:
    return render_document(notes_blocks(content, title), title or DEFAULT_NOTES_TITLE)


def render_summary(summary: dict, file_name: str | None) -> bytes:
    return render_document(summary_blocks(summary, file_name), f"Study Summary - {file_name or 'Untitled'}")
