"""Assemble the stored sections into the paginated study-plan PDF.

One call to :func:`assemble_study_plan` owns a fresh :class:`RenderContext`
for its whole run, so concurrent exports never share counters or pages.
Content problems never abort the pass: an absent section becomes
``NO_CONTENT`` and an unreadable literature-review payload becomes an
inline error paragraph.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from pydantic import ValidationError
from reportlab.lib import colors

from .config import APP_CITATION, APP_TITLE
from .layout import (
    CONTENT_WIDTH,
    MARGIN,
    PAGE_HEIGHT,
    PAGE_WIDTH,
    STYLES,
    RenderContext,
    TocEntry,
    check_page_break,
    draw_string,
    draw_table,
    flow_lines,
    render_heading,
    render_toc,
    wrap,
    write_markdown,
)
from .models import LiteratureReview
from .sections import EXPORT_ORDER, NO_CONTENT, SectionStore, section_title
from .tables import parse_markdown_table

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "My Research Study"
TOC_PAGE = 2
LIT_REVIEW_ERROR = "Error parsing literature review data."
ARTICLE_HEADERS = ["Title", "Author", "Year", "Design", "Summary"]
ARTICLE_COL_WIDTHS = [CONTENT_WIDTH * w for w in (0.22, 0.14, 0.08, 0.14, 0.42)]
FOOTER_GREY = colors.Color(150 / 255, 150 / 255, 150 / 255)


@dataclass
class ExportResult:
    filename: str
    pdf: bytes
    page_count: int
    toc: List[TocEntry]
    references: List[str]


def sanitize_title(study_title: str) -> str:
    title = re.sub(r"\s+", "_", study_title.strip())
    return re.sub(r'[\\/:*?"<>|]', "_", title)


def export_filename(study_title: str, extension: str = "pdf", suffix: str = "study_plan") -> str:
    return f"{sanitize_title(study_title or DEFAULT_TITLE)}_{suffix}.{extension}"


def _long_date(d: date) -> str:
    return f"{d:%B} {d.day}, {d.year}"


# =====================
# Pages
# =====================
def render_title_page(ctx: RenderContext, title: str, today: date) -> None:
    style = STYLES["title"]
    center = PAGE_WIDTH / 2
    y = PAGE_HEIGHT / 4
    lines = wrap(title, style, CONTENT_WIDTH * 0.8)
    for i, line in enumerate(lines):
        draw_string(ctx, line, center, y + i * style.leading, style, align="center")
    y += len(lines) * style.leading + 40

    rule_y = PAGE_HEIGHT - y

    def rule(c):
        c.setLineWidth(0.5)
        c.setStrokeColor(colors.Color(180 / 255, 180 / 255, 180 / 255))
        c.line(MARGIN, rule_y, PAGE_WIDTH - MARGIN, rule_y)

    ctx.surface.draw(rule)
    y += 40

    subtitle = STYLES["subtitle"]
    draw_string(ctx, "A Research Plan", center, y, subtitle, align="center")
    y += subtitle.leading
    small = subtitle._replace(size=12)
    draw_string(ctx, f"Generated by {APP_TITLE}", center, y, small, align="center")
    draw_string(ctx, _long_date(today), center, PAGE_HEIGHT - MARGIN * 1.5, small, align="center")


def render_literature_review(ctx: RenderContext, content: str) -> None:
    try:
        review = LiteratureReview.model_validate_json(content)
    except (ValidationError, ValueError):
        logger.warning("Literature review payload could not be parsed; writing error paragraph")
        write_markdown(ctx, LIT_REVIEW_ERROR)
        return

    if review.keyConcepts:
        check_page_break(ctx, STYLES["h2"].leading)
        render_heading(ctx, 2, "Key Concepts")
        for concept in review.keyConcepts:
            write_markdown(ctx, f"### {concept.concept}\n{concept.note}")
            ctx.y += 4

    check_page_break(ctx, 20)
    render_heading(ctx, 2, "Article Summaries")
    ctx.references.extend(a.citation for a in review.articles)
    rows = [[a.title, a.author, a.year, a.studyDesign, a.summary] for a in review.articles]
    draw_table(ctx, ARTICLE_HEADERS, rows, font_size=8, padding=2, col_widths=ARTICLE_COL_WIDTHS)


def render_analysis(ctx: RenderContext, content: str) -> None:
    parsed = parse_markdown_table(content) if "|" in content else None
    if parsed:
        headers, rows = parsed
        draw_table(ctx, headers, rows, font_size=10)
    else:
        write_markdown(ctx, content)


def render_section(ctx: RenderContext, key: str, content: Optional[str]) -> None:
    ctx.new_page()
    render_heading(ctx, 1, section_title(key))

    if not content:
        write_markdown(ctx, NO_CONTENT)
    elif key == "LiteratureReview":
        render_literature_review(ctx, content)
    elif key == "Analysis":
        render_analysis(ctx, content)
    else:
        write_markdown(ctx, content)


def render_references(ctx: RenderContext) -> None:
    ctx.references.append(APP_CITATION)
    ctx.new_page()
    render_heading(ctx, 1, "References")
    style = STYLES["reference"]
    for index, ref in enumerate(ctx.references):
        lines = wrap(f"{index + 1}. {ref}", style, CONTENT_WIDTH)
        check_page_break(ctx, len(lines) * style.leading)
        flow_lines(ctx, lines, style, MARGIN, CONTENT_WIDTH)


def draw_footer(c, page_number: int) -> None:
    if page_number == 1:
        return
    c.setFont("Helvetica", 8)
    c.setFillColor(FOOTER_GREY)
    c.drawString(MARGIN, 30, APP_TITLE)
    c.drawRightString(PAGE_WIDTH - MARGIN, 30, f"Page {page_number}")


# =====================
# Export pass
# =====================
def assemble_study_plan(study_title: str, store: SectionStore, today: Optional[date] = None) -> RenderContext:
    """Lay out the full plan and return the populated context (nothing serialized yet)."""
    ctx = RenderContext()
    render_title_page(ctx, study_title or DEFAULT_TITLE, today or date.today())
    ctx.new_page()  # reserved for the table of contents

    for key in EXPORT_ORDER:
        render_section(ctx, key, store.get(study_title, key))

    render_references(ctx)
    render_toc(ctx, TOC_PAGE)
    return ctx


def export_study_plan(study_title: str, store: SectionStore, today: Optional[date] = None) -> ExportResult:
    logger.info("Exporting study plan for %r", study_title or DEFAULT_TITLE)
    ctx = assemble_study_plan(study_title, store, today)
    pdf = ctx.surface.save(title=study_title or DEFAULT_TITLE, footer=draw_footer)
    logger.info("Export finished: %d pages, %d contents entries", ctx.surface.page_count, len(ctx.toc))
    return ExportResult(
        filename=export_filename(study_title),
        pdf=pdf,
        page_count=ctx.surface.page_count,
        toc=ctx.toc,
        references=ctx.references,
    )
