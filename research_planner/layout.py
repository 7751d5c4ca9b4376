"""Page layout for the exported study plan.

Everything is laid out top-down: ``y`` is the distance from the top edge
of the page to the baseline of the next line, which is how the page-break
rule (``y + height >= page height - margin``) reads most naturally.
ReportLab's canvas is bottom-up and strictly sequential, so drawing is
recorded per page as a list of operations and only replayed onto a real
canvas in :meth:`PageSurface.save`. That is what lets the table of
contents be written onto page 2 after the body has been laid out.
"""
from __future__ import annotations

import io
import re
from dataclasses import dataclass, field
from typing import Callable, List, NamedTuple, Optional, Sequence, Tuple
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas as rl_canvas
from reportlab.platypus import Paragraph, Table, TableStyle

# =====================
# Page geometry & styles
# =====================
PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 72  # 1 inch
CONTENT_WIDTH = PAGE_WIDTH - MARGIN * 2
BOTTOM_LIMIT = PAGE_HEIGHT - MARGIN

LIST_INDENT = 20
LINE_GAP = 4
TOC_INDENT = 20
TOC_LINE_HEIGHT = 20
HEADER_FILL = colors.Color(7 / 255, 136 / 255, 135 / 255)
LINK_COLOR = colors.Color(0, 0, 1)
MUTED = colors.Color(150 / 255, 150 / 255, 150 / 255)


class TextStyle(NamedTuple):
    font: str
    size: float
    line_height: float

    @property
    def leading(self) -> float:
        return self.size * self.line_height


STYLES = {
    "title": TextStyle("Helvetica-Bold", 24, 1.2),
    "subtitle": TextStyle("Helvetica", 14, 1.4),
    "h1": TextStyle("Helvetica-Bold", 16, 1.5),
    "h2": TextStyle("Helvetica-Bold", 13, 1.5),
    "h3": TextStyle("Helvetica-Bold", 12, 1.5),
    "body": TextStyle("Helvetica", 12, 1.5),
    "bold_body": TextStyle("Helvetica-Bold", 12, 1.5),
    "reference": TextStyle("Helvetica", 10, 1.5),
    "toc": TextStyle("Helvetica", 12, 1.5),
}
HEADING_STYLES = {1: STYLES["h1"], 2: STYLES["h2"], 3: STYLES["h3"]}


# =====================
# Drawing surface
# =====================
DrawOp = Callable[[rl_canvas.Canvas], None]


@dataclass
class Page:
    ops: List[DrawOp] = field(default_factory=list)
    # (top offset, text) of every string drawn, kept for inspection
    texts: List[Tuple[float, str]] = field(default_factory=list)


class PageSurface:
    """Ordered pages of recorded drawing operations."""

    def __init__(self):
        self.pages: List[Page] = [Page()]
        self.current = 1

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def add_page(self) -> int:
        self.pages.append(Page())
        self.current = len(self.pages)
        return self.current

    def set_page(self, number: int) -> None:
        if not 1 <= number <= len(self.pages):
            raise IndexError(f"No page {number} (document has {len(self.pages)})")
        self.current = number

    def insert_pages(self, after: int, count: int) -> None:
        for _ in range(count):
            self.pages.insert(after, Page())
        if self.current > after:
            self.current += count

    def draw(self, op: DrawOp, y: Optional[float] = None, text: Optional[str] = None) -> None:
        page = self.pages[self.current - 1]
        page.ops.append(op)
        if text is not None:
            page.texts.append((y, text))

    def text_on(self, number: int) -> List[str]:
        return [t for _, t in self.pages[number - 1].texts]

    def save(self, title: str = "", footer: Optional[Callable[[rl_canvas.Canvas, int], None]] = None) -> bytes:
        buf = io.BytesIO()
        c = rl_canvas.Canvas(buf, pagesize=A4)
        if title:
            c.setTitle(title)
        for number, page in enumerate(self.pages, start=1):
            for op in page.ops:
                op(c)
            if footer:
                footer(c, number)
            c.showPage()
        c.save()
        return buf.getvalue()


def _pdf_y(y: float) -> float:
    return PAGE_HEIGHT - y


# =====================
# Render state
# =====================
class HeadingCounter:
    """chapter.section.subsection numbering."""

    def __init__(self):
        self.levels = [0, 0, 0]

    def next(self, level: int) -> str:
        """Advance ``level`` (1-3), zero the levels below it, return the number."""
        self.levels[level - 1] += 1
        for i in range(level, 3):
            self.levels[i] = 0
        if level == 1:
            return f"{self.levels[0]}."
        return ".".join(str(n) for n in self.levels[:level])

    def label(self, level: int, text: str) -> str:
        return f"{self.next(level)} {text}"


@dataclass
class TocEntry:
    title: str
    page: int
    level: int
    y: float
    # named destination the contents line links to
    anchor: str = ""


@dataclass
class RenderContext:
    """Mutable state owned by one export pass."""

    surface: PageSurface = field(default_factory=PageSurface)
    y: float = MARGIN
    counters: HeadingCounter = field(default_factory=HeadingCounter)
    toc: List[TocEntry] = field(default_factory=list)
    references: List[str] = field(default_factory=list)

    @property
    def page(self) -> int:
        return self.surface.current

    def new_page(self) -> None:
        self.surface.add_page()
        self.y = MARGIN


def check_page_break(ctx: RenderContext, required: float) -> float:
    if ctx.y + required >= BOTTOM_LIMIT:
        ctx.new_page()
    return ctx.y


# =====================
# Primitive drawing
# =====================
def draw_string(ctx: RenderContext, text: str, x: float, y: float, style: TextStyle,
                color=colors.black, justify_width: Optional[float] = None, align: str = "left") -> None:
    word_space = 0.0
    gaps = text.count(" ")
    if justify_width and gaps:
        word_space = (justify_width - stringWidth(text, style.font, style.size)) / gaps

    def op(c, text=text, x=x, y=_pdf_y(y)):
        c.setFillColor(color)
        c.setFont(style.font, style.size)
        if align == "center":
            c.drawCentredString(x, y, text)
        elif align == "right":
            c.drawRightString(x, y, text)
        elif word_space > 0:
            t = c.beginText(x, y)
            t.setFont(style.font, style.size)
            t.setWordSpace(word_space)
            t.textOut(text)
            c.drawText(t)
        else:
            c.drawString(x, y, text)

    ctx.surface.draw(op, y, text)


def flow_lines(ctx: RenderContext, lines: Sequence[str], style: TextStyle, x: float,
               width: float, justify: bool = False) -> None:
    """Draw pre-wrapped lines from the cursor down.

    Callers run the page-break check for the whole block first; the per-line
    check only fires for blocks taller than a page.
    """
    for i, line in enumerate(lines):
        if i and ctx.y + style.leading >= BOTTOM_LIMIT:
            ctx.new_page()
        last = i == len(lines) - 1
        draw_string(ctx, line, x, ctx.y, style, justify_width=width if justify and not last else None)
        ctx.y += style.leading


def wrap(text: str, style: TextStyle, width: float) -> List[str]:
    # empty text still occupies one line
    return simpleSplit(text, style.font, style.size, width) or [""]


# =====================
# Markdown lines
# =====================
H1, H2, H3, BOLD, BULLET, NUMBERED, BLANK, BODY = (
    "h1", "h2", "h3", "bold", "bullet", "numbered", "blank", "body",
)

BOLD_LABEL_RE = re.compile(r"^\s*\*\*.+\*\*\s*:\s*$")
BOLD_LINE_RE = re.compile(r"^\s*\*\*[^*]+?\*\*\s*$")
BULLET_RE = re.compile(r"^[*-]\s")
NUMBERED_RE = re.compile(r"^\d+\.\s")


class Line(NamedTuple):
    kind: str
    text: str
    marker: str = ""


def classify_line(line: str) -> Line:
    """Classify one line of restricted markdown, independent of its neighbours."""
    if line.startswith("### "):
        return Line(H3, line[4:])
    if line.startswith("## "):
        return Line(H2, line[3:])
    if line.startswith("# "):
        return Line(H1, line[2:])
    if BOLD_LABEL_RE.match(line) or BOLD_LINE_RE.match(line):
        return Line(BOLD, line.replace("**", "").strip())
    if BULLET_RE.match(line):
        return Line(BULLET, line[2:], "•")
    if NUMBERED_RE.match(line):
        number, _, rest = line.partition(" ")
        return Line(NUMBERED, rest, number)
    if not line.strip():
        return Line(BLANK, "")
    return Line(BODY, line)


def render_heading(ctx: RenderContext, level: int, text: str) -> float:
    """Number ``text`` at ``level``, record a TOC entry and draw it."""
    label = ctx.counters.label(level, text)
    style = HEADING_STYLES[level]
    lines = wrap(label, style, CONTENT_WIDTH)
    check_page_break(ctx, len(lines) * style.leading)
    entry = TocEntry(label, ctx.page, level, ctx.y, anchor=f"toc-{len(ctx.toc) + 1}")
    ctx.toc.append(entry)
    anchor, top = entry.anchor, _pdf_y(ctx.y) + style.size
    ctx.surface.draw(lambda c: c.bookmarkHorizontal(anchor, 0, top))
    flow_lines(ctx, lines, style, MARGIN, CONTENT_WIDTH)
    return ctx.y


def render_paragraph(ctx: RenderContext, text: str, style: TextStyle = STYLES["body"],
                     justify: bool = True) -> float:
    lines = wrap(text, style, CONTENT_WIDTH)
    check_page_break(ctx, len(lines) * style.leading)
    flow_lines(ctx, lines, style, MARGIN, CONTENT_WIDTH, justify=justify)
    return ctx.y


def render_list_item(ctx: RenderContext, marker: str, text: str) -> float:
    style = STYLES["body"]
    width = CONTENT_WIDTH - LIST_INDENT
    lines = wrap(text, style, width)
    check_page_break(ctx, len(lines) * style.leading)
    draw_string(ctx, marker, MARGIN, ctx.y, style)
    flow_lines(ctx, lines, style, MARGIN + LIST_INDENT, width, justify=True)
    return ctx.y


def render_line(ctx: RenderContext, line: str) -> float:
    """Render a single markdown line at the cursor and return the new offset."""
    kind, text, marker = classify_line(line)
    if kind == H1:
        return render_heading(ctx, 1, text)
    if kind == H2:
        return render_heading(ctx, 2, text)
    if kind == H3:
        return render_heading(ctx, 3, text)
    if kind == BOLD:
        return render_paragraph(ctx, text, STYLES["bold_body"])
    if kind in (BULLET, NUMBERED):
        return render_list_item(ctx, marker, text)
    if kind == BLANK:
        ctx.y += STYLES["body"].size / 2
        return ctx.y
    return render_paragraph(ctx, text)


def write_markdown(ctx: RenderContext, markdown: str) -> float:
    for line in markdown.strip().split("\n"):
        ctx.y += LINE_GAP
        render_line(ctx, line.rstrip("\r"))
    return ctx.y


# =====================
# Tables
# =====================
def _cell_styles(font_size: float) -> Tuple[ParagraphStyle, ParagraphStyle]:
    body = ParagraphStyle("cell", fontName="Helvetica", fontSize=font_size, leading=font_size * 1.2)
    head = ParagraphStyle("cell-head", parent=body, fontName="Helvetica-Bold", textColor=colors.white)
    return body, head


def build_table(headers: Sequence[str], rows: Sequence[Sequence[str]], font_size: float = 10,
                padding: float = 4, col_widths: Optional[Sequence[float]] = None) -> Table:
    body, head = _cell_styles(font_size)
    data = [[Paragraph(escape(str(h)), head) for h in headers]]
    data += [[Paragraph(escape(str(cell)), body) for cell in row] for row in rows]
    if col_widths is None:
        col_widths = [CONTENT_WIDTH / len(headers)] * len(headers)
    table = Table(data, colWidths=list(col_widths), repeatRows=1)
    table.setStyle(TableStyle([
        ("GRID", (0, 0), (-1, -1), 0.5, colors.Color(0.78, 0.78, 0.78)),
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_FILL),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("LEFTPADDING", (0, 0), (-1, -1), padding),
        ("RIGHTPADDING", (0, 0), (-1, -1), padding),
        ("TOPPADDING", (0, 0), (-1, -1), padding),
        ("BOTTOMPADDING", (0, 0), (-1, -1), padding),
    ]))
    return table


def _place(ctx: RenderContext, part: Table, height: float) -> None:
    x, bottom = MARGIN, _pdf_y(ctx.y + height)
    ctx.surface.draw(lambda c: part.drawOn(c, x, bottom))
    ctx.y += height


def draw_table(ctx: RenderContext, headers: Sequence[str], rows: Sequence[Sequence[str]],
               font_size: float = 10, padding: float = 4,
               col_widths: Optional[Sequence[float]] = None) -> float:
    """Draw a grid table at the cursor, splitting it across pages as needed.

    Returns the offset just below the last row.
    """
    pending: Optional[Table] = build_table(headers, rows, font_size, padding, col_widths)
    for cell_row in [list(headers)] + [list(map(str, r)) for r in rows]:
        ctx.surface.pages[ctx.page - 1].texts.append((ctx.y, " | ".join(cell_row)))
    while pending is not None:
        avail = BOTTOM_LIMIT - ctx.y
        _, height = pending.wrap(CONTENT_WIDTH, avail)
        if height <= avail:
            _place(ctx, pending, height)
            break
        parts = pending.split(CONTENT_WIDTH, avail)
        if len(parts) < 2:
            if ctx.y <= MARGIN:
                # a single row taller than a page; let it run off rather than loop
                _place(ctx, pending, height)
                ctx.y = min(ctx.y, BOTTOM_LIMIT)
                break
            ctx.new_page()
            continue
        first, rest = parts[0], parts[1]
        _, first_height = first.wrap(CONTENT_WIDTH, avail)
        _place(ctx, first, first_height)
        ctx.new_page()
        pending = rest
    return ctx.y


# =====================
# Table of contents
# =====================
def toc_pages_needed(entry_count: int) -> int:
    y, pages = MARGIN + 40, 1
    for _ in range(entry_count):
        if y > BOTTOM_LIMIT:
            pages += 1
            y = MARGIN
        y += TOC_LINE_HEIGHT
    return pages


def render_toc(ctx: RenderContext, toc_page: int = 2) -> int:
    """Write the contents list starting on the reserved ``toc_page``.

    Extra pages are inserted right after it when the list overflows, and
    every entry's page number is shifted to match. Returns the number of
    TOC pages used.
    """
    pages = toc_pages_needed(len(ctx.toc))
    if pages > 1:
        ctx.surface.insert_pages(toc_page, pages - 1)
        for entry in ctx.toc:
            if entry.page > toc_page:
                entry.page += pages - 1

    resume = ctx.surface.current
    ctx.surface.set_page(toc_page)
    y = MARGIN
    draw_string(ctx, "Contents", MARGIN, y, STYLES["h1"])
    y += 40

    style = STYLES["toc"]
    dot_width = stringWidth(".", style.font, style.size)
    for entry in ctx.toc:
        if y > BOTTOM_LIMIT:
            ctx.surface.set_page(ctx.surface.current + 1)
            y = MARGIN
        indent = TOC_INDENT * (entry.level - 1)
        x = MARGIN + indent
        number = str(entry.page)
        title_width = stringWidth(entry.title, style.font, style.size)
        available = CONTENT_WIDTH - indent - stringWidth(number, style.font, style.size) - 5

        draw_string(ctx, entry.title, x, y, style, color=LINK_COLOR)
        rect = (x, _pdf_y(y) - 2, x + title_width, _pdf_y(y) + style.size)
        ctx.surface.draw(lambda c, anchor=entry.anchor, rect=rect: c.linkRect("", anchor, rect, thickness=0))
        if available > title_width:
            dots = "." * int((available - title_width) // dot_width)
            draw_string(ctx, dots, x + title_width + 2.5, y, style, color=MUTED)
        draw_string(ctx, number, PAGE_WIDTH - MARGIN, y, style, align="right")
        y += TOC_LINE_HEIGHT

    ctx.surface.set_page(resume)
    return pages
