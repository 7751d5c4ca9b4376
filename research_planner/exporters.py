"""Side-channel downloads: pro-forma text files, XLSForm workbook, Word copy, PDF preview."""
from __future__ import annotations

import io
from typing import Dict, List

import fitz  # PyMuPDF
import pandas as pd
from docx import Document
from docx.shared import Pt

from .assembler import ARTICLE_HEADERS, DEFAULT_TITLE, LIT_REVIEW_ERROR, sanitize_title
from .config import APP_CITATION
from .flows import parse_literature_review
from .layout import BLANK, BOLD, BULLET, H1, H2, H3, NUMBERED, HeadingCounter, classify_line
from .models import PisConsentDocuments, XlsForm
from .sections import EXPORT_ORDER, NO_CONTENT, SectionStore, section_title
from .tables import parse_markdown_table

SURVEY_COLUMNS = ["type", "name", "label", "required", "hint", "constraint", "constraint_message", "appearance"]
SELECT_TYPES = ("select_one", "select_multiple")


# =====================
# Pro-formas
# =====================
def proforma_files(study_title: str, docs: PisConsentDocuments) -> Dict[str, bytes]:
    """File name -> UTF-8 bytes for the four information/consent documents."""
    pis, consent = docs.participantInformationSheet, docs.consentForm
    files = {
        f"{study_title}_PIS_EN.txt": pis.english,
        f"{study_title}_PIS_HI.txt": pis.hindi,
        f"{study_title}_Consent_EN.txt": consent.english,
        f"{study_title}_Consent_HI.txt": consent.hindi,
    }
    return {name: text.encode("utf-8") for name, text in files.items()}


# =====================
# XLSForm
# =====================
def _survey_type(question) -> str:
    qtype = question.type.strip()
    if qtype in SELECT_TYPES and question.choices:
        return f"{qtype} {question.choices[0].list_name}"
    return qtype


def xlsform_frames(form: XlsForm, form_title: str) -> Dict[str, pd.DataFrame]:
    survey_rows: List[dict] = []
    choice_rows: List[dict] = []
    seen = set()
    for q in form.survey:
        row = q.model_dump(exclude={"choices"})
        row["type"] = _survey_type(q)
        if q.required is not None:
            row["required"] = "yes" if q.required else "no"
        survey_rows.append(row)
        for choice in q.choices or []:
            key = (choice.list_name, choice.name)
            if key not in seen:
                seen.add(key)
                choice_rows.append(choice.model_dump())

    survey = pd.DataFrame(survey_rows, columns=SURVEY_COLUMNS).fillna("")
    choices = pd.DataFrame(choice_rows, columns=["list_name", "name", "label"])
    settings = pd.DataFrame([{"form_title": form_title, "form_id": sanitize_title(form_title).lower()}])
    return {"survey": survey, "choices": choices, "settings": settings}


def xlsform_workbook(form: XlsForm, form_title: str) -> bytes:
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for sheet, frame in xlsform_frames(form, form_title).items():
            frame.to_excel(writer, sheet_name=sheet, index=False)
    return buf.getvalue()


# =====================
# Word copy of the plan
# =====================
def _add_table(doc, headers, rows) -> None:
    table = doc.add_table(rows=1, cols=len(headers))
    table.style = "Table Grid"
    for cell, text in zip(table.rows[0].cells, headers):
        cell.text = str(text)
        for run in cell.paragraphs[0].runs:
            run.bold = True
    for row in rows:
        for cell, text in zip(table.add_row().cells, row):
            cell.text = str(text)


def _add_markdown(doc, markdown: str, counters: HeadingCounter) -> None:
    for raw in markdown.strip().split("\n"):
        kind, text, _ = classify_line(raw.rstrip("\r"))
        if kind in (H1, H2, H3):
            level = {H1: 1, H2: 2, H3: 3}[kind]
            doc.add_heading(counters.label(level, text), level=level)
        elif kind == BOLD:
            doc.add_paragraph().add_run(text).bold = True
        elif kind == BULLET:
            doc.add_paragraph(text, style="List Bullet")
        elif kind == NUMBERED:
            doc.add_paragraph(text, style="List Number")
        elif kind != BLANK:
            doc.add_paragraph(text)


def plan_to_docx(study_title: str, store: SectionStore) -> bytes:
    """Word version of the plan, numbered the same way as the PDF."""
    doc = Document()
    style = doc.styles["Normal"]
    style.font.name = "Calibri"
    style.font.size = Pt(11)

    doc.add_heading(study_title or DEFAULT_TITLE, level=0)
    counters = HeadingCounter()
    references: List[str] = []
    for key in EXPORT_ORDER:
        doc.add_heading(counters.label(1, section_title(key)), level=1)
        content = store.get(study_title, key)
        if not content:
            doc.add_paragraph(NO_CONTENT)
            continue
        if key == "LiteratureReview":
            review = parse_literature_review(content)
            if review is None:
                doc.add_paragraph(LIT_REVIEW_ERROR)
                continue
            if review.keyConcepts:
                doc.add_heading(counters.label(2, "Key Concepts"), level=2)
                for concept in review.keyConcepts:
                    _add_markdown(doc, f"### {concept.concept}\n{concept.note}", counters)
            doc.add_heading(counters.label(2, "Article Summaries"), level=2)
            _add_table(doc, ARTICLE_HEADERS,
                       [[a.title, a.author, a.year, a.studyDesign, a.summary] for a in review.articles])
            references.extend(a.citation for a in review.articles)
            continue
        parsed = parse_markdown_table(content) if key == "Analysis" else None
        if parsed:
            _add_table(doc, *parsed)
        else:
            _add_markdown(doc, content, counters)

    doc.add_heading(counters.label(1, "References"), level=1)
    for i, ref in enumerate(references + [APP_CITATION], 1):
        doc.add_paragraph(f"{i}. {ref}")

    bio = io.BytesIO()
    doc.save(bio)
    return bio.getvalue()


# =====================
# Preview
# =====================
def pdf_preview(pdf: bytes, pages: int = 3, zoom: float = 1.0) -> List[bytes]:
    """PNG renderings of the first ``pages`` pages."""
    images = []
    with fitz.open(stream=pdf, filetype="pdf") as doc:
        for page in doc.pages(0, min(pages, doc.page_count)):
            images.append(page.get_pixmap(matrix=fitz.Matrix(zoom, zoom)).tobytes("png"))
    return images
