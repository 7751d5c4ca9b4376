"""Data models shared by the drafting flows and the exporters.

Model output is validated against these before it is stored, so the
field names mirror the JSON the prompts ask for (``studyDesign``,
``keyConcepts``) rather than Python naming.
"""
from __future__ import annotations

from typing import Annotated, List, Optional

from pydantic import BaseModel, BeforeValidator, Field


def _as_text(value):
    if value is None:
        return ""
    return str(value)


# Models sometimes answer with numbers (year: 2021) or nulls for free-text fields
Text = Annotated[str, BeforeValidator(_as_text)]


def _concept_list(value):
    # a non-list keyConcepts reads as none given
    if not isinstance(value, list):
        return None
    return [v for v in value if isinstance(v, dict)]


class KeyConcept(BaseModel):
    concept: Text = ""
    note: Text = ""


class ArticleSummary(BaseModel):
    title: Text = ""
    author: Text = ""
    year: Text = ""
    studyDesign: Text = ""
    summary: Text = ""
    citation: Text = ""


class LiteratureReview(BaseModel):
    """Structured payload stored for the LiteratureReview section."""

    keyConcepts: Annotated[Optional[List[KeyConcept]], BeforeValidator(_concept_list)] = None
    articles: List[ArticleSummary]


class SectionText(BaseModel):
    content: str


class Critique(BaseModel):
    critique: str


class RefMeta(BaseModel):
    """Bibliographic record retrieved from PubMed."""

    doi: Optional[str] = None
    title: Optional[str] = None
    journal: Optional[str] = None
    year: Optional[str] = None
    authors: List[str] = Field(default_factory=list)
    pmid: Optional[str] = None
    url: Optional[str] = None


class ScholarlyArticle(BaseModel):
    title: str
    authors: Text = ""
    year: Text = ""
    journal: Text = ""
    abstract: Text = ""


class ScholarlySearchResult(BaseModel):
    articles: List[ScholarlyArticle] = Field(default_factory=list)


class XlsChoice(BaseModel):
    list_name: str
    name: str
    label: str


class XlsQuestion(BaseModel):
    type: str
    name: str
    label: str
    required: Optional[bool] = None
    hint: Optional[str] = None
    constraint: Optional[str] = None
    constraint_message: Optional[str] = None
    appearance: Optional[str] = None
    choices: Optional[List[XlsChoice]] = None


class XlsForm(BaseModel):
    survey: List[XlsQuestion]


class BilingualText(BaseModel):
    english: str
    hindi: str


class PisConsentDocuments(BaseModel):
    participantInformationSheet: BilingualText
    consentForm: BilingualText
