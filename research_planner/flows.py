"""Drafting flows: validate inputs, gather prerequisites, call the drafter, store the result.

Every flow checks its inputs and dependency sections before the model is
contacted, so a missing title or section never costs a request.
"""
from __future__ import annotations

import json
import logging
from typing import Dict, List, Optional

from .errors import GenerationError, MissingInputError, MissingPrerequisiteError
from .llm import Drafter
from .models import (
    BilingualText,
    Critique,
    LiteratureReview,
    PisConsentDocuments,
    RefMeta,
    ScholarlyArticle,
    ScholarlySearchResult,
    SectionText,
    XlsForm,
)
from .prompts import SECTION_PROMPTS
from .pubmed import articles_digest
from .sections import DEPENDENCIES, SECTIONS, SectionStore, section_title
from .templates import CONSENT_TEMPLATE, PIS_TEMPLATE

logger = logging.getLogger(__name__)

DEFAULT_INVESTIGATOR = "Student Investigator"
DEFAULT_GUIDE = "Thesis Guide"


def require_title(study_title: str) -> str:
    title = (study_title or "").strip()
    if not title:
        raise MissingInputError("Please enter a study title first.")
    return title


def require_sections(store: SectionStore, study_title: str, keys: List[str]) -> Dict[str, str]:
    missing = store.missing(study_title, keys)
    if missing:
        raise MissingPrerequisiteError([section_title(k) for k in missing])
    return {k: store.get(study_title, k) for k in keys}


def _draft(drafter: Drafter, kind: str, facts: Dict[str, object], model):
    result = drafter.draft(kind, facts)
    if not result:
        raise GenerationError("The AI returned no output.")
    try:
        return model.model_validate(result)
    except ValueError as e:
        raise GenerationError("The AI response did not match the expected format.") from e


# =====================
# Sections
# =====================
def draft_section(drafter: Drafter, store: SectionStore, study_title: str, section_key: str,
                  articles: Optional[List[RefMeta]] = None) -> str:
    """Generate ``section_key`` and store it. Returns the stored text.

    The literature review is stored as its JSON payload; every other
    section as markdown.
    """
    if section_key not in SECTIONS:
        raise KeyError(f"Unknown section: {section_key}")
    title = require_title(study_title)
    facts: Dict[str, object] = {"study_title": title}
    facts.update(require_sections(store, title, DEPENDENCIES[section_key]))

    kind = SECTION_PROMPTS[section_key]
    if section_key == "LiteratureReview":
        facts["articles"] = articles_digest(articles or [])
        review = _draft(drafter, kind, facts, LiteratureReview)
        text = review.model_dump_json(exclude_none=True)
    else:
        text = _draft(drafter, kind, facts, SectionText).content.strip()
        if not text:
            raise GenerationError(f"The AI returned an empty {section_title(section_key)} section.")

    store.put(title, section_key, text)
    logger.info("Stored %s for %r (%d chars)", section_key, title, len(text))
    return text


def critique_section(drafter: Drafter, store: SectionStore, study_title: str, section_key: str) -> str:
    title = require_title(study_title)
    text = require_sections(store, title, [section_key])[section_key]
    critique = _draft(drafter, "critique", {
        "study_title": title,
        "section_title": section_title(section_key),
        "section_text": text,
    }, Critique).critique
    store.put_critique(title, section_key, critique)
    return critique


def search_scholarly_articles(drafter: Drafter, query: str, max_results: int = 5) -> List[ScholarlyArticle]:
    """Model-backed article search. Failures are logged and yield an empty list."""
    if not (query or "").strip():
        raise MissingInputError("Please enter a search query.")
    try:
        result = _draft(drafter, "scholarly_search", {"query": query, "max_results": max_results},
                        ScholarlySearchResult)
    except GenerationError as e:
        logger.error("Scholarly search failed for %r: %s", query, e)
        return []
    return result.articles[:max_results]


def parse_literature_review(text: Optional[str]) -> Optional[LiteratureReview]:
    if not text:
        return None
    try:
        return LiteratureReview.model_validate(json.loads(text))
    except ValueError:
        return None


# =====================
# Pro-formas
# =====================
def generate_pis_and_consent(drafter: Drafter, store: SectionStore, study_title: str,
                             investigator_name: str = DEFAULT_INVESTIGATOR,
                             guide_name: str = DEFAULT_GUIDE) -> PisConsentDocuments:
    """Fill the English and Hindi information sheets and consent forms (four calls)."""
    title = require_title(study_title)
    deps = require_sections(store, title, ["Introduction", "Methodology", "Objectives"])
    people = {"studyTitle": title, "investigatorName": investigator_name, "guideName": guide_name}
    pis_details = {**people, "introduction": deps["Introduction"],
                   "methodology": deps["Methodology"], "objectives": deps["Objectives"]}

    def fill(kind: str, template: str, details: Dict[str, str]) -> str:
        return _draft(drafter, kind, {"template": template, "details": details}, SectionText).content

    return PisConsentDocuments(
        participantInformationSheet=BilingualText(
            english=fill("pis_document", PIS_TEMPLATE["english"], pis_details),
            hindi=fill("pis_document", PIS_TEMPLATE["hindi"], pis_details),
        ),
        consentForm=BilingualText(
            english=fill("consent_document", CONSENT_TEMPLATE["english"], people),
            hindi=fill("consent_document", CONSENT_TEMPLATE["hindi"], people),
        ),
    )


def generate_xlsform(drafter: Drafter, store: SectionStore, study_title: str) -> XlsForm:
    title = require_title(study_title)
    deps = require_sections(store, title, ["Objectives", "Methodology"])
    form = _draft(drafter, "xlsform", {
        "study_title": title,
        "objectives": deps["Objectives"],
        "methodology": deps["Methodology"],
    }, XlsForm)
    if not form.survey:
        raise GenerationError("The AI failed to generate the XLSForm questions.")
    return form
