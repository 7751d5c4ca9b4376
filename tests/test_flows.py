from __future__ import annotations

import json

import pytest

from research_planner.errors import GenerationError, MissingInputError, MissingPrerequisiteError
from research_planner.flows import (
    critique_section,
    draft_section,
    generate_pis_and_consent,
    generate_xlsform,
    parse_literature_review,
    search_scholarly_articles,
)
from research_planner.models import RefMeta
from research_planner.templates import CONSENT_TEMPLATE, PIS_TEMPLATE

from .conftest import FakeDrafter

TITLE = "Anaemia in Pregnancy"


def _fill(store, *keys):
    for key in keys:
        store.put(TITLE, key, f"{key} text.")


def test_blank_title_is_rejected_before_any_call(store):
    drafter = FakeDrafter()
    with pytest.raises(MissingInputError):
        draft_section(drafter, store, "   ", "LiteratureReview")
    assert drafter.calls == []


def test_missing_prerequisites_are_listed_by_title(store):
    drafter = FakeDrafter()
    with pytest.raises(MissingPrerequisiteError) as exc:
        draft_section(drafter, store, TITLE, "SampleSize")
    assert exc.value.missing == ["SMART Objectives", "Study Design & Methodology"]
    assert "SMART Objectives, Study Design & Methodology" in str(exc.value)
    assert drafter.calls == []


def test_unknown_section_key(store):
    with pytest.raises(KeyError):
        draft_section(FakeDrafter(), store, TITLE, "Budget")


def test_literature_review_is_stored_as_json(store, lit_review_json):
    drafter = FakeDrafter({"literature_review": json.loads(lit_review_json)})
    records = [RefMeta(title="Iron and anaemia.", authors=["Kavita Rao"], journal="BMJ", year="2020", pmid="123")]

    text = draft_section(drafter, store, TITLE, "LiteratureReview", articles=records)

    assert store.get(TITLE, "LiteratureReview") == text
    review = parse_literature_review(text)
    assert review.keyConcepts[0].concept == "Anaemia"
    assert review.articles[0].year == "2020"
    kind, facts = drafter.calls[0]
    assert kind == "literature_review"
    assert facts["study_title"] == TITLE
    assert facts["articles"] == "1. Rao K. Iron and anaemia. BMJ. 2020. PMID:123"


def test_literature_review_without_records(store):
    drafter = FakeDrafter({"literature_review": {"articles": []}})
    draft_section(drafter, store, TITLE, "LiteratureReview")
    assert drafter.calls[0][1]["articles"] == "(no retrieved articles)"
    assert parse_literature_review(store.get(TITLE, "LiteratureReview")).keyConcepts is None


def test_section_reads_its_dependencies(store):
    _fill(store, "Objectives", "Methodology")
    drafter = FakeDrafter({"analysis": {"content": "  | A | B |\n|---|---|\n| 1 | 2 |  "}})

    text = draft_section(drafter, store, TITLE, "Analysis")

    assert text == "| A | B |\n|---|---|\n| 1 | 2 |"
    assert store.get(TITLE, "Analysis") == text
    assert drafter.calls == [("analysis", {
        "study_title": TITLE,
        "Objectives": "Objectives text.",
        "Methodology": "Methodology text.",
    })]


def test_generation_failure_leaves_store_untouched(store):
    _fill(store, "LiteratureReview")
    drafter = FakeDrafter({"introduction": GenerationError("The AI service request failed: 503")})
    with pytest.raises(GenerationError):
        draft_section(drafter, store, TITLE, "Introduction")
    assert store.get(TITLE, "Introduction") is None


@pytest.mark.parametrize("response", [{}, {"content": "   "}, {"text": "wrong field"}])
def test_unusable_output_is_a_generation_error(store, response):
    _fill(store, "LiteratureReview")
    with pytest.raises(GenerationError):
        draft_section(FakeDrafter({"introduction": response}), store, TITLE, "Introduction")
    assert store.get(TITLE, "Introduction") is None


def test_critique_is_stored_beside_the_section(store):
    _fill(store, "Methodology")
    drafter = FakeDrafter({"critique": {"critique": "- Sampling frame is unclear."}})

    assert critique_section(drafter, store, TITLE, "Methodology") == "- Sampling frame is unclear."
    assert store.get_critique(TITLE, "Methodology") == "- Sampling frame is unclear."
    assert store.get(TITLE, "Methodology") == "Methodology text."
    assert drafter.calls[0][1]["section_title"] == "Study Design & Methodology"


def test_critique_needs_the_section(store):
    with pytest.raises(MissingPrerequisiteError):
        critique_section(FakeDrafter(), store, TITLE, "Objectives")


def test_scholarly_search_truncates_results():
    articles = [{"title": f"Paper {i}", "year": 2020 + i} for i in range(8)]
    drafter = FakeDrafter({"scholarly_search": {"articles": articles}})
    found = search_scholarly_articles(drafter, "iron deficiency", max_results=5)
    assert [a.title for a in found] == [f"Paper {i}" for i in range(5)]
    assert found[0].year == "2020"
    assert drafter.calls[0][1] == {"query": "iron deficiency", "max_results": 5}


def test_scholarly_search_failure_yields_empty_list():
    drafter = FakeDrafter({"scholarly_search": GenerationError("timeout")})
    assert search_scholarly_articles(drafter, "iron deficiency") == []


def test_scholarly_search_needs_a_query():
    with pytest.raises(MissingInputError):
        search_scholarly_articles(FakeDrafter(), "  ")


def test_pis_and_consent_make_four_calls(store):
    _fill(store, "Introduction", "Methodology", "Objectives")
    drafter = FakeDrafter({
        "pis_document": lambda facts: {"content": "PIS " + facts["template"][:10]},
        "consent_document": lambda facts: {"content": "CONSENT " + facts["template"][:10]},
    })

    docs = generate_pis_and_consent(drafter, store, TITLE, investigator_name="Dr. A. Rao")

    assert [kind for kind, _ in drafter.calls] == [
        "pis_document", "pis_document", "consent_document", "consent_document",
    ]
    templates = [facts["template"] for _, facts in drafter.calls]
    assert templates == [PIS_TEMPLATE["english"], PIS_TEMPLATE["hindi"],
                         CONSENT_TEMPLATE["english"], CONSENT_TEMPLATE["hindi"]]

    pis_details = drafter.calls[0][1]["details"]
    assert pis_details["studyTitle"] == TITLE
    assert pis_details["investigatorName"] == "Dr. A. Rao"
    assert pis_details["guideName"] == "Thesis Guide"
    assert pis_details["methodology"] == "Methodology text."
    assert drafter.calls[2][1]["details"] == {
        "studyTitle": TITLE, "investigatorName": "Dr. A. Rao", "guideName": "Thesis Guide",
    }

    assert docs.participantInformationSheet.english == "PIS " + PIS_TEMPLATE["english"][:10]
    assert docs.consentForm.hindi == "CONSENT " + CONSENT_TEMPLATE["hindi"][:10]


def test_pis_and_consent_need_three_sections(store):
    _fill(store, "Introduction")
    drafter = FakeDrafter()
    with pytest.raises(MissingPrerequisiteError) as exc:
        generate_pis_and_consent(drafter, store, TITLE)
    assert exc.value.missing == ["Study Design & Methodology", "SMART Objectives"]
    assert drafter.calls == []


def test_xlsform_generation(store):
    _fill(store, "Objectives", "Methodology")
    survey = [
        {"type": "note", "name": "intro", "label": "This study is about anaemia."},
        {"type": "select_one", "name": "consent", "label": "Do you agree to participate?", "required": True,
         "choices": [{"list_name": "yes_no", "name": "yes", "label": "Yes"},
                     {"list_name": "yes_no", "name": "no", "label": "No"}]},
    ]
    drafter = FakeDrafter({"xlsform": {"survey": survey}})

    form = generate_xlsform(drafter, store, TITLE)

    assert [q.name for q in form.survey] == ["intro", "consent"]
    assert form.survey[1].choices[1].label == "No"
    assert drafter.calls[0][1]["objectives"] == "Objectives text."


def test_xlsform_with_no_questions_fails(store):
    _fill(store, "Objectives", "Methodology")
    with pytest.raises(GenerationError):
        generate_xlsform(FakeDrafter({"xlsform": {"survey": []}}), store, TITLE)


def test_parse_literature_review_rejects_bad_payloads():
    assert parse_literature_review(None) is None
    assert parse_literature_review("not json") is None
    assert parse_literature_review(json.dumps({"keyConcepts": []})) is None
