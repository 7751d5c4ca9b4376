from __future__ import annotations

import json
from typing import Any, Dict, List, Tuple

import pytest

from research_planner.sections import SectionStore


class FakeDrafter:
    """Deterministic drafter: canned responses per prompt kind, every call recorded."""

    def __init__(self, responses: Dict[str, Any] = None):
        self.responses = dict(responses or {})
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    def draft(self, prompt_kind, facts):
        self.calls.append((prompt_kind, dict(facts)))
        response = self.responses[prompt_kind]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(facts)
        return response


@pytest.fixture
def store() -> SectionStore:
    return SectionStore({})


@pytest.fixture
def lit_review_json() -> str:
    return json.dumps({
        "keyConcepts": [{"concept": "Anaemia", "note": "Haemoglobin below 11 g/dL in pregnancy."}],
        "articles": [{
            "title": "Iron supplementation in pregnancy",
            "author": "Rao K",
            "year": 2020,
            "studyDesign": "RCT",
            "summary": "Daily iron reduced anaemia.",
            "citation": "Rao K, Shah P. Iron supplementation in pregnancy. BMJ. 2020;1:1-9.",
        }],
    })
