"""Section catalog and the keyed store the drafting flows write into."""
from __future__ import annotations

from typing import Dict, List, MutableMapping, Optional

SECTIONS: Dict[str, Dict[str, str]] = {
    "Introduction": {
        "title": "Introduction",
        "description": "Synthesize the literature review to provide context and rationale for your study.",
    },
    "LiteratureReview": {
        "title": "Review of Literature",
        "description": "Retrieve and summarize relevant articles from PubMed to build a foundation for your study.",
    },
    "Objectives": {
        "title": "SMART Objectives",
        "description": "Generate specific, measurable, achievable, relevant, and time-bound goals for your study.",
    },
    "Methodology": {
        "title": "Study Design & Methodology",
        "description": "Define the overall study design and methodology based on your objectives.",
    },
    "SampleSize": {
        "title": "Sample Size Statement",
        "description": "Define the required sample size and provide a justification based on power analysis.",
    },
    "DataCollection": {
        "title": "Data Collection Plan",
        "description": "Outline the methods and instruments for collecting data.",
    },
    "Analysis": {
        "title": "Analysis Plan",
        "description": "Detail the statistical or qualitative methods you will use to analyze your data.",
    },
}

EXPORT_ORDER: List[str] = [
    "Introduction",
    "LiteratureReview",
    "Objectives",
    "Methodology",
    "SampleSize",
    "DataCollection",
    "Analysis",
]

# Sections each drafting prompt reads before it can run
DEPENDENCIES: Dict[str, List[str]] = {
    "LiteratureReview": [],
    "Introduction": ["LiteratureReview"],
    "Objectives": ["Introduction"],
    "Methodology": ["Objectives"],
    "SampleSize": ["Objectives", "Methodology"],
    "DataCollection": ["Methodology"],
    "Analysis": ["Objectives", "Methodology"],
}

NO_CONTENT = "No content generated."


def section_title(key: str) -> str:
    return SECTIONS[key]["title"]


def storage_key(study_title: str, section_key: str) -> str:
    return f"research-planner-{study_title}-{section_key}"


class SectionStore:
    """Section text keyed by (study title, section key).

    Wraps any mutable mapping: ``st.session_state`` in the app, a plain
    dict in tests. Empty strings read back as absent.
    """

    def __init__(self, backend: Optional[MutableMapping] = None):
        self.backend = backend if backend is not None else {}

    def get(self, study_title: str, section_key: str) -> Optional[str]:
        value = self.backend.get(storage_key(study_title, section_key))
        return value or None

    def put(self, study_title: str, section_key: str, text: str) -> None:
        if section_key not in SECTIONS:
            raise KeyError(f"Unknown section: {section_key}")
        self.backend[storage_key(study_title, section_key)] = text

    def get_critique(self, study_title: str, section_key: str) -> Optional[str]:
        return self.backend.get(storage_key(study_title, section_key) + "-critique") or None

    def put_critique(self, study_title: str, section_key: str, text: str) -> None:
        self.backend[storage_key(study_title, section_key) + "-critique"] = text

    def missing(self, study_title: str, section_keys: List[str]) -> List[str]:
        return [k for k in section_keys if not self.get(study_title, k)]

    def clear(self, study_title: str) -> int:
        """Remove every section and critique stored for ``study_title``."""
        removed = 0
        for key in SECTIONS:
            base = storage_key(study_title, key)
            for k in (base, base + "-critique"):
                if k in self.backend:
                    del self.backend[k]
                    removed += 1
        return removed
