"""Prompt templates for every drafting flow.

Templates use ``{{name}}`` placeholders so literal JSON examples can stay
in the text. ``render_prompt`` fills them by plain substitution; a
``details`` mapping in the facts is expanded into a bullet list under the
``{{study_details}}`` placeholder.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Type

from pydantic import BaseModel

from .models import Critique, LiteratureReview, ScholarlySearchResult, SectionText, XlsForm

PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")

SYSTEM_WRITER = (
    "You are an expert medical research methodologist helping a postgraduate student draft a thesis "
    "study plan. Write in formal academic English. Do not invent statistics, trial names or citations "
    "that are not supported by the material provided. Always answer with a single valid JSON object."
)


@dataclass(frozen=True)
class PromptSpec:
    system: str
    template: str
    output: Type[BaseModel]


def humanize_key(key: str) -> str:
    """``investigatorName`` -> ``Investigator Name``."""
    spaced = re.sub(r"([A-Z])", r" \1", key).strip()
    return spaced[:1].upper() + spaced[1:]


def format_study_details(details: Mapping[str, Any]) -> str:
    return "\n".join(f"- **{humanize_key(k)}:** {v}" for k, v in details.items())


def render_prompt(template: str, facts: Mapping[str, Any]) -> str:
    values: Dict[str, Any] = dict(facts)
    if "details" in values:
        values["study_details"] = format_study_details(values.pop("details"))

    def _sub(m):
        name = m.group(1)
        if name not in values:
            raise KeyError(f"Prompt placeholder {{{{{name}}}}} has no value")
        return str(values[name])

    return PLACEHOLDER_RE.sub(_sub, template)


# =====================
# Section drafting
# =====================
LITERATURE_REVIEW = """Prepare a structured review of literature for the study titled "{{study_title}}".

Retrieved articles (use these first; you may add other well-known, verifiable studies):
{{articles}}

Return a JSON object with:
- "keyConcepts": an array of 3-6 objects {"concept": string, "note": string} defining the core concepts and variables of the study.
- "articles": an array of 5-10 objects {"title", "author", "year", "studyDesign", "summary", "citation"} where "summary" is two to three sentences on the findings relevant to this study and "citation" is a full Vancouver-style reference.
"""

INTRODUCTION = """Write the Introduction for the study titled "{{study_title}}".

Base the rationale on this review of literature (JSON):
{{LiteratureReview}}

Structure it as background, burden of the problem, what is already known, the knowledge gap, and the justification for this study. Use markdown: "## " for sub-headings, plain paragraphs otherwise.
Return {"content": "<markdown>"}.
"""

OBJECTIVES = """Write SMART objectives for the study titled "{{study_title}}".

Introduction:
{{Introduction}}

Give one primary objective and two to four secondary objectives as numbered lists under "**Primary Objective:**" and "**Secondary Objectives:**" bold labels.
Return {"content": "<markdown>"}.
"""

METHODOLOGY = """Write the Study Design & Methodology for the study titled "{{study_title}}".

Objectives:
{{Objectives}}

Cover study design, setting, study period, study population, inclusion and exclusion criteria, sampling technique, study variables and operational definitions, and ethical considerations. Use "## " sub-headings and "- " bullets where helpful.
Return {"content": "<markdown>"}.
"""

SAMPLE_SIZE = """Write the Sample Size Statement for the study titled "{{study_title}}".

Objectives:
{{Objectives}}

Methodology:
{{Methodology}}

State the formula used, every assumed parameter with its source, the calculation, allowance for non-response, and the final sample size.
Return {"content": "<markdown>"}.
"""

DATA_COLLECTION = """Write the Data Collection Plan for the study titled "{{study_title}}".

Methodology:
{{Methodology}}

Describe tools and instruments, their validation, the step-by-step procedure, data quality measures, and data management. Use "## " sub-headings and "- " bullets.
Return {"content": "<markdown>"}.
"""

ANALYSIS = """Write the Analysis Plan for the study titled "{{study_title}}".

Objectives:
{{Objectives}}

Methodology:
{{Methodology}}

Present the plan ONLY as a pipe-delimited markdown table with the header row
| Objective | Variables | Type of Variable | Statistical Test |
followed by a separator row and one row per objective. Do not add any text outside the table.
Return {"content": "<markdown table>"}.
"""

CRITIQUE = """Act as a thesis review committee member. Critically appraise the "{{section_title}}" section of the study titled "{{study_title}}".

Section text:
{{section_text}}

Point out methodological weaknesses, missing elements, and unclear statements, and suggest concrete improvements as a short bulleted list.
Return {"critique": "<markdown>"}.
"""

SCHOLARLY_SEARCH = """You are an expert academic research assistant. Find and summarize up to {{max_results}} relevant, peer-reviewed, open-access scholarly articles based on the following query. For each article, provide the title, authors, publication year, journal/source, and a brief abstract.

Search Query: "{{query}}"

Prioritize recent and highly cited articles. Return {"articles": [{"title", "authors", "year", "journal", "abstract"}]}.
"""

# =====================
# Pro-formas
# =====================
PIS_DOCUMENT = """You are an expert research assistant. Your task is to populate the provided Participant Information Sheet (PIS) template with the specific details of a research study.

**Instructions:**
1.  Carefully review the PIS template and the provided study details.
2.  Your output MUST be ONLY the fully populated PIS text, in the language of the template. Do not add any extra commentary, titles, or explanations.
3.  Replace every placeholder in the template with the corresponding information:
    - `[STUDY_TITLE]`: Use the 'Study Title'.
    - `[INVESTIGATOR_NAME]`: Use the 'Investigator Name'.
    - `[GUIDE_NAME]`: Use the 'Guide Name'.
    - `[INTRODUCTION_SUMMARY]`: Write a concise summary of the 'Introduction' suitable for a layperson.
    - `[OBJECTIVE_SUMMARY]`: Use the provided 'Objectives' to summarize the purpose of the study.
    - `[METHODOLOGY_SUMMARY]`: Write a concise summary of the 'Methodology' explaining what participants will do.
    - `[DURATION_ESTIMATE]`: Based on the methodology, write a sentence like "Your participation will involve a single session lasting approximately [Estimate time, e.g., 20-30 minutes]."
    - `[POTENTIAL_BENEFITS]`: Infer potential benefits from the introduction. State that there may be no direct personal benefit.
    - `[CONTACT_INFO]`: Keep the exact placeholder string "[CONTACT_INFO]". Do not generate a phone number.

**Template:**
```
{{template}}
```

**Study Details:**
{{study_details}}

Return {"content": "<populated text>"}.
"""

CONSENT_DOCUMENT = """You are an expert research assistant. Your task is to populate the provided consent form template with the specific details of a research study.

**Instructions:**
1.  Carefully review the consent form template.
2.  Replace the placeholders `[STUDY_TITLE]`, `[INVESTIGATOR_NAME]`, and `[GUIDE_NAME]` with the actual information provided.
3.  For the date you must keep the exact placeholder string `[CURRENT_DATE]`. Do not insert a date.
4.  The output must be ONLY the fully populated consent form text, without any extra commentary or explanations.

**Template:**
```
{{template}}
```

**Study Details:**
{{study_details}}

Return {"content": "<populated text>"}.
"""

XLSFORM = """You are an expert in creating data collection forms for research using the XLSForm standard, commonly used in tools like KoboToolbox.

Generate a draft questionnaire for the study below as a JSON object that can be converted into an XLSForm workbook.

**Study Details:**
- **Title:** {{study_title}}
- **Objectives:** {{objectives}}
- **Methodology:** {{methodology}}

**Instructions:**
1.  Start with consent: a 'note' explaining the study's purpose and that participation is voluntary, then a mandatory 'select_one' question named 'consent' ("Do you agree to participate?") with choices 'yes' and 'no'.
2.  Infer the variables in the methodology (demographics, clinical variables, outcome measures) and create one or more questions for each, using 'integer', 'decimal', 'text', 'date', 'select_one' or 'select_multiple'.
3.  Every 'select_one' / 'select_multiple' question MUST define a 'choices' array; all choices of one question share the same 'list_name'.
4.  Return {"survey": [...]} where each question has 'type', 'name', 'label' and, where appropriate, 'required', 'hint', 'constraint', 'constraint_message', 'appearance'.

Example question:
{"type": "select_one", "name": "tobacco_use", "label": "Do you currently use any tobacco products?", "required": true,
 "choices": [{"list_name": "yes_no", "name": "yes", "label": "Yes"}, {"list_name": "yes_no", "name": "no", "label": "No"}]}
"""

SECTION_PROMPTS = {
    "LiteratureReview": "literature_review",
    "Introduction": "introduction",
    "Objectives": "objectives",
    "Methodology": "methodology",
    "SampleSize": "sample_size",
    "DataCollection": "data_collection",
    "Analysis": "analysis",
}

PROMPTS: Dict[str, PromptSpec] = {
    "literature_review": PromptSpec(SYSTEM_WRITER, LITERATURE_REVIEW, LiteratureReview),
    "introduction": PromptSpec(SYSTEM_WRITER, INTRODUCTION, SectionText),
    "objectives": PromptSpec(SYSTEM_WRITER, OBJECTIVES, SectionText),
    "methodology": PromptSpec(SYSTEM_WRITER, METHODOLOGY, SectionText),
    "sample_size": PromptSpec(SYSTEM_WRITER, SAMPLE_SIZE, SectionText),
    "data_collection": PromptSpec(SYSTEM_WRITER, DATA_COLLECTION, SectionText),
    "analysis": PromptSpec(SYSTEM_WRITER, ANALYSIS, SectionText),
    "critique": PromptSpec(SYSTEM_WRITER, CRITIQUE, Critique),
    "scholarly_search": PromptSpec(SYSTEM_WRITER, SCHOLARLY_SEARCH, ScholarlySearchResult),
    "pis_document": PromptSpec(SYSTEM_WRITER, PIS_DOCUMENT, SectionText),
    "consent_document": PromptSpec(SYSTEM_WRITER, CONSENT_DOCUMENT, SectionText),
    "xlsform": PromptSpec(SYSTEM_WRITER, XLSFORM, XlsForm),
}
