"""
Research Planner – Streamlit app

What this app does
------------------
1) The student enters a study title (and an API key for the language model)
2) PubMed is searched through eUtils to ground the review of literature
3) Each section of the study plan is drafted separately
   (Review of Literature → Introduction → Objectives → Methodology →
    Sample Size → Data Collection → Analysis), each prompt reading the
   sections it depends on, and can be critiqued and edited
4) Exports:
   - study plan PDF (title page, linked table of contents, numbered headings,
     literature table, analysis table, references, page footers)
   - Word copy of the same plan
   - Participant Information Sheet and Consent Form, English and Hindi (.txt)
   - draft XLSForm questionnaire (.xlsx) for KoboToolbox / ODK

Design rules
------------
- Nothing is sent to the model until the required inputs and prerequisite
  sections exist.
- A failed model call is reported once; there is no automatic retry.
- The PDF export never fails on content: missing sections print
  "No content generated." and a broken literature payload prints an error line.
- The API key entered in the sidebar lives only in this browser session.

Run:
  streamlit run app.py

Environment (optional):
  OPENAI_API_KEY   : default key (otherwise enter it in the sidebar)
  OPENAI_MODEL     : default gpt-4o-mini
  OPENAI_BASE_URL  : OpenAI-compatible endpoint
  ENTREZ_API_KEY   : raises NCBI eUtils quota
"""
from __future__ import annotations

import logging

import pandas as pd
import streamlit as st

from research_planner.assembler import export_filename, export_study_plan
from research_planner.config import APP_CITATION, APP_TITLE, OPENAI_API_KEY, OPENAI_MODEL, configure_logging
from research_planner.errors import PlannerError
from research_planner.exporters import pdf_preview, plan_to_docx, proforma_files, xlsform_frames, xlsform_workbook
from research_planner.flows import (
    critique_section,
    draft_section,
    generate_pis_and_consent,
    generate_xlsform,
    search_scholarly_articles,
)
from research_planner.llm import LLM, LLMDrafter
from research_planner.pubmed import search_literature, vancouver
from research_planner.sections import SECTIONS, SectionStore

configure_logging()
logger = logging.getLogger("research_planner.app")

# =====================
# Page
# =====================
st.set_page_config(page_title=APP_TITLE, layout="wide")
st.title(APP_TITLE)

with st.expander("How to use", expanded=False):
    st.markdown(
        """
        - **Title first**: every section is stored under the study title. Changing the title starts a fresh workspace.
        - **Order matters**: generate the Review of Literature first; later sections read the ones before them.
        - **Edit freely**: the text boxes are the source of truth for the export.
        - **Inspiration**: ICMR's repository of medical theses, [Medical Shodhganga](https://www.icmr.gov.in/medical-shodhganga).
        """
    )

store = SectionStore(st.session_state)

with st.sidebar:
    st.header("Settings")
    api_key = st.text_input("API key", value=OPENAI_API_KEY or "", type="password",
                            help="Used for this session only; never stored.")
    model = st.text_input("Model", value=OPENAI_MODEL)
    investigator = st.text_input("Investigator name", value="Student Investigator")
    guide = st.text_input("Thesis guide", value="Thesis Guide")

drafter = LLMDrafter(LLM(model, api_key or None))

col_title, col_clear = st.columns([5, 1])
with col_title:
    study_title = st.text_input("Study title", placeholder="Enter your title here").strip()
with col_clear:
    st.write("")
    confirm = st.checkbox("Confirm clear", disabled=not study_title)
    if st.button("Clear workspace", disabled=not (study_title and confirm)):
        removed = store.clear(study_title)
        st.success(f"Removed {removed} stored item(s) for “{study_title}”.")

st.caption("This is your research study workspace. Generate, refine, and validate each section below.")
st.divider()


def run_flow(label: str, fn, *args, **kwargs):
    """Run a drafting flow behind a spinner; report failures once."""
    try:
        with st.spinner(f"{label}…"):
            return fn(*args, **kwargs)
    except PlannerError as e:
        logger.warning("%s failed: %s", label, e)
        st.error(f"{label} failed: {e}")
        return None


# =====================
# 1) Literature search
# =====================
st.subheader("1) Find literature")
if "retrieved" not in st.session_state:
    st.session_state.retrieved = []  # List[RefMeta]

col_q, col_n = st.columns([4, 1])
with col_q:
    query = st.text_input("PubMed query", value=study_title)
with col_n:
    retmax = st.number_input("Max results", min_value=5, max_value=20, value=10, step=1)

col_pm, col_ai = st.columns(2)
with col_pm:
    if st.button("Search PubMed", disabled=not query):
        with st.spinner("Searching PubMed…"):
            st.session_state.retrieved = search_literature(query, retmax=int(retmax))
        if not st.session_state.retrieved:
            st.warning("PubMed returned no records (or could not be reached).")
with col_ai:
    if st.button("AI scholarly search", disabled=not (query and api_key)):
        found = run_flow("Scholarly search", search_scholarly_articles, drafter, query, int(retmax))
        if found:
            st.dataframe(pd.DataFrame([a.model_dump() for a in found]), use_container_width=True, hide_index=True)
        elif found is not None:
            st.info("No articles found.")

if st.session_state.retrieved:
    st.dataframe(
        pd.DataFrame([
            {"pmid": r.pmid, "year": r.year, "journal": r.journal, "title": r.title, "citation": vancouver(r), "url": r.url}
            for r in st.session_state.retrieved
        ]),
        column_config={"url": st.column_config.LinkColumn("PubMed")},
        use_container_width=True,
        hide_index=True,
    )
    st.caption(f"{len(st.session_state.retrieved)} article(s) will be offered to the Review of Literature prompt.")

st.divider()

# =====================
# 2) Sections
# =====================
st.subheader("2) Draft the study plan")
cols = st.columns(2)
for i, (key, meta) in enumerate(SECTIONS.items()):
    with cols[i % 2]:
        st.markdown(f"**{meta['title']}**")
        st.caption(meta["description"])
        b1, b2 = st.columns(2)
        with b1:
            if st.button("Generate", key=f"gen_{key}", disabled=not study_title):
                run_flow(f"{meta['title']} generation", draft_section, drafter, store, study_title, key,
                         articles=st.session_state.retrieved)
        with b2:
            if st.button("Critique", key=f"crit_{key}", disabled=not store.get(study_title, key)):
                run_flow(f"{meta['title']} critique", critique_section, drafter, store, study_title, key)

        current = store.get(study_title, key) or ""
        edited = st.text_area("Preview", value=current, height=220, key=f"ta_{key}_{hash(current)}",
                              label_visibility="collapsed", disabled=not study_title)
        if study_title and edited != current:
            store.put(study_title, key, edited)

        critique = store.get_critique(study_title, key)
        if critique:
            with st.expander("Critique"):
                st.markdown(critique)

st.divider()

# =====================
# 3) Exports
# =====================
st.subheader("3) Export")
col_pdf, col_pro, col_xls = st.columns(3)

with col_pdf:
    if st.button("Build study plan PDF"):
        result = export_study_plan(study_title, store)
        st.session_state.export = result
        st.toast(f"Study plan ready: {result.page_count} pages.")
    if "export" in st.session_state:
        result = st.session_state.export
        st.download_button("Download PDF", data=result.pdf, file_name=result.filename, mime="application/pdf")
        st.download_button(
            "Download .docx",
            data=plan_to_docx(study_title, store),
            file_name=export_filename(study_title, "docx"),
            mime="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        )
        with st.expander("Preview"):
            for png in pdf_preview(result.pdf, pages=3):
                st.image(png)

with col_pro:
    if st.button("Generate PIS & Consent", disabled=not (study_title and api_key)):
        st.toast("Generating PIS & Consent… this may take a moment.")
        docs = run_flow("PIS/Consent generation", generate_pis_and_consent, drafter, store, study_title,
                        investigator_name=investigator, guide_name=guide)
        if docs:
            st.session_state.proformas = proforma_files(study_title, docs)
    for name, data in st.session_state.get("proformas", {}).items():
        st.download_button(name, data=data, file_name=name, mime="text/plain", key=f"dl_{name}")

with col_xls:
    if st.button("Generate XLSForm", disabled=not (study_title and api_key)):
        form = run_flow("XLSForm generation", generate_xlsform, drafter, store, study_title)
        if form:
            st.session_state.xlsform = form
    if "xlsform" in st.session_state:
        form = st.session_state.xlsform
        st.dataframe(xlsform_frames(form, study_title)["survey"], use_container_width=True, hide_index=True)
        st.download_button(
            "Download XLSForm",
            data=xlsform_workbook(form, study_title),
            file_name=export_filename(study_title, "xlsx", "xlsform"),
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )

st.divider()
st.caption(f"How to cite: {APP_CITATION}")
