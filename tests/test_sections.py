from __future__ import annotations

import pytest

from research_planner.sections import DEPENDENCIES, EXPORT_ORDER, SECTIONS, SectionStore, storage_key


def test_catalog_is_consistent() -> None:
    assert set(EXPORT_ORDER) == set(SECTIONS) == set(DEPENDENCIES)
    for deps in DEPENDENCIES.values():
        assert set(deps) <= set(SECTIONS)


def test_storage_key() -> None:
    assert storage_key("Heart Study", "Objectives") == "research-planner-Heart Study-Objectives"


def test_empty_text_reads_as_absent() -> None:
    backend = {}
    store = SectionStore(backend)
    store.put("T", "Objectives", "")
    assert store.get("T", "Objectives") is None
    assert store.missing("T", ["Objectives", "Methodology"]) == ["Objectives", "Methodology"]
    store.put("T", "Objectives", "1. Measure Hb.")
    assert backend["research-planner-T-Objectives"] == "1. Measure Hb."
    assert store.missing("T", ["Objectives", "Methodology"]) == ["Methodology"]


def test_titles_are_isolated() -> None:
    store = SectionStore()
    store.put("Study A", "Introduction", "A")
    assert store.get("Study B", "Introduction") is None


def test_unknown_section_is_rejected() -> None:
    with pytest.raises(KeyError):
        SectionStore().put("T", "Budget", "x")


def test_clear_removes_sections_and_critiques_for_one_title() -> None:
    backend = {"unrelated": 1}
    store = SectionStore(backend)
    store.put("T", "Introduction", "intro")
    store.put_critique("T", "Introduction", "too long")
    store.put("T", "Analysis", "table")
    store.put("Other", "Analysis", "kept")

    assert store.clear("T") == 3
    assert store.get("T", "Introduction") is None
    assert store.get_critique("T", "Introduction") is None
    assert store.get("Other", "Analysis") == "kept"
    assert backend["unrelated"] == 1
    assert store.clear("T") == 0
