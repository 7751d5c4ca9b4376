from __future__ import annotations

import requests
from lxml import etree
from tenacity import retry, stop_after_attempt, wait_none

from research_planner import pubmed
from research_planner.models import RefMeta

EFETCH_XML = b"""<?xml version="1.0"?>
<PubmedArticleSet>
  <PubmedArticle>
    <MedlineCitation>
      <PMID>38012345</PMID>
      <Article>
        <Journal>
          <JournalIssue><PubDate><Year>2021</Year></PubDate></JournalIssue>
          <Title>The Lancet Global Health</Title>
        </Journal>
        <ArticleTitle>Prevalence of <i>anaemia</i> in   pregnant women.</ArticleTitle>
        <AuthorList>
          <Author><LastName>Rao</LastName><ForeName>Kavita M</ForeName></Author>
          <Author><LastName>Shah</LastName><ForeName>Priya</ForeName></Author>
        </AuthorList>
      </Article>
    </MedlineCitation>
    <PubmedData>
      <ArticleIdList>
        <ArticleId IdType="pubmed">38012345</ArticleId>
        <ArticleId IdType="doi">10.1016/S2214-109X(21)00001-X</ArticleId>
      </ArticleIdList>
    </PubmedData>
  </PubmedArticle>
  <PubmedArticle>
    <MedlineCitation>
      <PMID>29999999</PMID>
      <Article>
        <Journal>
          <JournalIssue><PubDate><MedlineDate>2018 Jan-Feb</MedlineDate></PubDate></JournalIssue>
          <Title>Indian J Public Health</Title>
        </Journal>
        <ArticleTitle>Iron folic acid compliance</ArticleTitle>
      </Article>
    </MedlineCitation>
  </PubmedArticle>
</PubmedArticleSet>
"""


def test_parse_records() -> None:
    first, second = pubmed.pubmed_parse_records(etree.fromstring(EFETCH_XML))

    assert first.pmid == "38012345"
    assert first.title == "Prevalence of anaemia in pregnant women."
    assert first.journal == "The Lancet Global Health"
    assert first.year == "2021"
    assert first.authors == ["Kavita M Rao", "Priya Shah"]
    assert first.doi == "10.1016/s2214-109x(21)00001-x"
    assert first.url == "https://pubmed.ncbi.nlm.nih.gov/38012345/"

    assert second.year == "2018"
    assert second.authors == []
    assert second.doi is None


def test_vancouver_citation() -> None:
    ref = RefMeta(title="Prevalence of anaemia.", journal="BMJ", year="2021",
                  authors=["Kavita M Rao", "Priya Shah"], doi="10.1/x")
    assert pubmed.vancouver(ref) == "Rao KM, Shah P. Prevalence of anaemia. BMJ. 2021. doi:10.1/x"


def test_vancouver_truncates_after_six_authors() -> None:
    ref = RefMeta(title="T", journal="J", year="2020", pmid="1", authors=[f"A Author{i}" for i in range(8)])
    citation = pubmed.vancouver(ref)
    assert citation.startswith("Author0 A, Author1 A, Author2 A, Author3 A, Author4 A, Author5 A, et al. T.")
    assert citation.endswith("PMID:1")


def test_search_literature_gives_up_quietly(monkeypatch) -> None:
    attempts = []

    @retry(stop=stop_after_attempt(2), wait=wait_none())
    def failing_search(term, retmax=10):
        attempts.append(term)
        raise requests.ConnectionError("eutils unreachable")

    monkeypatch.setattr(pubmed, "pubmed_search", failing_search)
    assert pubmed.search_literature("anaemia") == []
    assert attempts == ["anaemia", "anaemia"]


def test_search_literature_fetches_found_ids(monkeypatch) -> None:
    monkeypatch.setattr(pubmed, "pubmed_search", lambda term, retmax=10: ["38012345", "29999999"])
    monkeypatch.setattr(pubmed, "pubmed_fetch_xml", lambda pmids: etree.fromstring(EFETCH_XML))
    records = pubmed.search_literature("anaemia", retmax=2)
    assert [r.pmid for r in records] == ["38012345", "29999999"]


def test_empty_fetch_has_no_records() -> None:
    assert pubmed.pubmed_parse_records(pubmed.pubmed_fetch_xml.__wrapped__([])) == []


def test_digest() -> None:
    assert pubmed.articles_digest([]) == "(no retrieved articles)"
    ref = RefMeta(title="T", journal="J", year="2020", pmid="7", authors=["Ann Lee"])
    assert pubmed.articles_digest([ref, ref]).splitlines() == [
        "1. Lee A. T. J. 2020. PMID:7",
        "2. Lee A. T. J. 2020. PMID:7",
    ]
