"""PubMed retrieval through NCBI eUtils, used to ground the literature review."""
from __future__ import annotations

import logging
import re
from typing import List, Optional

import requests
from lxml import etree
from tenacity import RetryError, retry, stop_after_attempt, wait_exponential

from .config import ENTREZ_API_KEY, EUTILS_BASE, MAX_RESULTS
from .models import RefMeta

logger = logging.getLogger(__name__)


def norm_text(s: Optional[str]) -> str:
    return re.sub(r"\s+", " ", s or "").strip()


def _params(**extra) -> dict:
    params = {"db": "pubmed", **extra}
    if ENTREZ_API_KEY:
        params["api_key"] = ENTREZ_API_KEY
    return params


@retry(stop=stop_after_attempt(3), wait=wait_exponential(multiplier=1, min=1, max=6))
def pubmed_search(term: str, retmax: int = MAX_RESULTS) -> List[str]:
    r = requests.get(
        f"{EUTILS_BASE}/esearch.fcgi",
        params=_params(term=term, retmode="json", retmax=retmax, sort="relevance"),
        timeout=30,
    )
    r.raise_for_status()
    return r.json().get("esearchresult", {}).get("idlist", [])


@retry(stop=stop_after_attempt(3), wait=wait_exponential(multiplier=1, min=1, max=6))
def pubmed_fetch_xml(pmids: List[str]) -> etree._Element:
    if not pmids:
        return etree.Element("empty")
    r = requests.get(f"{EUTILS_BASE}/efetch.fcgi", params=_params(id=",".join(pmids), retmode="xml"), timeout=60)
    r.raise_for_status()
    return etree.fromstring(r.content)


def _xml_text(node, xpath: str) -> Optional[str]:
    el = node.find(xpath)
    if el is None:
        return None
    # titles may carry inline markup (<i>, <sup>)
    text = norm_text("".join(el.itertext()))
    return text or None


def pubmed_parse_records(root: etree._Element) -> List[RefMeta]:
    out: List[RefMeta] = []
    for art in root.findall(".//PubmedArticle"):
        pmid = _xml_text(art, ".//MedlineCitation/PMID")
        year = (_xml_text(art, ".//Article/Journal/JournalIssue/PubDate/Year")
                or (_xml_text(art, ".//Article/Journal/JournalIssue/PubDate/MedlineDate") or "")[:4] or None)
        authors = []
        for a in art.findall(".//AuthorList/Author"):
            full = norm_text(f"{_xml_text(a, 'ForeName') or ''} {_xml_text(a, 'LastName') or ''}")
            if full:
                authors.append(full)
        doi = None
        for idn in art.findall(".//ArticleIdList/ArticleId"):
            if idn.get("IdType") == "doi" and idn.text:
                doi = idn.text.lower()
        out.append(RefMeta(
            doi=doi,
            title=_xml_text(art, ".//Article/ArticleTitle"),
            journal=_xml_text(art, ".//Article/Journal/Title"),
            year=year,
            authors=authors,
            pmid=pmid,
            url=f"https://pubmed.ncbi.nlm.nih.gov/{pmid}/" if pmid else None,
        ))
    return out


def vancouver(m: RefMeta) -> str:
    """Lastname Initials for up to six authors, then et al."""

    def fmt_author(a: str) -> str:
        parts = a.strip().split()
        if not parts:
            return a
        return f"{parts[-1]} {''.join(p[0] for p in parts[:-1])}".strip()

    authors = ", ".join(fmt_author(a) for a in m.authors[:6])
    if len(m.authors) > 6:
        authors += ", et al"
    ident = f" doi:{m.doi}" if m.doi else (f" PMID:{m.pmid}" if m.pmid else "")
    title = (m.title or "").rstrip(".")
    return norm_text(f"{authors}. {title}. {m.journal or ''}. {m.year or ''}.{ident}")


def search_literature(term: str, retmax: int = 10) -> List[RefMeta]:
    """Search and fetch in one go; a search that keeps failing yields no records."""
    try:
        records = pubmed_parse_records(pubmed_fetch_xml(pubmed_search(term, retmax=retmax)))
    except RetryError as e:
        logger.warning("PubMed search for %r failed after retries: %s", term, e.last_attempt.exception())
        return []
    logger.info("PubMed search for %r returned %d records", term, len(records))
    return records


def articles_digest(records: List[RefMeta]) -> str:
    if not records:
        return "(no retrieved articles)"
    return "\n".join(f"{i}. {vancouver(m)}" for i, m in enumerate(records, 1))
