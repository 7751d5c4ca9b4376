"""Environment-driven settings for Research Planner."""
from __future__ import annotations

import logging
import os

APP_TITLE = "Research Planner"
APP_CITATION = "B, Arjun., & Pakhare, Abhijit P. (2025). Research Planner (Version 2.0) [Web Application]."

OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
ENTREZ_API_KEY = os.getenv("ENTREZ_API_KEY")
LOG_LEVEL = os.getenv("RESEARCH_PLANNER_LOG_LEVEL", "INFO")

EUTILS_BASE = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils"
MAX_RESULTS = 20

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())
    # Streamlit re-runs the script on every interaction
    if any(getattr(h, "_research_planner", False) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    handler._research_planner = True
    root.addHandler(handler)
