"""Research Planner: AI-assisted drafting and PDF assembly of medical research study plans."""

__version__ = "2.0.0"
