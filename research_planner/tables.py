"""Pipe-delimited markdown tables."""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple


def _cells(line: str) -> List[str]:
    return [c.strip() for c in line.split("|") if c.strip()]


def parse_markdown_table(markdown: str) -> Optional[Tuple[List[str], List[List[str]]]]:
    """Return ``(headers, rows)`` or None when the text is not a usable table.

    Only lines containing a pipe are considered; the first is the header,
    the second the separator. Data rows wider than the header are dropped,
    narrower ones are padded with empty cells.
    """
    if not markdown or "|" not in markdown:
        return None

    lines = [line for line in markdown.strip().split("\n") if "|" in line]
    if len(lines) < 2:
        return None

    headers = _cells(lines[0])
    rows = [row for row in (_cells(line) for line in lines[2:]) if 0 < len(row) <= len(headers)]
    if not headers or not rows:
        return None

    for row in rows:
        row.extend([""] * (len(headers) - len(row)))
    return headers, rows


def to_markdown_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    lines = ["| " + " | ".join(headers) + " |", "|" + "|".join("---" for _ in headers) + "|"]
    for row in rows:
        lines.append("| " + " | ".join(str(c) for c in row) + " |")
    return "\n".join(lines)
