"""Splits Markdown replies into (heading, body) sections."""

from __future__ import annotations

import re
from typing import Iterable, List, Tuple

from .text import fold, strip_bold

HEADING_RE = re.compile(r"^\s{0,3}(#{1,6})(?!#)\s*(.*?)\s*#*\s*$")

Section = Tuple[str, str]


def _clean_heading(title: str) -> str:
    return strip_bold(title).rstrip(":").strip()


def split_sections(text: str) -> List[Section]:
    """Returns sections in document order.

    Level-2 headings delimit sections and deeper headings stay in the body.
    A reply with no level-2 heading at all falls back to any heading level.
    Text before the first heading is dropped.
    """
    lines = text.splitlines()
    headings = []
    for number, line in enumerate(lines):
        match = HEADING_RE.match(line)
        if match and match.group(2):
            headings.append((number, len(match.group(1)), _clean_heading(match.group(2))))

    boundaries = [h for h in headings if h[1] == 2] or headings
    sections: List[Section] = []
    for idx, (number, _, title) in enumerate(boundaries):
        end = boundaries[idx + 1][0] if idx + 1 < len(boundaries) else len(lines)
        body = "\n".join(lines[number + 1 : end]).strip()
        sections.append((title, body))
    return sections


def find_section(sections: List[Section], phrases: Iterable[str]) -> str | None:
    """First phrase wins; within a phrase, the first matching heading wins."""
    folded = [(fold(title), body) for title, body in sections]
    for phrase in phrases:
        needle = fold(phrase)
        for title, body in folded:
            if needle in title:
                return body
    return None
