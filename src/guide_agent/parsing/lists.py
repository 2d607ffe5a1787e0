"""Bullet-list extraction for tools, risks, next steps and metrics."""

from __future__ import annotations

import re
from typing import List, Tuple

from ..guide import ITEM_NAME_PLACEHOLDER, RecommendedItem, Risk
from .text import fold, strip_bold

BULLET_RE = re.compile(r"^\s*[*\-•]\s+(.*\S)\s*$")
BOLD_HEAD_RE = re.compile(r"^\*\*(.+?)\*\*\s*(.*)$")
SEPARATOR_RE = re.compile(r":|\s[-–—]\s")
LEADING_SEPARATOR_RE = re.compile(r"^[:\-–—]\s*")
LEVEL_TAG_RE = re.compile(
    r"\s*[\[(]\s*(?:nivel|riesgo|level)?\s*:?\s*(alt[oa]|medi[oa]|baj[oa]|high|medium|low)\s*[\])]",
    re.IGNORECASE,
)
HIGH_RE = re.compile(r"\b(alto|alta|high)\b")
LOW_RE = re.compile(r"\b(bajo|baja|low)\b")

LEVEL_WORDS = {
    "alto": "high",
    "alta": "high",
    "high": "high",
    "medio": "medium",
    "media": "medium",
    "medium": "medium",
    "bajo": "low",
    "baja": "low",
    "low": "low",
}


def bullet_lines(body: str) -> List[str]:
    """Lines that start with a bullet marker, marker removed."""
    items = []
    for line in body.splitlines():
        match = BULLET_RE.match(line)
        if match:
            items.append(match.group(1).strip())
    return items


def extract_bullets(body: str, limit: int) -> List[str]:
    return bullet_lines(body)[:limit]


def split_head_tail(text: str) -> Tuple[str, str | None]:
    """Splits 'Head: tail' style lines. Tail is None when there is no separator.

    A leading **bold** run is the head; otherwise the first colon or spaced dash.
    """
    bold = BOLD_HEAD_RE.match(text)
    if bold:
        head = bold.group(1).strip().rstrip(":").strip()
        tail = LEADING_SEPARATOR_RE.sub("", bold.group(2).strip()).strip()
        return head, tail

    separator = SEPARATOR_RE.search(text)
    if separator is None:
        return strip_bold(text), None
    return strip_bold(text[: separator.start()]), text[separator.end() :].strip()


def normalize_level(word: str) -> str:
    return LEVEL_WORDS.get(fold(word), "medium")


def infer_risk_level(text: str) -> str:
    tag = LEVEL_TAG_RE.search(text)
    if tag:
        return normalize_level(tag.group(1))
    folded = fold(text)
    if HIGH_RE.search(folded):
        return "high"
    if LOW_RE.search(folded):
        return "low"
    return "medium"


def parse_recommended_item(text: str) -> RecommendedItem:
    head, tail = split_head_tail(text)
    if tail is None:
        return RecommendedItem(name=ITEM_NAME_PLACEHOLDER, description=head)
    return RecommendedItem(name=head or ITEM_NAME_PLACEHOLDER, description=tail)


def parse_risk(text: str) -> Risk:
    level = infer_risk_level(text)
    head, tail = split_head_tail(LEVEL_TAG_RE.sub("", text, count=1).strip())
    return Risk(description=head, level=level, mitigation=tail or "")


def extract_recommended_items(body: str, limit: int) -> List[RecommendedItem]:
    return [parse_recommended_item(line) for line in bullet_lines(body)[:limit]]


def extract_risks(body: str, limit: int) -> List[Risk]:
    return [parse_risk(line) for line in bullet_lines(body)[:limit]]
