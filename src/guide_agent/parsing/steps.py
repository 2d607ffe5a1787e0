"""Numbered implementation-step extraction."""

from __future__ import annotations

import re
from typing import Any, Dict, List

from ..guide import DEFAULT_DURATION, DEFAULT_TOOL, MAX_STEPS, Step, step_title_placeholder
from .lists import LEADING_SEPARATOR_RE
from .text import strip_bold

# 1. **[Tool] Title (Duration)**; only the last parenthesized run is the duration.
STEP_RE = re.compile(
    r"^(\d+)[.)]\s*\*\*(?:\[([^\]]*)\]\s*)?(.*?)\s*(?:\(([^()]*)\))?\s*:?\s*\*\*(.*)$"
)
LEGACY_STEP_RE = re.compile(r"^\d+[.)]\s*(.*)$")


def _build_steps(entries: List[Dict[str, Any]], limit: int) -> List[Step]:
    steps = []
    for index, entry in enumerate(entries[:limit], start=1):
        steps.append(
            Step(
                index=index,
                title=entry.get("title") or step_title_placeholder(index),
                description=entry.get("description", ""),
                tool=entry.get("tool") or DEFAULT_TOOL,
                duration_label=entry.get("duration_label") or DEFAULT_DURATION,
            )
        )
    return steps


def parse_structured_steps(lines: List[str]) -> List[Dict[str, Any]]:
    entries: List[Dict[str, Any]] = []
    current: Dict[str, Any] | None = None
    description: List[str] = []

    for line in lines:
        stripped = line.strip()
        match = STEP_RE.match(stripped)
        if match:
            if current is not None:
                current["description"] = "\n".join(description)
                entries.append(current)
            current = {
                "tool": (match.group(2) or "").strip(),
                "title": (match.group(3) or "").strip(),
                "duration_label": (match.group(4) or "").strip(),
            }
            trailing = LEADING_SEPARATOR_RE.sub("", match.group(5).strip())
            description = [trailing] if trailing else []
        elif current is not None and stripped:
            description.append(stripped)

    if current is not None:
        current["description"] = "\n".join(description)
        entries.append(current)
    return entries


def parse_legacy_steps(lines: List[str]) -> List[Dict[str, Any]]:
    """'N. Title: description' lines, one step per line."""
    entries = []
    for line in lines:
        match = LEGACY_STEP_RE.match(line.strip())
        if not match:
            continue
        clean = match.group(1).strip()
        title, sep, rest = clean.partition(":")
        if sep:
            entries.append({"title": strip_bold(title), "description": rest.strip()})
        else:
            entries.append({"title": "", "description": clean})
    return entries


def parse_steps(body: str, limit: int = MAX_STEPS) -> List[Step]:
    lines = body.splitlines()
    entries = parse_structured_steps(lines)
    if not entries:
        entries = parse_legacy_steps(lines)
    return _build_steps(entries, limit)
