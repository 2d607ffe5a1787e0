"""Small pure helpers shared by the guide parsers."""

from __future__ import annotations

import re
import unicodedata

FENCE_RE = re.compile(r"^\s*```[\w-]*\s*\n(.*?)\n\s*```\s*$", re.DOTALL)


def fold(text: str) -> str:
    """Lower-cases and drops accents so 'Implementación' matches 'implementacion'."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def strip_bold(text: str) -> str:
    return text.replace("**", "").replace("__", "").strip()


def strip_code_fence(text: str) -> str:
    """Unwraps a reply that was wrapped whole in a ``` fence."""
    match = FENCE_RE.match(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def non_empty_lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]
