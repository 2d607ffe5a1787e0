"""Loads optional PROMPTS.md system-prompt overrides with fallbacks."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict

from .prompts import BUILTIN_SYSTEM_PROMPTS
from .scope import OUT_OF_SCOPE_SENTINEL

logger = logging.getLogger(__name__)

SECTION_TITLES = {
    "markdown": "markdown system prompt",
    "json": "json system prompt",
}


def _parse_markdown_sections(text: str) -> Dict[str, str]:
    sections: Dict[str, str] = {}
    heading_re = re.compile(r"^#\s+(.+?)\s*$", re.MULTILINE)
    matches = list(heading_re.finditer(text))
    for idx, match in enumerate(matches):
        start = match.end()
        end = matches[idx + 1].start() if idx + 1 < len(matches) else len(text)
        title = match.group(1).strip().lower()
        sections[title] = text[start:end].strip()
    return sections


def load_prompts(prompts_path: str) -> Dict[str, object]:
    """Top-level '# Markdown System Prompt' / '# JSON System Prompt' sections.

    Only level-1 headings split the file, so override prompts may contain the
    '##' guide headings. An override that drops the scope sentinel is ignored.
    """
    path = Path(prompts_path)
    prompts = dict(BUILTIN_SYSTEM_PROMPTS)
    if not path.exists():
        return {"exists": False, "prompts": prompts}

    sections = _parse_markdown_sections(path.read_text(encoding="utf-8"))
    for output_format, wanted in SECTION_TITLES.items():
        for title, body in sections.items():
            if wanted not in title or not body:
                continue
            if OUT_OF_SCOPE_SENTINEL not in body:
                logger.warning("Ignoring %s override in %s: missing %s", output_format, path, OUT_OF_SCOPE_SENTINEL)
                break
            prompts[output_format] = body
            break

    return {"exists": True, "prompts": prompts}
