"""Parser strategy selection, decided once per provider config."""

from __future__ import annotations

from typing import Any, Dict

from .json_parser import JsonGuideParser
from .markdown_parser import MarkdownGuideParser


def get_parser(output_format: str, settings: Dict[str, Any] | None = None):
    settings = settings or {}
    if output_format == "markdown":
        return MarkdownGuideParser()
    if output_format == "json":
        structured_costs = bool(settings.get("parsing", {}).get("structured_costs", False))
        return JsonGuideParser(structured_costs=structured_costs)
    raise ValueError(f"Unsupported output format: {output_format}")
