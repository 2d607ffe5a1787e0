"""Tolerant parser for Markdown replies with '##' section headings.

Each Guide field is resolved by case- and accent-insensitive substring match
of a short phrase list against the reply's headings, so prompt revisions that
rename a section ("Resumen Ejecutivo" vs "Executive Summary") keep parsing.
A field whose heading is missing falls back to its placeholder instead of
failing the whole reply.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from ..guide import (
    ANALYSIS_PLACEHOLDER,
    COSTS_PLACEHOLDER,
    MAX_ARCHITECTURE_COMPONENTS,
    MAX_NEXT_STEPS,
    MAX_RECOMMENDED_ITEMS,
    MAX_RISKS,
    MAX_STEPS,
    MAX_SUCCESS_METRICS,
    SUMMARY_PLACEHOLDER,
    TIMELINE_PLACEHOLDER,
    Architecture,
    Guide,
)
from ..llm.types import RawCompletion
from .lists import BULLET_RE, extract_bullets, extract_recommended_items, extract_risks
from .sections import find_section, split_sections
from .steps import parse_steps
from .text import non_empty_lines, strip_code_fence

logger = logging.getLogger(__name__)

FIELD_HEADINGS: Dict[str, Tuple[str, ...]] = {
    "summary": ("Resumen Ejecutivo", "Resumen General", "Executive Summary"),
    "request_analysis": ("Caso de Uso Específico", "Análisis de la Solicitud", "Request Analysis"),
    "recommended_items": (
        "Herramientas de IA",
        "Tecnologías Recomendadas",
        "Herramientas Recomendadas",
        "Recommended Tools",
    ),
    "architecture": ("Arquitectura", "Architecture"),
    "steps": ("Paso a Paso", "Pasos de Implementación", "Implementation Steps"),
    "templates": ("Plantillas", "Templates"),
    "costs_summary": ("Costos Estimados", "Costos", "Estimated Costs"),
    "risks": ("Riesgos", "Risks"),
    "next_steps": ("Casos de Uso Adicionales", "Próximos Pasos", "Next Steps"),
    "timeline_label": ("Cronograma Estimado", "Cronograma", "Timeline"),
    "success_metrics": ("Indicadores", "Métricas", "Success Metrics"),
}


def parse_architecture(body: str) -> Architecture:
    prose: List[str] = []
    for line in non_empty_lines(body):
        if not BULLET_RE.match(line):
            prose.append(line)
    return Architecture(
        description="\n".join(prose),
        components=extract_bullets(body, MAX_ARCHITECTURE_COMPONENTS),
    )


def parse_markdown_guide(text: str) -> Guide:
    sections = split_sections(strip_code_fence(text))
    if not sections:
        logger.warning("Markdown reply has no headings; keeping the whole text as summary")
        return Guide(summary=text.strip() or SUMMARY_PLACEHOLDER)

    def body(field: str) -> str:
        return find_section(sections, FIELD_HEADINGS[field]) or ""

    missing = [field for field in FIELD_HEADINGS if not body(field)]
    if missing:
        logger.debug("Markdown reply missing sections: %s", ", ".join(missing))

    return Guide(
        summary=body("summary") or SUMMARY_PLACEHOLDER,
        request_analysis=body("request_analysis") or ANALYSIS_PLACEHOLDER,
        recommended_items=extract_recommended_items(body("recommended_items"), MAX_RECOMMENDED_ITEMS),
        architecture=parse_architecture(body("architecture")),
        steps=parse_steps(body("steps"), MAX_STEPS),
        costs_summary=body("costs_summary") or COSTS_PLACEHOLDER,
        risks=extract_risks(body("risks"), MAX_RISKS),
        next_steps=extract_bullets(body("next_steps"), MAX_NEXT_STEPS),
        timeline_label=body("timeline_label") or TIMELINE_PLACEHOLDER,
        success_metrics=extract_bullets(body("success_metrics"), MAX_SUCCESS_METRICS),
        templates=body("templates"),
    )


class MarkdownGuideParser:
    format = "markdown"

    def parse(self, raw: RawCompletion, out_of_scope: bool = False) -> Guide:
        if out_of_scope:
            raise ValueError("Declined completions have no guide")
        return parse_markdown_guide(raw.text)
