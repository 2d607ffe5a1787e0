"""Renders a Guide back to the Markdown heading form the parser reads."""

from __future__ import annotations

from typing import List

from ..guide import Guide

RENDER_HEADINGS = {
    "summary": "Resumen Ejecutivo",
    "request_analysis": "Caso de Uso Específico",
    "recommended_items": "Herramientas de IA a Utilizar",
    "architecture": "Arquitectura Simplificada (No Técnica)",
    "steps": "Paso a Paso de Implementación (2 Horas o Menos)",
    "templates": "Plantillas Clave",
    "costs_summary": "Costos Estimados (USD)",
    "risks": "Riesgos y Limitaciones",
    "next_steps": "Casos de Uso Adicionales",
    "timeline_label": "Cronograma Estimado",
    "success_metrics": "Indicadores de Impacto Rápido",
}

LEVEL_LABELS = {"high": "alto", "medium": "medio", "low": "bajo"}


def _section(field: str, lines: List[str]) -> str:
    body = "\n".join(lines).strip()
    return f"## {RENDER_HEADINGS[field]}\n{body}".rstrip()


def render_markdown(guide: Guide) -> str:
    items = [
        f"* **{item.name}**: {item.description}" if item.description else f"* **{item.name}**"
        for item in guide.recommended_items
    ]

    architecture = [guide.architecture.description] if guide.architecture.description else []
    architecture += [f"* {component}" for component in guide.architecture.components]

    steps: List[str] = []
    for step in guide.steps:
        steps.append(f"{step.index}. **[{step.tool}] {step.title} ({step.duration_label})**")
        steps.extend(f"   {line}" for line in step.description.splitlines() if line.strip())

    risks = []
    for risk in guide.risks:
        line = f"* **{risk.description}** [{LEVEL_LABELS[risk.level]}]"
        risks.append(f"{line}: {risk.mitigation}" if risk.mitigation else line)

    sections = [
        _section("summary", [guide.summary]),
        _section("request_analysis", [guide.request_analysis]),
        _section("recommended_items", items),
        _section("architecture", architecture),
        _section("steps", steps),
        _section("templates", [guide.templates]),
        _section("costs_summary", [guide.costs_summary]),
        _section("risks", risks),
        _section("next_steps", [f"* {item}" for item in guide.next_steps]),
        _section("timeline_label", [guide.timeline_label]),
        _section("success_metrics", [f"* {item}" for item in guide.success_metrics]),
    ]
    return "\n\n".join(sections) + "\n"
