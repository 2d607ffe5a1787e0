"""Structured-JSON parser: validates a Guide-shaped JSON object field by field."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

from ..guide import (
    ANALYSIS_PLACEHOLDER,
    COSTS_PLACEHOLDER,
    DEFAULT_DURATION,
    DEFAULT_TOOL,
    ITEM_NAME_PLACEHOLDER,
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
    RecommendedItem,
    Risk,
    Step,
    step_title_placeholder,
)
from ..llm.types import MalformedResponseError, RawCompletion
from .lists import normalize_level, parse_recommended_item
from .text import strip_code_fence

# Canonical key first, then names used by earlier prompt revisions.
KEY_ALIASES: Dict[str, Sequence[str]] = {
    "summary": ("summary", "executive_summary"),
    "request_analysis": ("request_analysis", "use_case"),
    "recommended_items": ("recommended_items", "recommended_techs", "tools"),
    "architecture": ("architecture",),
    "steps": ("steps", "implementation_steps"),
    "costs_summary": ("costs_summary", "estimated_costs"),
    "risks": ("risks", "risks_and_challenges"),
    "next_steps": ("next_steps",),
    "timeline_label": ("timeline_label", "estimated_timeline", "timeline"),
    "success_metrics": ("success_metrics",),
    "templates": ("templates",),
}


def _lookup(data: Dict[str, Any], field: str) -> Any:
    for key in KEY_ALIASES[field]:
        if data.get(key) is not None:
            return data[key]
    return None


def _invalid(field: str, expected: str) -> MalformedResponseError:
    return MalformedResponseError(f"Respuesta de IA inválida: '{field}' debe ser {expected}")


def _text(value: Any, field: str, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise _invalid(field, "texto")
    return str(value).strip() or default


def _text_list(value: Any, field: str, limit: int) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise _invalid(field, "una lista de textos")
    return [_text(item, field) for item in value if item is not None][:limit]


def _object_list(value: Any, field: str, limit: int) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise _invalid(field, "una lista")
    return value[:limit]


def _recommended_item(item: Any) -> RecommendedItem:
    if isinstance(item, str):
        return parse_recommended_item(item)
    if not isinstance(item, dict):
        raise _invalid("recommended_items", "una lista de objetos {name, description}")
    return RecommendedItem(
        name=_text(item.get("name"), "recommended_items.name", ITEM_NAME_PLACEHOLDER),
        description=_text(item.get("description"), "recommended_items.description"),
    )


def _step(item: Any, index: int) -> Step:
    if not isinstance(item, dict):
        raise _invalid("steps", "una lista de objetos")
    duration = item.get("duration_label", item.get("duration", item.get("estimated_duration")))
    return Step(
        index=index,
        title=_text(item.get("title"), "steps.title", step_title_placeholder(index)),
        description=_text(item.get("description"), "steps.description"),
        tool=_text(item.get("tool"), "steps.tool", DEFAULT_TOOL),
        duration_label=_text(duration, "steps.duration_label", DEFAULT_DURATION),
    )


def _risk(item: Any) -> Risk:
    if not isinstance(item, dict):
        raise _invalid("risks", "una lista de objetos {description, level, mitigation}")
    description = item.get("description", item.get("risk"))
    return Risk(
        description=_text(description, "risks.description"),
        level=normalize_level(_text(item.get("level"), "risks.level", "medium")),
        mitigation=_text(item.get("mitigation"), "risks.mitigation"),
    )


def _architecture(value: Any) -> Architecture:
    if value is None:
        return Architecture()
    if isinstance(value, str):
        return Architecture(description=value.strip())
    if not isinstance(value, dict):
        raise _invalid("architecture", "un objeto {description, components}")
    return Architecture(
        description=_text(value.get("description"), "architecture.description"),
        components=_text_list(value.get("components"), "architecture.components", MAX_ARCHITECTURE_COMPONENTS),
    )


def _cost_lines(value: Any, label: str = "", currency: str = "") -> List[str]:
    prefix = f"{label}: " if label else ""
    if isinstance(value, dict):
        currency = str(value.get("currency") or currency)
        if "min" in value or "max" in value:
            amount = f"{value.get('min', '?')}-{value.get('max', '?')}"
            return [f"{prefix}{amount} {currency}".strip()]
        lines: List[str] = []
        for key, item in value.items():
            if key == "currency":
                continue
            lines.extend(_cost_lines(item, str(key), currency))
        return lines
    if isinstance(value, list):
        return [line for item in value for line in _cost_lines(item, label, currency)]
    return [f"{prefix}{value}"]


def _costs(value: Any, structured_costs: bool) -> str:
    if value is None or isinstance(value, str):
        return _text(value, "costs_summary", COSTS_PLACEHOLDER)
    if not structured_costs:
        raise _invalid("costs_summary", "texto (costos estructurados deshabilitados)")
    return "\n".join(_cost_lines(value)) or COSTS_PLACEHOLDER


def parse_json_guide(text: str, structured_costs: bool = False) -> Guide:
    try:
        data = json.loads(strip_code_fence(text))
    except json.JSONDecodeError as exc:
        raise MalformedResponseError(f"Respuesta de IA no es JSON válido: {exc.msg}") from exc
    if not isinstance(data, dict):
        raise MalformedResponseError("Respuesta de IA inválida: se esperaba un objeto JSON")

    steps = _object_list(_lookup(data, "steps"), "steps", MAX_STEPS)
    return Guide(
        summary=_text(_lookup(data, "summary"), "summary", SUMMARY_PLACEHOLDER),
        request_analysis=_text(_lookup(data, "request_analysis"), "request_analysis", ANALYSIS_PLACEHOLDER),
        recommended_items=[
            _recommended_item(item)
            for item in _object_list(_lookup(data, "recommended_items"), "recommended_items", MAX_RECOMMENDED_ITEMS)
        ],
        architecture=_architecture(_lookup(data, "architecture")),
        steps=[_step(item, index) for index, item in enumerate(steps, start=1)],
        costs_summary=_costs(_lookup(data, "costs_summary"), structured_costs),
        risks=[_risk(item) for item in _object_list(_lookup(data, "risks"), "risks", MAX_RISKS)],
        next_steps=_text_list(_lookup(data, "next_steps"), "next_steps", MAX_NEXT_STEPS),
        timeline_label=_text(_lookup(data, "timeline_label"), "timeline_label", TIMELINE_PLACEHOLDER),
        success_metrics=_text_list(_lookup(data, "success_metrics"), "success_metrics", MAX_SUCCESS_METRICS),
        templates=_text(_lookup(data, "templates"), "templates"),
    )


class JsonGuideParser:
    format = "json"

    def __init__(self, structured_costs: bool = False) -> None:
        self.structured_costs = structured_costs

    def parse(self, raw: RawCompletion, out_of_scope: bool = False) -> Guide:
        if out_of_scope:
            raise ValueError("Declined completions have no guide")
        return parse_json_guide(raw.text, structured_costs=self.structured_costs)
