"""Canonical implementation-guide document."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

RISK_LEVELS = ("low", "medium", "high")

MAX_STEPS = 12
MAX_RECOMMENDED_ITEMS = 6
MAX_ARCHITECTURE_COMPONENTS = 8
MAX_RISKS = 5
MAX_NEXT_STEPS = 5
MAX_SUCCESS_METRICS = 5

SUMMARY_PLACEHOLDER = "Resumen no disponible."
ANALYSIS_PLACEHOLDER = "Análisis no disponible."
COSTS_PLACEHOLDER = "Costos no disponibles."
TIMELINE_PLACEHOLDER = "Consultar detalles en pasos."
ITEM_NAME_PLACEHOLDER = "Tecnología"
DEFAULT_TOOL = "General"
DEFAULT_DURATION = "Variable"


def step_title_placeholder(index: int) -> str:
    return f"Paso {index}"


@dataclass
class RecommendedItem:
    name: str
    description: str = ""


@dataclass
class Architecture:
    description: str = ""
    components: List[str] = field(default_factory=list)


@dataclass
class Step:
    index: int
    title: str
    description: str = ""
    tool: str = DEFAULT_TOOL
    duration_label: str = DEFAULT_DURATION


@dataclass
class Risk:
    description: str
    level: str = "medium"
    mitigation: str = ""

    def __post_init__(self) -> None:
        if self.level not in RISK_LEVELS:
            raise ValueError(f"Invalid risk level: {self.level}")


@dataclass
class Guide:
    summary: str = SUMMARY_PLACEHOLDER
    request_analysis: str = ANALYSIS_PLACEHOLDER
    recommended_items: List[RecommendedItem] = field(default_factory=list)
    architecture: Architecture = field(default_factory=Architecture)
    steps: List[Step] = field(default_factory=list)
    costs_summary: str = COSTS_PLACEHOLDER
    risks: List[Risk] = field(default_factory=list)
    next_steps: List[str] = field(default_factory=list)
    timeline_label: str = TIMELINE_PLACEHOLDER
    success_metrics: List[str] = field(default_factory=list)
    templates: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Guide":
        """Rebuilds a guide from its stored shape. Missing keys take defaults."""
        architecture = data.get("architecture") or {}
        return cls(
            summary=data.get("summary") or SUMMARY_PLACEHOLDER,
            request_analysis=data.get("request_analysis") or ANALYSIS_PLACEHOLDER,
            recommended_items=[RecommendedItem(**item) for item in data.get("recommended_items") or []],
            architecture=Architecture(
                description=architecture.get("description", ""),
                components=list(architecture.get("components") or []),
            ),
            steps=[Step(**step) for step in data.get("steps") or []],
            costs_summary=data.get("costs_summary") or COSTS_PLACEHOLDER,
            risks=[Risk(**risk) for risk in data.get("risks") or []],
            next_steps=list(data.get("next_steps") or []),
            timeline_label=data.get("timeline_label") or TIMELINE_PLACEHOLDER,
            success_metrics=list(data.get("success_metrics") or []),
            templates=data.get("templates") or "",
        )
