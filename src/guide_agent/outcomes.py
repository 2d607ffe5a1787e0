"""Request and outcome values of one generation attempt."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Union

from .guide import Guide


@dataclass(frozen=True)
class GenerationRequest:
    client_text: str
    provider: str | None = None
    actor_id: str | None = None


@dataclass(frozen=True)
class Success:
    guide: Guide
    model_used: str
    total_tokens: int
    latency_ms: int
    status = "success"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "guide": self.guide.to_dict(),
            "model": self.model_used,
            "tokens": self.total_tokens,
            "latency_ms": self.latency_ms,
        }


@dataclass(frozen=True)
class OutOfScope:
    message: str
    model_used: str
    latency_ms: int
    total_tokens: int = 0
    status = "out_of_scope"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "guide": None,
            "message": self.message,
            "model": self.model_used,
            "tokens": self.total_tokens,
            "latency_ms": self.latency_ms,
        }


@dataclass(frozen=True)
class Failure:
    kind: str
    message: str
    latency_ms: int
    status = "failure"

    @property
    def audit_status(self) -> str:
        return "timeout" if self.kind == "timeout" else "error"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "kind": self.kind,
            "error": self.message,
            "latency_ms": self.latency_ms,
        }


GenerationOutcome = Union[Success, OutOfScope, Failure]
