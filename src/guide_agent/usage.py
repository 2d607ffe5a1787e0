"""Append-only audit of generation attempts."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Protocol

from .models import get_connection, insert_usage_record
from .outcomes import Failure, GenerationOutcome
from .utils import truncate, utc_now_iso

logger = logging.getLogger(__name__)

MAX_ERROR_MESSAGE_CHARS = 500


@dataclass(frozen=True)
class UsageRecord:
    model_used: str
    prompt_tokens: int
    completion_tokens: int
    status: str
    latency_ms: int
    error_message: str | None = None
    provider: str = ""
    actor_id: str | None = None
    cost_usd: float = 0.0
    timestamp: str = field(default_factory=utc_now_iso)


class UsageSink(Protocol):
    def insert(self, record: UsageRecord) -> None:
        ...


class SqliteUsageSink:
    """Writes records to the usage_records table; one connection per insert."""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path

    def insert(self, record: UsageRecord) -> None:
        with get_connection(self.db_path) as conn:
            insert_usage_record(
                conn,
                model=record.model_used,
                status=record.status,
                prompt_tokens=record.prompt_tokens,
                completion_tokens=record.completion_tokens,
                latency_ms=record.latency_ms,
                error_message=record.error_message,
                provider=record.provider,
                actor_id=record.actor_id,
                cost_usd=record.cost_usd,
                created_at=record.timestamp,
            )


def estimate_cost(
    pricing: Dict[str, Any],
    provider: str,
    model: str,
    prompt_tokens: int,
    completion_tokens: int,
) -> float:
    prices = pricing.get(f"{provider}:{model}")
    if not prices:
        return 0.0
    in_price = float(prices.get("input_per_1k", 0.0))
    out_price = float(prices.get("output_per_1k", 0.0))
    return ((prompt_tokens / 1000.0) * in_price) + ((completion_tokens / 1000.0) * out_price)


class UsageRecorder:
    def __init__(self, sink: UsageSink, pricing: Dict[str, Any] | None = None) -> None:
        self.sink = sink
        self.pricing = pricing or {}

    def record(
        self,
        outcome: GenerationOutcome,
        model_used: str,
        prompt_tokens: int,
        completion_tokens: int,
        latency_ms: int,
        provider: str = "",
        actor_id: str | None = None,
    ) -> None:
        """Audits one attempt. Sink errors are logged and never reach the caller."""
        if isinstance(outcome, Failure):
            status = outcome.audit_status
            error_message = truncate(outcome.message, MAX_ERROR_MESSAGE_CHARS)
        else:
            status = "success"
            error_message = None

        record = UsageRecord(
            model_used=model_used,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            status=status,
            latency_ms=latency_ms,
            error_message=error_message,
            provider=provider,
            actor_id=actor_id,
            cost_usd=estimate_cost(self.pricing, provider, model_used, prompt_tokens, completion_tokens),
        )
        try:
            self.sink.insert(record)
        except Exception:
            logger.exception("Failed to write usage record (status=%s, model=%s)", status, model_used)
