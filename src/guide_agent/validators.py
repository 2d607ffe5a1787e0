"""Client request validation."""

from __future__ import annotations

from typing import Any, Dict

from .llm.types import ValidationError

DEFAULT_MIN_REQUEST_CHARS = 20
DEFAULT_MAX_REQUEST_CHARS = 5000


def get_request_limits(config: Dict[str, Any]) -> tuple[int, int]:
    generation = config.get("generation", {})
    return (
        int(generation.get("min_request_chars", DEFAULT_MIN_REQUEST_CHARS)),
        int(generation.get("max_request_chars", DEFAULT_MAX_REQUEST_CHARS)),
    )


def validate_client_request(text: str | None, config: Dict[str, Any]) -> str:
    """Returns the trimmed request or raises ValidationError."""
    cleaned = (text or "").strip()
    min_chars, max_chars = get_request_limits(config)
    if len(cleaned) < min_chars:
        raise ValidationError(f"La solicitud debe tener al menos {min_chars} caracteres")
    if len(cleaned) > max_chars:
        raise ValidationError(f"La solicitud no puede exceder {max_chars} caracteres")
    return cleaned
