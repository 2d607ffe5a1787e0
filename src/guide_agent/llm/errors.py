"""Maps provider HTTP failures onto the generation error taxonomy."""

from __future__ import annotations

import json
from typing import Any, Dict

from .types import (
    CredentialError,
    ProviderError,
    ProviderUnavailableError,
    QuotaExceededError,
    UnknownProviderError,
)

PROVIDER_LABELS = {
    "gemini": "Google AI",
    "openai": "OpenAI",
    "anthropic": "Anthropic",
}

CREDENTIAL_STATUSES = {401, 403}
QUOTA_STATUSES = {429}
UNAVAILABLE_STATUSES = {404, 503, 529}


def _error_fields(body_text: str | None) -> Dict[str, Any] | None:
    """Returns {'message', 'code'} from a structured error body, if any."""
    if not body_text:
        return None
    try:
        payload = json.loads(body_text)
    except (TypeError, ValueError):
        return None
    if not isinstance(payload, dict) or "error" not in payload:
        return None

    error = payload["error"]
    if isinstance(error, str):
        return {"message": error, "code": ""}
    if isinstance(error, dict):
        code = error.get("status") or error.get("type") or error.get("code") or ""
        return {"message": str(error.get("message") or ""), "code": str(code)}
    return None


def classify_http_error(provider: str, status_code: int, body_text: str | None) -> ProviderError:
    label = PROVIDER_LABELS.get(provider, provider)
    fields = _error_fields(body_text)
    if fields is None:
        # Unparseable body: keep the status, decide by status only.
        message = f"{label} error: {status_code}"
        provider_message = ""
        code = ""
    else:
        provider_message = fields["message"]
        code = fields["code"]
        message = f"Error de IA: {provider_message}" if provider_message else f"{label} error: {status_code}"

    lowered = provider_message.lower()
    if status_code in CREDENTIAL_STATUSES or (status_code == 400 and "api key" in lowered):
        return CredentialError("API Key inválida o expirada.", status_code=status_code)
    if status_code in QUOTA_STATUSES or code.upper() == "RESOURCE_EXHAUSTED":
        return QuotaExceededError("Límite de cuota excedido. Intenta más tarde.", status_code=status_code)
    if status_code in UNAVAILABLE_STATUSES or "not found" in lowered:
        return ProviderUnavailableError(
            "Modelo no encontrado, sobrecargado o región no soportada. Verifica el modelo configurado.",
            status_code=status_code,
        )
    return UnknownProviderError(message, status_code=status_code)
