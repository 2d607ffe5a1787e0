"""Anthropic Messages API provider."""

from __future__ import annotations

import requests

from ...config import ProviderConfig
from ..errors import classify_http_error
from ..types import (
    CredentialError,
    MalformedResponseError,
    PromptPair,
    ProviderTimeoutError,
    RawCompletion,
    UnknownProviderError,
)

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicProvider:
    name = "anthropic"

    def call(self, prompt: PromptPair, config: ProviderConfig) -> RawCompletion:
        if not config.api_key:
            raise CredentialError("API Key de Anthropic no configurada (ANTHROPIC_API_KEY).")

        url = f"{config.base_url}/messages"
        headers = {
            "x-api-key": config.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }
        payload = {
            "model": config.model,
            "temperature": config.temperature,
            "max_tokens": config.max_tokens,
            "system": prompt.system,
            "messages": [{"role": "user", "content": prompt.user}],
        }

        try:
            res = requests.post(url, headers=headers, json=payload, timeout=config.timeout_seconds)
        except requests.Timeout as exc:
            raise ProviderTimeoutError(f"Anthropic no respondió en {config.timeout_seconds:g}s") from exc
        except requests.RequestException as exc:
            raise UnknownProviderError(f"Error de conexión con Anthropic: {exc}") from exc

        if not 200 <= res.status_code < 300:
            raise classify_http_error(self.name, res.status_code, res.text)

        try:
            data = res.json()
        except ValueError as exc:
            raise MalformedResponseError("Respuesta de Anthropic no es JSON válido") from exc

        if not isinstance(data, dict):
            raise MalformedResponseError("Respuesta de Anthropic inválida: se esperaba un objeto JSON")

        content = data.get("content", [])
        text = ""
        if content and isinstance(content, list):
            text = "".join(
                str(item.get("text") or "")
                for item in content
                if isinstance(item, dict) and item.get("type") == "text"
            )
        if not text.strip():
            raise MalformedResponseError("No se recibió respuesta del modelo de IA")

        usage = data.get("usage")
        if not isinstance(usage, dict):
            usage = {}
        return RawCompletion(
            text=text.strip(),
            model=data.get("model") or config.model,
            provider=self.name,
            prompt_tokens=int(usage.get("input_tokens", 0) or 0),
            completion_tokens=int(usage.get("output_tokens", 0) or 0),
        )
