"""Google Gemini REST provider."""

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


class GeminiProvider:
    name = "gemini"

    def call(self, prompt: PromptPair, config: ProviderConfig) -> RawCompletion:
        if not config.api_key:
            raise CredentialError("API Key de Google AI no configurada (GEMINI_API_KEY/GOOGLE_API_KEY).")

        url = f"{config.base_url}/models/{config.model}:generateContent"
        headers = {
            "x-goog-api-key": config.api_key,
            "content-type": "application/json",
        }
        generation_config = {
            "temperature": config.temperature,
            "maxOutputTokens": config.max_tokens,
        }
        if config.output_format == "json":
            generation_config["responseMimeType"] = "application/json"
        payload = {
            "system_instruction": {"parts": [{"text": prompt.system}]},
            "contents": [{"role": "user", "parts": [{"text": prompt.user}]}],
            "generationConfig": generation_config,
        }

        try:
            res = requests.post(url, headers=headers, json=payload, timeout=config.timeout_seconds)
        except requests.Timeout as exc:
            raise ProviderTimeoutError(f"Google AI no respondió en {config.timeout_seconds:g}s") from exc
        except requests.RequestException as exc:
            raise UnknownProviderError(f"Error de conexión con Google AI: {exc}") from exc

        if not 200 <= res.status_code < 300:
            raise classify_http_error(self.name, res.status_code, res.text)

        try:
            data = res.json()
        except ValueError as exc:
            raise MalformedResponseError("Respuesta de Google AI no es JSON válido") from exc

        if not isinstance(data, dict):
            raise MalformedResponseError("Respuesta de Google AI inválida: se esperaba un objeto JSON")

        candidates = data.get("candidates") or []
        text = ""
        if isinstance(candidates, list) and candidates and isinstance(candidates[0], dict):
            content = candidates[0].get("content") or {}
            parts = (content.get("parts") or []) if isinstance(content, dict) else []
            if isinstance(parts, list):
                text = "".join(str(part.get("text") or "") for part in parts if isinstance(part, dict))
        if not text.strip():
            raise MalformedResponseError("No se recibió respuesta del modelo de IA")

        usage = data.get("usageMetadata")
        if not isinstance(usage, dict):
            usage = {}
        return RawCompletion(
            text=text.strip(),
            model=data.get("modelVersion") or config.model,
            provider=self.name,
            prompt_tokens=int(usage.get("promptTokenCount", 0) or 0),
            completion_tokens=int(usage.get("candidatesTokenCount", 0) or 0),
        )
