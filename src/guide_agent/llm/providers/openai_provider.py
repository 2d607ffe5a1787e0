"""OpenAI Chat Completions provider."""

from __future__ import annotations

from typing import Any, Callable

import openai
from openai import OpenAI

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


def _default_client(config: ProviderConfig) -> Any:
    # The SDK retries by default; a failed attempt must surface to the caller.
    return OpenAI(
        api_key=config.api_key,
        base_url=config.base_url,
        timeout=config.timeout_seconds,
        max_retries=0,
    )


class OpenAIProvider:
    name = "openai"

    def __init__(self, client_factory: Callable[[ProviderConfig], Any] | None = None) -> None:
        self._client_factory = client_factory or _default_client

    def call(self, prompt: PromptPair, config: ProviderConfig) -> RawCompletion:
        if not config.api_key:
            raise CredentialError("API Key de OpenAI no configurada (OPENAI_API_KEY).")

        client = self._client_factory(config)
        kwargs: dict[str, Any] = {
            "model": config.model,
            "temperature": config.temperature,
            "max_tokens": config.max_tokens,
            "messages": [
                {"role": "system", "content": prompt.system},
                {"role": "user", "content": prompt.user},
            ],
        }
        if config.output_format == "json":
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = client.chat.completions.create(**kwargs)
        except openai.APITimeoutError as exc:
            raise ProviderTimeoutError(f"OpenAI no respondió en {config.timeout_seconds:g}s") from exc
        except openai.APIStatusError as exc:
            body = getattr(exc.response, "text", None)
            raise classify_http_error(self.name, exc.status_code, body) from exc
        except openai.APIConnectionError as exc:
            raise UnknownProviderError(f"Error de conexión con OpenAI: {exc}") from exc

        choices = getattr(response, "choices", None) or []
        text = ""
        if choices:
            message = getattr(choices[0], "message", None)
            text = getattr(message, "content", "") or ""
        if not text.strip():
            raise MalformedResponseError("No se recibió respuesta del modelo de IA")

        usage = getattr(response, "usage", None)
        return RawCompletion(
            text=text.strip(),
            model=getattr(response, "model", None) or config.model,
            provider=self.name,
            prompt_tokens=int(getattr(usage, "prompt_tokens", 0) or 0),
            completion_tokens=int(getattr(usage, "completion_tokens", 0) or 0),
        )
