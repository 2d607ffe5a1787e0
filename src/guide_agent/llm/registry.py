"""Provider variants and per-request resolution of the active backend."""

from __future__ import annotations

from typing import Dict, Mapping

from ..config import ProviderConfig, parse_route
from .providers.anthropic_provider import AnthropicProvider
from .providers.base import LLMProvider
from .providers.gemini_provider import GeminiProvider
from .providers.openai_provider import OpenAIProvider
from .types import ValidationError


def default_providers() -> Dict[str, LLMProvider]:
    return {
        provider.name: provider
        for provider in (GeminiProvider(), OpenAIProvider(), AnthropicProvider())
    }


def resolve_provider_config(
    configs: Mapping[str, ProviderConfig],
    active: str,
    override: str | None = None,
) -> ProviderConfig:
    """Picks the loaded config for the active variant or a request override.

    The override is a variant name ('openai') or a route ('openai:gpt-4.1').
    Only variants loaded at start-up can be selected.
    """
    if not override:
        return configs[active]

    override = override.strip()
    if ":" in override:
        name, model = parse_route(override)
    else:
        name, model = override, ""
    name = name.lower()

    config = configs.get(name)
    if config is None:
        raise ValidationError(f"Proveedor de IA no configurado: {name}")
    return config.with_model(model) if model else config
