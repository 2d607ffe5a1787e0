"""Configuration loading and defaults."""

from __future__ import annotations

import os
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

DEFAULT_SETTINGS: Dict[str, Any] = {
    "generation": {
        "provider": "gemini",
        "output_format": None,
        "min_request_chars": 20,
        "max_request_chars": 5000,
    },
    "database": {
        "path": "data/guide_agent.db",
    },
    "paths": {
        "prompts_path": "./PROMPTS.md",
    },
    "parsing": {
        "structured_costs": False,
    },
    "pricing": {
        "gemini:gemini-2.0-flash": {"input_per_1k": 0.0001, "output_per_1k": 0.0004},
        "gemini:gemini-1.5-pro": {"input_per_1k": 0.00125, "output_per_1k": 0.005},
        "openai:gpt-4.1-mini": {"input_per_1k": 0.0004, "output_per_1k": 0.0016},
        "openai:gpt-4.1": {"input_per_1k": 0.002, "output_per_1k": 0.008},
        "anthropic:claude-3-5-haiku-latest": {"input_per_1k": 0.00025, "output_per_1k": 0.00125},
        "anthropic:claude-3-7-sonnet-latest": {"input_per_1k": 0.003, "output_per_1k": 0.015},
    },
}

# Per-variant environment layout and defaults. Only the credential is secret.
PROVIDER_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "gemini": {
        "env_prefix": "GEMINI",
        "key_envs": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
        "model_env": "GOOGLE_AI_MODEL",
        "base_url": "https://generativelanguage.googleapis.com/v1beta",
        "model": "gemini-2.0-flash",
        "timeout_seconds": 60.0,
        "max_tokens": 8192,
        "temperature": 0.7,
        "output_format": "markdown",
    },
    "openai": {
        "env_prefix": "OPENAI",
        "key_envs": ("OPENAI_API_KEY",),
        "model_env": "OPENAI_MODEL",
        "base_url": "https://api.openai.com/v1",
        "model": "gpt-4.1-mini",
        "timeout_seconds": 120.0,
        "max_tokens": 8192,
        "temperature": 0.7,
        "output_format": "json",
    },
    "anthropic": {
        "env_prefix": "ANTHROPIC",
        "key_envs": ("ANTHROPIC_API_KEY",),
        "model_env": "ANTHROPIC_MODEL",
        "base_url": "https://api.anthropic.com/v1",
        "model": "claude-3-7-sonnet-latest",
        "timeout_seconds": 120.0,
        "max_tokens": 8192,
        "temperature": 0.7,
        "output_format": "markdown",
    },
}

OUTPUT_FORMATS = ("markdown", "json")


class ConfigError(ValueError):
    """Settings or environment describe an unusable deployment."""


@dataclass(frozen=True)
class ProviderConfig:
    """One provider backend, read once at start-up and never mutated."""

    provider: str
    base_url: str
    model: str
    api_key: str | None
    timeout_seconds: float
    max_tokens: int
    temperature: float
    output_format: str

    @property
    def route(self) -> str:
        return f"{self.provider}:{self.model}"

    def with_model(self, model: str) -> "ProviderConfig":
        return ProviderConfig(
            provider=self.provider,
            base_url=self.base_url,
            model=model,
            api_key=self.api_key,
            timeout_seconds=self.timeout_seconds,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            output_format=self.output_format,
        )


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(settings_path: str = "config/settings.yaml") -> Dict[str, Any]:
    """Loads settings.yaml and merges it onto defaults."""
    merged = deepcopy(DEFAULT_SETTINGS)
    config_path = Path(settings_path)
    if config_path.exists():
        with config_path.open("r", encoding="utf-8") as f:
            user_cfg = yaml.safe_load(f) or {}
        merged = _deep_merge(merged, user_cfg)
    return merged


def parse_route(route: str) -> tuple[str, str]:
    """Parses 'provider:model' route strings."""
    if ":" not in route:
        raise ValueError(f"Invalid route format: {route}")
    provider, model = route.split(":", 1)
    return provider.strip(), model.strip()


def _env_number(env: Mapping[str, str], key: str, default: Any, cast) -> Any:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be a number, got {raw!r}") from exc


def load_provider_config(
    provider: str,
    settings: Dict[str, Any] | None = None,
    env: Mapping[str, str] | None = None,
) -> ProviderConfig:
    """Builds the immutable config of one variant from the environment."""
    if provider not in PROVIDER_DEFAULTS:
        raise ConfigError(f"Unknown provider '{provider}'. Expected one of: {', '.join(PROVIDER_DEFAULTS)}")

    env = os.environ if env is None else env
    settings = settings or DEFAULT_SETTINGS
    defaults = PROVIDER_DEFAULTS[provider]
    prefix = defaults["env_prefix"]

    api_key = None
    for key_env in defaults["key_envs"]:
        if env.get(key_env):
            api_key = env[key_env]
            break

    output_format = (
        env.get("AI_OUTPUT_FORMAT")
        or settings.get("generation", {}).get("output_format")
        or defaults["output_format"]
    )
    if output_format not in OUTPUT_FORMATS:
        raise ConfigError(f"Unsupported output format '{output_format}'")

    return ProviderConfig(
        provider=provider,
        base_url=(env.get(f"{prefix}_BASE_URL") or defaults["base_url"]).rstrip("/"),
        model=env.get(defaults["model_env"]) or defaults["model"],
        api_key=api_key,
        timeout_seconds=_env_number(env, f"{prefix}_TIMEOUT_SECONDS", defaults["timeout_seconds"], float),
        max_tokens=_env_number(env, f"{prefix}_MAX_TOKENS", defaults["max_tokens"], int),
        temperature=_env_number(env, f"{prefix}_TEMPERATURE", defaults["temperature"], float),
        output_format=output_format,
    )


def active_provider_name(settings: Dict[str, Any], env: Mapping[str, str] | None = None) -> str:
    env = os.environ if env is None else env
    name = env.get("AI_PROVIDER") or settings.get("generation", {}).get("provider") or "gemini"
    name = name.strip().lower()
    if name not in PROVIDER_DEFAULTS:
        raise ConfigError(f"Unknown provider '{name}'. Expected one of: {', '.join(PROVIDER_DEFAULTS)}")
    return name


def load_provider_configs(
    settings: Dict[str, Any],
    env: Mapping[str, str] | None = None,
) -> Dict[str, ProviderConfig]:
    """Loads every variant once. Variants without credentials are still listed."""
    return {name: load_provider_config(name, settings, env) for name in PROVIDER_DEFAULTS}
