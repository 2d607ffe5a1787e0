"""Shared LLM data structures and the generation error taxonomy."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PromptPair:
    system: str
    user: str


@dataclass(frozen=True)
class RawCompletion:
    text: str
    model: str
    provider: str = ""
    prompt_tokens: int = 0
    completion_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


class GenerationError(RuntimeError):
    """Terminal failure of one generation attempt."""

    kind = "unknown_provider_error"


class ValidationError(GenerationError):
    """Client request rejected before any provider call."""

    kind = "validation_error"


class ProviderError(GenerationError):
    """Provider failed to return a valid generation."""

    kind = "unknown_provider_error"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProviderTimeoutError(ProviderError):
    kind = "timeout"


class CredentialError(ProviderError):
    kind = "invalid_credentials"


class QuotaExceededError(ProviderError):
    kind = "quota_exceeded"


class ProviderUnavailableError(ProviderError):
    kind = "model_unavailable"


class UnknownProviderError(ProviderError):
    kind = "unknown_provider_error"


class MalformedResponseError(ProviderError):
    """Empty completion or text the active parser cannot use."""

    kind = "invalid_model_output"
