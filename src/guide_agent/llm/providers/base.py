"""LLM provider interface."""

from __future__ import annotations

from typing import Protocol

from ...config import ProviderConfig
from ..types import PromptPair, RawCompletion


class LLMProvider(Protocol):
    name: str

    def call(self, prompt: PromptPair, config: ProviderConfig) -> RawCompletion:
        ...
