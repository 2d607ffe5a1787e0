"""Client request -> provider call -> scope check -> guide parsing -> audit."""

from __future__ import annotations

import enum
import logging
import os
import threading
import time
from typing import Any, Dict, Mapping

from .config import ProviderConfig, active_provider_name, load_provider_configs
from .llm.providers.base import LLMProvider
from .llm.registry import default_providers, resolve_provider_config
from .llm.types import (
    GenerationError,
    PromptPair,
    ProviderTimeoutError,
    RawCompletion,
    ValidationError,
)
from .outcomes import Failure, GenerationOutcome, GenerationRequest, OutOfScope, Success
from .parsing.strategies import get_parser
from .prompt_loader import load_prompts
from .prompts import build_prompt
from .scope import is_out_of_scope, out_of_scope_message
from .usage import SqliteUsageSink, UsageRecorder
from .validators import validate_client_request

logger = logging.getLogger(__name__)


class GenerationState(enum.Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    CLASSIFYING = "classifying"
    PARSING = "parsing"
    DONE = "done"
    TIMED_OUT = "timed_out"
    FAILED = "failed"


def call_with_deadline(provider: LLMProvider, prompt: PromptPair, config: ProviderConfig) -> RawCompletion:
    """Runs one provider call under a hard deadline; never retries.

    The call runs on a daemon thread that is abandoned on timeout, so a stuck
    request never holds the process open. The provider's own socket timeout
    (same value) then aborts the underlying request.
    """
    result: Dict[str, Any] = {}

    def _run() -> None:
        try:
            result["completion"] = provider.call(prompt, config)
        except Exception as exc:
            result["error"] = exc

    worker = threading.Thread(target=_run, name=f"{config.provider}-call", daemon=True)
    worker.start()
    worker.join(config.timeout_seconds)
    if worker.is_alive():
        raise ProviderTimeoutError(
            f"El modelo de IA no respondió en {config.timeout_seconds:g}s. Intenta nuevamente."
        )
    if "error" in result:
        raise result["error"]
    return result["completion"]


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class GuideGenerator:
    def __init__(
        self,
        settings: Dict[str, Any],
        provider_configs: Mapping[str, ProviderConfig],
        recorder: UsageRecorder,
        active_provider: str | None = None,
        providers: Mapping[str, LLMProvider] | None = None,
        system_prompts: Dict[str, str] | None = None,
    ) -> None:
        self.settings = settings
        self.provider_configs = dict(provider_configs)
        self.active_provider = active_provider or active_provider_name(settings)
        if self.active_provider not in self.provider_configs:
            raise ValueError(f"No configuration loaded for provider '{self.active_provider}'")
        self.recorder = recorder
        self.providers = dict(providers or default_providers())
        self.system_prompts = system_prompts
        self.parsers = {
            name: get_parser(config.output_format, settings)
            for name, config in self.provider_configs.items()
        }

    def generate_guide(
        self,
        client_text: str,
        provider: str | None = None,
        actor_id: str | None = None,
    ) -> GenerationOutcome:
        return self.run(GenerationRequest(client_text=client_text, provider=provider, actor_id=actor_id))

    def _transition(self, state: GenerationState, new_state: GenerationState) -> GenerationState:
        logger.debug("Generation %s -> %s", state.value, new_state.value)
        return new_state

    def run(self, request: GenerationRequest) -> GenerationOutcome:
        start = time.perf_counter()
        state = GenerationState.IDLE
        config: ProviderConfig | None = None
        raw: RawCompletion | None = None

        try:
            client_text = validate_client_request(request.client_text, self.settings)
            config = resolve_provider_config(self.provider_configs, self.active_provider, request.provider)
            provider = self.providers.get(config.provider)
            if provider is None:
                raise ValidationError(f"Proveedor de IA no disponible: {config.provider}")

            state = self._transition(state, GenerationState.REQUESTING)
            prompt = build_prompt(client_text, config.output_format, self.system_prompts)
            raw = call_with_deadline(provider, prompt, config)
            logger.debug("Raw %s completion:\n%s", config.provider, raw.text)

            state = self._transition(state, GenerationState.CLASSIFYING)
            if is_out_of_scope(raw):
                outcome: GenerationOutcome = OutOfScope(
                    message=out_of_scope_message(raw),
                    model_used=raw.model,
                    latency_ms=_elapsed_ms(start),
                    total_tokens=raw.total_tokens,
                )
                logger.info("Request declined as out of scope by %s", raw.model)
            else:
                state = self._transition(state, GenerationState.PARSING)
                guide = self.parsers[config.provider].parse(raw)
                outcome = Success(
                    guide=guide,
                    model_used=raw.model,
                    total_tokens=raw.total_tokens,
                    latency_ms=_elapsed_ms(start),
                )
                logger.info(
                    "Guide generated by %s: %d steps, %d tokens, %dms",
                    raw.model,
                    len(guide.steps),
                    raw.total_tokens,
                    outcome.latency_ms,
                )
            state = self._transition(state, GenerationState.DONE)
        except GenerationError as exc:
            terminal = GenerationState.TIMED_OUT if isinstance(exc, ProviderTimeoutError) else GenerationState.FAILED
            state = self._transition(state, terminal)
            outcome = Failure(kind=exc.kind, message=str(exc), latency_ms=_elapsed_ms(start))
            logger.warning("Guide generation failed (%s): %s", exc.kind, exc)

        self.recorder.record(
            outcome,
            model_used=raw.model if raw else (config.model if config else "unknown"),
            prompt_tokens=raw.prompt_tokens if raw else 0,
            completion_tokens=raw.completion_tokens if raw else 0,
            latency_ms=outcome.latency_ms,
            provider=config.provider if config else "",
            actor_id=request.actor_id,
        )
        return outcome


def build_generator(
    settings: Dict[str, Any],
    env: Mapping[str, str] | None = None,
    providers: Mapping[str, LLMProvider] | None = None,
) -> GuideGenerator:
    """Wires configs, prompts and the SQLite audit sink once at start-up."""
    env = os.environ if env is None else env
    prompts = load_prompts(settings.get("paths", {}).get("prompts_path", "./PROMPTS.md"))
    recorder = UsageRecorder(
        SqliteUsageSink(settings["database"]["path"]),
        pricing=settings.get("pricing", {}),
    )
    return GuideGenerator(
        settings=settings,
        provider_configs=load_provider_configs(settings, env),
        recorder=recorder,
        active_provider=active_provider_name(settings, env),
        providers=providers,
        system_prompts=prompts["prompts"],
    )
