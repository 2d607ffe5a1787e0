"""Out-of-scope detection via the sentinel the prompts ask providers to emit."""

from __future__ import annotations

import json

from .llm.types import RawCompletion
from .parsing.text import strip_code_fence

OUT_OF_SCOPE_SENTINEL = "OUT_OF_SCOPE"

DEFAULT_OUT_OF_SCOPE_MESSAGE = (
    "Este caso requiere desarrollo técnico o automatización estructural. "
    "Debe escalarse como proyecto tecnológico formal."
)


def is_out_of_scope(raw: RawCompletion) -> bool:
    return OUT_OF_SCOPE_SENTINEL in raw.text


def out_of_scope_message(raw: RawCompletion) -> str:
    """Provider-asserted JSON 'message', else the reply text without the sentinel."""
    try:
        payload = json.loads(strip_code_fence(raw.text))
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
        return DEFAULT_OUT_OF_SCOPE_MESSAGE

    lines = [
        line.strip()
        for line in raw.text.replace(OUT_OF_SCOPE_SENTINEL, "").splitlines()
        if line.strip()
    ]
    return "\n".join(lines) or DEFAULT_OUT_OF_SCOPE_MESSAGE
