import json

import pytest

from guide_agent.llm.errors import classify_http_error
from guide_agent.llm.types import (
    CredentialError,
    ProviderUnavailableError,
    QuotaExceededError,
    UnknownProviderError,
)


def _body(message, status=""):
    return json.dumps({"error": {"message": message, "status": status}})


@pytest.mark.parametrize(
    "status_code, body, expected, kind",
    [
        (401, _body("unauthorized"), CredentialError, "invalid_credentials"),
        (403, None, CredentialError, "invalid_credentials"),
        (400, _body("API key not valid. Please pass a valid API key."), CredentialError, "invalid_credentials"),
        (429, _body("Too many requests"), QuotaExceededError, "quota_exceeded"),
        (400, _body("Quota exhausted", "RESOURCE_EXHAUSTED"), QuotaExceededError, "quota_exceeded"),
        (404, _body("models/foo is not found"), ProviderUnavailableError, "model_unavailable"),
        (503, "<html>down</html>", ProviderUnavailableError, "model_unavailable"),
        (529, _body("Overloaded", "overloaded_error"), ProviderUnavailableError, "model_unavailable"),
        (500, _body("internal"), UnknownProviderError, "unknown_provider_error"),
    ],
)
def test_status_and_body_classification(status_code, body, expected, kind):
    error = classify_http_error("gemini", status_code, body)

    assert isinstance(error, expected)
    assert error.kind == kind
    assert error.status_code == status_code


def test_unknown_error_keeps_provider_message():
    error = classify_http_error("anthropic", 500, _body("something broke"))

    assert str(error) == "Error de IA: something broke"


def test_unparseable_body_falls_back_to_status_message():
    error = classify_http_error("openai", 502, "Bad Gateway")

    assert isinstance(error, UnknownProviderError)
    assert str(error) == "OpenAI error: 502"


def test_credential_message_is_user_facing():
    error = classify_http_error("gemini", 401, None)

    assert str(error) == "API Key inválida o expirada."
