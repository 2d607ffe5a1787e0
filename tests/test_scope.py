from guide_agent.llm.types import RawCompletion
from guide_agent.scope import DEFAULT_OUT_OF_SCOPE_MESSAGE, is_out_of_scope, out_of_scope_message


def _raw(text):
    return RawCompletion(text=text, model="gemini-2.0-flash")


def test_sentinel_with_plain_message():
    raw = _raw("OUT_OF_SCOPE\nThis requires custom development.")

    assert is_out_of_scope(raw)
    assert out_of_scope_message(raw) == "This requires custom development."


def test_json_message_wins_over_raw_text():
    raw = _raw('{"status": "OUT_OF_SCOPE", "message": "Necesita integración con el ERP."}')

    assert is_out_of_scope(raw)
    assert out_of_scope_message(raw) == "Necesita integración con el ERP."


def test_default_message_when_provider_gives_none():
    assert out_of_scope_message(_raw("OUT_OF_SCOPE")) == DEFAULT_OUT_OF_SCOPE_MESSAGE
    assert out_of_scope_message(_raw('{"status": "OUT_OF_SCOPE"}')) == DEFAULT_OUT_OF_SCOPE_MESSAGE


def test_regular_guide_is_in_scope():
    assert not is_out_of_scope(_raw("## Resumen Ejecutivo\nTodo en orden."))
