import pytest

from guide_agent.config import (
    ConfigError,
    active_provider_name,
    load_provider_config,
    load_provider_configs,
    load_settings,
    parse_route,
)


def test_settings_yaml_merges_onto_defaults(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("generation:\n  provider: anthropic\n  max_request_chars: 800\n", encoding="utf-8")

    settings = load_settings(str(path))

    assert settings["generation"]["provider"] == "anthropic"
    assert settings["generation"]["max_request_chars"] == 800
    assert settings["generation"]["min_request_chars"] == 20
    assert settings["database"]["path"] == "data/guide_agent.db"


def test_missing_settings_file_uses_defaults(tmp_path):
    settings = load_settings(str(tmp_path / "absent.yaml"))

    assert settings["generation"]["provider"] == "gemini"
    assert settings["parsing"]["structured_costs"] is False


def test_variant_defaults():
    gemini = load_provider_config("gemini", env={})
    openai = load_provider_config("openai", env={})
    anthropic = load_provider_config("anthropic", env={})

    assert (gemini.timeout_seconds, gemini.output_format) == (60.0, "markdown")
    assert (openai.timeout_seconds, openai.output_format) == (120.0, "json")
    assert (anthropic.timeout_seconds, anthropic.output_format) == (120.0, "markdown")
    assert gemini.max_tokens == openai.max_tokens == anthropic.max_tokens == 8192
    assert gemini.api_key is None


def test_environment_overrides_are_read_once():
    env = {
        "OPENAI_API_KEY": "sk-test",
        "OPENAI_MODEL": "gpt-4.1",
        "OPENAI_BASE_URL": "http://localhost:8080/v1/",
        "OPENAI_TIMEOUT_SECONDS": "30",
        "OPENAI_MAX_TOKENS": "2048",
        "OPENAI_TEMPERATURE": "0.2",
        "AI_OUTPUT_FORMAT": "markdown",
    }

    config = load_provider_config("openai", env=env)
    env["OPENAI_MODEL"] = "changed-later"

    assert config.model == "gpt-4.1"
    assert config.route == "openai:gpt-4.1"
    assert config.base_url == "http://localhost:8080/v1"
    assert (config.timeout_seconds, config.max_tokens, config.temperature) == (30.0, 2048, 0.2)
    assert config.output_format == "markdown"
    with pytest.raises(AttributeError):
        config.model = "other"


def test_bad_numbers_and_formats_fail_at_load():
    with pytest.raises(ConfigError):
        load_provider_config("gemini", env={"GEMINI_TIMEOUT_SECONDS": "soon"})
    with pytest.raises(ConfigError):
        load_provider_config("gemini", env={"AI_OUTPUT_FORMAT": "xml"})
    with pytest.raises(ConfigError):
        load_provider_config("mistral", env={})


def test_active_provider_from_env_then_settings():
    settings = {"generation": {"provider": "anthropic"}}

    assert active_provider_name(settings, env={}) == "anthropic"
    assert active_provider_name(settings, env={"AI_PROVIDER": " OpenAI "}) == "openai"
    with pytest.raises(ConfigError):
        active_provider_name(settings, env={"AI_PROVIDER": "mistral"})


def test_all_variants_are_loaded():
    configs = load_provider_configs({}, env={"ANTHROPIC_API_KEY": "a"})

    assert set(configs) == {"gemini", "openai", "anthropic"}
    assert configs["anthropic"].api_key == "a"
    assert configs["openai"].with_model("gpt-4.1").route == "openai:gpt-4.1"


def test_parse_route():
    assert parse_route("anthropic:claude-3-5-haiku-latest") == ("anthropic", "claude-3-5-haiku-latest")
    with pytest.raises(ValueError):
        parse_route("gemini")
