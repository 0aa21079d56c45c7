import pytest
from pydantic import ValidationError

from greenprompt.config import Settings


def test_defaults(make_settings):
    settings = make_settings()
    assert settings.gemini_api_key is None
    assert not settings.remote_configured
    assert settings.remote_timeout == 30.0
    assert settings.min_word_ratio == 0.9
    assert settings.min_sentence_ratio == 0.8
    assert settings.aggressive_typos is True
    assert settings.tokenizer == "heuristic"


def test_plain_gemini_key_variable(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "from-env")
    settings = Settings(_env_file=None)
    assert settings.gemini_api_key == "from-env"
    assert settings.remote_configured


def test_prefixed_variables(monkeypatch):
    monkeypatch.setenv("GREENPROMPT_MIN_WORD_RATIO", "0.75")
    monkeypatch.setenv("GREENPROMPT_AGGRESSIVE_TYPOS", "false")
    settings = Settings(_env_file=None)
    assert settings.min_word_ratio == 0.75
    assert settings.aggressive_typos is False


def test_blank_key_is_not_configured(make_settings):
    assert not make_settings(gemini_api_key="  ").remote_configured


@pytest.mark.parametrize("overrides", [
    {"min_word_ratio": 1.5},
    {"min_sentence_ratio": -0.1},
    {"remote_timeout": 0},
    {"tokenizer": "sentencepiece"},
])
def test_invalid_values_rejected(make_settings, overrides):
    with pytest.raises(ValidationError):
        make_settings(**overrides)
