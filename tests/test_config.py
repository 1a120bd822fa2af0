import pytest
from pydantic import ValidationError

from shipping.core.config import DEFAULT_QUOTE_ADDR, Settings, load_settings


def test_quote_addr_defaults_when_unset(monkeypatch):
    monkeypatch.delenv("QUOTE_ADDR", raising=False)
    s = Settings(_env_file=None)
    assert s.QUOTE_ADDR == DEFAULT_QUOTE_ADDR
    assert s.quote_url == "http://quote:8090/getquote"


def test_quote_addr_blank_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("QUOTE_ADDR", "   ")
    assert Settings(_env_file=None).QUOTE_ADDR == DEFAULT_QUOTE_ADDR


def test_quote_addr_from_env(monkeypatch):
    monkeypatch.setenv("QUOTE_ADDR", "http://pricing.local:9000/")
    s = Settings(_env_file=None)
    assert s.QUOTE_ADDR == "http://pricing.local:9000"
    assert s.quote_url == "http://pricing.local:9000/getquote"


def test_env_file_override(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("QUOTE_ADDR=http://from-file:8090\nQUOTE_TIMEOUT_SECONDS=1.5\n")
    monkeypatch.delenv("QUOTE_ADDR", raising=False)
    monkeypatch.delenv("QUOTE_TIMEOUT_SECONDS", raising=False)
    monkeypatch.setenv("ENV_FILE", str(env_file))
    s = load_settings()
    assert s.QUOTE_ADDR == "http://from-file:8090"
    assert s.QUOTE_TIMEOUT_SECONDS == 1.5


def test_timeout_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, QUOTE_TIMEOUT_SECONDS=0)


def test_sampler_ratio_is_clamped():
    assert Settings(_env_file=None, OTEL_TRACES_SAMPLER_RATIO=3).OTEL_TRACES_SAMPLER_RATIO == 1.0
    assert Settings(_env_file=None, OTEL_TRACES_SAMPLER_RATIO=-1).OTEL_TRACES_SAMPLER_RATIO == 0.0
