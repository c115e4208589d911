import pytest
from pydantic import ValidationError

from deeplist_ai.config.settings import Settings, load_settings


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for key in (
        "OPENROUTER_API_KEY",
        "OPENROUTER_MODEL_NAME",
        "OPENROUTER_MODEL_NAME_2",
        "OPENROUTER_BASE_URL",
        "HTTP_TIMEOUT",
        "MAX_RETRIES",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("DEEPLIST_CONFIG_FILE", str(tmp_path / "missing.yaml"))
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_defaults(clean_env):
    s = load_settings()
    assert s.openrouter_api_key is None
    assert s.openrouter_base_url == "https://openrouter.ai/api/v1"
    assert s.http_timeout == 30.0
    assert s.max_retries == 3
    assert s.rate_limit_max_requests == 60
    assert s.rate_limit_window_seconds == 60.0
    assert s.app_title == "DeepList AI"
    assert s.primary_model == "meta-llama/llama-4-maverick:free"
    assert s.secondary_model == s.primary_model
    assert s.suggestion_model == "meta-llama/llama-3.3-8b-instruct:free"


def test_model_resolution(clean_env):
    s = load_settings(openrouter_model_name="a/primary")
    assert s.secondary_model == "a/primary"
    assert s.suggestion_model == "a/primary"
    s = load_settings(openrouter_model_name="a/primary", openrouter_model_name_2="b/secondary")
    assert s.primary_model == "a/primary"
    assert s.secondary_model == "b/secondary"
    assert s.suggestion_model == "b/secondary"


def test_env_overrides(clean_env, monkeypatch):
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-env-0123456789")
    monkeypatch.setenv("MAX_RETRIES", "5")
    s = load_settings()
    assert s.openrouter_api_key == "sk-or-env-0123456789"
    assert s.max_retries == 5


def test_dotenv_file(clean_env):
    (clean_env / ".env").write_text("OPENROUTER_MODEL_NAME=dotenv/model\n", encoding="utf-8")
    assert load_settings().primary_model == "dotenv/model"


def test_yaml_config(clean_env, monkeypatch):
    cfg = clean_env / "deeplist.yaml"
    cfg.write_text("openrouter_model_name: yaml/model\nhttp_timeout: 12\n", encoding="utf-8")
    monkeypatch.setenv("DEEPLIST_CONFIG_FILE", str(cfg))
    s = load_settings()
    assert s.primary_model == "yaml/model"
    assert s.http_timeout == 12.0


def test_env_beats_yaml(clean_env, monkeypatch):
    cfg = clean_env / "config.yaml"
    cfg.write_text("openrouter_model_name: yaml/model\n", encoding="utf-8")
    monkeypatch.delenv("DEEPLIST_CONFIG_FILE")
    monkeypatch.setenv("OPENROUTER_MODEL_NAME", "env/model")
    assert load_settings().primary_model == "env/model"


def test_invalid_yaml_is_ignored(clean_env, monkeypatch):
    cfg = clean_env / "broken.yaml"
    cfg.write_text("openrouter_model_name: [unclosed\n", encoding="utf-8")
    monkeypatch.setenv("DEEPLIST_CONFIG_FILE", str(cfg))
    with pytest.warns(UserWarning):
        s = load_settings()
    assert s.openrouter_model_name is None


def test_short_api_key_rejected(clean_env):
    with pytest.raises(ValidationError):
        Settings(openrouter_api_key="short")


@pytest.mark.parametrize("field,value", [("http_timeout", 0.5), ("max_retries", -1), ("max_retries", 11)])
def test_range_validation(clean_env, field, value):
    with pytest.raises(ValidationError):
        Settings(**{field: value})
