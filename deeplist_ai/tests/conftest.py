import pytest

from deeplist_ai.config.settings import Settings


@pytest.fixture
def settings(monkeypatch, tmp_path):
    # 隔离本机环境变量、.env 与 config.yaml
    for key in (
        "OPENROUTER_API_KEY",
        "OPENROUTER_MODEL_NAME",
        "OPENROUTER_MODEL_NAME_2",
        "OPENROUTER_BASE_URL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("DEEPLIST_CONFIG_FILE", str(tmp_path / "missing.yaml"))
    monkeypatch.chdir(tmp_path)
    return Settings(
        openrouter_api_key="sk-or-test-0123456789",
        openrouter_model_name="primary/model",
        openrouter_model_name_2="secondary/model",
        http_timeout=5.0,
        max_retries=3,
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture
def recorded_sleeps():
    return []


@pytest.fixture
def fake_sleep(recorded_sleeps):
    async def _sleep(delay):
        recorded_sleeps.append(delay)

    return _sleep


@pytest.fixture
def clean_logger():
    from deeplist_ai.infrastructure.logging.logger import logger

    before = list(logger.handlers)
    yield logger
    for handler in list(logger.handlers):
        if handler not in before:
            logger.removeHandler(handler)
            handler.close()
