import dataclasses

import pytest

from deeplist_ai.domain.exceptions import (
    AIServiceError,
    ApiError,
    ErrorCode,
    RateLimitError,
    RetryExhaustedError,
    ValidationError,
    error_code_for_status,
)
from deeplist_ai.domain.models import AIResponse, Message, ModelConfig, TokenUsage


def test_message_rejects_unknown_role():
    with pytest.raises(ValueError):
        Message(role="tool", content="x")


def test_message_from_dict_and_payload():
    msg = Message.from_dict({"role": "assistant", "content": None})
    assert msg == Message(role="assistant", content="")
    assert Message(role="user", content="hi").to_payload() == {"role": "user", "content": "hi"}


def test_message_is_frozen():
    msg = Message(role="user", content="hi")
    with pytest.raises(dataclasses.FrozenInstanceError):
        msg.content = "changed"


def test_model_config_validation():
    with pytest.raises(ValueError):
        ModelConfig(model="", temperature=0.5, max_tokens=10, top_p=0.5)
    with pytest.raises(ValueError):
        ModelConfig(model="m", temperature=-0.1, max_tokens=10, top_p=0.5)
    with pytest.raises(ValueError):
        ModelConfig(model="m", temperature=0.5, max_tokens=0, top_p=0.5)
    with pytest.raises(ValueError):
        ModelConfig(model="m", temperature=0.5, max_tokens=10, top_p=1.5)
    # 边界值合法
    ModelConfig(model="m", temperature=2, max_tokens=1, top_p=1)


def test_model_config_payload_omits_unset_fields():
    cfg = ModelConfig(model="m", temperature=0.1, max_tokens=5, top_p=0.8, stop=["\n\n"])
    assert cfg.stop == ("\n\n",)
    assert cfg.to_payload() == {
        "model": "m",
        "temperature": 0.1,
        "max_tokens": 5,
        "top_p": 0.8,
        "stop": ["\n\n"],
    }


def test_token_usage_from_payload():
    assert TokenUsage.from_payload(None) is None
    assert TokenUsage.from_payload({}) is None
    usage = TokenUsage.from_payload({"prompt_tokens": 4, "total_tokens": 9})
    assert usage == TokenUsage(prompt_tokens=4, completion_tokens=0, total_tokens=9)


def test_ai_response_defaults():
    res = AIResponse(content="hi")
    assert res.usage is None
    assert res.model is None
    assert res.finish_reason is None


@pytest.mark.parametrize(
    "status,code",
    [
        (400, ErrorCode.BAD_REQUEST),
        (401, ErrorCode.UNAUTHORIZED),
        (403, ErrorCode.FORBIDDEN),
        (404, ErrorCode.NOT_FOUND),
        (408, ErrorCode.TIMEOUT),
        (429, ErrorCode.RATE_LIMITED),
        (500, ErrorCode.INTERNAL_ERROR),
        (502, ErrorCode.BAD_GATEWAY),
        (503, ErrorCode.SERVICE_UNAVAILABLE),
        (504, ErrorCode.UNKNOWN_ERROR),
        (418, ErrorCode.UNKNOWN_ERROR),
    ],
)
def test_error_code_for_status(status, code):
    assert error_code_for_status(status) == code


def test_error_hierarchy_and_flags():
    err = ValidationError(code=ErrorCode.INVALID_INPUT, message="bad")
    assert isinstance(err, AIServiceError)
    assert err.http_status == 400
    assert err.retryable is False

    rl = RateLimitError("Rate limit exceeded. Try again in 5 seconds", reset_in=5)
    assert rl.code == ErrorCode.RATE_LIMIT_EXCEEDED
    assert rl.http_status == 429
    assert rl.retryable is True
    assert rl.extra == {"reset_in": 5}
    assert rl.to_dict() == {
        "code": "RATE_LIMIT_EXCEEDED",
        "message": "Rate limit exceeded. Try again in 5 seconds",
        "http_status": 429,
        "retryable": True,
    }


def test_retry_exhausted_error_message():
    last = ApiError(code=ErrorCode.INTERNAL_ERROR, message="boom", http_status=500)
    err = RetryExhaustedError(attempts=4, last_error=last)
    assert err.code == ErrorCode.MAX_RETRIES_EXCEEDED
    assert str(err) == "Failed after 4 attempts: boom"
    assert err.last_error is last
    assert err.extra["attempts"] == 4
    assert "MAX_RETRIES_EXCEEDED" in repr(err)


def test_message_rejects_non_string_content():
    with pytest.raises(ValueError, match="content must be a string"):
        Message(role="user", content=42)
    with pytest.raises(ValueError):
        Message.from_dict({"role": "assistant", "content": ["a", "b"]})


@pytest.mark.parametrize("raw", ["n/a", ["prompt_tokens", 3], 7])
def test_token_usage_ignores_non_mapping(raw):
    assert TokenUsage.from_payload(raw) is None


def test_token_usage_ignores_non_numeric_counts():
    usage = TokenUsage.from_payload({"prompt_tokens": "many", "completion_tokens": 2.0, "total_tokens": True})
    assert usage == TokenUsage(prompt_tokens=0, completion_tokens=2, total_tokens=0)
