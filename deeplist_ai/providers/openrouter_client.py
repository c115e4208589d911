"""OpenRouter Provider 适配器（带重试的请求执行器）。

本模块负责：

1. 把已组装好的请求体 POST 到 OpenRouter 的 chat/completions 端点。
2. 为每次尝试加硬超时，超时即中止本次请求。
3. 按状态码分类错误（可重试：5xx / 429 / 408 / 网络错误 / 响应格式错误），
   对可重试错误做指数退避重试：min(1s * 2^attempt, 5s)。
4. 把响应 JSON 解析为统一的 AIResponse。

限流由上层 AIService 负责，这里不感知。
"""

import asyncio
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, Optional

import httpx

from deeplist_ai.domain.exceptions import (
    AIServiceError,
    ApiError,
    ErrorCode,
    NetworkError,
    RetryExhaustedError,
    ValidationError,
    error_code_for_status,
)
from deeplist_ai.domain.models import AIResponse, TokenUsage
from deeplist_ai.infrastructure.logging.logger import logger
from deeplist_ai.providers.registry import OPENROUTER_CONFIG

if TYPE_CHECKING:
    from deeplist_ai.config.settings import Settings


RETRYABLE_STATUSES = frozenset({408, 429})
BASE_BACKOFF_SECONDS = 1.0
MAX_BACKOFF_SECONDS = 5.0

SleepFunc = Callable[[float], Awaitable[Any]]


def backoff_delay(attempt: int) -> float:
    """第 attempt 次失败后的等待秒数（attempt 从 0 开始）。"""

    return min(BASE_BACKOFF_SECONDS * (2 ** attempt), MAX_BACKOFF_SECONDS)


def is_retryable_status(status: int) -> bool:
    return status >= 500 or status in RETRYABLE_STATUSES


def _is_transient(error: AIServiceError) -> bool:
    if error.code in (ErrorCode.NETWORK_ERROR, ErrorCode.TIMEOUT, ErrorCode.INVALID_RESPONSE):
        return True
    return error.http_status is not None and is_retryable_status(error.http_status)


class OpenRouterClient:
    """OpenRouter 提供方客户端实现。

    - name: Provider 名称（供日志/调试使用）。
    - execute: 执行一次逻辑请求（含超时与重试），返回 AIResponse。

    transport 与 sleep 可注入：测试里用 httpx.MockTransport 模拟服务端，
    用记录型 sleep 观察退避时间。
    """

    name = "openrouter"

    def __init__(
        self,
        settings: "Settings",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        if not settings.openrouter_api_key:
            # 配置缺失走 ValidationError，方便上层统一处理
            raise ValidationError(
                code=ErrorCode.MISSING_API_KEY,
                message="OpenRouter API key not configured",
                http_status=None,
            )
        self._settings = settings
        self._transport = transport
        self._sleep = sleep
        self._url = OPENROUTER_CONFIG.completions_url(settings.openrouter_base_url)

    async def execute(
        self,
        payload: Dict[str, Any],
        max_retries: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> AIResponse:
        """执行一次带重试的 chat completion 调用。

        步骤：
        1. 最多尝试 max_retries + 1 次，每次都带 timeout 秒的硬超时。
        2. 不可重试的错误（4xx 校验/鉴权类）立即抛出。
        3. 可重试错误在还有剩余次数时退避等待后重试。
        4. 最后一次仍是可重试类错误时，抛出 MAX_RETRIES_EXCEEDED。
        """

        if max_retries is None:
            max_retries = self._settings.max_retries
        if timeout is None:
            timeout = self._settings.http_timeout
        if max_retries < 0:
            raise ValidationError(code=ErrorCode.INVALID_INPUT, message="max_retries must not be negative")
        last_error: Optional[AIServiceError] = None

        for attempt in range(max_retries + 1):
            try:
                return await self._attempt(payload, attempt, max_retries, timeout)
            except AIServiceError as exc:
                last_error = exc
                if not _is_transient(exc):
                    logger.error(
                        f"OpenRouter request failed: {exc.message}",
                        extra={"extra": {"code": exc.code, "http_status": exc.http_status, "attempt": attempt}},
                    )
                    raise
                if attempt < max_retries:
                    delay = backoff_delay(attempt)
                    logger.warning(
                        f"Retryable OpenRouter error; retrying in {delay:.1f}s",
                        extra={"extra": {"code": exc.code, "attempt": attempt, "delay": delay}},
                    )
                    await self._sleep(delay)

        error = RetryExhaustedError(attempts=max_retries + 1, last_error=last_error)
        logger.error(error.message, extra={"extra": {"code": error.code}})
        raise error from last_error

    async def _attempt(
        self,
        payload: Dict[str, Any],
        attempt: int,
        max_retries: int,
        timeout: float,
    ) -> AIResponse:
        attempts_left = attempt < max_retries
        try:
            resp = await asyncio.wait_for(self._post(payload, timeout), timeout=timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            # 超时视为传输层故障，可重试
            raise NetworkError(
                code=ErrorCode.TIMEOUT,
                message=f"Request timed out after {timeout:g}s",
                http_status=408,
                retryable=attempts_left,
            )
        except httpx.RequestError as e:
            # 网络错误：DNS 失败、连接被拒绝/重置等
            raise NetworkError(
                code=ErrorCode.NETWORK_ERROR,
                message=str(e) or e.__class__.__name__,
                retryable=attempts_left,
            )

        if not resp.is_success:
            raise ApiError(
                code=error_code_for_status(resp.status_code),
                message=self._error_message(resp),
                http_status=resp.status_code,
                retryable=is_retryable_status(resp.status_code) and attempts_left,
            )
        return self._parse_response(resp, attempts_left)

    async def _post(self, payload: Dict[str, Any], timeout: float) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=timeout,
            trust_env=False,
            transport=self._transport,
        ) as client:
            return await client.post(self._url, json=payload, headers=self._headers())

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._settings.openrouter_api_key}",
            "HTTP-Referer": self._settings.site_url,
            "X-Title": self._settings.app_title,
        }

    @staticmethod
    def _error_message(resp: httpx.Response) -> str:
        """优先使用响应体中的 error.message，解析失败时回退到状态行。"""

        try:
            data = resp.json()
        except ValueError:
            data = None
        if isinstance(data, dict):
            err = data.get("error")
            if isinstance(err, dict) and err.get("message"):
                return str(err["message"])
        return f"HTTP {resp.status_code}: {resp.reason_phrase}"

    def _parse_response(self, resp: httpx.Response, attempts_left: bool) -> AIResponse:
        """将 OpenRouter 的响应 JSON 解析为 AIResponse，缺少 content 视为协议错误。"""

        invalid = ApiError(
            code=ErrorCode.INVALID_RESPONSE,
            message="Invalid response format from AI service",
            http_status=500,
            retryable=attempts_left,
        )
        try:
            data = resp.json()
        except ValueError:
            raise invalid
        if not isinstance(data, dict):
            raise invalid
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            raise invalid
        message = choices[0].get("message")
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str) or not content:
            raise invalid

        result = AIResponse(
            content=content.strip(),
            usage=TokenUsage.from_payload(data.get("usage")),
            model=data.get("model"),
            finish_reason=choices[0].get("finish_reason"),
        )
        logger.info(
            "OpenRouter request succeeded",
            extra={"extra": {
                "model": result.model,
                "finish_reason": result.finish_reason,
                "total_tokens": result.usage.total_tokens if result.usage else None,
            }},
        )
        return result
