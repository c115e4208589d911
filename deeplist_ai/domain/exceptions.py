"""统一业务异常模型。

所有跨模块抛出的 AI 调用错误都继承自 AIServiceError，
上层 UI 只需捕获 AIServiceError 并按 code 分支即可（toast / 提示文案）。

retryable 在异常创建时就已确定，执行器只读取该标记，不再事后推断。
"""

from typing import Any, Dict, Optional


class ErrorCode:
    """机器可读错误码。"""

    # 配置与输入校验
    MISSING_API_KEY = "MISSING_API_KEY"
    INVALID_INPUT = "INVALID_INPUT"
    INPUT_TOO_LONG = "INPUT_TOO_LONG"
    # 本地限流
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    # 响应与重试
    INVALID_RESPONSE = "INVALID_RESPONSE"
    MAX_RETRIES_EXCEEDED = "MAX_RETRIES_EXCEEDED"
    NETWORK_ERROR = "NETWORK_ERROR"
    # HTTP 状态码映射
    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    TIMEOUT = "TIMEOUT"
    RATE_LIMITED = "RATE_LIMITED"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    BAD_GATEWAY = "BAD_GATEWAY"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


STATUS_ERROR_CODES: Dict[int, str] = {
    400: ErrorCode.BAD_REQUEST,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    429: ErrorCode.RATE_LIMITED,
    500: ErrorCode.INTERNAL_ERROR,
    502: ErrorCode.BAD_GATEWAY,
    503: ErrorCode.SERVICE_UNAVAILABLE,
}


def error_code_for_status(status: int) -> str:
    """把 HTTP 状态码映射为错误码，未登记的状态统一为 UNKNOWN_ERROR。"""

    return STATUS_ERROR_CODES.get(status, ErrorCode.UNKNOWN_ERROR)


class AIServiceError(Exception):
    """AI 服务异常基类。

    Attributes:
        code: 机器可读错误码（见 ErrorCode）。
        message: 用户可读错误信息。
        http_status: 类 HTTP 状态码，本地错误（如网络中断）可能为 None。
        retryable: 创建时决定的可重试标记。
        extra: 其他补充字段（例如 attempt、model 等）。
    """

    def __init__(
        self,
        code: str,
        message: str,
        http_status: Optional[int] = None,
        retryable: bool = False,
        **extra: Any,
    ):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.retryable = retryable
        self.extra = extra
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "http_status": self.http_status,
            "retryable": self.retryable,
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r}, "
            f"http_status={self.http_status!r}, retryable={self.retryable!r})"
        )


class ValidationError(AIServiceError):
    """参数或配置校验失败，永不重试。"""

    def __init__(self, code: str, message: str, http_status: Optional[int] = 400, **extra: Any):
        super().__init__(code=code, message=message, http_status=http_status, retryable=False, **extra)


class RateLimitError(AIServiceError):
    """本地滑动窗口限流，等待窗口释放后可重试。"""

    def __init__(self, message: str, **extra: Any):
        super().__init__(
            code=ErrorCode.RATE_LIMIT_EXCEEDED,
            message=message,
            http_status=429,
            retryable=True,
            **extra,
        )


class ApiError(AIServiceError):
    """Provider 返回非 2xx，或 2xx 响应体格式不合法。"""


class NetworkError(AIServiceError):
    """网络层错误，例如连接失败、请求超时等。"""


class RetryExhaustedError(AIServiceError):
    """重试预算耗尽，包装最后一次的底层错误信息。"""

    def __init__(self, attempts: int, last_error: Optional[BaseException], **extra: Any):
        last_message = getattr(last_error, "message", None) or str(last_error)
        super().__init__(
            code=ErrorCode.MAX_RETRIES_EXCEEDED,
            message=f"Failed after {attempts} attempts: {last_message}",
            http_status=500,
            retryable=False,
            attempts=attempts,
            **extra,
        )
        self.last_error = last_error
