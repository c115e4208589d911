"""统一的消息、模型参数与结果数据模型。

本模块定义了 AI 服务层内部共享的标准数据结构：

- Message: 一条对话消息（system/user/assistant），发送后不可变。
- ModelConfig: 一次请求的采样参数，按任务类型从预设表选取，可逐字段覆盖。
- AIResponse: 一次成功请求的统一结果。
- ChatOptions / SuggestionOptions / ToolDraft: 各门面操作的入参。

OpenRouter 适配层只依赖这些模型，并负责在 API JSON 与它们之间做转换。
"""

from dataclasses import dataclass
from typing import Any, Dict, Literal, Mapping, Optional, Sequence, Tuple


# 与 OpenAI 兼容接口的 role 字段对应
Role = Literal["system", "user", "assistant"]
VALID_ROLES = frozenset({"system", "user", "assistant"})


@dataclass(frozen=True)
class Message:
    """一条对话消息。会话由按时间顺序排列的 Message 序列组成。"""

    role: Role
    content: str

    def __post_init__(self) -> None:
        if self.role not in VALID_ROLES:
            raise ValueError(f"Invalid role {self.role!r}. Must be one of: {sorted(VALID_ROLES)}")
        if not isinstance(self.content, str):
            raise ValueError(f"Message content must be a string, got {type(self.content).__name__}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Message":
        return cls(role=data["role"], content=data.get("content") or "")

    def to_payload(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class ModelConfig:
    """单次请求的模型与采样参数。

    不变量：0 <= temperature <= 2，0 < top_p <= 1，max_tokens >= 1。
    可选字段为 None 时不会出现在请求体中。
    """

    model: str
    temperature: float
    max_tokens: int
    top_p: float
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None
    stop: Optional[Tuple[str, ...]] = None

    def __post_init__(self) -> None:
        if not self.model:
            raise ValueError("Model identifier is required")
        if not 0 <= self.temperature <= 2:
            raise ValueError(f"temperature must be within [0, 2], got {self.temperature}")
        if not 0 < self.top_p <= 1:
            raise ValueError(f"top_p must be within (0, 1], got {self.top_p}")
        if self.max_tokens < 1:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")
        if self.stop is not None and not isinstance(self.stop, tuple):
            object.__setattr__(self, "stop", tuple(self.stop))

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "top_p": self.top_p,
        }
        if self.frequency_penalty is not None:
            payload["frequency_penalty"] = self.frequency_penalty
        if self.presence_penalty is not None:
            payload["presence_penalty"] = self.presence_penalty
        if self.stop:
            payload["stop"] = list(self.stop)
        return payload


def _as_count(value: Any) -> int:
    """token 计数只接受整数（或整数值的浮点数），其余一律记为 0。"""

    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return 0


@dataclass(frozen=True)
class TokenUsage:
    """Provider 返回的 token 统计信息。"""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    @classmethod
    def from_payload(cls, raw: Optional[Mapping[str, Any]]) -> Optional["TokenUsage"]:
        if not raw or not isinstance(raw, Mapping):
            return None
        return cls(
            prompt_tokens=_as_count(raw.get("prompt_tokens")),
            completion_tokens=_as_count(raw.get("completion_tokens")),
            total_tokens=_as_count(raw.get("total_tokens")),
        )


@dataclass(frozen=True)
class AIResponse:
    """一次成功调用的最终结果，创建后不再修改。

    - content: 去除首尾空白后的回答文本。
    - usage: 可选的 token 使用统计。
    - model: Provider 实际使用的模型 ID。
    - finish_reason: 结束原因，如 "stop" / "length"。
    """

    content: str
    usage: Optional[TokenUsage] = None
    model: Optional[str] = None
    finish_reason: Optional[str] = None


@dataclass
class ChatOptions:
    """chat() 的入参。

    max_retries / timeout 为 None 时使用 Settings 中的默认值；
    custom_config 会浅合并到 FACTUAL 预设之上。
    """

    tool_name: str
    tool_prompt: str
    conversation_history: Sequence[Message] = ()
    max_retries: Optional[int] = None
    timeout: Optional[float] = None
    custom_config: Optional[Mapping[str, Any]] = None


@dataclass
class SuggestionOptions:
    """generate_suggestions() 的入参。"""

    tool_name: str
    last_assistant_message: str
    conversation_history: Sequence[Message] = ()
    count: int = 3


@dataclass
class ToolDraft:
    """工具提交/编辑表单的当前内容。

    四个内容生成操作都从这里读取上下文：对应字段为空时“新建”，
    已有内容时“润色”。
    """

    name: str = ""
    description: str = ""
    prompt: str = ""
    initial_message: str = ""
