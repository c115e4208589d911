"""提示词模板引擎。

纯字符串处理，不做任何 I/O：

- build_prompt: {{KEY}} 占位符替换。
- get_model_config: 按任务类型选取采样参数预设，并合并逐次覆盖。
- prepare_conversation_context: 截断/摘要历史消息，控制上下文长度。
- sanitize_user_input / build_api_request: 组装最终发给 Provider 的请求体。
"""

import dataclasses
import re
from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence

from deeplist_ai.domain.models import Message, ModelConfig


TaskType = Literal["CREATIVE", "FACTUAL", "TECHNICAL", "SUGGESTIONS"]

# 各任务类型的采样参数预设（不含 model，model 由配置注入）
MODEL_PRESETS: Dict[str, Dict[str, Any]] = {
    # 创作类：名称、描述、欢迎语
    "CREATIVE": {
        "temperature": 0.8,
        "max_tokens": 1000,
        "top_p": 0.95,
        "frequency_penalty": 0.2,
        "presence_penalty": 0.1,
    },
    # 事实类：工具对话、AI 指令
    "FACTUAL": {
        "temperature": 0.3,
        "max_tokens": 800,
        "top_p": 0.85,
        "frequency_penalty": 0.0,
        "presence_penalty": 0.0,
    },
    "TECHNICAL": {
        "temperature": 0.1,
        "max_tokens": 2500,
        "top_p": 0.8,
        "frequency_penalty": 0.0,
        "presence_penalty": 0.0,
    },
    "SUGGESTIONS": {
        "temperature": 0.4,
        "max_tokens": 500,
        "top_p": 0.9,
        "frequency_penalty": 0.3,
        "presence_penalty": 0.2,
    },
}

MAX_INPUT_CHARS = 2000
SUMMARY_SNIPPET_CHARS = 150
RECENT_MESSAGE_RATIO = 0.7
SUMMARY_PREFIX = "Previous conversation summary: "

_PLACEHOLDER_RE = re.compile(r"\{\{([A-Z0-9_]+)\}\}")
_TEMPLATE_KEY_RE = re.compile(r"\{\{([^{}]+)\}\}")
_WHITESPACE_RE = re.compile(r"\s+")
_MODEL_CONFIG_FIELDS = frozenset(f.name for f in dataclasses.fields(ModelConfig))


def build_prompt(template: str, context: Mapping[str, Any]) -> str:
    """把 context 中每个 key 对应的 {{KEY_UPPERCASE}} 全部替换为值。

    只替换一轮，值里再出现的占位符不会被展开；
    context 中没有的占位符原样保留（可用 find_placeholders 检查）。
    """

    values = {key.upper(): str(value) for key, value in context.items()}
    return _TEMPLATE_KEY_RE.sub(lambda m: values.get(m.group(1), m.group(0)), template)


def find_placeholders(text: str) -> List[str]:
    """返回文本中仍未替换的占位符名（去重，按出现顺序）。"""

    seen: List[str] = []
    for name in _PLACEHOLDER_RE.findall(text):
        if name not in seen:
            seen.append(name)
    return seen


def get_model_config(
    task_type: TaskType,
    overrides: Optional[Mapping[str, Any]] = None,
    *,
    default_model: str,
) -> ModelConfig:
    """按任务类型返回模型配置：{model, **preset, **overrides}，覆盖项优先。

    未知任务类型、未知覆盖字段或违反取值范围时抛出 ValueError。
    """

    try:
        preset = MODEL_PRESETS[task_type]
    except KeyError:
        raise ValueError(f"Unknown task type: {task_type!r}") from None
    merged: Dict[str, Any] = {"model": default_model, **preset}
    if overrides:
        unknown = set(overrides) - _MODEL_CONFIG_FIELDS
        if unknown:
            raise ValueError(f"Unknown model config fields: {sorted(unknown)}")
        merged.update(overrides)
    return ModelConfig(**merged)


def prepare_conversation_context(
    messages: Sequence[Message],
    max_messages: int = 10,
    max_tokens_estimate: int = 4000,
) -> List[Message]:
    """裁剪会话历史。

    只保留内容非空的 user/assistant 消息；数量不超过 max_messages 时原样返回。
    超出时保留最近 floor(max_messages * 0.7) 条，更早的消息压缩成一条
    system 摘要放在最前面（每条截取前 150 个字符）。

    max_tokens_estimate 目前只作为调用方的预算提示，不参与裁剪。
    """

    valid = [m for m in messages if m.role in ("user", "assistant") and m.content.strip()]
    if len(valid) <= max_messages:
        return valid

    keep = int(max_messages * RECENT_MESSAGE_RATIO)
    recent = valid[len(valid) - keep:] if keep > 0 else []
    older = valid[: len(valid) - len(recent)]
    if not older:
        return recent

    parts = []
    for msg in older:
        snippet = msg.content[:SUMMARY_SNIPPET_CHARS]
        if len(msg.content) > SUMMARY_SNIPPET_CHARS:
            snippet += "..."
        parts.append(f"{msg.role}: {snippet}")
    summary = Message(role="system", content=SUMMARY_PREFIX + " | ".join(parts))
    return [summary, *recent]


def sanitize_user_input(text: str) -> str:
    """去除首尾空白、合并连续空白并截断到 2000 个字符。"""

    return _WHITESPACE_RE.sub(" ", text.strip())[:MAX_INPUT_CHARS].strip()


def build_api_request(
    system_prompt: str,
    history: Sequence[Message],
    user_input: str,
    config: ModelConfig,
) -> Dict[str, Any]:
    """组装请求体：[system, *history, user(已清洗)] + 模型参数。"""

    messages = [
        Message(role="system", content=system_prompt),
        *history,
        Message(role="user", content=sanitize_user_input(user_input)),
    ]
    return _with_model_params([m.to_payload() for m in messages], config)


def build_instruction_request(instruction: str, config: ModelConfig) -> Dict[str, Any]:
    """内容生成类请求：只有一条 user 指令消息，保留原有换行与长度。"""

    message = Message(role="user", content=instruction.strip())
    return _with_model_params([message.to_payload()], config)


def _with_model_params(messages: List[Dict[str, str]], config: ModelConfig) -> Dict[str, Any]:
    params = config.to_payload()
    return {"model": params.pop("model"), "messages": messages, **params}
