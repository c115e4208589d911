"""Provider 与模型配置。

DeepList 只对接 OpenRouter 一个 Provider，其端点与默认模型集中维护在这里：

- base_url / 端点路径：所有 chat completions 请求都发往这里。
- default_model：未配置 OPENROUTER_MODEL_NAME 时使用的主模型。
- suggestion_model：主/次模型都未配置时，建议生成使用的轻量模型。

上层只通过 Settings 的 primary_model / secondary_model / suggestion_model 取模型名，
具体默认值由这里集中维护，便于后续升级或切换。
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ProviderConfig:
    """某个 Provider 的整体配置。"""

    name: str
    base_url: str
    completions_path: str
    default_model: str
    suggestion_model: str

    def completions_url(self, base_url: str = "") -> str:
        return f"{(base_url or self.base_url).rstrip('/')}{self.completions_path}"


OPENROUTER_CONFIG = ProviderConfig(
    name="openrouter",
    base_url="https://openrouter.ai/api/v1",
    completions_path="/chat/completions",
    default_model="meta-llama/llama-4-maverick:free",
    suggestion_model="meta-llama/llama-3.3-8b-instruct:free",
)

