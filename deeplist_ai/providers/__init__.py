"""LLM Provider 集成层。

该包下的模块负责：
- 定义 Provider 抽象接口 (base)。
- 维护 OpenRouter 端点与默认模型 (registry)。
- 提供具体实现 (openrouter_client)。
"""

from typing import TYPE_CHECKING

from deeplist_ai.providers.base import ProviderClient
from deeplist_ai.providers.openrouter_client import OpenRouterClient

if TYPE_CHECKING:
    from deeplist_ai.config.settings import Settings


def create_provider(settings: "Settings") -> ProviderClient:
    """按配置创建默认的 OpenRouter 客户端。"""

    return OpenRouterClient(settings)
