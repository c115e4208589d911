"""Provider 抽象接口。

上层 AIService 不直接依赖 httpx，而是依赖此协议：

- 每个厂商实现一个 ProviderClient（当前只有 OpenRouterClient）。
- 负责：发送已组装好的请求体，处理超时/重试，并把响应 JSON 解析为 AIResponse。

测试中可以用任意实现了 execute 的对象替换真实客户端。
"""

from typing import Any, Dict, Optional, Protocol

from deeplist_ai.domain.models import AIResponse


class ProviderClient(Protocol):
    """LLM Provider 客户端协议。

    实现者需要提供：
    - name: Provider 名称，用于日志/统计。
    - execute(payload, max_retries, timeout): 执行一次逻辑请求，返回 AIResponse，
      失败时抛出 AIServiceError。
    """

    name: str

    async def execute(
        self,
        payload: Dict[str, Any],
        max_retries: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> AIResponse:
        ...
