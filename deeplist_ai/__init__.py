"""DeepList AI 顶层包。

该包提供 AI 工具目录站点的 LLM 客户端层，
包括配置加载、提示词模板、进程内限流、带超时与重试的 OpenRouter 请求执行器，
以及对话、建议与工具内容生成的服务门面。
"""

from deeplist_ai.api.service import AIService, create_service
from deeplist_ai.domain.exceptions import AIServiceError, ErrorCode
from deeplist_ai.domain.models import AIResponse, ChatOptions, Message, SuggestionOptions, ToolDraft

__all__ = [
    "AIService",
    "create_service",
    "AIServiceError",
    "ErrorCode",
    "AIResponse",
    "ChatOptions",
    "Message",
    "SuggestionOptions",
    "ToolDraft",
]
