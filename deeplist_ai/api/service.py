"""对外 AI 服务门面。

AIService 把模板引擎、限流器与请求执行器串起来，提供上层页面直接调用的操作：

- chat: 工具对话，错误向上抛出。
- generate_suggestions: 后续问题建议，任何失败都回退到默认建议列表，从不抛出。
- generate_tool_description / generate_tool_prompt / generate_tool_name /
  generate_initial_message: 工具提交表单的内容生成（新建或润色）。

实例通过 create_service() 或显式传入 Settings 构造，不在导入时创建单例。
"""

import math
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from deeplist_ai.api.cleanup import clean_generated_text
from deeplist_ai.api.suggestions import fallback_suggestions, parse_suggestions
from deeplist_ai.config.settings import Settings, load_settings
from deeplist_ai.domain.exceptions import (
    ApiError,
    ErrorCode,
    RateLimitError,
    ValidationError,
)
from deeplist_ai.domain.models import AIResponse, ChatOptions, Message, SuggestionOptions, ToolDraft
from deeplist_ai.infrastructure.logging.logger import logger, setup_logger
from deeplist_ai.infrastructure.rate_limiter import RateLimiter
from deeplist_ai.prompts import QUICK_TOOL_SYSTEM_PROMPT, SUGGESTION_SYSTEM_PROMPT, load_template
from deeplist_ai.prompts.builder import (
    MAX_INPUT_CHARS,
    TaskType,
    build_api_request,
    build_instruction_request,
    build_prompt,
    get_model_config,
    prepare_conversation_context,
)
from deeplist_ai.prompts.generation import (
    description_instruction,
    initial_message_instruction,
    name_instruction,
    prompt_instruction,
    suggestion_instruction,
)
from deeplist_ai.providers import ProviderClient, create_provider


# 建议与内容生成走较小的重试/超时预算
SUGGESTION_MAX_RETRIES = 2
SUGGESTION_TIMEOUT = 15.0
GENERATION_MAX_RETRIES = 2
GENERATION_TIMEOUT = 15.0
GENERATION_OVERRIDES: Dict[str, Any] = {"max_tokens": 2000, "top_p": 0.9}

HistoryItem = Union[Message, Mapping[str, Any]]


def _invalid_input(message: str) -> ValidationError:
    return ValidationError(code=ErrorCode.INVALID_INPUT, message=message)


def _coerce_history(history: Sequence[HistoryItem]) -> List[Message]:
    """接受 Message 或 {role, content} 字典，统一转换为 Message。"""

    try:
        return [m if isinstance(m, Message) else Message.from_dict(m) for m in history or ()]
    except (KeyError, TypeError, ValueError) as e:
        raise _invalid_input(f"Invalid conversation history: {e}") from e


class AIService:
    """AI 服务门面。

    Args:
        settings: 已解析的配置，必须包含 openrouter_api_key。
        provider_client: 请求执行器，默认按配置创建 OpenRouterClient；测试中可替换。
        rate_limiter: 限流器，默认按配置创建；同一实例的所有操作共享。
    """

    def __init__(
        self,
        settings: Settings,
        provider_client: Optional[ProviderClient] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        if not settings.openrouter_api_key:
            raise ValidationError(
                code=ErrorCode.MISSING_API_KEY,
                message="OpenRouter API key not configured",
                http_status=None,
            )
        self._settings = settings
        self._client = provider_client if provider_client is not None else create_provider(settings)
        if rate_limiter is None:
            rate_limiter = RateLimiter(
                max_requests=settings.rate_limit_max_requests,
                window_seconds=settings.rate_limit_window_seconds,
            )
        self.rate_limiter = rate_limiter

    # ------------------------------------------------------------------
    # 对话
    # ------------------------------------------------------------------
    async def chat(self, user_input: str, options: ChatOptions) -> AIResponse:
        """与指定工具对话，返回模型回答。

        校验顺序：输入为空 → 工具名为空 → 工具指令为空 → 输入超长，
        之后才占用限流额度。所有 AIServiceError 原样向上抛出。
        """

        if not user_input or not user_input.strip():
            raise _invalid_input("User input cannot be empty")
        if not options.tool_name or not options.tool_name.strip():
            raise _invalid_input("Tool name is required")
        if not options.tool_prompt or not options.tool_prompt.strip():
            raise _invalid_input("Tool prompt is required")
        if len(user_input) > MAX_INPUT_CHARS:
            raise ValidationError(
                code=ErrorCode.INPUT_TOO_LONG,
                message=f"Input too long. Maximum {MAX_INPUT_CHARS} characters allowed.",
            )
        if options.max_retries is not None and options.max_retries < 0:
            raise _invalid_input("max_retries must not be negative")
        if options.timeout is not None and options.timeout <= 0:
            raise _invalid_input("timeout must be positive")
        try:
            config = get_model_config(
                "FACTUAL",
                options.custom_config,
                default_model=self._settings.primary_model,
            )
        except (TypeError, ValueError) as e:
            raise _invalid_input(f"Invalid model configuration: {e}") from e
        history = prepare_conversation_context(
            _coerce_history(options.conversation_history),
            max_messages=10,
            max_tokens_estimate=4000,
        )

        self._acquire("chat")

        system_prompt = build_prompt(
            load_template(QUICK_TOOL_SYSTEM_PROMPT),
            {"tool_name": options.tool_name, "tool_prompt": options.tool_prompt},
        )
        payload = build_api_request(system_prompt, history, user_input, config)
        logger.info(
            "Chat request",
            extra={"extra": {
                "tool_name": options.tool_name,
                "history_messages": len(history),
                "model": config.model,
            }},
        )
        return await self._client.execute(
            payload,
            max_retries=options.max_retries,
            timeout=options.timeout,
        )

    # ------------------------------------------------------------------
    # 建议
    # ------------------------------------------------------------------
    async def generate_suggestions(self, options: SuggestionOptions) -> List[str]:
        """生成后续问题建议，最多 3 条。失败时返回默认建议，从不抛出。"""

        fallback = fallback_suggestions(options.tool_name)
        if not options.last_assistant_message or not options.last_assistant_message.strip():
            logger.warning("Last assistant message is required for suggestions; using fallback")
            return fallback
        if not self.rate_limiter.can_make_request():
            logger.warning(
                "Rate limit exceeded for suggestions; using fallback",
                extra={"extra": {"reset_in": self.rate_limiter.get_reset_time()}},
            )
            return fallback

        try:
            history = _coerce_history(options.conversation_history)
            config = get_model_config("SUGGESTIONS", default_model=self._settings.suggestion_model)
            system_prompt = build_prompt(
                load_template(SUGGESTION_SYSTEM_PROMPT),
                {"tool_name": options.tool_name},
            )
            user_prompt = suggestion_instruction(history, options.last_assistant_message, options.count)
            payload = build_api_request(system_prompt, [], user_prompt, config)
            response = await self._client.execute(
                payload,
                max_retries=SUGGESTION_MAX_RETRIES,
                timeout=SUGGESTION_TIMEOUT,
            )
        except Exception as e:
            logger.warning(
                f"Failed to generate suggestions: {e}; using fallback",
                extra={"extra": {"code": getattr(e, "code", None), "tool_name": options.tool_name}},
            )
            return fallback

        suggestions = parse_suggestions(response.content)
        if not suggestions:
            logger.warning(
                "No suggestions parsed from response; using fallback",
                extra={"extra": {"content": response.content[:200]}},
            )
            return fallback
        return suggestions

    # ------------------------------------------------------------------
    # 工具内容生成
    # ------------------------------------------------------------------
    async def generate_tool_description(self, draft: ToolDraft) -> str:
        """为工具生成（或润色）一到两句话的简介，需要工具名。"""

        if not draft.name.strip():
            raise _invalid_input("Tool name is required to generate a description")
        return await self._generate(
            "description",
            description_instruction(draft),
            "CREATIVE",
            self._settings.secondary_model,
            temperature=0.7,
        )

    async def generate_tool_prompt(self, draft: ToolDraft) -> str:
        """生成（或润色）以 "You are..." 开头的工具指令，需要工具名。"""

        if not draft.name.strip():
            raise _invalid_input("Tool name is required to generate instructions")
        return await self._generate(
            "instructions",
            prompt_instruction(draft),
            "FACTUAL",
            self._settings.primary_model,
        )

    async def generate_tool_name(self, draft: ToolDraft) -> str:
        """生成（或润色）工具名；有简介时作为上下文。"""

        return await self._generate(
            "name",
            name_instruction(draft),
            "CREATIVE",
            self._settings.secondary_model,
            temperature=0.8,
        )

    async def generate_initial_message(self, draft: ToolDraft) -> str:
        """生成（或润色）欢迎语，需要工具名与工具指令。"""

        if not draft.name.strip() or not draft.prompt.strip():
            raise _invalid_input("Tool name and instructions are required to generate a welcome message")
        return await self._generate(
            "welcome message",
            initial_message_instruction(draft),
            "CREATIVE",
            self._settings.secondary_model,
            temperature=0.7,
        )

    async def _generate(
        self,
        subject: str,
        instruction: str,
        task_type: TaskType,
        model: str,
        **overrides: Any,
    ) -> str:
        config = get_model_config(
            task_type,
            {**GENERATION_OVERRIDES, **overrides},
            default_model=model,
        )
        self._acquire(f"generate {subject}")

        response = await self._client.execute(
            build_instruction_request(instruction, config),
            max_retries=GENERATION_MAX_RETRIES,
            timeout=GENERATION_TIMEOUT,
        )
        text = clean_generated_text(response.content, subject)
        if not text:
            logger.error(
                f"Generated {subject} is empty after cleanup",
                extra={"extra": {"model": response.model}},
            )
            raise ApiError(
                code=ErrorCode.INVALID_RESPONSE,
                message=f"AI service returned an empty {subject}",
                http_status=500,
                retryable=False,
            )
        return text

    def _acquire(self, operation: str) -> None:
        """占用一个限流额度，窗口已满时抛出 RateLimitError。"""

        if self.rate_limiter.can_make_request():
            return
        reset_in = math.ceil(self.rate_limiter.get_reset_time())
        logger.warning(
            f"Rate limit exceeded for {operation}",
            extra={"extra": {"reset_in": reset_in}},
        )
        raise RateLimitError(
            f"Rate limit exceeded. Try again in {reset_in} seconds",
            reset_in=reset_in,
        )


def create_service(
    settings: Optional[Settings] = None,
    provider_factory: Optional[Callable[[Settings], ProviderClient]] = None,
) -> AIService:
    """解析配置、初始化日志并返回新的 AIService 实例。"""

    if settings is None:
        settings = load_settings()
    setup_logger(settings)
    provider = provider_factory(settings) if provider_factory else None
    return AIService(settings, provider_client=provider)
