"""系统提示词模板加载工具。

模板文本以 Markdown 文件形式放在 prompts/templates 目录下，
内容中的 {{KEY}} 占位符由 builder.build_prompt 负责替换。
"""

from functools import lru_cache
from pathlib import Path


TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

QUICK_TOOL_SYSTEM_PROMPT = "quick_tool_system"
SUGGESTION_SYSTEM_PROMPT = "suggestion_system"
CORE_SYSTEM_PROMPT = "core_system"
COMPARISON_SYSTEM_PROMPT = "comparison_system"

TEMPLATE_NAMES = (
    QUICK_TOOL_SYSTEM_PROMPT,
    SUGGESTION_SYSTEM_PROMPT,
    CORE_SYSTEM_PROMPT,
    COMPARISON_SYSTEM_PROMPT,
)


@lru_cache(maxsize=None)
def load_template(name: str) -> str:
    """按名称加载模板文本。

    名称必须是 TEMPLATE_NAMES 之一，否则抛出 KeyError，
    避免拼错名字时静默读到空模板。
    """

    if name not in TEMPLATE_NAMES:
        raise KeyError(f"Unknown prompt template: {name!r}")
    fname = TEMPLATES_DIR / f"{name}.md"
    return fname.read_text(encoding="utf-8").strip()
