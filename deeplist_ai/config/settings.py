"""配置管理模块。

支持从环境变量、.env 以及 config.yaml 加载配置。

配置只在 load_settings() 时解析一次，之后以 Settings 实例的形式
显式传给 AIService / OpenRouterClient，业务代码不直接读取环境变量。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from deeplist_ai.providers.registry import OPENROUTER_CONFIG


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在）。"""
    candidates = []
    explicit = os.getenv("DEEPLIST_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if not path or path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict):
                    return data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


class Settings(BaseSettings):
    """配置设置（使用 Pydantic）。"""

    # ---- OpenRouter ----
    openrouter_api_key: Optional[str] = Field(default=None, description="OpenRouter API 密钥")
    openrouter_base_url: str = Field(
        default=OPENROUTER_CONFIG.base_url,
        description="OpenRouter API 基础URL",
    )
    openrouter_model_name: Optional[str] = Field(
        default=None,
        description="主模型，用于对话与 AI 指令生成；为空时使用 registry 中的默认模型",
    )
    openrouter_model_name_2: Optional[str] = Field(
        default=None,
        description="次模型，用于建议、描述、名称与欢迎语生成；为空时回退到主模型",
    )
    # OpenRouter 要求的来源标识头（HTTP-Referer / X-Title）
    site_url: str = Field(default="http://localhost:8080", description="HTTP-Referer 头")
    app_title: str = Field(default="DeepList AI", description="X-Title 头")

    # ---- 请求策略 ----
    http_timeout: float = Field(default=30.0, ge=1.0, description="单次请求超时时间（秒）")
    max_retries: int = Field(default=3, ge=0, le=10, description="默认最大重试次数")
    rate_limit_max_requests: int = Field(default=60, ge=1, description="滑动窗口内允许的请求数")
    rate_limit_window_seconds: float = Field(default=60.0, gt=0, description="滑动窗口长度（秒）")

    # ---- 日志 ----
    log_dir: str = Field(default="logs", description="日志目录")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @field_validator("openrouter_api_key")
    @classmethod
    def validate_api_key(cls, v: Optional[str]) -> Optional[str]:
        if v and len(v) < 10:
            raise ValueError("API key seems too short")
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            cls._config_source,
            file_secret_settings,
        )

    @property
    def primary_model(self) -> str:
        return self.openrouter_model_name or OPENROUTER_CONFIG.default_model

    @property
    def secondary_model(self) -> str:
        """次模型名，未配置时回退到主模型。"""

        return self.openrouter_model_name_2 or self.primary_model

    @property
    def suggestion_model(self) -> str:
        """建议生成使用的模型：次模型 → 主模型 → 轻量默认模型。"""

        return (
            self.openrouter_model_name_2
            or self.openrouter_model_name
            or OPENROUTER_CONFIG.suggestion_model
        )


def load_settings(**overrides: Any) -> Settings:
    """解析一次配置并返回新的 Settings 实例。"""

    return Settings(**overrides)
