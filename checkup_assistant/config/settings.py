"""配置管理模块。

支持从 .env、config.yaml 以及环境变量加载配置。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在）。"""
    candidates = []
    explicit = os.getenv("CHECKUP_CONFIG_FILE")
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


class AssistantSettings(BaseSettings):
    """配置设置（使用 Pydantic）。"""

    # ---- 模式 ----
    demo_mode: bool = Field(
        default=True,
        description="演示模式：使用预设回复，无需后端。仅当显式设置为 'false' 时关闭",
    )

    # ---- 远程 Edge Function ----
    supabase_url: Optional[str] = Field(default=None, description="Supabase 项目地址")
    supabase_anon_key: Optional[str] = Field(default=None, description="Supabase 匿名 key")
    chat_function_name: str = Field(default="health-chat", description="对话 Edge Function 名称")
    http_timeout: float = Field(default=30.0, ge=1.0, description="HTTP 超时时间（秒）")

    # ---- 对话 ----
    demo_delay_seconds: float = Field(
        default=0.8,
        ge=0.0,
        description="演示模式下模拟的回复延迟（秒），0 表示不延迟",
    )
    max_history_messages: int = Field(default=20, ge=1, le=200, description="本地保留的最大消息数")
    default_user_age: int = Field(default=29, ge=1, le=120, description="默认用户年龄")

    # ---- 存储与日志 ----
    storage_root: str = Field(default=".storage", description="存储根目录")
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

    @field_validator("demo_mode", mode="before")
    @classmethod
    def parse_demo_mode(cls, v: Any) -> bool:
        # 只有字符串 "false" 才关闭演示模式，其余取值一律视为开启
        if v is None:
            return True
        if isinstance(v, bool):
            return v
        return str(v).strip().lower() != "false"

    @field_validator("supabase_url", "supabase_anon_key", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        s = str(v).strip()
        return s or None

    @field_validator("supabase_url")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        return v.rstrip("/") if v else v

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
    def remote_configured(self) -> bool:
        """远程模式所需的地址与 key 是否都已配置。"""

        return bool(self.supabase_url and self.supabase_anon_key)


settings = AssistantSettings()

# 类型别名，让外部代码可以使用 Settings 类型
Settings = AssistantSettings
