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
    explicit = os.getenv("RELAY_CONFIG_FILE")
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

    # ---- OpenAI ----
    openai_api_key: Optional[str] = Field(
        default=None,
        description="调用方未显式传入 key 时使用的 OpenAI API 密钥",
    )
    openai_organization: Optional[str] = Field(
        default=None,
        description="可选的 OpenAI-Organization 请求头",
    )
    openai_api_host: str = Field(
        default="https://api.openai.com",
        description="OpenAI API 主机地址（可指向代理或兼容服务）",
    )
    default_model: str = Field(default="gpt-3.5-turbo", description="默认对话模型 ID")

    # ---- Pinecone ----
    pinecone_api_key: Optional[str] = Field(default=None, description="Pinecone API 密钥")
    pinecone_index: Optional[str] = Field(default=None, description="Pinecone 索引名")
    pinecone_environment: Optional[str] = Field(default=None, description="Pinecone 环境，例如 us-east1-gcp")
    pinecone_project_id: str = Field(
        default="2c91f9c",
        description="Pinecone 项目标识，拼接在索引名之后",
    )

    # 为 None 时不设置超时，由调用方自行控制
    http_timeout: Optional[float] = Field(default=None, gt=0, description="HTTP 超时时间（秒）")
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

    @field_validator("openai_api_key", "pinecone_api_key")
    @classmethod
    def validate_api_key(cls, v: Optional[str]) -> Optional[str]:
        if v and len(v) < 10:
            raise ValueError("API key seems too short")
        return v

    @field_validator("openai_api_host")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

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


settings = Settings()
