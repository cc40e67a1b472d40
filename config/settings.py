"""
Settings Configuration
使用 Pydantic 进行配置验证和管理
"""
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings


class EndpointSettings(BaseSettings):
    """生成式搜索端点配置 (OpenAI Responses API)"""
    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("NEWSFEED_API_KEY", "OPENAI_API_KEY"),
        description="Bearer token",
    )
    model: str = Field(default="gpt-4o", description="模型名称")
    base_url: str = Field(default="https://api.openai.com/v1", description="API 根地址")
    request_timeout_s: float = Field(default=120.0, description="单次 HTTP 请求超时(秒)")
    primary_deadline_s: float = Field(default=150.0, description="Tier 1 总截止时间(秒)")
    fallback_deadline_s: float = Field(default=90.0, description="Tier 2 总截止时间(秒)")

    class Config:
        env_prefix = "NEWSFEED_"
        populate_by_name = True


class GeneralSettings(BaseSettings):
    """通用设置"""
    log_level: str = Field(default="INFO", description="日志级别")
    default_topic: str = Field(default="Artificial Intelligence", description="空看板时的默认话题")

    @field_validator("log_level", mode="before")
    @classmethod
    def _known_level(cls, value: object) -> str:
        # 未知级别回退到 INFO，保证 logging.setLevel 可直接使用
        name = str(value or "").strip().upper()
        return name if isinstance(logging.getLevelName(name), int) else "INFO"

    class Config:
        env_prefix = "NEWSFEED_"


class Settings(BaseSettings):
    """主配置类 - 聚合所有子配置"""

    endpoint: EndpointSettings = Field(default_factory=EndpointSettings)
    general: GeneralSettings = Field(default_factory=GeneralSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def load_from_env_file(cls, env_path: Optional[Path] = None) -> "Settings":
        """从指定的 .env 文件加载配置"""
        if env_path is None:
            # 默认查找 config/.env
            env_path = Path(__file__).parent / ".env"

        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)

        return cls(
            endpoint=EndpointSettings(),
            general=GeneralSettings(),
        )


@lru_cache()
def get_settings() -> Settings:
    """获取全局配置单例"""
    return Settings.load_from_env_file()


def get_endpoint_settings() -> EndpointSettings:
    return get_settings().endpoint


def get_general_settings() -> GeneralSettings:
    return get_settings().general
