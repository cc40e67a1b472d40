"""
Configuration Management Module
统一配置管理
"""
from .settings import (
    Settings,
    EndpointSettings,
    GeneralSettings,
    get_settings,
    get_endpoint_settings,
    get_general_settings,
)

__all__ = [
    "Settings",
    "EndpointSettings",
    "GeneralSettings",
    "get_settings",
    "get_endpoint_settings",
    "get_general_settings",
]
