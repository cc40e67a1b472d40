"""
Utils Module
通用工具函数
"""
from .logger import setup_logger
from .exceptions import (
    NewsFeedError,
    ConfigurationError,
    EndpointError,
    ParseError,
    FetchError,
)

__all__ = [
    "setup_logger",
    "NewsFeedError",
    "ConfigurationError",
    "EndpointError",
    "ParseError",
    "FetchError",
]
