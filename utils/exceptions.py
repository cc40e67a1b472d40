"""
Custom Exceptions
自定义异常类
"""
from typing import Optional


class NewsFeedError(Exception):
    """新闻聚合基础异常类"""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(NewsFeedError):
    """配置错误 (缺少凭证等)，不重试"""
    pass


class EndpointError(NewsFeedError):
    """端点调用错误: 非 2xx 响应、传输失败或空输出"""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = "", **kwargs):
        if status_code is not None:
            kwargs.setdefault("status_code", status_code)
        super().__init__(message, kwargs)
        self.status_code = status_code
        self.body = body


class ParseError(NewsFeedError):
    """输出文本无法恢复为合法的 feed JSON"""
    pass


class FetchError(NewsFeedError):
    """两个 tier 均失败后的终止错误"""

    def __init__(self, message: str, cause: Optional[BaseException] = None, tier: Optional[str] = None, **kwargs):
        if tier:
            kwargs.setdefault("tier", tier)
        if cause is not None:
            kwargs.setdefault("cause", f"{type(cause).__name__}: {cause}")
        super().__init__(message, kwargs)
        self.cause = cause
        self.tier = tier
