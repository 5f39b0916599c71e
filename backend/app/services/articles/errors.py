"""
文章服务错误类型与返回结果
服务层不向外抛出存储错误，而是统一返回 ServiceResult(data, error)
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ArticleError(Exception):
    """文章相关错误基类"""

    default_message = "操作失败，请稍后重试"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ArticleValidationError(ArticleError):
    """表单校验失败（标题/正文为空），在发起任何存储请求前拦截"""

    default_message = "表单校验失败"

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ArticleNotFound(ArticleError):
    """按 slug 或 ID 查找不到文章"""

    default_message = "文章不存在"


class ArticleTransportError(ArticleError):
    """存储不可达或拒绝了查询"""

    default_message = "文章服务暂时不可用，请稍后重试"

    def __init__(self, message: Optional[str] = None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


@dataclass
class ServiceResult(Generic[T]):
    """服务调用结果，data 与 error 二选一"""

    data: Optional[T] = None
    error: Optional[ArticleError] = None

    @property
    def ok(self) -> bool:
        return self.error is None
