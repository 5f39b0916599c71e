"""
文章服务模块
"""

from app.services.articles.article import ArticleService
from app.services.articles.errors import (
    ArticleError,
    ArticleNotFound,
    ArticleTransportError,
    ArticleValidationError,
    ServiceResult,
)
from app.services.articles.slug import generate_slug

__all__ = [
    "ArticleService",
    "ArticleError",
    "ArticleNotFound",
    "ArticleTransportError",
    "ArticleValidationError",
    "ServiceResult",
    "generate_slug",
]
