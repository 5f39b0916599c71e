"""
文章系统Schema模块
"""

from .article import (
    ArticleStatus,
    ArticleInput,
    ArticleCreate,
    ArticleUpdate,
    AuthorInfo,
    ArticleResponse,
    ArticleWithAuthor,
    ArticleStats,
    clean_tags,
    is_empty_content,
)

__all__ = [
    "ArticleStatus",
    "ArticleInput",
    "ArticleCreate",
    "ArticleUpdate",
    "AuthorInfo",
    "ArticleResponse",
    "ArticleWithAuthor",
    "ArticleStats",
    "clean_tags",
    "is_empty_content",
]
