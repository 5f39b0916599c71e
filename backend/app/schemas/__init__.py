"""
项目所有Pydantic Schema定义
按功能模块组织在子目录中

导入结构示例：
    from app.schemas.articles import ArticleCreate, ArticleResponse
"""

from .articles import *

# 导出所有Schema类型
__all__ = [
    "ArticleStatus",
    "ArticleInput",
    "ArticleCreate",
    "ArticleUpdate",
    "AuthorInfo",
    "ArticleResponse",
    "ArticleWithAuthor",
    "ArticleStats",
]
