"""
文章系统模型模块
"""

from app.models.articles.article import Article, ARTICLE_STATUSES

__all__ = ["Article", "ARTICLE_STATUSES"]
