"""
公开文章页面的数据状态
列表页：已发布文章 + 分类筛选 + 关键字搜索
详情页：按 slug 读取文章，区分"不存在"和"加载失败"
"""

import asyncio
from datetime import datetime
from enum import Enum
from typing import List, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import async_sessionmaker

from app.core.config import settings
from app.schemas.articles import ArticleWithAuthor
from app.services.articles.article import ArticleService
from app.services.articles.errors import ArticleNotFound

UNKNOWN_AUTHOR = "未知作者"


def author_name(article: ArticleWithAuthor) -> str:
    if article.author and article.author.full_name:
        return article.author.full_name
    return UNKNOWN_AUTHOR


def author_initial(article: ArticleWithAuthor) -> str:
    if article.author and article.author.full_name:
        return article.author.full_name[0]
    return "A"


def display_date(article: ArticleWithAuthor) -> str:
    """优先显示发布时间，未发布时显示创建时间，格式如 January 5, 2026"""
    value: Optional[datetime] = article.published_at or article.created_at
    if value is None:
        return ""
    return f"{value.strftime('%B')} {value.day}, {value.year}"


def truncate_text(text: Optional[str], max_length: Optional[int] = None) -> str:
    limit = settings.ARTICLE_EXCERPT_MAX_LENGTH if max_length is None else max_length
    if not text:
        return ""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


class ArticleIndexView:
    """
    公开文章列表页

    搜索结果会替换当前列表；之后选择分类是在搜索结果上筛选，
    而不是重新取一份已发布文章
    """

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory
        self.articles: List[ArticleWithAuthor] = []
        self.categories: List[str] = []
        self.selected_category = ""
        self.search_query = ""
        self.loading = True

    async def _fetch_published(self):
        async with self._session_factory() as db:
            return await ArticleService.list_published(db)

    async def _fetch_categories(self):
        async with self._session_factory() as db:
            return await ArticleService.categories(db)

    async def load(self) -> None:
        self.loading = True
        articles_res, categories_res = await asyncio.gather(
            self._fetch_published(), self._fetch_categories()
        )
        if not articles_res.ok:
            logger.error("article.index load fail err={}", articles_res.error)
        if articles_res.ok:
            self.articles = articles_res.data or []
        if categories_res.ok:
            self.categories = categories_res.data or []
        self.loading = False

    async def search(self, query: Optional[str] = None) -> None:
        """关键字为空时重新加载已发布列表"""
        if query is not None:
            self.search_query = query
        if not self.search_query.strip():
            await self.load()
            return

        self.loading = True
        async with self._session_factory() as db:
            result = await ArticleService.search(db, self.search_query)
        if result.ok:
            self.articles = result.data or []
        else:
            logger.error("article.index search fail err={}", result.error)
        self.loading = False

    def select_category(self, category: Optional[str]) -> None:
        self.selected_category = category or ""

    @property
    def visible_articles(self) -> List[ArticleWithAuthor]:
        if not self.selected_category:
            return list(self.articles)
        return [a for a in self.articles if a.category == self.selected_category]


class DetailState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    NOT_FOUND = "not_found"
    FAILED = "failed"


class ArticleDetailView:
    """
    文章详情页

    not_found 与 failed 只在提示文字上不同，页面上显示同样的空状态。
    正文按原样输出为 HTML，不做清洗：只有管理员可以写文章，
    若对更多角色开放写入，必须在这里加入清洗
    """

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory
        self.article: Optional[ArticleWithAuthor] = None
        self.state = DetailState.LOADING
        self.error: Optional[str] = None

    async def load(self, slug: str) -> None:
        self.state = DetailState.LOADING
        self.error = None
        self.article = None

        async with self._session_factory() as db:
            result = await ArticleService.get_by_slug(db, slug)

        if result.ok and result.data is not None:
            self.article = result.data
            self.state = DetailState.READY
        elif isinstance(result.error, ArticleNotFound) or (result.ok and result.data is None):
            self.error = "文章不存在"
            self.state = DetailState.NOT_FOUND
        else:
            logger.error("article.detail load fail slug={} err={}", slug, result.error)
            self.error = "文章加载失败"
            self.state = DetailState.FAILED

    @property
    def is_empty(self) -> bool:
        return self.state in (DetailState.NOT_FOUND, DetailState.FAILED)

    @property
    def content_html(self) -> str:
        if self.article is None:
            return ""
        return self.article.content or ""
