"""
文章管理（管理员）状态机
list / create / edit 三个视图，负责表单状态、提交前校验以及保存后的整体刷新
"""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import async_sessionmaker

from app.core.config import settings
from app.schemas.articles import (
    ArticleInput,
    ArticleResponse,
    ArticleStats,
    ArticleWithAuthor,
    is_empty_content,
)
from app.services.articles.article import ArticleService
from app.services.articles.errors import ArticleValidationError

STATUS_FILTERS = ("all", "draft", "published", "archived")


class ManagerView(str, Enum):
    LIST = "list"
    CREATE = "create"
    EDIT = "edit"


@dataclass
class ArticleForm:
    """编辑表单，标签以逗号分隔的字符串编辑"""

    title: str = ""
    content: str = ""
    excerpt: str = ""
    cover_image: str = ""
    category: str = ""
    tags: str = ""
    status: str = "draft"

    @classmethod
    def from_article(cls, article: ArticleResponse) -> "ArticleForm":
        return cls(
            title=article.title or "",
            content=article.content or "",
            excerpt=article.excerpt or "",
            cover_image=article.cover_image or "",
            category=article.category or "",
            tags=", ".join(article.tags or []),
            status=article.status or "draft",
        )

    def split_tags(self) -> List[str]:
        return [t.strip() for t in self.tags.split(",") if t.strip()]

    def validate(self) -> None:
        """提交前校验，失败抛出 ArticleValidationError"""
        if not self.title.strip():
            raise ArticleValidationError("标题不能为空", field="title")
        if is_empty_content(self.content):
            raise ArticleValidationError("正文不能为空", field="content")

    def to_input(self) -> ArticleInput:
        return ArticleInput(
            title=self.title.strip(),
            content=self.content,
            excerpt=self.excerpt,
            cover_image=self.cover_image,
            category=self.category,
            tags=self.split_tags(),
            status=self.status,
        )


@dataclass
class StatusMessage:
    type: str  # success / error
    text: str
    expires_at: float = field(default=0.0)


class ArticleManager:
    """
    管理员文章管理页的状态

    author_id 显式传入，用于创建文章时记录作者；
    每次存储调用独立开启会话，list 与 stats 可以并发加载
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        author_id: Optional[int],
        clock: Callable[[], float] = time.monotonic,
        message_ttl: Optional[float] = None,
    ):
        self._session_factory = session_factory
        self.author_id = author_id
        self._clock = clock
        self._message_ttl = settings.ARTICLE_MESSAGE_TTL_SECONDS if message_ttl is None else message_ttl

        self.view: ManagerView = ManagerView.LIST
        self.articles: List[ArticleWithAuthor] = []
        self.stats: ArticleStats = ArticleStats()
        self.form: ArticleForm = ArticleForm()
        self.editing: Optional[ArticleResponse] = None
        self.loading = True
        self.saving = False
        self.search_query = ""
        self.status_filter = "all"
        self._message: Optional[StatusMessage] = None

    # ---------- 提示消息 ----------

    @property
    def message(self) -> Optional[StatusMessage]:
        """当前提示消息，超时后自动清除"""
        if self._message is not None and self._clock() >= self._message.expires_at:
            self._message = None
        return self._message

    def _set_message(self, type_: str, text: str) -> None:
        self._message = StatusMessage(type=type_, text=text, expires_at=self._clock() + self._message_ttl)

    def dismiss_message(self) -> None:
        self._message = None

    # ---------- 数据加载 ----------

    async def _fetch_all(self):
        async with self._session_factory() as db:
            return await ArticleService.list_all(db)

    async def _fetch_stats(self):
        async with self._session_factory() as db:
            return await ArticleService.stats(db)

    async def load(self) -> None:
        """
        并发加载文章列表和统计
        loading 只在首次加载期间为 True，之后的刷新不清空列表
        """
        articles_res, stats_res = await asyncio.gather(self._fetch_all(), self._fetch_stats())

        if articles_res.ok:
            self.articles = articles_res.data or []
        if stats_res.ok:
            self.stats = stats_res.data
        if not articles_res.ok or not stats_res.ok:
            self._set_message("error", "加载文章失败")
        self.loading = False

    # ---------- 视图切换 ----------

    def _reset_form(self) -> None:
        self.form = ArticleForm()
        self.editing = None

    def start_create(self) -> None:
        self._reset_form()
        self.view = ManagerView.CREATE

    async def start_edit(self, article_id: int) -> bool:
        async with self._session_factory() as db:
            result = await ArticleService.get_by_id(db, article_id)

        if not result.ok:
            self._set_message("error", "加载文章失败")
            self.view = ManagerView.LIST
            return False

        self.form = ArticleForm.from_article(result.data)
        self.editing = result.data
        self.view = ManagerView.EDIT
        return True

    def cancel(self) -> None:
        self._reset_form()
        self.view = ManagerView.LIST

    # ---------- 保存与删除 ----------

    async def submit(self) -> bool:
        """
        保存当前表单
        校验失败时不发起任何请求；成功后回到列表并重新加载列表和统计
        """
        try:
            self.form.validate()
        except ArticleValidationError as e:
            self._set_message("error", e.message)
            return False

        self.saving = True
        try:
            payload = self.form.to_input()
            async with self._session_factory() as db:
                if self.editing is not None:
                    result = await ArticleService.update(db, self.editing.id, payload)
                else:
                    result = await ArticleService.create(db, payload, self.author_id)
        finally:
            self.saving = False

        if not result.ok:
            self._set_message("error", result.error.message or "保存文章失败")
            return False

        self._set_message("success", "文章已更新" if self.editing is not None else "文章已创建")
        self._reset_form()
        self.view = ManagerView.LIST
        await self.load()
        return True

    async def delete(self, article_id: int) -> bool:
        async with self._session_factory() as db:
            result = await ArticleService.remove(db, article_id)

        if not result.ok:
            logger.warning("article.manager delete fail id={} err={}", article_id, result.error)
            self._set_message("error", "删除文章失败")
            return False

        self._set_message("success", "文章已删除")
        await self.load()
        return True

    # ---------- 列表筛选（仅在已加载的数据上进行） ----------

    def set_status_filter(self, value: str) -> None:
        if value not in STATUS_FILTERS:
            raise ValueError(f"未知的状态筛选: {value}")
        self.status_filter = value

    @property
    def filtered_articles(self) -> List[ArticleWithAuthor]:
        query = self.search_query.lower()

        def matches(article: ArticleWithAuthor) -> bool:
            if query:
                in_title = query in (article.title or "").lower()
                in_category = query in (article.category or "").lower()
                if not (in_title or in_category):
                    return False
            return self.status_filter == "all" or article.status == self.status_filter

        return [a for a in self.articles if matches(a)]
