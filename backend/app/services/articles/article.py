"""
文章服务 - CRUD操作
无状态，所有操作返回 ServiceResult，存储错误记录日志后转换为通用错误
"""

from typing import Dict, Iterable, List, Optional, Sequence

import asyncpg
from loguru import logger
from sqlalchemy import select, update, delete, desc, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.articles import Article, ARTICLE_STATUSES
from app.models.articles.article import utcnow
from app.models.core import User
from app.schemas.articles import (
    ArticleInput,
    ArticleResponse,
    ArticleStats,
    ArticleWithAuthor,
    AuthorInfo,
    clean_tags,
)
from app.services.articles.errors import (
    ArticleNotFound,
    ArticleTransportError,
    ServiceResult,
)
from app.services.articles.slug import generate_slug

# asyncpg 建立连接时的错误（拒绝连接、认证失败等）不会被 SQLAlchemy 包装
STORE_ERRORS = (SQLAlchemyError, OSError, asyncpg.PostgresError)


async def _store_failure(db: AsyncSession, operation: str, exc: Exception) -> ServiceResult:
    """记录存储错误并回滚会话"""
    logger.error("article.{} fail err={}", operation, str(exc))
    try:
        await db.rollback()
    except STORE_ERRORS as rollback_exc:
        logger.warning("article.{} rollback fail err={}", operation, str(rollback_exc))
    return ServiceResult(error=ArticleTransportError(cause=exc))


def _like_pattern(query: Optional[str]) -> str:
    """按字面子串匹配，转义 LIKE 通配符"""
    escaped = (query or "").replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _optional_text(value: Optional[str]) -> Optional[str]:
    return value or None


class ArticleService:
    """文章服务类 - 提供文章的CRUD操作"""

    @staticmethod
    async def _load_authors(
        db: AsyncSession,
        author_ids: Iterable[Optional[int]],
        include_email: bool = False
    ) -> Dict[int, AuthorInfo]:
        """
        批量查询作者信息
        只对结果集中出现过的作者ID做一次 IN 查询，不使用表关联
        """
        ids = sorted({author_id for author_id in author_ids if author_id})
        if not ids:
            return {}

        columns = [User.id, User.full_name]
        if include_email:
            columns.append(User.email)
        result = await db.execute(select(*columns).where(User.id.in_(ids)))

        authors = {}
        for row in result.all():
            authors[row.id] = AuthorInfo(
                id=row.id,
                full_name=row.full_name,
                email=row.email if include_email else None,
            )
        return authors

    @staticmethod
    async def _with_authors(db: AsyncSession, articles: Sequence[Article]) -> List[ArticleWithAuthor]:
        authors = await ArticleService._load_authors(db, (a.author_id for a in articles))
        items = []
        for article in articles:
            item = ArticleWithAuthor.model_validate(article)
            item.author = authors.get(article.author_id) if article.author_id else None
            items.append(item)
        return items

    @staticmethod
    async def list_published(
        db: AsyncSession,
        category: Optional[str] = None
    ) -> ServiceResult[List[ArticleWithAuthor]]:
        """
        获取已发布文章（公开），按发布时间倒序
        不传分类时返回全部已发布文章
        """
        try:
            query = (
                select(Article)
                .where(Article.status == "published")
                .order_by(desc(Article.published_at))
            )
            if category:
                query = query.where(Article.category == category)

            result = await db.execute(query)
            articles = list(result.scalars().all())
            return ServiceResult(data=await ArticleService._with_authors(db, articles))
        except STORE_ERRORS as e:
            return await _store_failure(db, "list_published", e)

    @staticmethod
    async def get_by_slug(db: AsyncSession, slug: str) -> ServiceResult[ArticleWithAuthor]:
        """
        根据slug获取文章，并将浏览数加一

        返回的是递增前的快照，存储中的浏览数已经加一
        """
        try:
            result = await db.execute(select(Article).where(Article.slug == slug))
            article = result.scalar_one_or_none()
            if article is None:
                return ServiceResult(error=ArticleNotFound(f"文章slug '{slug}' 不存在"))

            item = ArticleWithAuthor.model_validate(article)
            if article.author_id:
                authors = await ArticleService._load_authors(db, [article.author_id], include_email=True)
                item.author = authors.get(article.author_id)

            # 在数据库端原子递增，避免并发读覆盖
            await db.execute(
                update(Article)
                .where(Article.id == article.id)
                .values(views=Article.views + 1)
            )
            await db.commit()
            return ServiceResult(data=item)
        except STORE_ERRORS as e:
            return await _store_failure(db, "get_by_slug", e)

    @staticmethod
    async def list_all(db: AsyncSession) -> ServiceResult[List[ArticleWithAuthor]]:
        """
        获取全部文章（管理员），不区分状态，按创建时间倒序
        """
        try:
            result = await db.execute(select(Article).order_by(desc(Article.created_at)))
            articles = list(result.scalars().all())
            return ServiceResult(data=await ArticleService._with_authors(db, articles))
        except STORE_ERRORS as e:
            return await _store_failure(db, "list_all", e)

    @staticmethod
    async def get_by_id(db: AsyncSession, article_id: int) -> ServiceResult[ArticleResponse]:
        """
        根据ID获取文章（编辑用），不附带作者信息
        """
        try:
            result = await db.execute(select(Article).where(Article.id == article_id))
            article = result.scalar_one_or_none()
            if article is None:
                return ServiceResult(error=ArticleNotFound(f"文章ID {article_id} 不存在"))
            return ServiceResult(data=ArticleResponse.model_validate(article))
        except STORE_ERRORS as e:
            return await _store_failure(db, "get_by_id", e)

    @staticmethod
    async def create(
        db: AsyncSession,
        article_data: ArticleInput,
        author_id: Optional[int]
    ) -> ServiceResult[ArticleResponse]:
        """
        创建文章

        不做校验；slug 由标题生成，状态为 published 时才写入发布时间
        """
        now = utcnow()
        status = article_data.status or "draft"
        article = Article(
            title=article_data.title,
            slug=generate_slug(article_data.title, now=now),
            content=article_data.content,
            excerpt=_optional_text(article_data.excerpt),
            cover_image=_optional_text(article_data.cover_image),
            category=_optional_text(article_data.category),
            tags=clean_tags(article_data.tags),
            status=status,
            author_id=author_id,
            views=0,
            created_at=now,
            updated_at=now,
            published_at=now if status == "published" else None,
        )

        try:
            db.add(article)
            await db.commit()
            await db.refresh(article)
        except STORE_ERRORS as e:
            return await _store_failure(db, "create", e)

        logger.info("article.create ok id={} slug={} status={}", article.id, article.slug, article.status)
        return ServiceResult(data=ArticleResponse.model_validate(article))

    @staticmethod
    async def update(
        db: AsyncSession,
        article_id: int,
        article_data: ArticleInput
    ) -> ServiceResult[ArticleResponse]:
        """
        更新文章

        写入所有可修改字段（slug 除外）并刷新更新时间；
        仅在首次转为 published 时写入发布时间，之后不再覆盖
        """
        try:
            result = await db.execute(select(Article).where(Article.id == article_id))
            existing = result.scalar_one_or_none()
            if existing is None:
                return ServiceResult(error=ArticleNotFound(f"文章ID {article_id} 不存在"))

            now = utcnow()
            update_data = {
                "title": article_data.title,
                "content": article_data.content,
                "excerpt": _optional_text(article_data.excerpt),
                "cover_image": _optional_text(article_data.cover_image),
                "category": _optional_text(article_data.category),
                "tags": clean_tags(article_data.tags),
                "status": article_data.status,
                "updated_at": now,
            }
            if article_data.status == "published" and existing.published_at is None:
                update_data["published_at"] = now

            await db.execute(
                update(Article)
                .where(Article.id == article_id)
                .values(**update_data)
            )
            await db.commit()
            await db.refresh(existing)
        except STORE_ERRORS as e:
            return await _store_failure(db, "update", e)

        logger.info("article.update ok id={} status={}", existing.id, existing.status)
        return ServiceResult(data=ArticleResponse.model_validate(existing))

    @staticmethod
    async def remove(db: AsyncSession, article_id: int) -> ServiceResult[bool]:
        """
        删除文章（硬删除）
        """
        try:
            result = await db.execute(delete(Article).where(Article.id == article_id))
            if result.rowcount == 0:
                await db.rollback()
                return ServiceResult(error=ArticleNotFound(f"文章ID {article_id} 不存在"))
            await db.commit()
        except STORE_ERRORS as e:
            return await _store_failure(db, "remove", e)

        logger.info("article.remove ok id={}", article_id)
        return ServiceResult(data=True)

    @staticmethod
    async def categories(db: AsyncSession) -> ServiceResult[List[str]]:
        """
        获取已发布文章中出现过的分类（去重、去空）
        """
        try:
            result = await db.execute(
                select(Article.category)
                .where(Article.status == "published", Article.category.isnot(None))
                .distinct()
                .order_by(Article.category)
            )
            return ServiceResult(data=[c for c in result.scalars().all() if c])
        except STORE_ERRORS as e:
            return await _store_failure(db, "categories", e)

    @staticmethod
    async def stats(db: AsyncSession) -> ServiceResult[ArticleStats]:
        """
        文章统计：总数、各状态数量、总浏览数
        """
        try:
            result = await db.execute(
                select(
                    Article.status,
                    func.count(Article.id),
                    func.coalesce(func.sum(Article.views), 0),
                ).group_by(Article.status)
            )
            stats = ArticleStats()
            for status, count, views in result.all():
                stats.total += count
                stats.total_views += int(views or 0)
                if status in ARTICLE_STATUSES:
                    setattr(stats, status, getattr(stats, status) + count)
            return ServiceResult(data=stats)
        except STORE_ERRORS as e:
            return await _store_failure(db, "stats", e)

    @staticmethod
    async def search(db: AsyncSession, query: str) -> ServiceResult[List[ArticleWithAuthor]]:
        """
        按关键字搜索标题、正文、摘要（不区分大小写），按创建时间倒序
        不限制文章状态
        """
        pattern = _like_pattern(query)
        try:
            result = await db.execute(
                select(Article)
                .where(
                    or_(
                        Article.title.ilike(pattern, escape="\\"),
                        Article.content.ilike(pattern, escape="\\"),
                        Article.excerpt.ilike(pattern, escape="\\"),
                    )
                )
                .order_by(desc(Article.created_at))
            )
            articles = list(result.scalars().all())
            return ServiceResult(data=await ArticleService._with_authors(db, articles))
        except STORE_ERRORS as e:
            return await _store_failure(db, "search", e)
