"""
文章 API 端点
公开接口：已发布列表、分类、搜索、按slug阅读
管理接口：全部文章、统计、增删改，需要管理员权限
"""

from typing import List, Optional, Dict, Any
from fastapi import APIRouter, Depends, HTTPException, status, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.core.deps import require_admin
from app.schemas.articles import (
    ArticleCreate,
    ArticleUpdate,
    ArticleResponse,
    ArticleStats,
    ArticleWithAuthor,
)
from app.services.articles.article import ArticleService
from app.services.articles.errors import ArticleError, ArticleNotFound

router = APIRouter()


def _raise_for_error(error: ArticleError) -> None:
    """将服务层错误转换为 HTTP 错误"""
    if isinstance(error, ArticleNotFound):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=error.message
        )
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=error.message
    )


# ==================== 公开接口 ====================

@router.get("/public/list", response_model=List[ArticleWithAuthor])
async def list_public_articles(
    category: Optional[str] = Query(None, description="按分类筛选"),
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    获取已发布文章列表（公开接口）

    权限：无需认证
    """
    result = await ArticleService.list_published(db=db, category=category)
    if not result.ok:
        _raise_for_error(result.error)
    return result.data


@router.get("/public/categories", response_model=List[str])
async def list_public_categories(db: AsyncSession = Depends(get_db)) -> Any:
    """
    获取已发布文章中的分类（公开接口）
    """
    result = await ArticleService.categories(db=db)
    if not result.ok:
        _raise_for_error(result.error)
    return result.data


@router.get("/public/search", response_model=List[ArticleWithAuthor])
async def search_articles(
    q: str = Query(..., min_length=1, description="搜索关键字"),
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    按关键字搜索标题、正文和摘要（公开接口）
    """
    result = await ArticleService.search(db=db, query=q)
    if not result.ok:
        _raise_for_error(result.error)
    return result.data


@router.get("/public/{slug}", response_model=ArticleWithAuthor)
async def get_public_article_by_slug(
    slug: str,
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    根据slug获取文章详情，同时浏览数加一（公开接口）

    权限：无需认证
    """
    result = await ArticleService.get_by_slug(db=db, slug=slug)
    if not result.ok:
        _raise_for_error(result.error)
    return result.data


# ==================== 管理接口 ====================

@router.get("", response_model=List[ArticleWithAuthor])
async def list_articles(
    db: AsyncSession = Depends(get_db),
    _: Dict[str, Any] = Depends(require_admin)
) -> Any:
    """
    获取全部文章（不区分状态）

    权限：管理员
    """
    result = await ArticleService.list_all(db=db)
    if not result.ok:
        _raise_for_error(result.error)
    return result.data


@router.get("/stats", response_model=ArticleStats)
async def get_article_stats(
    db: AsyncSession = Depends(get_db),
    _: Dict[str, Any] = Depends(require_admin)
) -> Any:
    """
    文章统计

    权限：管理员
    """
    result = await ArticleService.stats(db=db)
    if not result.ok:
        _raise_for_error(result.error)
    return result.data


@router.get("/{article_id}", response_model=ArticleResponse)
async def get_article(
    article_id: int,
    db: AsyncSession = Depends(get_db),
    _: Dict[str, Any] = Depends(require_admin)
) -> Any:
    """
    根据ID获取文章（编辑用）

    权限：管理员
    """
    result = await ArticleService.get_by_id(db=db, article_id=article_id)
    if not result.ok:
        _raise_for_error(result.error)
    return result.data


@router.post("", response_model=ArticleResponse, status_code=status.HTTP_201_CREATED)
async def create_article(
    article_data: ArticleCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Dict[str, Any] = Depends(require_admin)
) -> Any:
    """
    创建新文章，作者为当前用户

    权限：管理员
    """
    author_id = current_user.get("id")
    if not author_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="无法获取用户信息"
        )

    result = await ArticleService.create(db=db, article_data=article_data, author_id=author_id)
    if not result.ok:
        _raise_for_error(result.error)
    return result.data


@router.put("/{article_id}", response_model=ArticleResponse)
async def update_article(
    article_id: int,
    article_data: ArticleUpdate,
    db: AsyncSession = Depends(get_db),
    _: Dict[str, Any] = Depends(require_admin)
) -> Any:
    """
    更新文章（slug 不可修改）

    权限：管理员
    """
    result = await ArticleService.update(db=db, article_id=article_id, article_data=article_data)
    if not result.ok:
        _raise_for_error(result.error)
    return result.data


@router.delete("/{article_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_article(
    article_id: int,
    db: AsyncSession = Depends(get_db),
    _: Dict[str, Any] = Depends(require_admin)
) -> Response:
    """
    删除文章

    权限：管理员
    """
    result = await ArticleService.remove(db=db, article_id=article_id)
    if not result.ok:
        _raise_for_error(result.error)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
