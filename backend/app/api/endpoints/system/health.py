"""
健康检查 API 端点
同时挂载在根路径和 API 前缀下
"""

from datetime import datetime
from typing import Dict, Any

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.core.config import settings
from app.models.articles import Article

router = APIRouter()


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)) -> Dict[str, Any]:
    """
    健康检查：数据库连通性 + 文章表可读
    任一检查失败返回 503
    """
    try:
        await db.execute(text("SELECT 1"))
        article_count = (await db.execute(select(func.count(Article.id)))).scalar_one()
    except SQLAlchemyError as e:
        logger.error("health check fail err={}", str(e))
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "service": settings.PROJECT_NAME,
                "timestamp": datetime.now().isoformat(),
            }
        )

    return {
        "status": "healthy",
        "checks": {
            "database": "healthy",
            "articles": article_count,
        },
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "environment": settings.DEPLOYMENT_ENV,
        "timestamp": datetime.now().isoformat(),
    }


@router.get("/ping")
async def ping() -> Dict[str, str]:
    return {"message": "pong"}
