"""
API 路由注册
"""

from fastapi import APIRouter
from app.api.endpoints.system.health import router as health_router
from app.api.endpoints.content.articles import router as articles_router

api_router = APIRouter()

# 注册各个模块的路由
api_router.include_router(health_router, tags=["health"])
api_router.include_router(articles_router, tags=["articles"], prefix="/articles")
