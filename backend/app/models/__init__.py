"""
数据库模型定义 - 模块化结构
表名前缀方案：sys_ (系统表), lh_ (文章表)
"""

from app.db.database import Base

# 核心系统模型 (sys_ 前缀)
from .core import User

# 文章系统模型 (lh_ 前缀)
from .articles import Article

__all__ = [
    "Base",
    "User",
    "Article",
]
