"""
核心系统模型模块
包含用户资料模型
"""

from app.models.core.user import User

__all__ = ["User"]
