"""
FastAPI 依赖注入工具 - 权限控制和用户认证
"""

from typing import Optional, Dict, Any
from fastapi import Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordBearer

from app.core.config import settings
from app.services.auth import get_current_user as auth_get_current_user

# OAuth2 配置，令牌由托管认证服务签发
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/token", auto_error=False)


async def get_access_token(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
) -> Optional[str]:
    if token:
        return token
    return request.cookies.get(settings.ACCESS_TOKEN_COOKIE_NAME)


async def get_current_user(
    token: Optional[str] = Depends(get_access_token),
) -> Dict[str, Any]:
    """
    获取当前认证用户（必须有有效的认证令牌）

    返回:
        用户信息字典

    异常:
        401: 未授权访问
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="未提供认证令牌",
        )

    user = auth_get_current_user(token)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="无效的认证令牌",
        )
    return user


async def require_admin(
    current_user: Dict[str, Any] = Depends(get_current_user)
) -> Dict[str, Any]:
    """
    要求用户必须是管理员

    返回:
        用户信息字典（如果是管理员）

    异常:
        403: 权限不足
    """
    if current_user.get("role_code") not in settings.ADMIN_ROLE_CODES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="需要管理员权限",
        )
    return current_user
