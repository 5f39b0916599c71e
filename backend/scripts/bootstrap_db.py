"""
开发环境初始化：建表，并创建一个管理员资料用于本地调试
生产环境请使用 Alembic 迁移
"""

import argparse
import asyncio
import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from loguru import logger
from sqlalchemy import select

from app.db.database import engine, AsyncSessionLocal, close_db
from app.models import Base, User
from app.services.auth import create_access_token


async def ensure_admin(full_name: str, email: str) -> User:
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        if user is None:
            user = User(username=email.split("@")[0], full_name=full_name, email=email, role_code="admin")
            session.add(user)
            await session.commit()
            await session.refresh(user)
            logger.info("管理员资料已创建: id={} email={}", user.id, email)
        else:
            logger.info("管理员资料已存在: id={} email={}", user.id, email)
        return user


async def main(full_name: str, email: str) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("数据库表已创建")

    admin = await ensure_admin(full_name, email)
    token = create_access_token({"sub": str(admin.id), "role": admin.role_code})
    print(f"开发用管理员令牌: {token}")

    await close_db()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="初始化开发数据库")
    parser.add_argument("--name", default="Site Admin", help="管理员显示名称")
    parser.add_argument("--email", default="admin@learnhub.local", help="管理员邮箱")
    args = parser.parse_args()
    asyncio.run(main(args.name, args.email))
