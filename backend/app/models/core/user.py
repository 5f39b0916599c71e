"""
用户模型定义 - 使用 sys_ 前缀
账号本身由托管认证服务维护，这里只保存展示所需的资料
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, func
from sqlalchemy.sql import expression
from app.db.database import Base


class User(Base):
    """用户资料表模型 - sys_users"""
    __tablename__ = "sys_users"

    # 主键
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # 基本信息
    username = Column(String(50), unique=True, index=True, nullable=True, comment="用户名")
    full_name = Column(String(100), nullable=False, comment="显示名称")
    email = Column(String(255), nullable=True, comment="邮箱")

    # 角色标识
    role_code = Column(String(20), nullable=False, default='student', server_default='student', comment="角色代码: admin, instructor, student")

    # 状态
    is_active = Column(Boolean, default=True, server_default=expression.true(), comment="是否激活")

    # 时间戳
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, comment="创建时间")
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False, comment="更新时间")

    def __repr__(self):
        return f"<User(id={self.id}, role_code='{self.role_code}', full_name='{self.full_name}')>"
