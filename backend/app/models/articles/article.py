"""
文章模型定义 - 使用 lh_ 前缀
"""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from sqlalchemy.sql import func
from app.db.database import Base


ARTICLE_STATUSES = ("draft", "published", "archived")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Article(Base):
    """文章表模型 - lh_articles"""
    __tablename__ = "lh_articles"

    # 主键
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # 文章基本信息
    title = Column(String(255), nullable=False, comment="文章标题")
    slug = Column(String(255), unique=True, index=True, nullable=False, comment="URL友好的别名，创建后不可修改")
    content = Column(Text, nullable=False, comment="文章正文内容 (HTML格式)")
    excerpt = Column(Text, nullable=True, comment="文章摘要 (可选)")
    cover_image = Column(Text, nullable=True, comment="封面图片地址 (可选)")
    category = Column(String(100), nullable=True, index=True, comment="分类名 (可选)")
    tags = Column(JSON, nullable=False, default=list, comment="标签列表")

    # 状态字段: draft / published / archived
    status = Column(String(20), nullable=False, default="draft", server_default="draft", index=True, comment="文章状态")

    # 作者只保存ID，作者信息通过二次查询获取，不建立外键关联
    author_id = Column(Integer, nullable=True, index=True, comment="作者ID (sys_users.id)")

    # 浏览数只会递增
    views = Column(Integer, nullable=False, default=0, server_default="0", comment="浏览次数")

    # 时间戳
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, comment="创建时间")
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, comment="更新时间")
    published_at = Column(DateTime(timezone=True), nullable=True, comment="首次发布时间")

    def __repr__(self):
        return f"<Article(id={self.id}, title='{self.title}', slug='{self.slug}', status='{self.status}')>"
