"""
文章相关的 Pydantic 模型
用于请求/响应的数据验证
"""

from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator

from app.core.config import settings


ArticleStatus = Literal["draft", "published", "archived"]


def is_empty_content(content: Optional[str]) -> bool:
    """正文为空白或编辑器的空段落标记时视为无内容"""
    if content is None or not content.strip():
        return True
    return content == settings.ARTICLE_EMPTY_CONTENT_MARKUP


def clean_tags(tags: Optional[List[str]]) -> List[str]:
    """去除标签两端空白并丢弃空标签"""
    return [t.strip() for t in (tags or []) if t and t.strip()]


class ArticleInput(BaseModel):
    """
    文章写入数据
    服务层直接使用，不做任何校验（校验由调用方负责）
    """
    title: str = Field(..., max_length=255, description="文章标题")
    content: str = Field(..., description="文章正文内容 (HTML格式)")
    excerpt: Optional[str] = Field(None, description="文章摘要 (可选)")
    cover_image: Optional[str] = Field(None, description="封面图片地址 (可选)")
    category: Optional[str] = Field(None, max_length=100, description="分类名 (可选)")
    tags: List[str] = Field(default_factory=list, description="标签列表")
    status: ArticleStatus = Field("draft", description="文章状态")

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        return clean_tags(v)


class ArticleCreate(ArticleInput):
    """文章创建模型（HTTP 请求体）"""

    @field_validator("title")
    @classmethod
    def validate_title_not_empty(cls, v):
        """验证标题非空"""
        if not v.strip():
            raise ValueError("标题不能为空")
        return v.strip()

    @field_validator("content")
    @classmethod
    def validate_content_not_empty(cls, v):
        """验证正文非空"""
        if is_empty_content(v):
            raise ValueError("正文不能为空")
        return v


class ArticleUpdate(ArticleCreate):
    """文章更新模型 - 整体替换所有可修改字段，slug 不可修改"""
    status: ArticleStatus = Field(..., description="文章状态")


# 响应模型
class AuthorInfo(BaseModel):
    """作者信息模型（用于嵌套响应）"""
    id: int
    full_name: Optional[str] = None
    email: Optional[str] = None

    class Config:
        from_attributes = True


class ArticleResponse(BaseModel):
    """文章响应模型"""
    id: int
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    cover_image: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    status: ArticleStatus
    author_id: Optional[int] = None
    views: int = 0
    created_at: datetime
    updated_at: datetime
    published_at: Optional[datetime] = None

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v):
        return list(v or [])

    class Config:
        from_attributes = True


class ArticleWithAuthor(ArticleResponse):
    """附带作者信息的文章响应模型"""
    author: Optional[AuthorInfo] = None


class ArticleStats(BaseModel):
    """文章统计"""
    total: int = 0
    published: int = 0
    draft: int = 0
    archived: int = 0
    total_views: int = Field(0, alias="totalViews")

    class Config:
        populate_by_name = True
