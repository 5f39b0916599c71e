"""
应用配置管理
从环境变量加载配置，提供类型安全的配置访问
"""

import json
from pathlib import Path
from typing import List, Optional, Union
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, model_validator

PROJECT_ROOT = Path(__file__).resolve().parents[3]


class Settings(BaseSettings):
    """应用配置类，从环境变量加载所有配置"""

    # ==================== 项目信息 ====================
    PROJECT_NAME: str = Field(default="LearnHub")
    VERSION: str = Field(default="1.0.0")
    API_V1_STR: str = Field(default="/api/v1")

    # ==================== 部署环境 ====================
    DEPLOYMENT_ENV: str = Field(default="development")  # development, docker, production

    # ==================== 服务器配置 ====================
    BACKEND_HOST: str = Field(default="0.0.0.0")
    BACKEND_PORT: int = Field(default=8000)
    BACKEND_RELOAD: bool = Field(default=True)  # 开发模式热重载

    # ==================== 安全配置 ====================
    # 令牌由托管认证服务签发，这里只做校验
    SECRET_KEY: str = Field(default="change_me")
    ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60)
    ACCESS_TOKEN_COOKIE_NAME: str = Field(default="lh_access_token")
    ADMIN_ROLE_CODES: List[str] = Field(default=["admin"])

    # ==================== 调试配置 ====================
    DEBUG: bool = Field(default=True)
    LOG_LEVEL: str = Field(default="INFO")

    # ==================== CORS 配置 ====================
    CORS_ORIGINS: List[str] = Field(default=["http://localhost:5173", "http://127.0.0.1:5173"])

    @field_validator("CORS_ORIGINS", "ADMIN_ROLE_CODES", mode="before")
    @classmethod
    def parse_string_list(cls, v: Union[str, List[str]]) -> List[str]:
        """解析列表配置，支持JSON字符串或逗号分隔"""
        if isinstance(v, str):
            try:
                # 尝试解析JSON
                return json.loads(v)
            except json.JSONDecodeError:
                # 如果不是JSON，尝试按逗号分割
                return [item.strip() for item in v.split(",") if item.strip()]
        return v

    # ==================== 数据库配置 ====================
    POSTGRES_USER: str = Field(default="learnhub")
    POSTGRES_PASSWORD: str = Field(default="change_me")
    POSTGRES_DB: str = Field(default="learnhub_db")
    POSTGRES_HOST: str = Field(default="127.0.0.1")
    POSTGRES_PORT: str = Field(default="5432")
    POSTGRES_MAX_CONNECTIONS: int = Field(default=20)
    DB_MAX_OVERFLOW: int = Field(default=20)
    DB_POOL_TIMEOUT_SECONDS: int = Field(default=30)
    POSTGRES_STATEMENT_TIMEOUT: int = Field(default=30000)
    DATABASE_DRIVER: str = Field(default="asyncpg")

    # 数据库URL - 优先使用环境变量中的值
    DATABASE_URL: Optional[str] = Field(default=None)

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str], info) -> Optional[str]:
        """构建数据库连接 URL"""
        # 如果环境变量中已经有DATABASE_URL，直接使用
        if v:
            return v

        # 否则从各个组件构建
        values = info.data
        driver = values.get("DATABASE_DRIVER", "asyncpg")
        username = values.get("POSTGRES_USER")
        password = values.get("POSTGRES_PASSWORD")
        host = values.get("POSTGRES_HOST")
        port = values.get("POSTGRES_PORT")
        db = values.get("POSTGRES_DB")

        if all([driver, username, password, host, port, db]):
            return f"postgresql+{driver}://{username}:{password}@{host}:{port}/{db}"
        return None

    # ==================== 数据库调试配置 ====================
    SQLALCHEMY_ECHO: bool = Field(default=False)
    AUTO_CREATE_TABLES: bool = Field(default=False)

    # ==================== 文章相关配置 ====================
    # 富文本编辑器清空后留下的标记，视为"无内容"
    ARTICLE_EMPTY_CONTENT_MARKUP: str = Field(default="<p></p>")
    # 管理页提示消息自动消失时间（秒）
    ARTICLE_MESSAGE_TTL_SECONDS: float = Field(default=5.0)
    ARTICLE_EXCERPT_MAX_LENGTH: int = Field(default=100)

    @model_validator(mode="after")
    def validate_security_settings(self):
        if "POSTGRES_MAX_CONNECTIONS" not in self.model_fields_set:
            self.POSTGRES_MAX_CONNECTIONS = 20 if self.DEBUG else 50
        if "DB_MAX_OVERFLOW" not in self.model_fields_set:
            self.DB_MAX_OVERFLOW = 10 if self.DEBUG else 20
        if "DB_POOL_TIMEOUT_SECONDS" not in self.model_fields_set:
            self.DB_POOL_TIMEOUT_SECONDS = 15 if self.DEBUG else 30

        if self.DEBUG:
            return self

        def must_set(name: str, value: str):
            if not value or str(value).strip() in {"", "change_me"}:
                raise ValueError(f"{name} 未配置或仍为默认值，请在 .env 中设置为安全值")

        must_set("SECRET_KEY", self.SECRET_KEY)
        must_set("POSTGRES_PASSWORD", self.POSTGRES_PASSWORD)

        if len(self.SECRET_KEY) < 32:
            raise ValueError("SECRET_KEY 长度过短，建议至少 32 字符")

        return self

    class Config:
        env_file = str(PROJECT_ROOT / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False  # 环境变量不区分大小写
        extra = "ignore"  # 忽略额外的环境变量


# 创建全局配置实例
settings = Settings()
