"""
File: app/core/config.py
Description: 全局应用配置管理（使用 pydantic-settings）

所有配置值通过环境变量或 .env 文件加载。
本模块负责：
1. 校验环境变量类型
2. 解析复杂类型（如 CORS 列表）
3. 组装数据库 DSN（确保使用 postgresql+asyncpg 协议）
4. 定义 JWT 签发参数（Bearer 凭证有效期、算法）
5. 运行时强制校验必填项，确保应用在配置缺失时快速失败

Created: 2026-10-17
"""

from typing import Literal

from pydantic import AnyHttpUrl, model_validator
from pydantic_core import MultiHostUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """全局配置对象（唯一真实来源）"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=True,
    )

    # --------------------------------------------------------------------------
    # 1. General (通用)
    # --------------------------------------------------------------------------
    PROJECT_NAME: str = "Blog Platform API"
    API_V1_STR: str = "/api"
    ENVIRONMENT: Literal["local", "dev", "prod"] = "local"
    DEBUG: bool = False

    # JWT 签名密钥 (生产环境强制要求高强度随机串)
    SECRET_KEY: str | None = None

    # 前端站点来源，用于 CORS
    BACKEND_CORS_ORIGINS: list[AnyHttpUrl] = []

    # --------------------------------------------------------------------------
    # 2. Database (PostgreSQL)
    # --------------------------------------------------------------------------
    POSTGRES_SERVER: str | None = None
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str | None = None
    POSTGRES_PASSWORD: str | None = None
    POSTGRES_DB: str | None = None

    # 连接池配置 (SQLite 下忽略)
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_PRE_PING: bool = True
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    # 完整 DSN 覆盖（可选）
    SQLALCHEMY_DATABASE_URI: str | None = None

    # --------------------------------------------------------------------------
    # 3. Logging (Loguru)
    # --------------------------------------------------------------------------
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_JSON_FORMAT: bool = False
    LOG_FILE_ENABLED: bool = False
    LOG_DIR: str = "logs"
    LOG_ROTATION: str = "1 day"
    LOG_RETENTION: str = "14 days"
    LOG_COMPRESSION: str = "zip"
    LOG_DIAGNOSE: bool = True  # 生产环境建议 False，避免变量值进入日志

    # --------------------------------------------------------------------------
    # 4. Security & Authentication (JWT Bearer 凭证)
    # --------------------------------------------------------------------------
    # 凭证有效期 (分钟)，默认一天；凭证不落库，有效性只取决于签名与过期时间
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    ALGORITHM: str = "HS256"

    # --------------------------------------------------------------------------
    # Properties (便捷属性)
    # --------------------------------------------------------------------------
    @property
    def is_sqlite(self) -> bool:
        """当前 DSN 是否指向 SQLite (本地调试 / 测试)"""
        return str(self.SQLALCHEMY_DATABASE_URI or "").startswith("sqlite")

    # --------------------------------------------------------------------------
    # Validators
    # --------------------------------------------------------------------------
    @model_validator(mode="after")
    def _validate_and_build_db_uri(self) -> "Settings":
        """验证必填项并构建数据库连接串。"""
        if not self.SECRET_KEY:
            raise ValueError("SECRET_KEY 必须在环境变量或 .env 中设置")

        if self.ENVIRONMENT == "prod" and len(self.SECRET_KEY) < 32:
            raise ValueError("生产环境 SECRET_KEY 长度必须 >= 32 字符")

        if self.SQLALCHEMY_DATABASE_URI:
            return self

        missing_fields = [
            field
            for field in (
                "POSTGRES_SERVER",
                "POSTGRES_USER",
                "POSTGRES_PASSWORD",
                "POSTGRES_DB",
            )
            if not getattr(self, field)
        ]
        if missing_fields:
            raise ValueError(
                f"缺少数据库环境变量，无法构建 DSN: {', '.join(missing_fields)}"
            )

        self.SQLALCHEMY_DATABASE_URI = str(
            MultiHostUrl.build(
                scheme="postgresql+asyncpg",
                username=self.POSTGRES_USER,  # type: ignore[arg-type]
                password=self.POSTGRES_PASSWORD,  # type: ignore[arg-type]
                host=self.POSTGRES_SERVER,  # type: ignore[arg-type]
                port=self.POSTGRES_PORT,
                path=self.POSTGRES_DB,  # type: ignore[arg-type]
            )
        )

        return self


# 单例配置对象
settings = Settings()
