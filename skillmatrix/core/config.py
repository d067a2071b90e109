# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Core configuration: all env-driven, zero hardcode.
Single source of truth for every tunable parameter.
"""

import os


class Settings:
    """Application settings loaded from environment variables."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "skill-matrix")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")
    SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "8000"))

    # No defaults: a missing URI or database name is reported per request.
    MONGODB_URI: str = os.getenv("MONGODB_URI", "")
    MONGODB_DB_NAME: str = os.getenv("MONGODB_DB_NAME", "")
    MONGO_TIMEOUT_MS: int = int(os.getenv("MONGO_TIMEOUT_MS", "30000"))

    DEFAULT_PAGE_LIMIT: int = int(os.getenv("DEFAULT_PAGE_LIMIT", "12"))
    MAX_PAGE_LIMIT: int = int(os.getenv("MAX_PAGE_LIMIT", "100"))
    DEFAULT_CATALOG_LIMIT: int = int(os.getenv("DEFAULT_CATALOG_LIMIT", "100"))
    MAX_CATALOG_LIMIT: int = int(os.getenv("MAX_CATALOG_LIMIT", "500"))

    MAX_MEMBER_SKILLS: int = int(os.getenv("MAX_MEMBER_SKILLS", "30"))
    MAX_MEMBER_SPECIALTIES: int = int(os.getenv("MAX_MEMBER_SPECIALTIES", "20"))
    PROJECT_LOOKUP_WORKERS: int = int(os.getenv("PROJECT_LOOKUP_WORKERS", "8"))

    AI_API_KEY: str = os.getenv("AI_API_KEY", os.getenv("DEEPSEEK_API_KEY", ""))
    AI_API_URL: str = os.getenv(
        "AI_API_URL", "https://api.deepseek.com/v1/chat/completions"
    )
    AI_MODEL: str = os.getenv("AI_MODEL", "deepseek-chat")
    AI_TIMEOUT: float = float(os.getenv("AI_TIMEOUT", "25.0"))

    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
