from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file="novelverse/.env",
        env_file_encoding="utf-8",
        extra="allow",
    )
    # Application
    APP_NAME: str = "NovelVerse API"
    PROJECT_NAME: str = "NovelVerse"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    ALLOWED_ORIGINS: List[str] = ["*"]

    # Database
    # 로컬 개발은 sqlite, 운영은 postgresql+psycopg2 URL 사용
    DATABASE_URL: str = "sqlite:///./novelverse.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    # Security
    SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # text | json

    # Redis (사이트 설정 캐시, 인스턴스 간 공유)
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: Optional[str] = None

    # Site settings
    SITE_SETTINGS_KEY: str = "global"
    SITE_SETTINGS_CACHE_TTL_SECONDS: float = 5.0

    # Wallet
    MAX_TOP_UP_AMOUNT: int = 100_000  # mock 결제 1회 충전 한도
    SIGNUP_BONUS_COINS: int = 0
    LEDGER_PAGE_SIZE_MAX: int = 100

    # Optional admin bootstrap (scripts/seed_data.py)
    ADMIN_EMAIL: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


settings = Settings()
