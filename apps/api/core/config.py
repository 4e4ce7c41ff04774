"""
Centralized configuration management with validation.

All environment variables are loaded and validated here.
This ensures consistent configuration across the API and the worker.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """Application settings with validation."""

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    # Database Configuration
    # DATABASE_URL wins when set (e.g. sqlite:///./qt.db for local runs).
    DATABASE_URL: Optional[str] = Field(default=None)
    POSTGRES_USER: str = Field(default="postgres")
    POSTGRES_PASSWORD: str = Field(default="postgres")
    POSTGRES_DB: str = Field(default="daily_qt")
    POSTGRES_HOST: str = Field(default="postgres")
    POSTGRES_PORT: int = Field(default=5432)

    # Database Pool Configuration
    DB_POOL_SIZE: int = Field(default=10)
    DB_MAX_OVERFLOW: int = Field(default=5)
    DB_POOL_TIMEOUT: int = Field(default=30)
    DB_POOL_RECYCLE: int = Field(default=3600)  # 1 hour

    # API Configuration
    API_HOST: str = Field(default="0.0.0.0")
    API_PORT: int = Field(default=8000)

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="json")  # json or text

    # Cron trigger authorization.
    # When CRON_SECRET is unset the trigger runs unauthenticated (beta posture)
    # unless CRON_REQUIRE_SECRET is turned on.
    CRON_SECRET: Optional[str] = Field(default=None)
    CRON_REQUIRE_SECRET: bool = Field(default=False)

    # Shared secret for the manual daily push endpoint. Unset = endpoint refuses.
    PUSH_SEND_SECRET: Optional[str] = Field(default=None)

    # OpenAI (QT generation)
    OPENAI_API_KEY: Optional[str] = Field(default=None)
    QT_MODEL: str = Field(default="gpt-4o-mini")
    QT_SCRIPTURE_TEMPERATURE: float = Field(default=0.2, ge=0.0, le=2.0)
    QT_SCRIPTURE_MAX_TOKENS: int = Field(default=2000)
    QT_DEVOTIONAL_TEMPERATURE: float = Field(default=0.7, ge=0.0, le=2.0)
    QT_DEVOTIONAL_MAX_TOKENS: int = Field(default=1500)

    # Calendar day boundary for QT content (Korea Standard Time)
    QT_UTC_OFFSET_HOURS: int = Field(default=9)

    # Web Push (VAPID)
    VAPID_PUBLIC_KEY: Optional[str] = Field(default=None)
    VAPID_PRIVATE_KEY: Optional[str] = Field(default=None)
    VAPID_CLAIMS_EMAIL: str = Field(default="mailto:admin@example.com")
    PUSH_TTL_S: int = Field(default=86400)  # 24 hours

    # Celery Configuration
    CELERY_BROKER_URL: str = Field(default="redis://redis:6379/0")
    CELERY_RESULT_BACKEND: str = Field(default="redis://redis:6379/0")

    # Environment
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=False)

    # CORS - comma-separated list of allowed origins for production
    CORS_ORIGINS: Optional[str] = Field(default=None)

    # Sentry Error Tracking
    SENTRY_DSN: Optional[str] = Field(default=None)
    SENTRY_TRACES_SAMPLE_RATE: float = Field(default=0.1)  # 10% of transactions

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql://{self.POSTGRES_USER}:"
            f"{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:"
            f"{self.POSTGRES_PORT}/"
            f"{self.POSTGRES_DB}"
        )


# Global settings instance
settings = Settings()
