import logging

from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    ANTHROPIC_API_KEY: str = ""
    ANTHROPIC_MODEL: str = "claude-sonnet-4-5"
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/app.db"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    AUTH_JWT_SECRET: str = ""
    AUTH_JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    ADMIN_EMAILS: str = ""
    INSTRUCTOR_EMAILS: str = ""

    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"

    model_config = {"env_file": ".env", "extra": "ignore"}

    @staticmethod
    def _split(value: str) -> list[str]:
        return [item.strip().lower() for item in value.split(",") if item.strip()]

    @property
    def admin_emails(self) -> list[str]:
        return self._split(self.ADMIN_EMAILS)

    @property
    def instructor_emails(self) -> list[str]:
        return self._split(self.INSTRUCTOR_EMAILS)

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()

if not settings.ANTHROPIC_API_KEY:
    logger.warning(
        "ANTHROPIC_API_KEY is not set. Quiz generation endpoints will fail until configured."
    )
if not settings.AUTH_JWT_SECRET:
    logger.warning(
        "AUTH_JWT_SECRET is not set. Every request will be treated as unauthenticated."
    )
