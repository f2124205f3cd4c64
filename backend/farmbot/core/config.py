"""
Application configuration using pydantic-settings.
All config is loaded from environment variables with sensible defaults.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Farm Booking Bot"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Telegram
    BOT_TOKEN: str = ""
    TELEGRAM_API_URL: str = "https://api.telegram.org"
    TELEGRAM_TIMEOUT: float = 10.0
    WEBHOOK_SECRET: str = ""

    # Operator: who may confirm/cancel, and where new requests are announced
    ADMIN_USER_ID: Optional[int] = None
    ADMIN_CHAT_ID: Optional[int] = None

    # Key-value store
    STORE_BACKEND: str = "memory"  # memory | redis
    REDIS_URL: str = "redis://localhost:6379/0"
    STORE_TIMEOUT: float = 5.0
    KEY_PREFIX: str = "farmbot:"

    # Conversation
    SESSION_TTL_SECONDS: int = 600  # 10 minutes

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
    }

    @property
    def admin_notify_chat_id(self) -> Optional[int]:
        # Private chat id equals the user id, so the operator's own chat is a safe default
        return self.ADMIN_CHAT_ID if self.ADMIN_CHAT_ID is not None else self.ADMIN_USER_ID


@lru_cache()
def get_settings() -> Settings:
    return Settings()
