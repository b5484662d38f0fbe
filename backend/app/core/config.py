from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings."""

    # Database
    DATABASE_URL: str = "sqlite:///./gift_exchange.db"
    AUTO_CREATE_TABLES: bool = True

    # Redis
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0

    # Notifications
    NOTIFICATIONS_ENABLED: bool = True
    NOTIFICATION_QUEUE: str = "notifications"

    # Group rules
    GROUP_MAX_MEMBERS: int = 20
    MAX_OWNED_GROUPS: int = 3
    GROUP_CODE_ATTEMPTS: int = 5  # Codes tried before giving up on a collision streak
    MATCH_MAX_ATTEMPTS: int = 100

    # Frontend
    CORS_ORIGINS: List[str] = ["http://localhost:5173"]

    # Development settings
    DEBUG: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
