"""Core runtime settings for the portal service."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "police_unit_portal"

    # "mongo" or "memory"
    PORTAL_STORE_BACKEND: str = "mongo"

    ALLOWED_ORIGINS: str = "*"
    PORTAL_HOST: str = "127.0.0.1"
    PORTAL_PORT: int = 8090

    PORTAL_LOG_LEVEL: str = "INFO"
    PORTAL_LOG_FILE: str | None = "logs/portal_app.log"
    PORTAL_LOG_MAX_BYTES: int = 10485760
    PORTAL_LOG_BACKUP_COUNT: int = 5

    JWT_SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"


settings = Settings()
