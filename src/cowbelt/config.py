from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    enable_db: bool = True

    database_url: str = "postgresql+asyncpg://postgres:postgres@db:5432/cow_belt"

    classification_cache_size: int = 1024
    classification_cache_ttl_s: int = 30

    low_severity_alert_ttl_days: int = 30
    old_alert_retention_days: int = 90
    reading_retention_days: int = 30

    enable_notifications: bool = False


settings = Settings()
