from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    DATA_DIR: str = "./data"
    DEFAULT_TIMEZONE: str = "UTC"

    MEETING_LINK_BASE_URL: str = "https://meet.google.com"

    DEFAULT_SLOT_DURATION_MINUTES: int = 30
    MAX_SLOT_RANGE_DAYS: int = 62
    REMINDER_LEAD_MINUTES: int = 60


settings = Settings()
