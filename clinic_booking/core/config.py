from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    HOSPITAL_TIMEZONE: str = "UTC"
    # calendar months ahead that may be booked; 0 disables both the limit and the past-date check
    BOOKING_HORIZON_MONTHS: int = Field(default=2, ge=0)

    STORE_PROVIDER: str = "memory"
    SEED_FILE: str | None = None

    DOCUMENT_API_URL: str | None = None
    DOCUMENT_API_KEY: str | None = None
    DOCUMENT_API_TIMEOUT: float = 10.0


settings = Settings()
