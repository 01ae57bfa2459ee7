from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.sf_snowflake.domain.snowflake import (
    DEFAULT_EPOCH_MS,
    MAX_EPOCH_MS,
    MAX_PROCESS,
    MAX_WORKER,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Snowflake identity: each running process needs a distinct pair
    WORKER_ID: int = Field(0, ge=0, le=MAX_WORKER)
    PROCESS_ID: int = Field(0, ge=0, le=MAX_PROCESS)
    EPOCH_MS: int = Field(DEFAULT_EPOCH_MS, ge=0, le=MAX_EPOCH_MS)

    # App
    APP_NAME: str = "Snowflake ID Service"
    DEBUG: bool = False  # Safe default for production; set DEBUG=True in .env for local dev
    LOG_LEVEL: str = "INFO"


settings = Settings()
