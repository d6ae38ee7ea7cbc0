from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "projtrack"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    # Observability Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "console"
    ENABLE_METRICS: bool = True
    LOG_PERMISSION_CHECKS: bool = False

    # Progress update limits
    MAX_PHOTOS_PER_UPDATE: int = Field(default=10, ge=0)
    OBSERVATIONS_MAX_LENGTH: int = Field(default=1000, ge=1)

    @field_validator("LOG_LEVEL")
    @classmethod
    def _normalise_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


settings = Settings()
