"""Runtime settings for the workout core.

Values come from the environment (or a local .env file). The activity
catalog itself is fixed in code; settings only choose among its entries.
"""

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from beactive.core.logger import setup_logger


class Settings(BaseSettings):
    log_level: str = Field(default="INFO", validation_alias="BEACTIVE_LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="BEACTIVE_LOG_FILE")
    default_activity: str = Field(
        default="Swimming",
        validation_alias="BEACTIVE_DEFAULT_ACTIVITY",
        description="Activity name the picker starts on",
    )
    persist_on_end: bool = Field(
        default=True,
        validation_alias="BEACTIVE_PERSIST_ON_END",
        description="Ask the host to save the finished workout when a session ends",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid BEACTIVE_LOG_LEVEL '{value}'. Valid levels are: {', '.join(sorted(valid_levels))}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("log_file")
    @classmethod
    def validate_log_file(cls, value: str | None) -> str | None:
        """Treat an empty BEACTIVE_LOG_FILE as console-only logging."""
        if value is not None and not value.strip():
            return None
        return value


settings = Settings()

setup_logger(level=settings.log_level, log_file=settings.log_file)
