"""
Process settings for sqlrunner.

Values come from the environment (or a ``.env`` file in the working directory).
``SCRIPT_*`` values seed ``RunConfig.from_settings()``; explicit arguments win.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"

    # External DB connections (seconds)
    EXTERNAL_DB_CONNECT_TIMEOUT: int = 10

    # Script runner defaults
    SCRIPT_STOP_ON_ERROR: bool = False
    SCRIPT_THROW_WARNING: bool = False
    SCRIPT_AUTOCOMMIT: bool = False
    SCRIPT_SEND_FULL_SCRIPT: bool = False
    SCRIPT_REMOVE_CRS: bool = False
    SCRIPT_ESCAPE_PROCESSING: bool = True
    SCRIPT_DELIMITER: str = Field(default=";", min_length=1)
    SCRIPT_FULL_LINE_DELIMITER: bool = False


settings = Settings()  # type: ignore
