"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        display_error_details: Show the failure chain in error responses.
            When False, clients get a generic message and the chain is
            written to the error log instead.
        error_log_path: Optional file for the operational error log.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "errorpage"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    display_error_details: bool = False
    error_log_path: Optional[str] = None


settings = Settings()
