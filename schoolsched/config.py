"""Application settings, read from the environment and an optional ``.env`` file."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_title: str = "Class Schedule Service"
    log_level: str = "INFO"

    # School year runs June to May.
    school_year_start_month: int = 6
    school_year_options_before: int = 2
    school_year_options_after: int = 2

    model_config = SettingsConfigDict(
        env_prefix="SCHOOLSCHED_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
