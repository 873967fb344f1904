"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for the translation pipeline.

    Values are read from environment variables prefixed ``SPANSQL_`` and
    from a ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="SPANSQL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Translation
    default_dialect: str = "spanner"
    validate_sql: bool = True  # parse generated SQL with sqlglot; failures become warnings
    pretty_sql: bool = False
