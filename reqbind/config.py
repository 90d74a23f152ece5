"""Binder Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every setting can be overridden with a REQBIND_-prefixed environment variable
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults work without any environment: GET/DELETE/HEAD are the bodyless methods
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Binder settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="REQBIND_", env_file=".env", case_sensitive=False,
    )

    # Query phase runs only for these methods
    bodyless_methods: list[str] = ["GET", "DELETE", "HEAD"]

    @field_validator("bodyless_methods", mode="after")
    @classmethod
    def upper_methods(cls, v: list[str]) -> list[str]:
        return [method.upper() for method in v]

    # Multipart parsing limits (passed to Starlette's form parser)
    max_form_files: int = 1000
    max_form_fields: int = 1000

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
