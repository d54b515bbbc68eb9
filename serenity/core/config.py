from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Iterable

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _split_csv(value: Any, field_name: str) -> list[str]:
    if value in (None, "", []):
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, Iterable):
        return [str(item).strip() for item in value if str(item).strip()]
    raise TypeError(f"{field_name} must be a comma separated string or list")


class AppSettings(BaseSettings):
    """Environment-driven application configuration."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Serenity"
    BASE_DIR: Path = Field(default_factory=lambda: Path(__file__).resolve().parent.parent)
    TEMPLATES_DIR: Path | None = None
    STATIC_DIR: Path | None = None
    TZ: str = "UTC"
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    APP_SECRET: str = "dev-insecure-secret-change-me"
    SESSION_COOKIE_NAME: str = "serenity_session"
    SESSION_MAX_AGE: int = 60 * 60 * 24 * 7
    SESSION_HTTPS_ONLY: bool = False

    DB_URL: str = Field(
        default="sqlite:///./serenity.db",
        validation_alias=AliasChoices("DATABASE_URL", "DB_URL"),
    )

    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = Field(default="", validation_alias=AliasChoices("SUPABASE_ANON_KEY", "SUPABASE_KEY"))
    # When set, access tokens are verified locally instead of asking the auth server.
    SUPABASE_JWT_SECRET: str = ""

    PROTECTED_PREFIXES: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["/dashboard", "/chat", "/journal", "/activities", "/insights"]
    )
    AUTH_ONLY_PREFIXES: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["/login", "/signup"])
    GATE_EXEMPT_PREFIXES: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["/static", "/api", "/metrics", "/health", "/favicon.ico"]
    )
    LOGIN_PATH: str = "/login"
    HOME_PATH: str = "/dashboard"

    @property
    def templates_dir(self) -> Path:
        return self.TEMPLATES_DIR if self.TEMPLATES_DIR is not None else self.BASE_DIR / "templates"

    @property
    def static_dir(self) -> Path:
        return self.STATIC_DIR if self.STATIC_DIR is not None else self.BASE_DIR / "static"

    @property
    def identity_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY)

    @field_validator("PROTECTED_PREFIXES", "AUTH_ONLY_PREFIXES", "GATE_EXEMPT_PREFIXES", mode="before")
    @classmethod
    def parse_prefixes(cls, value: Any, info) -> list[str]:
        return _split_csv(value, info.field_name)


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return AppSettings()
