"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Settings are frozen: resolved once at startup, never mutated at runtime

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with SQLite
"""

from functools import lru_cache
from importlib import metadata

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, frozen=True,
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./scaffold.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres URLs come as postgres:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str):
            for prefix in ("postgres://", "postgresql://"):
                if v.startswith(prefix):
                    return v.replace(prefix, "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    database_echo: bool = False
    database_create_tables: bool = True

    # Signed credentials
    jwt_secret: str = ""
    jwt_issuer: str = "api-scaffold"
    jwt_audience: str = "api-scaffold"
    jwt_expires_seconds: int = 5 * 60
    jwt_algorithm: str = "HS256"

    # Password hashing
    bcrypt_rounds: int = 12

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def app_version() -> str:
    """Version of the installed distribution (build metadata)."""
    try:
        return metadata.version("api-scaffold")
    except metadata.PackageNotFoundError:
        return "0.0.0"
