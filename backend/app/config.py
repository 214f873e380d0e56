"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Store location/credentials and listen port come from the environment (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - No runtime reconfiguration

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support (ADR: developer UX)
    - DATABASE_URL wins when set; otherwise the URL is composed from DB_* parts, which is
      how container manifests usually hand them over
    - max_overflow is fixed at 0: pool_size is a hard ceiling on concurrent connections
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str | None = None

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str | None) -> str | None:
        """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v or None

    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "userdb"
    db_user: str = "postgres"
    db_password: str = "postgres"

    database_pool_size: int = 10
    database_pool_timeout: float = 5.0
    database_query_timeout: float = 10.0
    database_connect_timeout: float = 5.0
    database_create_schema: bool = True

    # Server
    host: str = "0.0.0.0"
    port: int = 5000

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def sqlalchemy_url(self) -> str:
        """Async SQLAlchemy URL for the store."""
        if self.database_url:
            return self.database_url
        return URL.create(
            "postgresql+asyncpg",
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        ).render_as_string(hide_password=False)


@lru_cache
def get_settings() -> Settings:
    return Settings()
