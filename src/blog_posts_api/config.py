"""Application configuration via environment variables."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

_ASYNC_DRIVERS = frozenset({"postgresql+asyncpg", "sqlite+aiosqlite"})


class Settings(BaseSettings):
    """Service configuration loaded from environment variables."""

    model_config = {"env_prefix": ""}

    # Database
    database_url: str = Field(
        description="SQLAlchemy async URL, e.g. postgresql+asyncpg://user:pw@host/db"
    )
    db_pool_size: int = Field(default=5, description="Connections kept open in the pool")
    db_max_overflow: int = Field(
        default=10, description="Extra connections allowed when the pool is saturated"
    )
    db_pool_timeout: float = Field(
        default=30.0, description="Seconds to wait for a pooled connection"
    )
    db_echo: bool = Field(default=False, description="Log every SQL statement")
    db_create_tables: bool = Field(
        default=False, description="Create missing tables on startup"
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Server bind host")
    port: int = Field(default=8000, description="Server bind port")
    log_level: str = Field(default="info", description="Log level")

    @property
    def database_driver(self) -> str:
        """The ``dialect+driver`` part of DATABASE_URL."""
        return self.database_url.split("://", 1)[0]

    @field_validator("database_url")
    @classmethod
    def _validate_async_driver(cls, v: str) -> str:
        if "://" not in v:
            raise ValueError("DATABASE_URL must be a URL like postgresql+asyncpg://...")
        driver = v.split("://", 1)[0]
        if driver not in _ASYNC_DRIVERS:
            supported = ", ".join(sorted(_ASYNC_DRIVERS))
            raise ValueError(
                f"DATABASE_URL driver '{driver}' is not async; use one of: {supported}"
            )
        return v

    @field_validator("db_pool_size")
    @classmethod
    def _validate_pool_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("DB_POOL_SIZE must be at least 1")
        return v
