from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url

# Driver used for each backend by the async engine.
_ASYNC_DRIVERS = {
    "postgresql": "postgresql+asyncpg",
    "sqlite": "sqlite+aiosqlite",
}


def _backend(url: URL) -> str:
    name = url.get_backend_name()
    # postgres:// is an old alias still found in hosted DATABASE_URL values
    return "postgresql" if name == "postgres" else name


class Settings(BaseSettings):
    """
    Database settings, read from the environment or a ``.env`` file.

    ``DATABASE_URL`` takes any SQLAlchemy URL (PostgreSQL or SQLite, with or
    without a driver). Without it, a PostgreSQL URL is assembled from the
    ``POSTGRES_*`` variables.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DATABASE_URL: Optional[str] = Field(
        default=None, description="Full URL, e.g. sqlite+aiosqlite:///./members.db"
    )
    POSTGRES_USER: Optional[str] = Field(default=None)
    POSTGRES_PASSWORD: Optional[str] = Field(default=None)
    POSTGRES_DB: Optional[str] = Field(default=None)
    POSTGRES_HOST: str = Field(default="localhost")
    POSTGRES_PORT: int = Field(default=5432)

    SQL_ECHO: bool = Field(default=False, description="Log every SQL statement")

    @property
    def url(self) -> URL:
        """The configured URL as given, before any driver is chosen."""
        if self.DATABASE_URL:
            return make_url(self.DATABASE_URL)
        if not (self.POSTGRES_USER and self.POSTGRES_PASSWORD and self.POSTGRES_DB):
            raise ValueError(
                "Database configuration missing: set DATABASE_URL, or POSTGRES_USER, "
                "POSTGRES_PASSWORD and POSTGRES_DB."
            )
        return URL.create(
            "postgresql",
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD,
            host=self.POSTGRES_HOST,
            port=self.POSTGRES_PORT,
            database=self.POSTGRES_DB,
        )

    @property
    def database_url(self) -> str:
        return self.url.render_as_string(hide_password=False)

    @property
    def async_database_url(self) -> str:
        """URL with the async driver for its backend (asyncpg or aiosqlite)."""
        url = self.url
        backend = _backend(url)
        driver = _ASYNC_DRIVERS.get(backend)
        if driver is None:
            raise ValueError(f"Unsupported database backend: {backend!r}")
        return url.set(drivername=driver).render_as_string(hide_password=False)

    @property
    def sync_database_url(self) -> str:
        """URL with the driver stripped, for Alembic's offline mode."""
        url = self.url
        return url.set(drivername=_backend(url)).render_as_string(hide_password=False)


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Read database settings; a fresh instance picks up environment changes."""
    return Settings()
