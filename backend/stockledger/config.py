# backend/stockledger/config.py
"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables with validation:
- ENVIRONMENT: Runtime mode (development, test, production)
- DATABASE_URL: Where saved portfolio snapshots live (SQLite by default)
- PRICE_CACHE_DIR / PRICE_SOURCE: Where historical prices come from

Environment-specific behavior:
- test: Forces an in-memory SQLite database for isolated tests
- development: Uses a local SQLite file unless DATABASE_URL is set
- production: Requires DATABASE_URL to be set explicitly

Usage:
    from stockledger.config import settings

    if settings.price_source == "yahoo":
        ...
"""
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# The .env file lives in the project root (parent of backend/)
_BACKEND_DIR = Path(__file__).resolve().parent.parent
_PROJECT_ROOT = _BACKEND_DIR.parent
_ENV_FILE = _PROJECT_ROOT / ".env"

DEFAULT_DATABASE_URL = "sqlite:///./stockledger.db"
TEST_DATABASE_URL = "sqlite:///:memory:"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables:
        - ENVIRONMENT: Runtime environment (development, test, production)
        - APP_NAME: Application name (default: "Stock Ledger")
        - DEBUG: Echo SQL and enable debug output (default: False)
        - LOG_LEVEL: Logging level (default: "INFO")
        - LOG_FORMAT: "text" or "json" (default: "text")

    Price data:
        - PRICE_CACHE_DIR: Directory of <TICKER>.csv price files
        - PRICE_SOURCE: "cache" (local CSV only) or "yahoo" (CSV cache
          backed by Yahoo Finance)
        - PROVIDER_TIMEOUT_SECONDS: Timeout for remote price fetches

    Ledger policy:
        - REQUIRE_WHOLE_SHARE_BUYS: Reject fractional buys (default: True)
        - CHART_MAX_SYMBOLS: Widest bar in a performance chart (default: 40)
    """

    environment: Literal["development", "test", "production"] = Field(
        default="development",
        description="Runtime environment (development, test, production)"
    )

    app_name: str = "Stock Ledger"
    debug: bool = False

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_format: Literal["text", "json"] = Field(
        default="text",
        description="Log output format"
    )

    database_url: str | None = Field(
        default=None,
        description="SQLAlchemy URL for saved portfolio snapshots"
    )

    # =========================================================================
    # PRICE DATA
    # =========================================================================
    price_cache_dir: Path = Field(
        default=_PROJECT_ROOT / "data" / "prices",
        description="Directory holding cached <TICKER>.csv price histories"
    )
    price_source: Literal["cache", "yahoo"] = Field(
        default="yahoo",
        description="'cache' reads local CSV files only, 'yahoo' fills the cache from Yahoo Finance"
    )
    provider_timeout_seconds: int = Field(
        default=10,
        ge=1,
        le=120,
        description="Timeout for remote price requests"
    )

    # =========================================================================
    # LEDGER AND CHART POLICY
    # =========================================================================
    require_whole_share_buys: bool = Field(
        default=True,
        description="Reject buys of fractional share counts"
    )
    chart_max_symbols: int = Field(
        default=40,
        ge=1,
        le=200,
        description="Number of symbols drawn for the largest value in a chart"
    )

    # =========================================================================
    # CORS
    # =========================================================================
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"],
        description="Allowed CORS origins"
    )
    cors_allow_methods: list[str] = Field(
        default=["*"],
        description="Allowed HTTP methods for CORS"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        description="Allowed HTTP headers for CORS"
    )

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_database_config(self) -> "Settings":
        """
        Resolve the database URL for the current environment.

        Rules:
        - test: in-memory SQLite unless a URL is given
        - development: local SQLite file unless a URL is given
        - production: DATABASE_URL is required
        """
        if self.database_url is not None:
            return self

        if self.environment == "test":
            object.__setattr__(self, "database_url", TEST_DATABASE_URL)
        elif self.environment == "development":
            object.__setattr__(self, "database_url", DEFAULT_DATABASE_URL)
        else:
            raise ValueError(
                "DATABASE_URL is required in production environment. "
                "Example: sqlite:////var/lib/stockledger/ledger.db"
            )
        return self

    @property
    def is_sqlite(self) -> bool:
        """Check if using SQLite database."""
        return self.database_url is not None and self.database_url.lower().startswith("sqlite://")


# Create single instance
settings = Settings()
