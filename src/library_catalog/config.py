"""Configuration management for the Library Catalog service.

Settings are read from ``LIBRARY_CATALOG_*`` environment variables (or a
``.env`` file) and validated with Pydantic v2.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """Service configuration.

    The ``app_name`` is used as the prefix of the alert and error headers
    the REST layer attaches to responses (``X-<app_name>-alert``).
    """

    model_config = SettingsConfigDict(
        env_prefix="LIBRARY_CATALOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application Metadata ===

    app_name: str = Field(
        default="libraryApp",
        description="Application name used in alert and error headers",
        pattern=r"^[A-Za-z][A-Za-z0-9]*$",
    )

    app_version: str = Field(
        default="0.1.0",
        description="Version reported by the OpenAPI document",
        pattern=r"^\d+\.\d+\.\d+(-[a-zA-Z0-9.]+)?$",
    )

    # === Database Configuration ===

    database_path: Path = Field(
        default=Path("data/library.db"),
        description="SQLite database file path",
    )

    database_url: str | None = Field(
        default=None,
        description="Full SQLAlchemy URL; takes precedence over database_path",
        repr=False,
    )

    # === HTTP Configuration ===

    http_host: str = Field(
        default="127.0.0.1",
        description="Host the HTTP server binds to",
    )

    http_port: int = Field(
        default=8080,
        description="Port the HTTP server binds to",
        ge=1024,
        le=65535,
    )

    # === Pagination ===

    default_page_size: int = Field(
        default=20,
        description="Page size used when a list request does not send one",
        ge=1,
    )

    max_page_size: int = Field(
        default=100,
        description="Upper bound accepted for the size query parameter",
        ge=1,
        le=2000,
    )

    # === Development Configuration ===

    debug: bool = Field(
        default=False,
        description="Enable debug logging",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lower-case level names from the environment."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("max_page_size")
    @classmethod
    def validate_max_page_size(cls, v: int, info) -> int:
        """The maximum page size can never be below the default page size."""
        default_size = info.data.get("default_page_size")
        if default_size is not None and v < default_size:
            raise ValueError("max_page_size must be >= default_page_size")
        return v

    # === Computed Properties ===

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level


class _ConfigStore:
    """Internal storage for configuration singleton."""

    _instance: AppConfig | None = None


def get_config() -> AppConfig:
    """Get or create the global configuration instance."""
    if _ConfigStore._instance is None:  # type: ignore[reportPrivateUsage]
        _ConfigStore._instance = AppConfig()  # type: ignore[reportPrivateUsage]
    return _ConfigStore._instance  # type: ignore[reportPrivateUsage]


def reset_config() -> None:
    """Reset configuration (useful for testing)."""
    _ConfigStore._instance = None  # type: ignore[reportPrivateUsage]
