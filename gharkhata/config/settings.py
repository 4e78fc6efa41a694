"""
Configuration Management for GharKhata

Read from GHARKHATA_* environment variables or a .env file.

DESIGN DECISION: Configuration lives here and nowhere else.
The aggregation engine takes no configuration; its rules
are fixed. Settings only cover where data lives and how we log.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Key-value store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GHARKHATA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    storage_backend: str = Field(
        default="json",
        pattern="^(json|memory)$",
        description="Which key-value store to use"
    )
    data_dir: Path = Field(
        default=Path.home() / ".gharkhata",
        description="Directory holding the JSON data file"
    )
    storage_file_name: str = Field(
        default="gharkhata.json",
        min_length=1,
        description="Name of the JSON data file inside data_dir"
    )
    storage_prefix: str = Field(
        default="gharkhata_",
        min_length=1,
        description="Prefix for every stored key"
    )
    default_profile: str = Field(
        default="default",
        min_length=1,
        description="Profile used when none is selected"
    )
    write_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a failed write is attempted"
    )

    @field_validator("data_dir")
    @classmethod
    def expand_data_dir(cls, v: Path) -> Path:
        """Allow ~ in the configured path."""
        return Path(v).expanduser()

    @property
    def storage_path(self) -> Path:
        """Full path to the JSON data file."""
        return self.data_dir / self.storage_file_name


class AppSettings(BaseSettings):
    """Logging, environment and statement presentation."""

    model_config = SettingsConfigDict(
        env_prefix="GHARKHATA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="development, staging or production"
    )
    debug_mode: bool = Field(
        default=False,
        description="Show extra diagnostics in the UI"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum log level"
    )
    log_json: bool = Field(
        default=False,
        description="Render logs as JSON lines instead of console text"
    )

    # Presentation
    statement_title: str = Field(
        default="Singhi GharKhata Monthly Statement",
        max_length=200,
        description="Heading used on exported statements"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v):
        """Accept lower-case level names."""
        return v.upper() if isinstance(v, str) else v


class Settings(BaseSettings):
    """
    Root settings container.

    Storage and app sections, each re-read from the environment on access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Settings for the running process.

    Tests call get_settings.cache_clear() after changing the environment.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Check that each settings section loads.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the ones that failed.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.storage
        results["storage"] = True
    except Exception as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
