"""Configuration for pyfulmen.

Settings are read from the environment with the ``PYFULMEN_`` prefix, for example
``PYFULMEN_SCHEMA_ROOT=/srv/schemas`` or ``PYFULMEN_TELEMETRY_ENABLED=true``.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SCHEMA_URL_PREFIX = "https://schemas.fulmenhq.dev/"

# --- Module State ---
_CONFIG_CACHE: Optional["FulmenConfig"] = None


class FulmenConfig(BaseSettings):
    """Process-wide pyfulmen settings."""

    schema_root: Optional[Path] = Field(
        default=None,
        description="Schema catalog root. When unset the catalog is located automatically.",
    )
    log_level: str = Field(default="INFO", description="Log level used by the CLI")
    telemetry_enabled: bool = Field(
        default=False,
        description="Enable the logging telemetry emitter at startup",
    )
    schema_url_prefix: str = Field(
        default=DEFAULT_SCHEMA_URL_PREFIX,
        description="Vendor URL prefix mapped onto the local schema catalog",
    )
    identity_file: str = Field(
        default=".fulmen/app.yaml",
        description="Relative path of the application identity file used for export provenance",
    )

    model_config = SettingsConfigDict(
        env_prefix="PYFULMEN_",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("schema_url_prefix")
    @classmethod
    def ensure_trailing_slash(cls, value: str) -> str:
        return value if value.endswith("/") else value + "/"

    def model_post_init(self, __context) -> None:
        """Expand user-relative schema roots."""
        if self.schema_root is not None:
            self.schema_root = self.schema_root.expanduser()


def get_config() -> FulmenConfig:
    """Return the cached configuration, loading it from the environment on first use."""
    global _CONFIG_CACHE
    if _CONFIG_CACHE is None:
        _CONFIG_CACHE = FulmenConfig()
    return _CONFIG_CACHE


def reset_config() -> None:
    """Drop the cached configuration so the next call re-reads the environment."""
    global _CONFIG_CACHE
    _CONFIG_CACHE = None
