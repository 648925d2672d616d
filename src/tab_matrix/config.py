"""
Configuration management for the tab-matrix system.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TRACKING_PARAMS = [
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "utm_term",
    "utm_content",
    "fbclid",
    "gclid",
    "msclkid",
    "_ga",
    "mc_cid",
    "mc_eid",
]

DEFAULT_INVALID_URL_PREFIXES = [
    "chrome://",
    "chrome-extension://",
    "about:",
    "edge://",
    "opera://",
    "brave://",
]


class NormalizationConfig(BaseSettings):
    """Configuration for URL canonicalization."""

    tracking_params: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TRACKING_PARAMS),
        description="Query parameter names stripped during canonicalization",
    )

    model_config = SettingsConfigDict(env_prefix="NORMALIZE_")


class TabSourceConfig(BaseSettings):
    """Configuration for tab collection."""

    invalid_url_prefixes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INVALID_URL_PREFIXES),
        description="Browser-internal URL prefixes that are never collected",
    )

    model_config = SettingsConfigDict(env_prefix="TABS_")


class ExportConfig(BaseSettings):
    """Configuration for export and file writing."""

    output_dir: Path = Field(
        default=Path("./exports"), description="Directory for exported files"
    )
    filename_prefix: str = Field(
        default="tab-urls", description="Prefix for generated export filenames"
    )
    max_content_size_mb: float = Field(
        default=10.0,
        description="Size above which a warning is logged (export still proceeds)",
    )
    compress: bool = Field(
        default=False, description="Compress written exports with zstd"
    )
    compression_level: int = Field(
        default=6, description="Compression level (1-22 for zstd)"
    )

    model_config = SettingsConfigDict(env_prefix="EXPORT_")


class Config(BaseSettings):
    """Main configuration."""

    # Sub-configs
    normalization: NormalizationConfig = Field(default_factory=NormalizationConfig)
    tabs: TabSourceConfig = Field(default_factory=TabSourceConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)

    # Global settings
    log_level: str = Field(default="INFO", description="Logging level")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_nested_delimiter="__"
    )


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (mainly for testing)."""
    global _config
    _config = None
