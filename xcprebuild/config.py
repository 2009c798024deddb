"""Configuration settings for xcprebuild.

Uses pydantic-settings for config parsing from environment variables
and defaults. Configuration precedence: CLI flags > env vars > defaults.
"""

import tempfile
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PREBUILD_PACKAGES = [
    "expo-av",
    "expo-barcode-scanner",
    "expo-gl",
    "expo-image-loader",
    "expo-linear-gradient",
]


def _default_packages_dir() -> Path:
    """Return the default packages directory."""
    return Path.cwd() / "packages"


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from environment variables with the XCPREBUILD_ prefix.
    CLI flags can override these at runtime.
    """

    model_config = SettingsConfigDict(
        env_prefix="XCPREBUILD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    tmp_dir: Path | None = Field(
        default=None,
        description="Base directory for the shared build cache (uses system default if not set)",
    )
    cache_namespace: str = Field(
        default="Expo",
        min_length=1,
        description="Directory under tmp_dir owning the shared derived data",
    )
    packages_dir: Path = Field(
        default_factory=_default_packages_dir,
        description="Root directory of the package monorepo",
    )

    # Packages
    prebuild_packages: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PREBUILD_PACKAGES),
        description="Names of packages that can be prebuilt",
    )

    # External tools
    xcodebuild_path: str = Field(
        default="xcodebuild",
        description="Executable used to build frameworks and xcframeworks",
    )
    xcodegen_path: str = Field(
        default="xcodegen",
        description="Executable used to generate .xcodeproj files from specs",
    )
    ios_deployment_target: str = Field(
        default="12.0",
        description="iOS deployment target written into generated project specs",
    )

    # Operational
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    build_timeout: int = Field(
        default=3600,
        ge=60,
        description="Timeout for a single external tool run (seconds)",
    )

    @property
    def derived_data_dir(self) -> Path:
        """Shared derived data directory reused across builds."""
        base = self.tmp_dir if self.tmp_dir is not None else Path(tempfile.gettempdir())
        return base / self.cache_namespace / "DerivedData"

    @property
    def products_dir(self) -> Path:
        """Directory in derived data where built `.framework` files land."""
        return self.derived_data_dir / "Build" / "Products"

    @property
    def intermediates_dir(self) -> Path:
        """Directory in derived data holding per-project intermediate files."""
        return self.derived_data_dir / "Build" / "Intermediates.noindex"


def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()


def print_settings_json(settings: Settings | None = None) -> str:
    """Render effective settings as JSON.

    Args:
        settings: Optional settings instance; uses default if not provided.

    Returns:
        JSON string of effective settings.
    """
    if settings is None:
        settings = get_settings()
    return settings.model_dump_json(indent=2)


__all__ = [
    "DEFAULT_PREBUILD_PACKAGES",
    "Settings",
    "get_settings",
    "print_settings_json",
]
