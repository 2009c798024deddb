"""Package discovery and lookup.

Packages live in `Settings.packages_dir`, one directory each with a
`package.json` and, for packages with native iOS code, an
`ios/<Name>.podspec`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from xcprebuild.config import get_settings
from xcprebuild.packages.models import Package

if TYPE_CHECKING:
    from xcprebuild.config import Settings

logger = logging.getLogger(__name__)


def load_package(package_dir: Path) -> Package | None:
    """Load a package from its directory.

    Args:
        package_dir: Root directory of the package.

    Returns:
        Package, or None if the directory has no `package.json`.

    Raises:
        ValueError: If `package.json` is not valid JSON or not an object with a name.
    """
    manifest_path = package_dir / "package.json"
    if not manifest_path.is_file():
        return None

    with manifest_path.open(encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict) or not data.get("name"):
        raise ValueError(f"Invalid package.json in {package_dir}")

    podspecs = sorted((package_dir / "ios").glob("*.podspec"))
    podspec_name = podspecs[0].stem if podspecs else None

    return Package(
        name=data["name"],
        version=data.get("version") or "0.0.0",
        path=package_dir,
        podspec_name=podspec_name,
    )


def _load_package_or_skip(package_dir: Path) -> Package | None:
    try:
        return load_package(package_dir)
    except ValueError as e:
        logger.warning("Skipping invalid package in %s: %s", package_dir, e)
        return None


def discover_packages(packages_dir: Path) -> list[Package]:
    """Discover all packages in a packages directory.

    Args:
        packages_dir: Directory containing one sub-directory per package.

    Returns:
        Packages sorted by name.
    """
    if not packages_dir.is_dir():
        logger.warning("Packages directory does not exist: %s", packages_dir)
        return []

    packages: list[Package] = []
    for child in sorted(packages_dir.iterdir()):
        if not child.is_dir():
            continue
        package = _load_package_or_skip(child)
        if package is not None:
            packages.append(package)

    logger.debug("Discovered %d packages in %s", len(packages), packages_dir)
    return sorted(packages, key=lambda p: p.name)


def get_package_by_name(
    name: str,
    settings: Settings | None = None,
) -> Package | None:
    """Find a package by its name.

    Args:
        name: Package name.
        settings: Application settings.

    Returns:
        Package, or None if no package has that name.
    """
    if settings is None:
        settings = get_settings()

    # Packages usually live in a directory named after them
    candidate = settings.packages_dir / name
    if candidate.is_dir():
        package = _load_package_or_skip(candidate)
        if package is not None and package.name == name:
            return package

    for package in discover_packages(settings.packages_dir):
        if package.name == name:
            return package
    return None


def list_prebuildable_package_names(settings: Settings | None = None) -> list[str]:
    """Return names of packages that can be prebuilt."""
    if settings is None:
        settings = get_settings()
    return list(dict.fromkeys(settings.prebuild_packages))


def can_prebuild_package(package: Package, settings: Settings | None = None) -> bool:
    """Check whether a package can be prebuilt.

    Args:
        package: Package to check.
        settings: Application settings.

    Returns:
        True if the package is configured for prebuilding.
    """
    return package.name in list_prebuildable_package_names(settings)


__all__ = [
    "can_prebuild_package",
    "discover_packages",
    "get_package_by_name",
    "list_prebuildable_package_names",
    "load_package",
]
