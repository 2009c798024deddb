"""Build output bookkeeping.

This module handles:
- Removing universal artifacts
- Stripping extraneous items from built frameworks
- Cleaning the shared derived data cache and per-project temporary files
- Measuring and formatting output sizes
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from xcprebuild.projects.handle import ProjectHandle

logger = logging.getLogger(__name__)

# Headers are exposed through HEADER_SEARCH_PATHS of the pod,
# _CodeSignature is only generated for simulator builds.
EXTRANEOUS_FRAMEWORK_ITEMS = ["Headers", "_CodeSignature"]


def remove_path(path: Path) -> bool:
    """Remove a file or directory tree if it exists.

    Args:
        path: Path to remove.

    Returns:
        True if something was removed.
    """
    if path.is_symlink() or path.is_file():
        path.unlink()
        return True
    if path.is_dir():
        shutil.rmtree(path)
        return True
    return False


def remove_artifact(project: ProjectHandle) -> None:
    """Remove the project's `.xcframework`, if any."""
    if remove_path(project.artifact_path()):
        logger.info("Removed %s", project.artifact_path())


def clean_build_cache(derived_data_dir: Path) -> None:
    """Remove the shared derived data directory and everything beneath it.

    Args:
        derived_data_dir: Shared derived data directory.
    """
    if remove_path(derived_data_dir):
        logger.info("Removed shared derived data: %s", derived_data_dir)
    else:
        logger.debug("Shared derived data already absent: %s", derived_data_dir)


def clean_temporary_files(project: ProjectHandle, intermediates_dir: Path) -> None:
    """Remove files generated while prebuilding a single project.

    Removes the generated `.xcodeproj`, its spec, and the project's own
    intermediates in derived data. Build products and intermediates of
    other projects are kept.

    Args:
        project: Project to clean up after.
        intermediates_dir: Intermediates directory of the shared derived data.
    """
    intermediates = intermediates_dir / f"{project.name}.build"
    for path in (project.descriptor_path(), project.spec_path(), intermediates):
        if remove_path(path):
            logger.debug("Removed temporary path: %s", path)


def strip_framework(framework_path: Path) -> list[str]:
    """Remove extraneous items from a built `.framework`.

    Removal is best-effort: a failure to remove one item is logged and
    the remaining items are still processed.

    Args:
        framework_path: Path to the `.framework` directory.

    Returns:
        Names of the items that were removed.
    """
    removed: list[str] = []
    for item in EXTRANEOUS_FRAMEWORK_ITEMS:
        path = framework_path / item
        try:
            if remove_path(path):
                removed.append(item)
        except OSError as e:
            logger.warning("Failed to remove %s: %s", path, e)
    return removed


def directory_size(path: Path) -> int:
    """Return the total size in bytes of the files under a path."""
    if path.is_file():
        return path.stat().st_size
    return sum(p.stat().st_size for p in path.rglob("*") if p.is_file())


def format_size(size_bytes: int) -> str:
    """Format a byte count in human units, e.g. `1.5 MB`."""
    size = float(size_bytes)
    for unit in ("B", "kB", "MB"):
        if size < 1000:
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1000
    return f"{size:.1f} GB"


__all__ = [
    "EXTRANEOUS_FRAMEWORK_ITEMS",
    "clean_build_cache",
    "clean_temporary_files",
    "directory_size",
    "format_size",
    "remove_artifact",
    "remove_path",
    "strip_framework",
]
