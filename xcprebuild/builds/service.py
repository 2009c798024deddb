"""Prebuild service module.

This module provides the high-level prebuild API:
- run_prebuild(): Main entry point used by the CLI
- prebuild_package(): Generate, build, clean up and time a single package
- prebuild_packages_task(): Prebuild step of the package release pipeline

Packages are processed strictly one after another. The first failure
aborts the run and propagates to the caller.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from xcprebuild.builds.artifacts import (
    clean_build_cache,
    clean_temporary_files,
    directory_size,
    format_size,
    remove_artifact,
)
from xcprebuild.builds.runner import build_framework, build_xcframework
from xcprebuild.config import get_settings
from xcprebuild.packages.registry import (
    can_prebuild_package,
    get_package_by_name,
    list_prebuildable_package_names,
)
from xcprebuild.projects.handle import ProjectHandle, generate_from_spec
from xcprebuild.projects.spec import generate_project_spec, project_name_for_package
from xcprebuild.types import (
    Flavor,
    Framework,
    PrebuildResult,
    XcodebuildOptions,
)

if TYPE_CHECKING:
    from xcprebuild.config import Settings
    from xcprebuild.packages.models import Package

logger = logging.getLogger(__name__)

DEFAULT_FLAVORS: tuple[Flavor, ...] = (
    Flavor(configuration="Release", sdk="iphoneos", archs=("arm64",)),
    Flavor(configuration="Release", sdk="iphonesimulator", archs=("arm64", "x86_64")),
)

DEFAULT_BUILD_SETTINGS: dict[str, str | bool] = {
    "ONLY_ACTIVE_ARCH": False,
    "BUILD_LIBRARY_FOR_DISTRIBUTION": True,
    "DEAD_CODE_STRIPPING": True,
    "DEPLOYMENT_POSTPROCESSING": True,
    "STRIP_INSTALLED_PRODUCT": True,
    "STRIP_STYLE": "non-global",
    "COPY_PHASE_STRIP": True,
    "GCC_GENERATE_DEBUGGING_SYMBOLS": False,
}


def resolve_package_names(
    requested: Sequence[str],
    known: Sequence[str],
) -> list[str]:
    """Filter requested package names against the known prebuildable ones.

    Args:
        requested: Package names asked for, possibly empty.
        known: Names of packages that can be prebuilt.

    Returns:
        Requested names that are known, in input order, or all known
        names if none were requested.
    """
    if not requested:
        return list(known)
    known_set = set(known)
    return [name for name in requested if name in known_set]


def lookup_packages(
    names: Iterable[str],
    settings: Settings | None = None,
) -> list[Package]:
    """Look packages up by name, dropping names without a package."""
    packages: list[Package] = []
    for name in names:
        package = get_package_by_name(name, settings=settings)
        if package is None:
            logger.debug("Skipping unknown package: %s", name)
            continue
        packages.append(package)
    return packages


def project_for_package(package: Package) -> ProjectHandle:
    """Return the handle of a package's project, generated or not."""
    return ProjectHandle(
        name=project_name_for_package(package),
        root_dir=package.ios_dir,
    )


def generate_project(package: Package, settings: Settings | None = None) -> ProjectHandle:
    """Generate the Xcode project of a package from its spec."""
    spec = generate_project_spec(package, settings=settings)
    return generate_from_spec(package.ios_dir, spec, settings=settings)


def build_frameworks_for_project(
    project: ProjectHandle,
    settings: Settings | None = None,
    flavors: Sequence[Flavor] = DEFAULT_FLAVORS,
    quiet: bool = False,
) -> Path:
    """Build a framework per flavor and merge them into an xcframework.

    Args:
        project: Project to build.
        settings: Application settings.
        flavors: Flavors to build.
        quiet: Pass `-quiet` to xcodebuild and hide merge output.

    Returns:
        Path to the universal `.xcframework`.
    """
    if settings is None:
        settings = get_settings()

    options = XcodebuildOptions(quiet=quiet, settings=dict(DEFAULT_BUILD_SETTINGS))
    frameworks: list[Framework] = []

    for flavor in flavors:
        logger.info(
            "Building framework for %s (%s)",
            flavor.sdk,
            ", ".join(flavor.archs),
        )
        framework = build_framework(
            project, project.name, flavor, options=options, settings=settings
        )
        logger.info("   Binary size: %s", format_size(framework.binary_size))
        frameworks.append(framework)

    logger.info("Merging %d frameworks into xcframework", len(frameworks))
    xcframework_path = build_xcframework(
        project, frameworks, options=options, settings=settings
    )
    logger.info(
        "   Created %s (%s)",
        xcframework_path.name,
        format_size(directory_size(xcframework_path)),
    )
    return xcframework_path


def prebuild_package(
    package: Package,
    settings: Settings | None = None,
    generate_specs_only: bool = False,
    quiet: bool = True,
    flavors: Sequence[Flavor] = DEFAULT_FLAVORS,
) -> PrebuildResult:
    """Prebuild a single package.

    Generates the project, builds and merges frameworks, removes
    temporary files and reports the elapsed time. With
    `generate_specs_only` only the project is generated.

    Args:
        package: Package to prebuild.
        settings: Application settings.
        generate_specs_only: Skip building and cleanup.
        quiet: Hide xcodebuild output.
        flavors: Flavors to build.

    Returns:
        PrebuildResult with timing and the xcframework path.
    """
    if settings is None:
        settings = get_settings()

    logger.info("Prebuilding %s", package.name)
    started = time.perf_counter()

    project = generate_project(package, settings=settings)
    xcframework_path: Path | None = None

    if not generate_specs_only:
        xcframework_path = build_frameworks_for_project(
            project, settings=settings, flavors=flavors, quiet=quiet
        )
        clean_temporary_files(project, settings.intermediates_dir)

    duration = time.perf_counter() - started
    logger.info("   Finished in: %.2fs", duration)

    return PrebuildResult(
        package_name=package.name,
        duration_seconds=duration,
        xcframework_path=xcframework_path,
    )


def remove_artifacts(packages: Iterable[Package]) -> None:
    """Remove the xcframeworks of the given packages."""
    for package in packages:
        remove_artifact(project_for_package(package))


def run_prebuild(
    package_names: Sequence[str] = (),
    settings: Settings | None = None,
    remove_artifacts_only: bool = False,
    clean_cache: bool = False,
    generate_specs: bool = False,
    verbose: bool = False,
) -> list[PrebuildResult]:
    """Prebuild packages, or run one of the cleanup modes.

    Args:
        package_names: Packages to process; all prebuildable ones if empty.
        settings: Application settings.
        remove_artifacts_only: Only remove existing xcframeworks.
        clean_cache: Only wipe the shared derived data directory.
        generate_specs: Only generate projects, do not build.
        verbose: Show xcodebuild output.

    Returns:
        One PrebuildResult per prebuilt package (empty for cleanup modes).
    """
    if settings is None:
        settings = get_settings()

    names = resolve_package_names(
        package_names, list_prebuildable_package_names(settings)
    )

    if clean_cache:
        logger.info("Cleaning shared derived data directory")
        clean_build_cache(settings.derived_data_dir)
        return []

    packages = lookup_packages(names, settings=settings)

    if remove_artifacts_only:
        logger.info("Removing existing artifacts")
        remove_artifacts(packages)
        return []

    return [
        prebuild_package(
            package,
            settings=settings,
            generate_specs_only=generate_specs,
            quiet=not verbose,
        )
        for package in packages
    ]


def prebuild_packages_task(
    packages: Iterable[Package],
    settings: Settings | None = None,
) -> list[PrebuildResult]:
    """Prebuild step of the release pipeline.

    Prebuilds every package that can be prebuilt, quietly, and skips
    the others.
    """
    if settings is None:
        settings = get_settings()

    results: list[PrebuildResult] = []
    for package in packages:
        if not can_prebuild_package(package, settings):
            continue
        results.append(prebuild_package(package, settings=settings, quiet=True))
    return results


__all__ = [
    "DEFAULT_BUILD_SETTINGS",
    "DEFAULT_FLAVORS",
    "build_frameworks_for_project",
    "generate_project",
    "lookup_packages",
    "prebuild_package",
    "prebuild_packages_task",
    "project_for_package",
    "remove_artifacts",
    "resolve_package_names",
    "run_prebuild",
]
