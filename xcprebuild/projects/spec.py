"""XcodeGen project specs.

This module handles:
- Describing an Xcode project as an XcodeGen spec
- Building a spec for a package's iOS sources
- Writing specs as YAML and running XcodeGen on them
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

from xcprebuild.config import get_settings
from xcprebuild.errors import (
    BUILD_TIMEOUT,
    EXECUTION_ERROR,
    PROJECT_GENERATION_FAILED,
    BuildError,
)

if TYPE_CHECKING:
    from xcprebuild.config import Settings
    from xcprebuild.packages.models import Package

logger = logging.getLogger(__name__)

SPEC_SUFFIX = ".spec.yml"

# Files in a package's ios/ directory that never belong to the framework
SOURCE_EXCLUDES = [
    "Tests/**",
    "**/*.xcodeproj/**",
    "**/*.xcframework/**",
    "*.podspec",
    f"*{SPEC_SUFFIX}",
]


class _SpecModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class DeploymentTargetSchema(_SpecModel):
    """Minimum OS versions per platform."""

    ios: str | None = Field(default=None, alias="iOS")


class ProjectOptionsSchema(_SpecModel):
    """Project-wide XcodeGen options."""

    bundle_id_prefix: str | None = Field(default=None, alias="bundleIdPrefix")
    deployment_target: DeploymentTargetSchema | None = Field(
        default=None, alias="deploymentTarget"
    )


class SettingsSchema(_SpecModel):
    """Build settings group."""

    base: dict[str, Any] = Field(default_factory=dict)


class SourceSchema(_SpecModel):
    """A source directory of a target."""

    path: str
    excludes: list[str] | None = None


class TargetSchema(_SpecModel):
    """A single target of the project.

    Attributes:
        type: Product type, e.g. `framework`.
        platform: Target platform, e.g. `iOS`.
        sources: Source directories.
        settings: Target build settings.
        dependencies: Linked SDKs or frameworks.
        scheme: Scheme options; an empty mapping asks XcodeGen for a default scheme.
    """

    type: str = "framework"
    platform: str = "iOS"
    sources: list[SourceSchema] = Field(default_factory=list)
    settings: SettingsSchema | None = None
    dependencies: list[dict[str, str]] | None = None
    scheme: dict[str, Any] | None = Field(default_factory=dict)


class ProjectSpec(_SpecModel):
    """XcodeGen project spec.

    Attributes:
        name: Project name, also the `.xcodeproj` base filename.
        options: Project-wide options.
        settings: Project build settings.
        targets: Targets keyed by name.
    """

    name: str = Field(min_length=1)
    options: ProjectOptionsSchema | None = None
    settings: SettingsSchema | None = None
    targets: dict[str, TargetSchema] = Field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Render the spec in XcodeGen's own key format."""
        return self.model_dump(by_alias=True, exclude_none=True)


def project_name_for_package(package: Package) -> str:
    """Return the project name used for a package."""
    return package.podspec_name or package.name


def generate_project_spec(
    package: Package,
    settings: Settings | None = None,
) -> ProjectSpec:
    """Build an XcodeGen spec for a package's iOS sources.

    The spec has one framework target named `<name>_iOS` whose product
    is `<name>.framework`.

    Args:
        package: Package to build the spec for.
        settings: Application settings.

    Returns:
        ProjectSpec for the package.
    """
    if settings is None:
        settings = get_settings()

    name = project_name_for_package(package)
    target = TargetSchema(
        sources=[SourceSchema(path=".", excludes=list(SOURCE_EXCLUDES))],
        settings=SettingsSchema(
            base={
                "PRODUCT_NAME": name,
                "PRODUCT_BUNDLE_IDENTIFIER": f"dev.expo.{name}",
                "GENERATE_INFOPLIST_FILE": True,
                "MARKETING_VERSION": package.version,
            }
        ),
        dependencies=[{"sdk": "Foundation.framework"}],
    )
    return ProjectSpec(
        name=name,
        options=ProjectOptionsSchema(
            bundle_id_prefix="dev.expo",
            deployment_target=DeploymentTargetSchema(
                ios=settings.ios_deployment_target
            ),
        ),
        targets={f"{name}_iOS": target},
    )


def write_project_spec(spec: ProjectSpec, path: Path) -> Path:
    """Write a project spec to a YAML file.

    Args:
        spec: Project spec to write.
        path: Output file path.

    Returns:
        Path to the written spec file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(spec.to_dict(), f, default_flow_style=False, sort_keys=False)
    logger.debug("Wrote project spec to %s", path)
    return path


def generate_project_from_spec(
    root_dir: Path,
    spec: ProjectSpec,
    settings: Settings | None = None,
) -> Path:
    """Materialize an `.xcodeproj` from a spec with XcodeGen.

    Args:
        root_dir: Directory in which the spec and project are written.
        spec: Project spec.
        settings: Application settings.

    Returns:
        Path to the generated `.xcodeproj`.

    Raises:
        BuildError: If XcodeGen cannot be run or fails.
    """
    if settings is None:
        settings = get_settings()

    root_dir = Path(root_dir)
    spec_path = write_project_spec(spec, root_dir / f"{spec.name}{SPEC_SUFFIX}")

    cmd = [
        settings.xcodegen_path,
        "generate",
        "--spec",
        str(spec_path),
        "--project",
        str(root_dir),
        "--quiet",
    ]
    logger.info("Generating project: %s", shlex.join(cmd))

    try:
        result = subprocess.run(
            cmd,
            cwd=root_dir,
            capture_output=True,
            text=True,
            timeout=settings.build_timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        raise BuildError(
            f"xcodegen timed out after {settings.build_timeout}s",
            exit_code=-1,
            code=BUILD_TIMEOUT,
        ) from e
    except OSError as e:
        raise BuildError(
            f"Failed to run xcodegen: {e}",
            code=EXECUTION_ERROR,
        ) from e

    if result.returncode != 0:
        raise BuildError(
            f"xcodegen failed with exit code {result.returncode}: {result.stderr}",
            exit_code=result.returncode,
            code=PROJECT_GENERATION_FAILED,
            stdout=result.stdout,
        )

    return root_dir / f"{spec.name}.xcodeproj"


__all__ = [
    "SOURCE_EXCLUDES",
    "SPEC_SUFFIX",
    "ProjectSpec",
    "SettingsSchema",
    "SourceSchema",
    "TargetSchema",
    "generate_project_from_spec",
    "generate_project_spec",
    "project_name_for_package",
    "write_project_spec",
]
