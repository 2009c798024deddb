"""Runner for `xcodebuild` commands.

This module handles:
- Composing `xcodebuild` arguments, build settings and flags
- Executing `xcodebuild` with subprocess
- Building `.framework` files per flavor
- Merging frameworks into a universal `.xcframework`
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import sys
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from xcprebuild.builds.artifacts import remove_path, strip_framework
from xcprebuild.config import get_settings
from xcprebuild.errors import (
    BUILD_TIMEOUT,
    EXECUTION_ERROR,
    BuildError,
    NotFoundError,
)
from xcprebuild.types import Flavor, Framework, StdOutput, XcodebuildOptions

if TYPE_CHECKING:
    from xcprebuild.config import Settings
    from xcprebuild.projects.handle import ProjectHandle

logger = logging.getLogger(__name__)

# File descriptor of the parent's standard error
STDERR_FD = 2


def parse_settings_value(value: str | bool) -> str:
    """Convert a build setting value to xcodebuild's format.

    Booleans become `YES`/`NO`; any other value passes through.
    """
    if isinstance(value, bool):
        return "YES" if value else "NO"
    return value


def compose_settings_args(settings: Mapping[str, str | bool] | None) -> list[str]:
    """Compose `KEY=VALUE` build setting overrides.

    Args:
        settings: Build settings keyed by name.

    Returns:
        One `KEY=VALUE` token per setting, in mapping order.
    """
    if not settings:
        return []
    return [f"{key}={parse_settings_value(value)}" for key, value in settings.items()]


def spread_args(flag: str, values: Iterable[str]) -> list[str]:
    """Repeat a flag before each value.

    Example: `spread_args("-arch", ["arm64", "x86_64"])` returns
    `["-arch", "arm64", "-arch", "x86_64"]`.
    """
    args: list[str] = []
    for value in values:
        args.extend([flag, str(value)])
    return args


def compose_xcodebuild_command(
    args: list[str],
    options: XcodebuildOptions | None = None,
    executable: str = "xcodebuild",
) -> list[str]:
    """Compose the full `xcodebuild` command.

    Build setting overrides come first, then `-quiet` if requested,
    then the given arguments.

    Args:
        args: Action arguments.
        options: Invocation options.
        executable: Name or path of the xcodebuild executable.

    Returns:
        Command as list of strings suitable for subprocess.
    """
    cmd = [executable]
    if options is not None:
        cmd.extend(compose_settings_args(options.settings))
        if options.quiet:
            cmd.append("-quiet")
    cmd.extend(args)
    return cmd


def _stdout_target(std_output: StdOutput | None) -> Any:
    if std_output is None or std_output == StdOutput.STDERR:
        return STDERR_FD
    if std_output == StdOutput.IGNORE:
        return subprocess.DEVNULL
    if std_output == StdOutput.CAPTURE:
        return subprocess.PIPE
    return None


def run_xcodebuild(
    args: list[str],
    cwd: Path,
    options: XcodebuildOptions | None = None,
    executable: str = "xcodebuild",
    timeout: int | None = None,
) -> None:
    """Execute `xcodebuild`.

    Standard input is disabled. Standard output goes to the parent's
    standard error unless `options.std_output` says otherwise; standard
    error is inherited.

    Args:
        args: Action arguments.
        cwd: Working directory, the project root.
        options: Invocation options.
        executable: Name or path of the xcodebuild executable.
        timeout: Timeout in seconds (None = no timeout).

    Raises:
        BuildError: If xcodebuild cannot be run, times out or exits non-zero.
    """
    cmd = compose_xcodebuild_command(args, options, executable)
    cmd_str = shlex.join(cmd)
    logger.info("Executing: %s", cmd_str)
    logger.debug("Working directory: %s", cwd)

    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            stdout=_stdout_target(options.std_output if options else None),
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        raise BuildError(
            f"xcodebuild timed out after {timeout} seconds",
            exit_code=-1,
            code=BUILD_TIMEOUT,
        ) from e
    except OSError as e:
        raise BuildError(
            f"Failed to execute xcodebuild: {e}",
            code=EXECUTION_ERROR,
        ) from e

    if result.returncode != 0:
        stdout = result.stdout if isinstance(result.stdout, str) else None
        # xcodebuild writes the details of a failure to stdout
        if stdout:
            sys.stdout.write(stdout)
            sys.stdout.flush()
        logger.error("xcodebuild failed with exit code %d", result.returncode)
        raise BuildError(
            f"xcodebuild failed with exit code {result.returncode}: {cmd_str}",
            exit_code=result.returncode,
            stdout=stdout,
        )


def flavor_to_framework_path(products_dir: Path, target: str, flavor: Flavor) -> Path:
    """Return the path to the `.framework` built for a flavor."""
    return products_dir / f"{flavor.configuration}-{flavor.sdk}" / f"{target}.framework"


def build_framework(
    project: ProjectHandle,
    target: str,
    flavor: Flavor,
    options: XcodebuildOptions | None = None,
    settings: Settings | None = None,
) -> Framework:
    """Build a `.framework` of a target for one flavor.

    Args:
        project: Project containing the target.
        target: Target name; the scheme built is `<target>_iOS`.
        flavor: Configuration, SDK and architectures to build.
        options: Invocation options.
        settings: Application settings, providing the derived data directory.

    Returns:
        Framework describing the built output.

    Raises:
        BuildError: If xcodebuild fails.
        NotFoundError: If the framework binary is missing after the build.
    """
    if settings is None:
        settings = get_settings()

    run_xcodebuild(
        [
            "build",
            "-project",
            project.descriptor_path().name,
            "-scheme",
            f"{target}_iOS",
            "-configuration",
            flavor.configuration,
            "-sdk",
            flavor.sdk,
            *spread_args("-arch", flavor.archs),
            "-derivedDataPath",
            str(settings.derived_data_dir),
        ],
        cwd=project.root_dir,
        options=options,
        executable=settings.xcodebuild_path,
        timeout=settings.build_timeout,
    )

    framework_path = flavor_to_framework_path(settings.products_dir, target, flavor)
    binary_path = framework_path / target
    if not binary_path.exists():
        raise NotFoundError(binary_path, what="Framework binary")
    binary_size = binary_path.lstat().st_size

    strip_framework(framework_path)

    return Framework(
        target=target,
        flavor=flavor,
        framework_path=framework_path,
        binary_size=binary_size,
    )


def build_xcframework(
    project: ProjectHandle,
    frameworks: list[Framework],
    options: XcodebuildOptions | None = None,
    settings: Settings | None = None,
) -> Path:
    """Merge frameworks into the project's universal `.xcframework`.

    Any existing `.xcframework` is removed first. Only the quiet toggle
    of `options` is used, `-create-xcframework` takes no other options.

    Args:
        project: Project the frameworks were built from.
        frameworks: Frameworks to merge.
        options: Invocation options.
        settings: Application settings.

    Returns:
        Path to the created `.xcframework`.

    Raises:
        BuildError: If xcodebuild fails.
    """
    if settings is None:
        settings = get_settings()

    output_path = project.artifact_path()
    remove_path(output_path)

    quiet = options.quiet if options is not None else False
    run_xcodebuild(
        [
            "-create-xcframework",
            *spread_args("-framework", [str(f.framework_path) for f in frameworks]),
            "-output",
            str(output_path),
        ],
        cwd=project.root_dir,
        options=XcodebuildOptions(
            std_output=StdOutput.IGNORE if quiet else StdOutput.INHERIT
        ),
        executable=settings.xcodebuild_path,
        timeout=settings.build_timeout,
    )
    return output_path


__all__ = [
    "build_framework",
    "build_xcframework",
    "compose_settings_args",
    "compose_xcodebuild_command",
    "flavor_to_framework_path",
    "parse_settings_value",
    "run_xcodebuild",
    "spread_args",
]
