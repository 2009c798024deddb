"""Shared type definitions for xcprebuild.

This module contains dataclasses and enums shared across subpackages to
avoid circular imports.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class StdOutput(str, Enum):
    """Where the standard output of `xcodebuild` goes."""

    STDERR = "stderr"
    IGNORE = "ignore"
    INHERIT = "inherit"
    CAPTURE = "capture"


@dataclass(frozen=True)
class Flavor:
    """A single build variant.

    Attributes:
        configuration: Build configuration, e.g. `Release`.
        sdk: Platform SDK identifier, e.g. `iphoneos`.
        archs: Architectures to compile against, in order.
    """

    configuration: str
    sdk: str
    archs: tuple[str, ...]

    def __post_init__(self) -> None:
        # Accept any sequence but always store an immutable tuple
        object.__setattr__(self, "archs", tuple(self.archs))


@dataclass(frozen=True)
class Framework:
    """A `.framework` built for one flavor.

    Attributes:
        target: Name of the built target.
        flavor: Flavor the framework was built for.
        framework_path: Path to the `.framework` directory.
        binary_size: Size of the framework binary in bytes.
    """

    target: str
    flavor: Flavor
    framework_path: Path
    binary_size: int


@dataclass
class XcodebuildOptions:
    """Options for a single `xcodebuild` invocation."""

    quiet: bool = False
    settings: dict[str, str | bool] | None = None
    std_output: StdOutput | None = None


@dataclass
class PrebuildResult:
    """Result of prebuilding a single package."""

    package_name: str
    duration_seconds: float
    xcframework_path: Path | None = None


__all__ = [
    "Flavor",
    "Framework",
    "PrebuildResult",
    "StdOutput",
    "XcodebuildOptions",
]
