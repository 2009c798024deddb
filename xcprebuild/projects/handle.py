"""Project handles.

A project handle is a lightweight reference to an `.xcodeproj` file on
disk. Output paths are derived from its name and root directory by naming
convention, without touching the filesystem.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from xcprebuild.errors import NotFoundError
from xcprebuild.projects.spec import SPEC_SUFFIX, generate_project_from_spec

if TYPE_CHECKING:
    from xcprebuild.config import Settings
    from xcprebuild.projects.spec import ProjectSpec

DESCRIPTOR_SUFFIX = ".xcodeproj"
XCFRAMEWORK_SUFFIX = ".xcframework"


@dataclass(frozen=True)
class ProjectHandle:
    """Reference to a single Xcode project.

    Attributes:
        name: Project name, always equal to the `.xcodeproj` base filename.
        root_dir: Directory containing the `.xcodeproj` file.
    """

    name: str
    root_dir: Path

    @classmethod
    def for_descriptor(cls, descriptor_path: Path) -> ProjectHandle:
        """Build a handle from a descriptor path without checking it exists."""
        descriptor_path = Path(descriptor_path)
        name = descriptor_path.name
        if name.endswith(DESCRIPTOR_SUFFIX):
            name = name[: -len(DESCRIPTOR_SUFFIX)]
        return cls(name=name, root_dir=descriptor_path.parent)

    def descriptor_path(self) -> Path:
        """Path to the `.xcodeproj` file."""
        return self.root_dir / f"{self.name}{DESCRIPTOR_SUFFIX}"

    def spec_path(self) -> Path:
        """Path to the XcodeGen spec the project is generated from."""
        return self.root_dir / f"{self.name}{SPEC_SUFFIX}"

    def artifact_path(self) -> Path:
        """Path where the universal `.xcframework` is stored after a build."""
        return self.root_dir / f"{self.name}{XCFRAMEWORK_SUFFIX}"


def from_descriptor_path(descriptor_path: Path) -> ProjectHandle:
    """Create a handle from the path to an existing `.xcodeproj` file.

    Args:
        descriptor_path: Path to the `.xcodeproj` file.

    Returns:
        ProjectHandle for the project.

    Raises:
        NotFoundError: If the descriptor does not exist.
    """
    descriptor_path = Path(descriptor_path)
    if not descriptor_path.exists():
        raise NotFoundError(descriptor_path, what="Xcodeproj")
    return ProjectHandle.for_descriptor(descriptor_path)


def generate_from_spec(
    root_dir: Path,
    spec: ProjectSpec,
    settings: Settings | None = None,
) -> ProjectHandle:
    """Generate an `.xcodeproj` from a spec and return a handle to it.

    Args:
        root_dir: Directory in which the project is generated.
        spec: Project spec to generate from.
        settings: Application settings.

    Returns:
        ProjectHandle for the generated project.
    """
    descriptor_path = generate_project_from_spec(root_dir, spec, settings=settings)
    return ProjectHandle.for_descriptor(descriptor_path)


__all__ = [
    "DESCRIPTOR_SUFFIX",
    "XCFRAMEWORK_SUFFIX",
    "ProjectHandle",
    "from_descriptor_path",
    "generate_from_spec",
]
