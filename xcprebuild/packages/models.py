"""Pydantic models for packages in the monorepo."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class Package(BaseModel):
    """A package with native iOS code.

    Attributes:
        name: Package name from `package.json`.
        version: Package version from `package.json`.
        path: Root directory of the package.
        podspec_name: Base filename of the package's podspec, if any.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    version: str = "0.0.0"
    path: Path
    podspec_name: str | None = None

    @property
    def ios_dir(self) -> Path:
        """Directory holding the package's iOS sources."""
        return self.path / "ios"


__all__ = ["Package"]
