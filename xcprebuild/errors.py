"""Error definitions for xcprebuild.

Every error carries a stable `code` so the CLI (and any caller driving a
release pipeline) can report failures without parsing messages.
"""

from pathlib import Path

NOT_FOUND = "not_found"
BUILD_FAILED = "build_failed"
BUILD_TIMEOUT = "build_timeout"
EXECUTION_ERROR = "execution_error"
PROJECT_GENERATION_FAILED = "project_generation_failed"


class PrebuildError(Exception):
    """Base error for prebuild operations."""

    def __init__(self, message: str, code: str = "prebuild_error") -> None:
        super().__init__(message)
        self.code = code


class NotFoundError(PrebuildError):
    """Raised when a project descriptor or an expected build output is missing."""

    def __init__(self, path: Path, what: str = "Path", code: str = NOT_FOUND) -> None:
        super().__init__(f"{what} not found at path: {path}", code=code)
        self.path = path


class BuildError(PrebuildError):
    """Raised when an external build tool fails."""

    def __init__(
        self,
        message: str,
        exit_code: int | None = None,
        code: str = BUILD_FAILED,
        stdout: str | None = None,
    ) -> None:
        super().__init__(message, code=code)
        self.exit_code = exit_code
        self.stdout = stdout


__all__ = [
    "BUILD_FAILED",
    "BUILD_TIMEOUT",
    "EXECUTION_ERROR",
    "NOT_FOUND",
    "PROJECT_GENERATION_FAILED",
    "BuildError",
    "NotFoundError",
    "PrebuildError",
]
