"""Xcode project module.

This module handles:
- Project handles wrapping a generated `.xcodeproj`
- XcodeGen project specs built from packages
- Running XcodeGen to materialize projects
"""

from xcprebuild.projects.handle import (
    ProjectHandle,
    from_descriptor_path,
    generate_from_spec,
)

__all__ = ["ProjectHandle", "from_descriptor_path", "generate_from_spec"]
