"""xcprebuild - Prebuild native iOS packages into universal xcframeworks.

This package provides orchestration around `xcodebuild` and XcodeGen for
generating Xcode projects, building frameworks per flavor, and merging
them into a single distributable `.xcframework`.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
