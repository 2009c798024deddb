"""Build orchestration module.

This module handles:
- Running xcodebuild for frameworks and xcframeworks
- Stripping and cleaning build outputs
- Driving prebuilds package by package
"""

# Access submodules via xcprebuild.builds.runner, xcprebuild.builds.service, etc.
