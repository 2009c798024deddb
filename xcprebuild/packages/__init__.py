"""Package registry module.

This module handles:
- Discovering packages in the monorepo
- Looking packages up by name
- Deciding which packages can be prebuilt
"""

from xcprebuild.packages.models import Package

__all__ = ["Package"]
