"""
Release service for bumping the version and updating changelogs.

Provides high-level operations for:
- Syncing the web dashboard submodule
- Rewriting the version file
- Generating GitHub, Debian and RPM changelogs from merged pull requests
- Staging the edited files
"""

from relbump.core.release.service import BumpResult, BumpService, ReleaseServiceError

__all__ = ["BumpResult", "BumpService", "ReleaseServiceError"]
