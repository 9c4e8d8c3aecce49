"""
relbump - release version bump and changelog generator

Rewrites the version, collects pull requests merged since the previous
release, and prepends GitHub, Debian and RPM changelog entries.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
