"""Utility modules for relbump."""

from .git import GitHistory, MergeHistory, get_current_branch, get_status, stage_files

__all__ = [
    "GitHistory",
    "MergeHistory",
    "get_current_branch",
    "get_status",
    "stage_files",
]
