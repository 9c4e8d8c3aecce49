"""Environment file loading.

relbump reads $EDITOR and the RELBUMP_* overrides from the environment.
They may also be kept in env files, applied in this order:

- ~/.config/relbump/.env (XDG aware)
- <project>/.env, then <project>/.env.local

A variable exported in the shell always wins over both files; the project
files win over the user file.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from dotenv import dotenv_values

from .loader import get_xdg_config_home


def get_user_env_path() -> Path:
    """Path to the user's relbump env file."""
    return get_xdg_config_home() / "relbump" / ".env"


def _values(paths: Iterable[Path]) -> dict[str, str]:
    merged: dict[str, str] = {}
    for path in paths:
        if path.is_file():
            merged.update({k: v for k, v in dotenv_values(path).items() if v is not None})
    return merged


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
) -> None:
    """
    Export variables from the user and project env files.

    Args:
        project_dir: Directory holding .env and .env.local (defaults to cwd)
        user_env_paths: User env files (defaults to get_user_env_path())
    """
    project_dir = project_dir or Path.cwd()
    if user_env_paths is None:
        user_env_paths = [get_user_env_path()]

    values = _values(Path(p) for p in user_env_paths)
    values.update(_values([project_dir / ".env", project_dir / ".env.local"]))

    for key, value in values.items():
        os.environ.setdefault(key, value)
