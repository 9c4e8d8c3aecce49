"""
Atomic file replacement.

New contents are written to a temporary file in the target's directory and
renamed over the target, so readers see either the old or the new file.
The temporary file is removed if anything fails before the rename.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def atomic_write(path: Path, content: str) -> None:
    """
    Replace path with content atomically.

    The file mode of an existing target is preserved.

    Args:
        path: File to replace
        content: New file contents

    Raises:
        OSError: If writing or renaming fails (the target is left untouched)
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        if path.exists():
            shutil.copymode(path, temp_path)

        # Read back before committing
        with open(temp_path, encoding="utf-8", newline="") as f:
            if f.read() != content:
                raise OSError(f"Verification of {temp_path} failed")

        os.replace(temp_path, path)
        logger.debug("Replaced %s", path)

    except BaseException:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise
