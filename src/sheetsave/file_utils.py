"""File operation utilities."""
import contextlib
import os
from pathlib import Path


def fsync_directory(path: Path) -> None:
    """Flush a directory entry to disk so a completed rename survives a crash.

    Best effort: platforms that cannot open directories are skipped.

    Args:
        path: Directory to flush
    """
    flags = getattr(os, "O_DIRECTORY", 0)
    try:
        fd = os.open(path, flags)
    except OSError:
        return
    try:
        with contextlib.suppress(OSError):
            os.fsync(fd)
    finally:
        os.close(fd)


def remove_if_exists(path: Path) -> None:
    """Delete a file if it is still there.

    Args:
        path: File to delete
    """
    path.unlink(missing_ok=True)
