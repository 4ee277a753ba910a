"""Preserving the previous version of a target before it is replaced."""
import os
import tempfile
from pathlib import Path

from sheetsave.config import Config
from sheetsave.errors import BackupError
from sheetsave.file_utils import fsync_directory, remove_if_exists
from sheetsave.logging_config import get_logger
from sheetsave.replace import move_file

logger = get_logger(__name__)


def backup_file(target_path: Path, config: Config) -> Path | None:
    """Move the existing target to a fresh backup file.

    Uses the same move as installation: an atomic rename, or a full copy
    followed by deleting the target once the copy is complete. The target is
    never deleted before its content exists at the backup location.

    Args:
        target_path: File about to be overwritten
        config: Configuration

    Returns:
        Path of the backup, or None if the target does not exist

    Raises:
        BackupError: If the target could not be relocated; the target is
            left untouched
    """
    if not target_path.exists():
        return None

    backup_dir = config.resolve_backup_dir()
    try:
        fd, name = tempfile.mkstemp(prefix=f"{target_path.name}.", suffix=".bkp", dir=backup_dir)
    except OSError as e:
        raise BackupError(f"Unable to create backup file in {backup_dir}: {e}", target_path) from e
    os.close(fd)

    backup_path = Path(name)
    try:
        move_file(target_path, backup_path, config.chunk_size, fsync=config.fsync)
    except OSError as e:
        if target_path.exists():
            remove_if_exists(backup_path)
        raise BackupError(f"Unable to back up {target_path}: {e}", target_path) from e

    if config.fsync:
        fsync_directory(backup_path.parent)
        fsync_directory(target_path.parent)

    logger.info(f"Created backup: {backup_path}")
    return backup_path
