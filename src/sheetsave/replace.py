"""Moving files into place: atomic rename with a verified copy fallback."""
import os
import stat
import warnings
from pathlib import Path
from typing import BinaryIO

from sheetsave.config import Config
from sheetsave.errors import DeleteWarning, ReplaceError, StaleTargetError
from sheetsave.file_utils import remove_if_exists
from sheetsave.logging_config import get_logger
from sheetsave.types import MoveResult

logger = get_logger(__name__)


def atomic_rename(source: Path, dest: Path) -> None:
    """Rename source over dest in one step. Fails across filesystems."""
    os.replace(source, dest)


def transfer_bytes(src: BinaryIO, dst: BinaryIO, size: int, chunk_size: int) -> int:
    """Copy exactly ``size`` bytes from src to dst.

    Neither a read nor a write is assumed to handle the whole request; the
    loop runs until the cumulative count reaches ``size``.

    Args:
        src: Readable binary file positioned at the start
        dst: Writable binary file
        size: Total number of bytes to copy
        chunk_size: Maximum bytes requested per read

    Returns:
        Number of bytes transferred, always equal to ``size``

    Raises:
        OSError: If the source ends before ``size`` bytes were read
    """
    count = 0
    while count < size:
        chunk = src.read(min(chunk_size, size - count))
        if not chunk:
            raise OSError(f"Source ended after {count} of {size} bytes")
        view = memoryview(chunk)
        while view:
            written = dst.write(view)
            view = view[written or 0 :]
        count += len(chunk)
    return count


def copy_file_chunked(source: Path, dest: Path, chunk_size: int, fsync: bool = True) -> int:
    """Copy source to dest, then delete source once the copy is complete.

    dest takes the permission bits of source, as a rename would leave them.
    A partially written dest is removed when the copy fails, and source is
    only deleted after the full byte count has been transferred.

    Args:
        source: File to copy
        dest: Destination, created or truncated
        chunk_size: Bytes per read
        fsync: Flush dest to disk before deleting source

    Returns:
        Number of bytes transferred
    """
    try:
        with open(source, "rb", buffering=0) as src, open(dest, "wb", buffering=0) as dst:
            source_stat = os.fstat(src.fileno())
            size = source_stat.st_size
            count = transfer_bytes(src, dst, size, chunk_size)
            if fsync:
                os.fsync(dst.fileno())
        os.chmod(dest, stat.S_IMODE(source_stat.st_mode))
    except OSError:
        remove_if_exists(dest)
        raise

    if count != size:
        raise OSError(f"Copied {count} of {size} bytes from {source} to {dest}")
    source.unlink()
    return count


def move_file(source: Path, dest: Path, chunk_size: int, fsync: bool = True) -> MoveResult:
    """Move source to dest, preferring an atomic rename.

    Args:
        source: File to move
        dest: New location
        chunk_size: Bytes per read for the copy fallback
        fsync: Flush copied data to disk

    Returns:
        MoveResult naming the method used and the bytes copied

    Raises:
        OSError: If both the rename and the copy fail
    """
    try:
        atomic_rename(source, dest)
        return MoveResult(method="rename", bytes_transferred=0)
    except OSError as e:
        logger.warning(
            f"Unable to rename file during move: {source} to {dest}, "
            f"performing full copy of data ({e})"
        )

    count = copy_file_chunked(source, dest, chunk_size, fsync=fsync)
    return MoveResult(method="copy", bytes_transferred=count)


def install(staging_path: Path, target_path: Path, config: Config) -> MoveResult:
    """Install a staged file at the target path.

    The old target is deleted first. A failed delete is logged and the move
    is attempted anyway, unless ``config.strict_delete`` is set.

    Args:
        staging_path: Staged file holding the new content
        target_path: Final location
        config: Configuration

    Returns:
        MoveResult of the move

    Raises:
        StaleTargetError: If the old target could not be deleted and either
            strict_delete is set or the move failed as well
        ReplaceError: If the move failed
    """
    delete_error: OSError | None = None
    if target_path.exists():
        try:
            target_path.unlink()
        except OSError as e:
            delete_error = e
            logger.warning(
                f"Unable to delete file: {target_path}, you may lose the results. ({e})",
                extra={"warning": DeleteWarning.__name__},
            )
            if config.warn_on_stale_delete:
                warnings.warn(
                    f"Unable to delete file: {target_path}", DeleteWarning, stacklevel=2
                )
            if config.strict_delete:
                raise StaleTargetError(
                    f"Unable to delete {target_path} before replacing it: {e}", target_path
                ) from e

    try:
        return move_file(staging_path, target_path, config.chunk_size, fsync=config.fsync)
    except OSError as e:
        if delete_error is not None:
            raise StaleTargetError(
                f"Unable to replace {target_path}: delete failed ({delete_error}) "
                f"and move failed ({e})",
                target_path,
            ) from e
        raise ReplaceError(f"Unable to move {staging_path} to {target_path}: {e}", target_path) from e
