"""Staging of serialized documents in temporary files."""
import os
import stat
import tempfile
from pathlib import Path

from sheetsave.config import Config
from sheetsave.document import Document, detect_format, serialize_document
from sheetsave.errors import WriteError
from sheetsave.file_utils import remove_if_exists
from sheetsave.logging_config import get_logger

logger = get_logger(__name__)


def stage_document(document: Document, target_path: Path, config: Config) -> tuple[Path, int]:
    """Write the serialized document to a fresh temporary file.

    The file is created next to the target by default so that it can later be
    renamed into place atomically. When the target already exists its
    permission bits are copied onto the staging file, so replacing the target
    does not change its mode.

    Args:
        document: Document to serialize
        target_path: Final location of the document, used to pick the format
            and the staging directory
        config: Configuration

    Returns:
        Path of the staging file and the number of bytes written

    Raises:
        WriteError: If serialization or writing fails; no staging file is left
    """
    try:
        data = serialize_document(document, detect_format(target_path), config.encoding)
    except Exception as e:
        raise WriteError(f"Unable to serialize document for {target_path}: {e}") from e

    staging_dir = config.resolve_staging_dir(target_path)
    try:
        fd, name = tempfile.mkstemp(prefix=config.staging_prefix, suffix=".tmp", dir=staging_dir)
    except OSError as e:
        raise WriteError(f"Unable to create staging file in {staging_dir}: {e}") from e

    staging_path = Path(name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            if config.fsync:
                os.fsync(f.fileno())
        if target_path.exists():
            os.chmod(staging_path, stat.S_IMODE(target_path.stat().st_mode))
    except OSError as e:
        remove_if_exists(staging_path)
        raise WriteError(f"Unable to write staging file {staging_path}: {e}", staging_path) from e

    logger.debug(f"Staged {len(data)} bytes for {target_path} in {staging_path}")
    return staging_path, len(data)
