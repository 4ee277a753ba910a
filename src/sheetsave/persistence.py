"""Durable overwrite of a document at its target path.

The protocol runs in four steps and never destroys the previous version of
the target before a copy of it exists elsewhere:

1. skip everything when the document has no unsaved changes;
2. stage the serialized document in a temporary file;
3. move the existing target to a backup file;
4. install the staged file at the target path.

Any step failure is reported as a single PersistenceError.
"""
from pathlib import Path

from sheetsave.backup import backup_file
from sheetsave.config import Config, get_default_config
from sheetsave.document import Document
from sheetsave.errors import BackupError, ReplaceError, WriteError
from sheetsave.file_utils import remove_if_exists
from sheetsave.logging_config import get_logger
from sheetsave.metrics import PersistMetrics
from sheetsave.replace import install
from sheetsave.reporter import to_persistence_error
from sheetsave.staging import stage_document
from sheetsave.types import PersistReport

logger = get_logger(__name__)


def persist(
    document: Document,
    target_path: Path,
    dirty: bool,
    config: Config | None = None,
    metrics: PersistMetrics | None = None,
) -> PersistReport:
    """Persist a document to its target path if it has unsaved changes.

    Args:
        document: Document to write
        target_path: Location the document must end up at
        dirty: Whether the document changed since it was loaded
        config: Configuration (defaults when omitted)
        metrics: Optional metrics to update

    Returns:
        PersistReport describing what was done

    Raises:
        PersistenceError: If staging, backup or installation failed
    """
    if not dirty:
        logger.debug(f"No changes for {target_path}, skipping persist")
        if metrics is not None:
            metrics.persists_skipped += 1
        return PersistReport(
            target=str(target_path),
            persisted=False,
            backup=None,
            method=None,
            bytes_written=0,
            bytes_transferred=0,
        )

    config = config or get_default_config()

    try:
        staging_path, bytes_written = stage_document(document, target_path, config)
    except WriteError as e:
        _record_failure(metrics)
        raise to_persistence_error(e) from e

    try:
        backup_path = backup_file(target_path, config)
    except BackupError as e:
        remove_if_exists(staging_path)
        _record_failure(metrics)
        raise to_persistence_error(e) from e

    try:
        result = install(staging_path, target_path, config)
    except ReplaceError as e:
        logger.error(
            f"Failed to install {target_path}; new content kept at {staging_path}"
            + (f", previous version at {backup_path}" if backup_path else "")
        )
        _record_failure(metrics)
        raise to_persistence_error(e, backup_path=backup_path, staging_path=staging_path) from e

    if metrics is not None:
        metrics.persists_completed += 1
        metrics.bytes_staged += bytes_written
        metrics.bytes_transferred += result["bytes_transferred"]
        if backup_path is not None:
            metrics.backups_created += 1
        if result["method"] == "copy":
            metrics.rename_fallbacks += 1

    logger.info(f"Saved {target_path} ({bytes_written} bytes, {result['method']})")
    return PersistReport(
        target=str(target_path),
        persisted=True,
        backup=str(backup_path) if backup_path else None,
        method=result["method"],
        bytes_written=bytes_written,
        bytes_transferred=result["bytes_transferred"],
    )


def _record_failure(metrics: PersistMetrics | None) -> None:
    if metrics is not None:
        metrics.persists_failed += 1
