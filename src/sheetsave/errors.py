"""Exception taxonomy for the persistence protocol."""
from pathlib import Path


class SheetsaveError(Exception):
    """Base class for sheetsave errors."""


class ProtocolStepError(SheetsaveError):
    """Failure of one step of the persistence protocol.

    Attributes:
        path: File the failing step was operating on
    """

    stage = "unknown"

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class WriteError(ProtocolStepError):
    """Serializing or staging the document failed. Nothing was touched."""

    stage = "staging"


class BackupError(ProtocolStepError):
    """The existing target could not be preserved. The target is untouched."""

    stage = "backup"


class ReplaceError(ProtocolStepError):
    """Installing the staged file at the target failed.

    The target may be missing at this point; the backup artifact is the
    recovery path.
    """

    stage = "replace"


class StaleTargetError(ReplaceError):
    """The old target could not be deleted before installing the new one."""


class DeleteWarning(UserWarning):
    """Deleting the stale target failed but the protocol continued."""


class PersistenceError(SheetsaveError):
    """Terminal outcome of a failed persist call.

    Attributes:
        stage: Protocol step that failed ("staging", "backup" or "replace")
        cause: The low-level error that caused the failure
        backup_path: Backup artifact left on disk, if one was created
        staging_path: Staging artifact left on disk, if one was kept
    """

    def __init__(
        self,
        message: str,
        stage: str,
        cause: BaseException | None = None,
        backup_path: Path | None = None,
        staging_path: Path | None = None,
    ) -> None:
        super().__init__(message)
        self.stage = stage
        self.cause = cause
        self.backup_path = backup_path
        self.staging_path = staging_path
