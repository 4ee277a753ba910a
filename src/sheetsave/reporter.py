"""Error translation and report formatting."""
import json
from pathlib import Path

from sheetsave.errors import PersistenceError, ProtocolStepError, ReplaceError
from sheetsave.metrics import PersistMetrics
from sheetsave.types import PersistReport


def to_persistence_error(
    error: ProtocolStepError,
    backup_path: Path | None = None,
    staging_path: Path | None = None,
) -> PersistenceError:
    """Translate a failed protocol step into the terminal persistence error.

    Args:
        error: Failure of the staging, backup or replace step
        backup_path: Backup artifact left on disk, if any
        staging_path: Staging artifact left on disk, if any

    Returns:
        PersistenceError carrying the original error as its cause
    """
    cause = error.__cause__ or error
    message = f"Failed to persist document during {error.stage}: {error}"
    if isinstance(error, ReplaceError) and backup_path is not None:
        message += f" (previous version kept at {backup_path})"
    return PersistenceError(
        message,
        stage=error.stage,
        cause=cause,
        backup_path=backup_path,
        staging_path=staging_path,
    )


def format_detailed_report(report: PersistReport, metrics: PersistMetrics) -> str:
    """Format a persist report as human-readable text.

    Args:
        report: Outcome of the persist call
        metrics: Persist metrics

    Returns:
        Formatted report string
    """
    lines = []
    if not report["persisted"]:
        lines.append(f"[OK] {report['target']}")
        lines.append("   No changes to save")
    else:
        lines.append(f"[SAVED] {report['target']}")
        lines.append(f"   {report['bytes_written']} bytes written via {report['method']}")
        if report["backup"]:
            lines.append(f"   Previous version: {report['backup']}")

    lines.append(f"Elapsed time: {metrics.elapsed_seconds:.2f}s")
    return "\n".join(lines)


def format_error_report(error: PersistenceError) -> str:
    """Format a persistence failure with its recovery artifacts.

    Args:
        error: The terminal error

    Returns:
        Formatted report string
    """
    lines = [f"[FAILED] {error}"]
    if error.cause is not None:
        lines.append(f"   Cause: {type(error.cause).__name__}: {error.cause}")
    if error.backup_path is not None:
        lines.append(f"   Backup: {error.backup_path}")
    if error.staging_path is not None:
        lines.append(f"   Unsaved data: {error.staging_path}")
    return "\n".join(lines)


def format_json_report(
    report: PersistReport | None,
    metrics: PersistMetrics,
    error: PersistenceError | None = None,
) -> str:
    """Format the outcome as JSON.

    Args:
        report: Outcome of the persist call, None when it failed
        metrics: Persist metrics
        error: The terminal error, if any

    Returns:
        JSON string
    """
    data: dict = {"result": report, "metrics": metrics.to_dict()}
    if error is not None:
        data["error"] = {
            "stage": error.stage,
            "message": str(error),
            "cause": repr(error.cause) if error.cause is not None else None,
            "backup": str(error.backup_path) if error.backup_path else None,
            "staging": str(error.staging_path) if error.staging_path else None,
        }
    return json.dumps(data, indent=2)


def get_exit_code(error: PersistenceError | None) -> int:
    """Get exit code for a persist outcome.

    Returns:
        0 on success, 1 if persisting failed
    """
    return 1 if error is not None else 0
