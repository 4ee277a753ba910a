"""Input validation functions."""
from pathlib import Path

from sheetsave.document import Document, detect_format


def validate_target_path(target_path: Path) -> None:
    """Validate that a document can be saved at the given path.

    Args:
        target_path: Path to validate

    Raises:
        ValueError: If the parent directory is missing, the path is a
            directory, or the file type is unsupported
    """
    parent = target_path.parent
    if not parent.exists():
        raise ValueError(f"Directory does not exist: {parent}")

    if not parent.is_dir():
        raise ValueError(f"Not a directory: {parent}")

    if target_path.is_dir():
        raise ValueError(f"Target is a directory: {target_path}")

    detect_format(target_path)


def validate_row_index(document: Document, row: int) -> None:
    """Validate a data row index.

    Args:
        document: Document the index refers to
        row: Zero-based data row index

    Raises:
        IndexError: If the row does not exist
    """
    if row < 0 or row >= len(document.rows):
        raise IndexError(f"Row {row} out of range (document has {len(document.rows)} rows)")


def validate_column_index(column: int) -> None:
    """Validate a column index.

    Args:
        column: Zero-based column index

    Raises:
        IndexError: If the column is negative
    """
    if column < 0:
        raise IndexError(f"Column must be non-negative, got: {column}")
