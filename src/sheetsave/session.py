"""Editing session over a document stored on disk."""
from pathlib import Path
from types import TracebackType

from sheetsave.config import Config, get_default_config
from sheetsave.dirty import DirtyTracker
from sheetsave.document import Document
from sheetsave.file_reader import load_document
from sheetsave.logging_config import get_logger
from sheetsave.metrics import PersistMetrics
from sheetsave.persistence import persist
from sheetsave.types import PersistReport
from sheetsave.validation import validate_column_index, validate_row_index, validate_target_path

logger = get_logger(__name__)


class SheetSession:
    """A loaded document plus its unsaved-changes state.

    Mutations mark the session dirty; ``close()`` writes the document back to
    its target path once, and only if something changed.
    """

    def __init__(
        self,
        document: Document,
        target_path: Path | None = None,
        config: Config | None = None,
        metrics: PersistMetrics | None = None,
    ) -> None:
        self.document = document
        self.target_path = target_path
        self.config = config or get_default_config()
        self.metrics = metrics or PersistMetrics()
        self.tracker = DirtyTracker()
        self.last_report: PersistReport | None = None
        self._closed = False

    @classmethod
    def open(cls, path: Path, config: Config | None = None) -> "SheetSession":
        """Load the document at path and start a session saving back to it.

        Args:
            path: Document location; need not exist yet
            config: Configuration

        Returns:
            New session
        """
        validate_target_path(path)
        config = config or get_default_config()
        document = load_document(path, config)
        return cls(document, target_path=path, config=config)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def dirty(self) -> bool:
        return self.tracker.is_dirty()

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("Session is closed")

    def set_header(self, values: list[str]) -> None:
        self._check_open()
        self.document.header = list(values)
        self.tracker.mark_dirty()

    def set_cell(self, row: int, column: int, value: str) -> None:
        """Set one cell of a data row, padding the row with empty cells."""
        self._check_open()
        validate_row_index(self.document, row)
        validate_column_index(column)
        cells = self.document.rows[row]
        if column >= len(cells):
            cells.extend([""] * (column + 1 - len(cells)))
        cells[column] = value
        self.tracker.mark_dirty()

    def append_row(self, values: list[str]) -> None:
        self._check_open()
        self.document.rows.append(list(values))
        self.tracker.mark_dirty()

    def delete_row(self, row: int) -> None:
        self._check_open()
        validate_row_index(self.document, row)
        del self.document.rows[row]
        self.tracker.mark_dirty()

    def save(self) -> PersistReport:
        """Persist pending changes and keep the session open.

        Returns:
            PersistReport of the persist call

        Raises:
            PersistenceError: If persisting failed; changes stay pending
        """
        self._check_open()
        if self.target_path is None:
            raise ValueError("Session has no target path to save to")
        return self._persist()

    def close(self) -> PersistReport | None:
        """Persist pending changes and close the session.

        Closing an already closed session does nothing.

        Returns:
            PersistReport, or None if the session was already closed or has
            no target path

        Raises:
            PersistenceError: If persisting failed; the session stays open so
                the caller may retry
        """
        if self._closed:
            return None
        report = self._persist() if self.target_path is not None else None
        self._closed = True
        return report

    def discard(self) -> None:
        """Close the session without saving."""
        if self.dirty:
            logger.warning(f"Discarding unsaved changes to {self.target_path}")
        self.tracker.clear()
        self._closed = True

    def _persist(self) -> PersistReport:
        report = persist(
            self.document,
            self.target_path,
            self.tracker.is_dirty(),
            config=self.config,
            metrics=self.metrics,
        )
        self.tracker.clear()
        self.last_report = report
        return report

    def __enter__(self) -> "SheetSession":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            self.close()
        else:
            self.discard()
