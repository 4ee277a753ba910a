"""Tracking of unsaved changes."""


class DirtyTracker:
    """Records whether a document changed since it was loaded or last saved."""

    def __init__(self, dirty: bool = False) -> None:
        self._dirty = dirty

    def is_dirty(self) -> bool:
        return self._dirty

    def mark_dirty(self) -> None:
        self._dirty = True

    def clear(self) -> None:
        """Forget pending changes, typically after a successful persist."""
        self._dirty = False

    def __repr__(self) -> str:
        return f"DirtyTracker(dirty={self._dirty})"
