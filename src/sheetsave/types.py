"""Type definitions for sheetsave."""
from typing import TypedDict


class MoveResult(TypedDict):
    """Outcome of relocating one file."""

    method: str
    bytes_transferred: int


class PersistReport(TypedDict):
    """Outcome of a single persist call."""

    target: str
    persisted: bool
    backup: str | None
    method: str | None
    bytes_written: int
    bytes_transferred: int
