"""sheetsave: crash-safe saving of tabular documents."""

from sheetsave.__version__ import __version__
from sheetsave.config import Config, get_default_config, load_config
from sheetsave.document import Document
from sheetsave.errors import (
    BackupError,
    PersistenceError,
    ReplaceError,
    StaleTargetError,
    WriteError,
)
from sheetsave.persistence import persist
from sheetsave.session import SheetSession
from sheetsave.types import PersistReport

__all__ = [
    "__version__",
    "Config",
    "load_config",
    "get_default_config",
    "Document",
    "persist",
    "SheetSession",
    "PersistReport",
    "PersistenceError",
    "WriteError",
    "BackupError",
    "ReplaceError",
    "StaleTargetError",
]
