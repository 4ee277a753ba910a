"""Configuration management for sheetsave."""
import json
import tempfile
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_NAME = ".sheetsave.json"


class Config(BaseModel):
    """Configuration for the persistence protocol with validation."""

    staging_dir: Path | None = Field(
        default=None, description="Directory for staging files (defaults to the target's directory)"
    )
    staging_prefix: str = Field(default="sheetsave", description="Prefix of staging file names")
    backup_dir: Path | None = Field(
        default=None, description="Directory for backup files (defaults to the system temp dir)"
    )
    chunk_size: int = Field(
        default=1024 * 1024, gt=0, le=64 * 1024 * 1024, description="Bytes per copy chunk"
    )
    fsync: bool = Field(default=True, description="Flush staged and moved data to disk")
    strict_delete: bool = Field(
        default=False, description="Abort when the old target cannot be deleted"
    )
    warn_on_stale_delete: bool = Field(
        default=False, description="Emit a DeleteWarning when the old target cannot be deleted"
    )
    encoding: str = Field(default="utf-8", description="Text encoding for CSV documents")
    max_file_size_mb: float = Field(
        default=50.0, gt=0, le=1024, description="Maximum document size in MB"
    )

    @field_validator("staging_prefix")
    @classmethod
    def validate_staging_prefix(cls, v: str) -> str:
        """Ensure the staging prefix is a usable file name fragment."""
        if not v.strip():
            raise ValueError("staging_prefix cannot be empty")
        if "/" in v or "\\" in v:
            raise ValueError("staging_prefix cannot contain path separators")
        return v

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Ensure the encoding is known to the codec registry."""
        try:
            "".encode(v)
        except LookupError as e:
            raise ValueError(f"unknown encoding: {v}") from e
        return v

    def resolve_staging_dir(self, target_path: Path) -> Path:
        """Directory staging files go to for the given target."""
        return self.staging_dir if self.staging_dir is not None else target_path.parent

    def resolve_backup_dir(self) -> Path:
        """Directory backup files go to."""
        return self.backup_dir if self.backup_dir is not None else Path(tempfile.gettempdir())

    model_config = {"frozen": False}


def get_default_config() -> Config:
    """Return default configuration.

    Returns:
        Config with default values
    """
    return Config()


def load_config(config_path: Path) -> Config:
    """Load configuration from file or return defaults.

    Supports both snake_case (preferred) and camelCase keys.

    Args:
        config_path: Path to .sheetsave.json file

    Returns:
        Config object with loaded or default values

    Raises:
        ValueError: If configuration values are invalid
    """
    if not config_path.exists():
        return get_default_config()

    with config_path.open(encoding="utf-8") as f:
        data = json.load(f)

    defaults = get_default_config()

    config_data = {
        "staging_dir": data.get("staging_dir", data.get("stagingDir", defaults.staging_dir)),
        "staging_prefix": data.get(
            "staging_prefix", data.get("stagingPrefix", defaults.staging_prefix)
        ),
        "backup_dir": data.get("backup_dir", data.get("backupDir", defaults.backup_dir)),
        "chunk_size": data.get("chunk_size", data.get("chunkSize", defaults.chunk_size)),
        "fsync": data.get("fsync", defaults.fsync),
        "strict_delete": data.get(
            "strict_delete", data.get("strictDelete", defaults.strict_delete)
        ),
        "warn_on_stale_delete": data.get(
            "warn_on_stale_delete",
            data.get("warnOnStaleDelete", defaults.warn_on_stale_delete),
        ),
        "encoding": data.get("encoding", defaults.encoding),
        "max_file_size_mb": data.get(
            "max_file_size_mb", data.get("maxFileSizeMb", defaults.max_file_size_mb)
        ),
    }

    return Config(**config_data)
