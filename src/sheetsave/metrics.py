"""Metrics collected while persisting documents."""
import time
from dataclasses import dataclass, field


@dataclass
class PersistMetrics:
    """Metrics collected during persist calls."""

    # Timing
    start_time: float = field(default_factory=time.time)
    end_time: float | None = None

    # Outcomes
    persists_completed: int = 0
    persists_skipped: int = 0
    persists_failed: int = 0

    # Bytes
    bytes_staged: int = 0
    bytes_transferred: int = 0

    # Moves
    backups_created: int = 0
    rename_fallbacks: int = 0

    def finish(self) -> None:
        """Mark collection as finished."""
        self.end_time = time.time()

    @property
    def elapsed_seconds(self) -> float:
        """Get elapsed time in seconds."""
        end = self.end_time or time.time()
        return end - self.start_time

    def to_dict(self) -> dict:
        """Convert metrics to dictionary."""
        return {
            "elapsed_seconds": round(self.elapsed_seconds, 2),
            "persists_completed": self.persists_completed,
            "persists_skipped": self.persists_skipped,
            "persists_failed": self.persists_failed,
            "bytes_staged": self.bytes_staged,
            "bytes_transferred": self.bytes_transferred,
            "backups_created": self.backups_created,
            "rename_fallbacks": self.rename_fallbacks,
        }
