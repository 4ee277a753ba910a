"""Caller-side retries for operations that may fail transiently.

Persisting never retries on its own. The CLI wraps ``session.close()`` in
``retry_with_backoff`` when asked to, and a failed attempt that left recovery
files behind is reported before the next attempt starts.
"""
import random
import time
from typing import Callable, Iterator, TypeVar

from sheetsave.logging_config import get_logger

T = TypeVar("T")
logger = get_logger(__name__)


def backoff_delays(initial_delay: float, backoff_factor: float) -> Iterator[float]:
    """Yield growing delays with jitter between 0.5x and 1.5x the base delay."""
    delay = initial_delay
    while True:
        yield delay * (0.5 + random.random())
        delay *= backoff_factor


def describe_artifacts(error: BaseException) -> str | None:
    """Describe the recovery files a failed save left on disk, if any."""
    parts = []
    backup_path = getattr(error, "backup_path", None)
    staging_path = getattr(error, "staging_path", None)
    if backup_path is not None:
        parts.append(f"previous version at {backup_path}")
    if staging_path is not None:
        parts.append(f"new content at {staging_path}")
    return ", ".join(parts) or None


def retry_with_backoff(
    func: Callable[[], T],
    max_retries: int = 3,
    initial_delay: float = 1.0,
    backoff_factor: float = 2.0,
    retry_on: tuple[type[Exception], ...] = (Exception,),
) -> T:
    """Call func until it succeeds or max_retries attempts have failed.

    Args:
        func: Function to call
        max_retries: Maximum number of attempts
        initial_delay: Base delay before the second attempt, in seconds
        backoff_factor: Multiplier for the base delay after each attempt
        retry_on: Exception types that trigger another attempt

    Returns:
        Result from the successful call

    Raises:
        Exception: The last exception if every attempt failed, or the first
            exception not listed in retry_on
        ValueError: If max_retries is below 1
    """
    if max_retries < 1:
        raise ValueError(f"max_retries must be at least 1, got {max_retries}")

    delays = backoff_delays(initial_delay, backoff_factor)
    for attempt in range(1, max_retries + 1):
        try:
            return func()
        except retry_on as e:
            artifacts = describe_artifacts(e)
            if artifacts:
                logger.warning(f"Attempt {attempt} left recovery files: {artifacts}")
            if attempt == max_retries:
                logger.debug(f"Giving up after {attempt} attempts: {type(e).__name__}: {e}")
                raise
            wait = next(delays)
            logger.warning(
                f"Attempt {attempt}/{max_retries} failed with "
                f"{type(e).__name__}: {e}. Retrying in {wait:.1f}s..."
            )
            time.sleep(wait)

    raise AssertionError("unreachable")
