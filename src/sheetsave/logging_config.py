"""Logging configuration for sheetsave."""
import logging
import sys

PACKAGE_LOGGER = "sheetsave"

DEFAULT_FORMAT = "%(levelname)s%(category)s: %(message)s"
VERBOSE_FORMAT = "%(levelname)s%(category)s %(name)s: %(message)s"


class WarningCategoryFilter(logging.Filter):
    """Expose the warning category passed as ``extra={"warning": ...}``.

    Records without one get an empty ``category`` so that the format string
    can always reference it.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        warning = getattr(record, "warning", None)
        record.category = f" [{warning}]" if warning else ""
        return True


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Configure the sheetsave logger.

    Messages go to stderr so that JSON reports on stdout stay parseable.
    Verbose output also names the module that logged each message.

    Args:
        verbose: Enable verbose (INFO level) logging
        quiet: Enable quiet (ERROR only) logging; wins over verbose

    Returns:
        The configured package logger
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.propagate = False
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(WarningCategoryFilter())
    handler.setFormatter(logging.Formatter(VERBOSE_FORMAT if verbose else DEFAULT_FORMAT))
    logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get logger for module.

    Args:
        name: Module name (will be prefixed with 'sheetsave.')

    Returns:
        Logger instance
    """
    if not name.startswith(f"{PACKAGE_LOGGER}."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
