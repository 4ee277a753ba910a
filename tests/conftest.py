import logging

import pytest

from sheetsave.config import Config


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Let records reach caplog even after setup_logging() detached the logger."""
    logger = logging.getLogger("sheetsave")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    yield
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def config(tmp_path):
    """Config keeping backups inside the test directory."""
    backup_dir = tmp_path / "backups"
    backup_dir.mkdir()
    return Config(backup_dir=backup_dir, fsync=False)
