"""Tests for staging serialized documents."""
import os
import stat
from unittest.mock import patch

import pytest

from sheetsave.config import Config
from sheetsave.document import Document
from sheetsave.errors import WriteError
from sheetsave.staging import stage_document


def test_stage_document_writes_full_content(tmp_path, config):
    """Test the staging file holds the serialized document."""
    target = tmp_path / "data.csv"
    document = Document(header=["A", "B"], rows=[["3", "4"]])

    staging, size = stage_document(document, target, config)

    assert staging.read_bytes() == b"A,B\n3,4\n"
    assert size == len(b"A,B\n3,4\n")
    assert not target.exists()


def test_stage_document_next_to_target(tmp_path, config):
    """Test staging defaults to the target's directory."""
    target = tmp_path / "data.csv"

    staging, _ = stage_document(Document(header=["A"]), target, config)

    assert staging.parent == tmp_path
    assert staging.name.startswith("sheetsave")
    assert staging.suffix == ".tmp"


def test_stage_document_unique_names(tmp_path, config):
    """Test each staging call creates a new file."""
    target = tmp_path / "data.csv"

    first, _ = stage_document(Document(header=["A"]), target, config)
    second, _ = stage_document(Document(header=["B"]), target, config)

    assert first != second
    assert first.read_bytes() == b"A\n"


def test_stage_document_custom_dir_and_prefix(tmp_path):
    """Test configured staging directory and prefix."""
    staging_dir = tmp_path / "staging"
    staging_dir.mkdir()
    config = Config(staging_dir=staging_dir, staging_prefix="xlsdriver", fsync=False)

    staging, _ = stage_document(Document(header=["A"]), tmp_path / "data.csv", config)

    assert staging.parent == staging_dir
    assert staging.name.startswith("xlsdriver")


def test_stage_document_serialization_failure(tmp_path, config):
    """Test serialization errors become WriteError and leave no file."""
    target = tmp_path / "data.csv"

    with patch("sheetsave.staging.serialize_document", side_effect=RuntimeError("boom")):
        with pytest.raises(WriteError, match="serialize") as exc_info:
            stage_document(Document(header=["A"]), target, config)

    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert list(tmp_path.glob("*.tmp")) == []


def test_stage_document_unsupported_target(tmp_path, config):
    """Test an unsupported target type fails before creating files."""
    with pytest.raises(WriteError):
        stage_document(Document(header=["A"]), tmp_path / "data.txt", config)

    assert list(tmp_path.glob("*.tmp")) == []


def test_stage_document_missing_dir(tmp_path):
    """Test a missing staging directory raises WriteError."""
    config = Config(staging_dir=tmp_path / "missing", fsync=False)

    with pytest.raises(WriteError, match="create staging file"):
        stage_document(Document(header=["A"]), tmp_path / "data.csv", config)


def test_stage_document_write_failure_removes_partial_file(tmp_path):
    """Test a failed write removes the partially written staging file."""
    config = Config(fsync=True)

    with patch("sheetsave.staging.os.fsync", side_effect=OSError("disk full")):
        with pytest.raises(WriteError, match="disk full"):
            stage_document(Document(header=["A"]), tmp_path / "data.csv", config)

    assert list(tmp_path.glob("*.tmp")) == []


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_stage_document_copies_target_mode(tmp_path, config):
    """Test the staging file takes the existing target's permission bits."""
    target = tmp_path / "data.csv"
    target.write_bytes(b"A\n")
    os.chmod(target, 0o644)

    staging, _ = stage_document(Document(header=["B"]), target, config)

    assert stat.S_IMODE(staging.stat().st_mode) == 0o644


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_stage_document_new_target_stays_private(tmp_path, config):
    """Test a staging file for a new target keeps the mkstemp mode."""
    staging, _ = stage_document(Document(header=["B"]), tmp_path / "data.csv", config)

    assert stat.S_IMODE(staging.stat().st_mode) == 0o600


def test_stage_document_chmod_failure_is_write_error(tmp_path, config):
    """Test a failed mode copy is reported as WriteError and cleaned up."""
    target = tmp_path / "data.csv"
    target.write_bytes(b"A\n")

    with patch("sheetsave.staging.os.chmod", side_effect=OSError("denied")):
        with pytest.raises(WriteError, match="denied"):
            stage_document(Document(header=["B"]), target, config)

    assert list(tmp_path.glob("*.tmp")) == []
