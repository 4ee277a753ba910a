"""Tests for editing sessions."""
from pathlib import Path
from unittest.mock import patch

import pytest
from openpyxl import Workbook, load_workbook

from sheetsave.document import Document
from sheetsave.errors import PersistenceError, ReplaceError
from sheetsave.session import SheetSession


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "data.csv"
    path.write_bytes(b"A,B\n1,2\n")
    return path


def test_open_loads_document(csv_file, config):
    """Test opening a session loads the file."""
    session = SheetSession.open(csv_file, config)

    assert session.document.header == ["A", "B"]
    assert session.document.rows == [["1", "2"]]
    assert not session.dirty


def test_open_missing_file_starts_empty(tmp_path, config):
    """Test a session can create a new file."""
    session = SheetSession.open(tmp_path / "new.csv", config)

    assert session.document.is_empty()


def test_open_rejects_unsupported_type(tmp_path, config):
    """Test unsupported file types are rejected up front."""
    with pytest.raises(ValueError, match="Unsupported"):
        SheetSession.open(tmp_path / "notes.txt", config)


def test_mutations_mark_dirty(csv_file, config):
    """Test each mutation marks the session dirty."""
    session = SheetSession.open(csv_file, config)

    session.set_cell(0, 0, "3")

    assert session.dirty
    assert session.document.rows == [["3", "2"]]


def test_set_cell_pads_short_rows(csv_file, config):
    """Test setting a cell past the end of a row pads it."""
    session = SheetSession.open(csv_file, config)

    session.set_cell(0, 3, "x")

    assert session.document.rows[0] == ["1", "2", "", "x"]


def test_set_cell_out_of_range(csv_file, config):
    """Test invalid indexes raise IndexError and keep the session clean."""
    session = SheetSession.open(csv_file, config)

    with pytest.raises(IndexError):
        session.set_cell(5, 0, "x")
    with pytest.raises(IndexError):
        session.set_cell(0, -1, "x")

    assert not session.dirty


def test_append_and_delete_rows(csv_file, config):
    """Test appending and deleting rows."""
    session = SheetSession.open(csv_file, config)

    session.append_row(["3", "4"])
    session.delete_row(0)

    assert session.document.rows == [["3", "4"]]
    assert session.dirty


def test_close_writes_changes(csv_file, config):
    """Test closing a dirty session persists it."""
    session = SheetSession.open(csv_file, config)
    session.set_cell(0, 0, "3")
    session.set_cell(0, 1, "4")

    report = session.close()

    assert report["persisted"] is True
    assert csv_file.read_bytes() == b"A,B\n3,4\n"
    assert session.closed
    assert not session.dirty


def test_close_clean_session_skips_persist(csv_file, config):
    """Test closing without changes does no I/O."""
    session = SheetSession.open(csv_file, config)

    with patch("sheetsave.persistence.stage_document") as mock_stage:
        report = session.close()

    assert report["persisted"] is False
    assert not mock_stage.called


def test_close_twice_persists_once(csv_file, config):
    """Test repeated close calls do not rewrite the file."""
    session = SheetSession.open(csv_file, config)
    session.append_row(["5", "6"])

    session.close()
    assert session.close() is None

    assert session.metrics.persists_completed == 1


def test_save_clears_dirty_flag(csv_file, config):
    """Test saving twice only writes once."""
    session = SheetSession.open(csv_file, config)
    session.append_row(["5", "6"])

    first = session.save()
    second = session.save()

    assert first["persisted"] is True
    assert second["persisted"] is False
    assert not session.closed


def test_failed_close_keeps_session_open_and_dirty(csv_file, config):
    """Test a failed persist can be retried."""
    session = SheetSession.open(csv_file, config)
    session.append_row(["5", "6"])

    with patch("sheetsave.persistence.install", side_effect=ReplaceError("move failed")):
        with pytest.raises(PersistenceError):
            session.close()

    assert not session.closed
    assert session.dirty

    report = session.close()
    assert report["persisted"] is True
    assert csv_file.read_bytes() == b"A,B\n1,2\n5,6\n"


def test_mutation_after_close_rejected(csv_file, config):
    """Test closed sessions refuse edits."""
    session = SheetSession.open(csv_file, config)
    session.close()

    with pytest.raises(ValueError, match="closed"):
        session.append_row(["x"])


def test_session_without_target(config):
    """Test an in-memory session closes without saving."""
    session = SheetSession(Document(header=["A"]), config=config)
    session.append_row(["1"])

    assert session.close() is None
    assert session.closed


def test_save_without_target(config):
    """Test saving an in-memory session is an error."""
    session = SheetSession(Document(header=["A"]), config=config)

    with pytest.raises(ValueError, match="no target"):
        session.save()


def test_context_manager_saves(csv_file, config):
    """Test leaving the block normally saves changes."""
    with SheetSession.open(csv_file, config) as session:
        session.append_row(["5", "6"])

    assert session.closed
    assert csv_file.read_bytes() == b"A,B\n1,2\n5,6\n"


def test_context_manager_discards_on_error(csv_file, config):
    """Test an exception inside the block discards changes."""
    with pytest.raises(RuntimeError):
        with SheetSession.open(csv_file, config) as session:
            session.append_row(["5", "6"])
            raise RuntimeError("caller failed")

    assert session.closed
    assert csv_file.read_bytes() == b"A,B\n1,2\n"


def test_xlsx_session_round_trip(tmp_path, config):
    """Test editing an XLSX file through a session."""
    path = tmp_path / "book.xlsx"
    with SheetSession.open(path, config) as session:
        session.set_header(["A", "B"])
        session.append_row(["1", "2"])

    reopened = SheetSession.open(Path(path), config)
    assert reopened.document.header == ["A", "B"]
    assert reopened.document.rows == [["1", "2"]]


def test_xlsx_session_keeps_other_sheets(tmp_path, config):
    """Test saving a workbook leaves its other sheets intact."""
    path = tmp_path / "book.xlsx"
    wb = Workbook()
    wb.active.append(["A", "B"])
    wb.active.append(["1", "2"])
    second = wb.create_sheet("Second")
    second["A1"] = "notes"
    second["B1"] = "=2*3"
    wb.save(path)

    with SheetSession.open(path, config) as session:
        session.set_cell(0, 1, "9")

    saved = load_workbook(path)
    assert saved.sheetnames == ["Sheet", "Second"]
    assert saved["Second"]["A1"].value == "notes"
    assert saved["Second"]["B1"].value == "=2*3"
    assert SheetSession.open(path, config).document.rows == [["1", "9"]]


def test_latin1_csv_saved_in_its_own_encoding(tmp_path, config):
    """Test a CSV read through the latin-1 fallback is written back as latin-1."""
    path = tmp_path / "cities.csv"
    path.write_bytes("city,n\nZürich,1\n".encode("latin-1"))

    with SheetSession.open(path, config) as session:
        session.set_cell(0, 1, "2")

    assert path.read_bytes() == "city,n\nZürich,2\n".encode("latin-1")
