"""Document loading with encoding fallback and size limits."""
import csv
import io
from pathlib import Path

from openpyxl import load_workbook

from sheetsave.config import Config, get_default_config
from sheetsave.document import Document, detect_format
from sheetsave.logging_config import get_logger

logger = get_logger(__name__)


def read_text_safely(file_path: Path, encoding: str) -> tuple[str, str]:
    """Read a text file, falling back to latin-1 when it does not decode.

    Args:
        file_path: File to read
        encoding: Preferred encoding

    Returns:
        File content and the encoding that decoded it
    """
    try:
        return file_path.read_text(encoding=encoding), encoding
    except UnicodeDecodeError:
        # latin-1 accepts all byte sequences
        logger.warning(f"File {file_path} is not valid {encoding}, trying latin-1")
        return file_path.read_text(encoding="latin-1"), "latin-1"


def load_document(path: Path, config: Config | None = None) -> Document:
    """Load a document from disk.

    A missing file yields an empty document so that new files can be created
    through a session.

    Args:
        path: Document location
        config: Configuration (defaults when omitted)

    Returns:
        Loaded document

    Raises:
        ValueError: If the file type is unsupported or the file is too large
    """
    config = config or get_default_config()
    fmt = detect_format(path)

    if not path.exists():
        logger.info(f"{path} does not exist yet, starting with an empty document")
        return Document()

    max_size_bytes = int(config.max_file_size_mb * 1024 * 1024)
    file_size = path.stat().st_size
    if file_size > max_size_bytes:
        raise ValueError(
            f"File {path} exceeds size limit "
            f"({file_size / 1024 / 1024:.2f}MB > {config.max_file_size_mb:.2f}MB)"
        )

    if fmt == "csv":
        return _load_csv(path, config.encoding)
    return _load_xlsx(path)


def _load_csv(path: Path, encoding: str) -> Document:
    text, used_encoding = read_text_safely(path, encoding)
    rows = list(csv.reader(io.StringIO(text, newline="")))
    if not rows:
        return Document(encoding=used_encoding)
    return Document(header=rows[0], rows=rows[1:], encoding=used_encoding)


def _load_xlsx(path: Path) -> Document:
    """Load the first sheet as values, keeping the whole workbook for saving.

    Cell values come from the cached results, while the kept workbook holds
    formulas, so sheets other than the first are written back unchanged.
    """
    values_wb = load_workbook(path, data_only=True)
    try:
        ws = values_wb.worksheets[0]
        rows = [
            ["" if value is None else str(value) for value in row]
            for row in ws.iter_rows(values_only=True)
        ]
        sheet_name = ws.title
    finally:
        values_wb.close()

    workbook = load_workbook(path)
    if not rows:
        return Document(sheet_name=sheet_name, workbook=workbook)
    return Document(header=rows[0], rows=rows[1:], sheet_name=sheet_name, workbook=workbook)
