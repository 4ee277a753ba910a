"""In-memory tabular document and its on-disk serializations."""
import csv
import io
from dataclasses import dataclass, field
from pathlib import Path

from openpyxl import Workbook

SUPPORTED_FORMATS = {".csv": "csv", ".xlsx": "xlsx"}


@dataclass
class Document:
    """Tabular content: a header row followed by data rows."""

    header: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)
    sheet_name: str = "Sheet1"
    # encoding the CSV was read with; None means the configured one
    encoding: str | None = None
    # workbook the sheet was loaded from, so other sheets survive a save
    workbook: Workbook | None = field(default=None, repr=False, compare=False)

    def is_empty(self) -> bool:
        return not self.header and not self.rows


def detect_format(path: Path) -> str:
    """Return the serialization format for a target path.

    Args:
        path: Target file path

    Returns:
        "csv" or "xlsx"

    Raises:
        ValueError: If the suffix is not supported
    """
    fmt = SUPPORTED_FORMATS.get(path.suffix.lower())
    if fmt is None:
        supported = ", ".join(sorted(SUPPORTED_FORMATS))
        raise ValueError(f"Unsupported document type: {path.name}. Must be one of: {supported}")
    return fmt


def serialize_document(document: Document, fmt: str, encoding: str = "utf-8") -> bytes:
    """Serialize a document to bytes.

    Args:
        document: Document to serialize
        fmt: "csv" or "xlsx"
        encoding: Text encoding for CSV output when the document does not
            carry the encoding it was read with

    Returns:
        Complete file content
    """
    if fmt == "csv":
        return _serialize_csv(document, encoding)
    if fmt == "xlsx":
        return _serialize_xlsx(document)
    raise ValueError(f"Unsupported format: {fmt}")


def _serialize_csv(document: Document, encoding: str) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    if document.header:
        writer.writerow(document.header)
    writer.writerows(document.rows)
    return buffer.getvalue().encode(document.encoding or encoding)


def _serialize_xlsx(document: Document) -> bytes:
    """Write the document into its sheet, keeping any other loaded sheets."""
    if document.workbook is None:
        wb = Workbook()
        ws = wb.active
        ws.title = document.sheet_name
    else:
        wb = document.workbook
        if document.sheet_name in wb.sheetnames:
            ws = wb[document.sheet_name]
        else:
            ws = wb.worksheets[0]
            ws.title = document.sheet_name
        ws.delete_rows(1, ws.max_row)

    lines = [document.header] + document.rows if document.header else document.rows
    for row_idx, values in enumerate(lines, start=1):
        for col_idx, value in enumerate(values, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
