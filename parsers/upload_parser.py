"""
CSV / Excel parser for guest blog site bulk uploads.

Reads the first sheet (or the CSV body) into a header list and positional
rows of trimmed text. No field-level validation happens here: any problem
reading the file is fatal for the upload session and raised as a single
UploadParseError.
"""

from dataclasses import dataclass, field
from io import BytesIO, StringIO
from pathlib import Path
from typing import Optional
import structlog

import pandas as pd

from exceptions import UploadParseError, UnsupportedFileTypeError
from utils.text_utils import clean_cell

logger = structlog.get_logger(__name__)

DEFAULT_EXTENSIONS = (".csv", ".xls", ".xlsx")

# pandas engine per Excel extension
EXCEL_ENGINES = {
    ".xlsx": "openpyxl",
    ".xls": "xlrd",
}


@dataclass(frozen=True)
class ParsedRow:
    """One non-blank data line: header → raw cell text."""
    row_index: int
    values: dict[str, str] = field(default_factory=dict)

    def get(self, column: Optional[str]) -> str:
        """Raw text for a column ("" when unmapped or missing)."""
        if column is None:
            return ""
        return self.values.get(column, "")

    def is_blank(self, columns: Optional[list[str]] = None) -> bool:
        """True if every given column (default: all) is empty."""
        keys = columns if columns is not None else list(self.values.keys())
        return all(not self.get(col) for col in keys)


@dataclass
class ParsedUpload:
    """Result of parsing an uploaded file."""
    filename: str
    headers: list[str] = field(default_factory=list)
    rows: list[ParsedRow] = field(default_factory=list)

    @property
    def total_rows(self) -> int:
        return len(self.rows)


def get_extension(filename: str) -> str:
    """Lower-cased extension including the dot ("" if none)."""
    return Path(filename or "").suffix.lower()


def parse_upload(
    content: bytes,
    filename: str,
    allowed_extensions: tuple[str, ...] = DEFAULT_EXTENSIONS,
) -> ParsedUpload:
    """
    Parse an uploaded CSV or Excel file.

    Args:
        content: Raw file bytes
        filename: Original filename (extension selects the reader)
        allowed_extensions: Accepted extensions, lower-case with dot

    Returns:
        ParsedUpload with headers and non-blank rows numbered from 1

    Raises:
        UnsupportedFileTypeError: Extension not accepted
        UploadParseError: File unreadable, empty, or without data rows
    """
    extension = get_extension(filename)
    logger.info("parsing_upload", filename=filename, extension=extension, size=len(content))

    if extension not in allowed_extensions:
        raise UnsupportedFileTypeError(filename, allowed_extensions)

    if not content:
        raise UploadParseError(
            message="Uploaded file is empty",
            details={"filename": filename}
        )

    if extension == ".csv":
        grid = _read_csv(content, filename)
    else:
        grid = _read_excel(content, filename, EXCEL_ENGINES[extension])

    result = _grid_to_upload(grid, filename)

    logger.info(
        "upload_parsed",
        filename=filename,
        columns=len(result.headers),
        rows=result.total_rows
    )

    return result


# ===================
# READERS
# ===================

def _read_csv(content: bytes, filename: str) -> list[list[str]]:
    """Read CSV bytes into a grid of cleaned cells."""
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        logger.warning("csv_decode_failed", filename=filename, error=str(e))
        raise UploadParseError(
            message="File is not valid UTF-8 text",
            details={"filename": filename, "original_error": str(e)}
        )

    try:
        df = pd.read_csv(
            StringIO(text),
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
        )
    except pd.errors.EmptyDataError:
        raise UploadParseError(
            message="File must have a header row and at least one data row",
            details={"filename": filename}
        )
    except (pd.errors.ParserError, ValueError) as e:
        logger.warning("csv_read_failed", filename=filename, error=str(e))
        raise UploadParseError(
            message="Failed to read CSV file",
            details={"filename": filename, "original_error": str(e)}
        )

    return _frame_to_grid(df)


def _read_excel(content: bytes, filename: str, engine: str) -> list[list[str]]:
    """Read the first worksheet into a grid of cleaned cells."""
    try:
        df = pd.read_excel(
            BytesIO(content),
            sheet_name=0,
            header=None,
            dtype=object,
            engine=engine,
        )
    except Exception as e:
        logger.error("excel_read_failed", filename=filename, engine=engine, error=str(e))
        raise UploadParseError(
            message="Failed to read Excel file",
            details={"filename": filename, "original_error": str(e)}
        )

    return _frame_to_grid(df)


def _frame_to_grid(df: pd.DataFrame) -> list[list[str]]:
    return [
        ["" if _is_missing(value) else clean_cell(value) for value in row]
        for row in df.itertuples(index=False, name=None)
    ]


def _is_missing(value) -> bool:
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


# ===================
# GRID → ROWS
# ===================

def _grid_to_upload(grid: list[list[str]], filename: str) -> ParsedUpload:
    """
    Turn a cell grid into headers and numbered rows.

    The first non-blank line is the header. Fully blank lines are dropped
    and do not consume a row index.
    """
    lines = [line for line in grid if any(cell for cell in line)]

    if len(lines) < 2:
        raise UploadParseError(
            message="File must have a header row and at least one data row",
            details={"filename": filename, "non_blank_lines": len(lines)}
        )

    header_line = lines[0]
    width = max(len(line) for line in lines)
    header_line = header_line + [""] * (width - len(header_line))

    headers = _unique_headers(header_line)

    # Columns with no header and no data (trailing spreadsheet junk)
    keep = [
        i for i, header_cell in enumerate(header_line)
        if header_cell or any(i < len(line) and line[i] for line in lines[1:])
    ]
    headers = [headers[i] for i in keep]

    rows: list[ParsedRow] = []
    for line in lines[1:]:
        cells = line + [""] * (width - len(line))
        values = {headers[pos]: cells[i] for pos, i in enumerate(keep)}
        rows.append(ParsedRow(row_index=len(rows) + 1, values=values))

    return ParsedUpload(filename=filename, headers=headers, rows=rows)


def _unique_headers(header_line: list[str]) -> list[str]:
    """
    Make header names usable as keys.

    Empty headers become "Column N"; repeats get a " (2)", " (3)" suffix.
    """
    seen: dict[str, int] = {}
    headers = []
    for i, raw in enumerate(header_line):
        name = raw or f"Column {i + 1}"
        count = seen.get(name, 0) + 1
        seen[name] = count
        headers.append(name if count == 1 else f"{name} ({count})")
    return headers
