"""
Spreadsheet Adapter Service - turn uploaded bytes into typed upload rows.

Supports two formats:
- XLSX: one sheet per section ("Categories", "Tags", "Menu Items"), first
  non-blank row is the header
- CSV: either a `Section` column routing each row, or a single-section file
  whose section is recognized from its header

Any failure to read the file raises FileFormatError (or its subclass
UnknownSectionError); no partial document is returned.

Usage:
    from src.services.spreadsheet_adapter_service import parse_upload

    document = parse_upload(content, filename="menu.xlsx")
    print(document.present_sections())
"""

import csv
import io
import zipfile
from pathlib import PurePath
from typing import Any, Dict, Iterable, List, Optional, Sequence

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from src.services.dto import BulkUploadDocument
from src.services.exceptions import FileFormatError, UnknownSectionError
from src.services.logging_utils import get_service_logger
from src.utils import constants as c
from src.utils.config import get_config
from src.utils.validators import cell_to_text, is_blank

logger = get_service_logger(__name__)

# Header lookup per section: lowercase header text -> canonical header
_SECTION_HEADER_LOOKUP: Dict[str, Dict[str, str]] = {
    section: {h.lower(): h for h in headers} for section, headers in c.SECTION_HEADERS.items()
}

# All canonical headers (Name is shared by every section)
_ALL_HEADER_LOOKUP: Dict[str, str] = {
    h.lower(): h for headers in c.SECTION_HEADERS.values() for h in headers
}

# Accepted Section column values, compared without case, spaces or underscores
_SECTION_ALIASES: Dict[str, str] = {
    "categories": c.SECTION_CATEGORIES,
    "category": c.SECTION_CATEGORIES,
    "tags": c.SECTION_TAGS,
    "tag": c.SECTION_TAGS,
    "menuitems": c.SECTION_MENU_ITEMS,
    "menuitem": c.SECTION_MENU_ITEMS,
}


# ============================================================================
# Entry Point
# ============================================================================


def detect_file_type(filename: Optional[str], content_type: Optional[str]) -> str:
    """
    Decide how to read an upload from its filename and declared MIME type.

    The extension wins when present; the MIME type is used only for
    extensionless names.

    Args:
        filename: Original filename (may be None)
        content_type: Declared MIME type (may be None)

    Returns:
        FILE_TYPE_CSV or FILE_TYPE_XLSX

    Raises:
        FileFormatError: If neither identifies a supported type
    """
    suffix = PurePath(filename).suffix.lower() if filename else ""
    mime = (content_type or "").split(";")[0].strip().lower()

    if suffix == ".csv":
        return c.FILE_TYPE_CSV
    if suffix == ".xlsx":
        return c.FILE_TYPE_XLSX
    if not suffix:
        if mime in c.CSV_MIME_TYPES:
            return c.FILE_TYPE_CSV
        if mime == c.XLSX_MIME_TYPE:
            return c.FILE_TYPE_XLSX

    raise FileFormatError(
        f"Unsupported file type '{filename or mime or 'unknown'}'. "
        "Only Excel (.xlsx) and CSV files are allowed"
    )


def parse_upload(
    content: bytes,
    filename: Optional[str] = None,
    content_type: Optional[str] = None,
) -> BulkUploadDocument:
    """
    Parse an uploaded spreadsheet into a BulkUploadDocument.

    Args:
        content: Raw file bytes
        filename: Original filename, used to detect the format
        content_type: Declared MIME type, used when filename has no extension

    Returns:
        BulkUploadDocument; sections missing from the file are None

    Raises:
        FileFormatError: Empty, oversized, unsupported or corrupt file
        UnknownSectionError: CSV rows that cannot be routed to a section
    """
    max_bytes = get_config().max_upload_bytes
    if len(content) > max_bytes:
        raise FileFormatError(f"File too large. Maximum size is {max_bytes / 1_000_000:g}MB")
    if not content:
        raise FileFormatError("Uploaded file is empty")

    file_type = detect_file_type(filename, content_type)
    if file_type == c.FILE_TYPE_CSV:
        records = _read_csv(content)
    else:
        records = _read_xlsx(content)

    document = BulkUploadDocument.from_records(records)
    logger.debug(
        f"Parsed {file_type} upload '{filename}': "
        + ", ".join(f"{s}={len(records[s])}" for s in document.present_sections())
    )
    return document


# ============================================================================
# Shared Helpers
# ============================================================================


def _canonical_headers(raw_headers: Sequence[Any], lookup: Dict[str, str]) -> List[Optional[str]]:
    """
    Map header cells to canonical header names.

    Known headers match case-insensitively after trimming; unknown headers
    are kept as trimmed text; blank header cells become None (column ignored).
    """
    headers: List[Optional[str]] = []
    for raw in raw_headers:
        text = cell_to_text(raw)
        if not text:
            headers.append(None)
        else:
            headers.append(lookup.get(text.lower(), text))
    return headers


def _row_to_record(headers: Sequence[Optional[str]], values: Sequence[Any]) -> Dict[str, Any]:
    """Pair header names with non-blank cell values."""
    record: Dict[str, Any] = {}
    for header, value in zip(headers, values):
        if header is None or is_blank(value):
            continue
        record[header] = value.strip() if isinstance(value, str) else value
    return record


def _is_blank_row(values: Iterable[Any]) -> bool:
    return all(is_blank(v) for v in values)


# ============================================================================
# XLSX
# ============================================================================


def _read_xlsx(content: bytes) -> Dict[str, List[Dict[str, Any]]]:
    """
    Read the section sheets of an XLSX workbook.

    Returns:
        Records per section for each section sheet present in the workbook

    Raises:
        FileFormatError: If the bytes are not a readable workbook
    """
    # XML errors from ElementTree and lxml both derive from SyntaxError
    try:
        workbook = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (
        zipfile.BadZipFile,
        InvalidFileException,
        SyntaxError,
        KeyError,
        ValueError,
        OSError,
        EOFError,
    ) as e:
        raise FileFormatError(f"Invalid file format or corrupted file: {e}") from e

    try:
        records: Dict[str, List[Dict[str, Any]]] = {}
        for section, sheet_name in c.SHEET_NAMES.items():
            if sheet_name not in workbook.sheetnames:
                continue
            rows = workbook[sheet_name].iter_rows(values_only=True)
            records[section] = _sheet_records(rows, _SECTION_HEADER_LOOKUP[section])
        return records
    except (zipfile.BadZipFile, SyntaxError, KeyError, ValueError, OSError) as e:
        raise FileFormatError(f"Invalid file format or corrupted file: {e}") from e
    finally:
        workbook.close()


def _sheet_records(rows: Iterable[Sequence[Any]], lookup: Dict[str, str]) -> List[Dict[str, Any]]:
    """Convert sheet rows to records using the first non-blank row as headers."""
    headers: Optional[List[Optional[str]]] = None
    records: List[Dict[str, Any]] = []

    for values in rows:
        if headers is None:
            if _is_blank_row(values):
                continue
            headers = _canonical_headers(values, lookup)
            continue
        if _is_blank_row(values):
            continue
        record = _row_to_record(headers, values)
        if record:
            records.append(record)

    return records


# ============================================================================
# CSV
# ============================================================================


def _read_csv(content: bytes) -> Dict[str, List[Dict[str, Any]]]:
    """
    Read a CSV upload.

    Returns:
        Records per section for each section that received rows

    Raises:
        FileFormatError: If the bytes are not UTF-8 CSV text or have no header
        UnknownSectionError: If rows cannot be routed to a section
    """
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise FileFormatError(f"Invalid file format or corrupted file: {e}") from e

    try:
        rows = [row for row in csv.reader(io.StringIO(text, newline="")) if not _is_blank_row(row)]
    except csv.Error as e:
        raise FileFormatError(f"Invalid file format or corrupted file: {e}") from e

    if not rows:
        raise FileFormatError("CSV file has no header row")

    header_row, data_rows = rows[0], rows[1:]

    section_position = _find_section_column(header_row)
    if section_position is not None:
        return _route_by_section_column(header_row, data_rows, section_position)

    headers = _canonical_headers(header_row, _ALL_HEADER_LOOKUP)
    section = _section_from_headers(headers)
    records = [_row_to_record(headers, row) for row in data_rows]
    return {section: [r for r in records if r]}


def _find_section_column(header_row: Sequence[str]) -> Optional[int]:
    for position, raw in enumerate(header_row):
        if cell_to_text(raw).lower() == c.CSV_SECTION_COLUMN.lower():
            return position
    return None


def _route_by_section_column(
    header_row: Sequence[str],
    data_rows: List[List[str]],
    section_position: int,
) -> Dict[str, List[Dict[str, Any]]]:
    """Assign each CSV row to the section named in its Section cell."""
    headers = _canonical_headers(header_row, _ALL_HEADER_LOOKUP)
    headers[section_position] = None

    records: Dict[str, List[Dict[str, Any]]] = {}
    # Line 1 is the header
    for line_number, row in enumerate(data_rows, start=2):
        raw_section = row[section_position] if section_position < len(row) else ""
        key = "".join(cell_to_text(raw_section).lower().replace("_", " ").split())
        section = _SECTION_ALIASES.get(key)
        if section is None:
            raise UnknownSectionError(
                f"Section value '{cell_to_text(raw_section)}' on line {line_number} "
                "(expected Categories, Tags or Menu Items)"
            )
        record = _row_to_record(headers, row)
        if record:
            records.setdefault(section, []).append(record)
    return records


def _section_from_headers(headers: Sequence[Optional[str]]) -> str:
    """
    Recognize the section of a single-section CSV from its header.

    Raises:
        UnknownSectionError: If the header matches no section
    """
    present = {h for h in headers if h is not None}

    if c.HEADER_NAME in present:
        if c.HEADER_PRICE in present:
            return c.SECTION_MENU_ITEMS
        if c.HEADER_COLOR in present:
            return c.SECTION_TAGS
        if c.HEADER_SORT_ORDER in present or present == {c.HEADER_NAME}:
            return c.SECTION_CATEGORIES

    raise UnknownSectionError(
        f"header [{', '.join(sorted(present))}] matches no section; add a "
        f"'{c.CSV_SECTION_COLUMN}' column or upload an XLSX workbook"
    )
