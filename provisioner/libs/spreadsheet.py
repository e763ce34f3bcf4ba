"""Spreadsheet ingestion helpers for uploaded contact lists."""

from __future__ import annotations

import csv
import io
import re
from pathlib import PurePath
from typing import Any

import openpyxl

SUPPORTED_SUFFIXES = (".xlsx", ".csv")

# Normalised header -> record column. "nome" is the legacy Portuguese header.
HEADER_ALIASES: dict[str, str] = {
    "name": "name",
    "nome": "name",
    "email": "email",
    "password": "password",
    "divisionid": "division_id",
    "division": "division_id",
    "manager": "manager",
}


class SpreadsheetError(Exception):
    """Raised when an upload cannot be read as a table."""


def read_rows(filename: str, content: bytes) -> list[dict[str, Any]]:
    """Return one dict per data row of the first sheet, keyed by header."""
    suffix = PurePath(filename or "").suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise SpreadsheetError(f"Unsupported file type '{suffix or filename}'")

    if suffix == ".csv":
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise SpreadsheetError("CSV file is not valid UTF-8") from exc
        table = [list(row) for row in csv.reader(io.StringIO(text, newline=""))]
    else:
        try:
            workbook = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
        except Exception as exc:  # openpyxl raises zipfile/KeyError/InvalidFileException
            raise SpreadsheetError("Excel file is empty or malformed") from exc
        try:
            table = [list(row) for row in workbook.worksheets[0].iter_rows(values_only=True)]
        finally:
            workbook.close()

    if not table:
        return []

    header, *data = table
    keys = [str(value).strip() if value is not None else "" for value in header]
    rows: list[dict[str, Any]] = []
    for values in data:
        row = {
            key: value
            for key, value in zip(keys, values)
            if key and value is not None and value != ""
        }
        if row:
            rows.append(row)
    return rows


def _normalise_header(header: str) -> str:
    return re.sub(r"[^a-z0-9]", "", header.lower())


def to_record_fields(row: dict[str, Any]) -> dict[str, Any]:
    """Split a raw row into known record columns and an ``extra`` mapping."""
    fields: dict[str, Any] = {}
    extra: dict[str, Any] = {}
    for header, value in row.items():
        column = HEADER_ALIASES.get(_normalise_header(header))
        if column and column not in fields:
            # Passwords are opaque; whitespace is part of the secret.
            fields[column] = str(value) if column == "password" else str(value).strip()
        else:
            extra[header] = value if isinstance(value, (str, int, float, bool)) else str(value)
    if extra:
        fields["extra"] = extra
    return fields
