from __future__ import annotations

import io

import openpyxl
import pytest
from provisioner.libs.spreadsheet import SpreadsheetError, read_rows, to_record_fields


def _xlsx(rows: list[list[object]]) -> bytes:
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def test_read_rows_from_xlsx_uses_header_row() -> None:
    content = _xlsx(
        [
            ["name", "email", "password", "divisionId", "manager"],
            ["Ana", "ana@x.com", "pw1", "div-1", "boss@x.com"],
            ["Bruno", "bruno@x.com", 1234, "div-2", None],
        ]
    )

    rows = read_rows("contacts.xlsx", content)

    assert rows == [
        {
            "name": "Ana",
            "email": "ana@x.com",
            "password": "pw1",
            "divisionId": "div-1",
            "manager": "boss@x.com",
        },
        {"name": "Bruno", "email": "bruno@x.com", "password": 1234, "divisionId": "div-2"},
    ]


def test_read_rows_skips_blank_rows() -> None:
    content = _xlsx([["email"], ["a@x.com"], [None], ["b@x.com"]])

    assert read_rows("list.XLSX", content) == [{"email": "a@x.com"}, {"email": "b@x.com"}]


def test_read_rows_from_csv_tolerates_bom() -> None:
    content = "\ufeffname,email\nAna,ana@x.com\n".encode()

    assert read_rows("contacts.csv", content) == [{"name": "Ana", "email": "ana@x.com"}]


def test_read_rows_header_only_returns_nothing() -> None:
    assert read_rows("contacts.csv", b"name,email\n") == []
    assert read_rows("contacts.csv", b"") == []


def test_read_rows_rejects_unsupported_extension() -> None:
    with pytest.raises(SpreadsheetError):
        read_rows("contacts.pdf", b"%PDF-1.4")


def test_read_rows_rejects_corrupt_workbook() -> None:
    with pytest.raises(SpreadsheetError):
        read_rows("contacts.xlsx", b"definitely not a zip archive")


def test_to_record_fields_maps_known_headers_and_keeps_extra() -> None:
    fields = to_record_fields(
        {
            "Nome": "Ana",
            "E-mail": "ana@x.com",
            "Password": 1234,
            "division_id": "div-1",
            "Manager": "boss@x.com",
            "Department": "Sales",
        }
    )

    assert fields == {
        "name": "Ana",
        "email": "ana@x.com",
        "password": "1234",
        "division_id": "div-1",
        "manager": "boss@x.com",
        "extra": {"Department": "Sales"},
    }


def test_to_record_fields_without_extra_columns() -> None:
    assert to_record_fields({"email": " a@x.com "}) == {"email": "a@x.com"}


def test_read_rows_uses_first_worksheet_not_active_one() -> None:
    workbook = openpyxl.Workbook()
    workbook.active.append(["email"])
    workbook.active.append(["first@x.com"])
    notes = workbook.create_sheet("Notes")
    notes.append(["note"])
    notes.append(["scratch"])
    workbook.active = 1
    buffer = io.BytesIO()
    workbook.save(buffer)

    assert read_rows("contacts.xlsx", buffer.getvalue()) == [{"email": "first@x.com"}]


def test_to_record_fields_keeps_password_whitespace() -> None:
    fields = to_record_fields({"email": " a@x.com ", "password": "  pw with spaces "})

    assert fields == {"email": "a@x.com", "password": "  pw with spaces "}


def test_csv_password_reaches_record_fields_verbatim() -> None:
    rows = read_rows("contacts.csv", b"email,password\na@x.com,  secret \n")

    assert to_record_fields(rows[0])["password"] == "  secret "
