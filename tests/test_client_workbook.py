from __future__ import annotations

from datetime import date

import pytest
from openpyxl import Workbook
from pydantic import ValidationError as PydanticValidationError

from allocator.core.schema import ClientRecord
from allocator.extractors.client_workbook import WorkbookImportError, parse

HEADER = ["Client Name", "Group", "Primary Partner", "FYE (Month 1-12)", "Work Type", "PTD BHrs", "WIP Date"]


def _workbook(tmp_path, rows, *, preamble=()):
    workbook = Workbook()
    sheet = workbook.active
    for line in preamble:
        sheet.append(list(line))
    sheet.append(HEADER)
    for row in rows:
        sheet.append(list(row))
    path = tmp_path / "wip.xlsx"
    workbook.save(path)
    return path


def test_rows_roll_up_per_client_and_month(tmp_path):
    path = _workbook(
        tmp_path,
        [
            ["Acme Ltd", "Acme", "Avery", 6, "Accounts", 10, date(2025, 3, 4)],
            ["Acme Ltd", "Acme", "Avery", 6, "Accounts", 5.5, date(2025, 3, 20)],
            ["Acme Ltd", "Acme", "Avery", 6, "Accounts", 8, date(2025, 9, 1)],
            ["Beta LLP", "", "Jordan", 3, "Tax", 12, "2025-01-15"],
        ],
        preamble=[["WIP export"], []],
    )

    result = parse(path)

    assert [client.client for client in result.clients] == ["Acme Ltd", "Beta LLP"]
    acme, beta = result.clients
    assert acme.months["March"] == 15.5
    assert acme.months["September"] == 8
    assert acme.total == 23.5
    assert acme.group == "Acme"
    assert acme.partner == "Avery"
    assert acme.year_end == 6
    assert acme.manager == "" and acme.locked is False
    assert beta.months["January"] == 12
    assert acme.id != beta.id


def test_missing_date_falls_after_year_end_and_bad_hours_clamp(tmp_path):
    path = _workbook(
        tmp_path,
        [
            ["Gamma", "", "Morgan", 12, "Audit", 7, None],
            ["Gamma", "", "Morgan", 12, "Audit", -4, "not a date"],
            ["Delta", "", "Morgan", "", "Audit", "n/a", None],
            ["Epsilon", "", "Morgan", 20, "Audit", 3, None],
            [None, "", "Morgan", 1, "Audit", 9, date(2025, 5, 1)],
        ],
    )

    result = parse(path)
    by_name = {client.client: client for client in result.clients}

    assert by_name["Gamma"].months["January"] == 7
    assert by_name["Gamma"].total == 7
    assert by_name["Delta"].year_end == 1
    assert by_name["Delta"].total == 0
    assert by_name["Epsilon"].year_end == 12
    assert by_name["Epsilon"].months["January"] == 3
    assert result.rows_skipped == 1


def test_missing_required_columns_are_named(tmp_path):
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(["Client Name", "Hours"])
    sheet.append(["Acme", 3])
    path = tmp_path / "bad.xlsx"
    workbook.save(path)

    with pytest.raises(WorkbookImportError) as excinfo:
        parse(path)
    assert "PTD BHrs" in str(excinfo.value)
    assert "WIP Date" in str(excinfo.value)


def test_sheet_without_client_names_is_rejected(tmp_path):
    path = _workbook(tmp_path, [[None, "", "", 1, "", 4, date(2025, 1, 1)]])
    with pytest.raises(WorkbookImportError):
        parse(path)


def test_csv_exports_are_accepted(tmp_path):
    path = tmp_path / "wip.csv"
    path.write_text(
        "Client Name,PTD BHrs,WIP Date,FYE (Month 1-12)\nOmega,4,2025-07-02,6\nOmega,1,,6\n",
        encoding="utf-8",
    )
    result = parse(path)
    assert result.clients[0].months["July"] == 5


def test_non_finite_numbers_are_treated_as_invalid(tmp_path):
    path = _workbook(
        tmp_path,
        [
            ["Acme", "", "Avery", "inf", "Tax", "1e999", date(2025, 2, 1)],
            ["Acme", "", "Avery", "inf", "Tax", 4, date(2025, 2, 1)],
            ["Beta", "", "Avery", "1e999", "Tax", "-inf", None],
        ],
    )

    result = parse(path)
    by_name = {client.client: client for client in result.clients}

    assert by_name["Acme"].year_end == 1
    assert by_name["Acme"].months["February"] == 4
    assert by_name["Acme"].total == 4
    assert by_name["Beta"].year_end == 1
    assert by_name["Beta"].total == 0


def test_client_record_rejects_infinite_hours():
    with pytest.raises(PydanticValidationError):
        ClientRecord(client="Acme", months={"January": float("inf")})
