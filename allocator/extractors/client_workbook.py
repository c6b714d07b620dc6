"""Parser for the WIP client workbook.

Each row of the sheet is a slice of work for one client: billable hours
(``PTD BHrs``) falling due on a ``WIP Date``.  Rows are rolled up into one
record per client with twelve calendar-month buckets.  The header row does not
have to be the first row; the parser looks for it near the top of the sheet.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any

import pandas as pd

from allocator.core.months import MONTH_NAMES, empty_months, month_after
from allocator.core.schema import ClientRecord

logger = logging.getLogger(__name__)

HEADER_KEYWORDS = ["Client Name", "PTD BHrs", "WIP Date"]
REQUIRED_COLUMNS = ["Client Name", "PTD BHrs", "WIP Date"]
HEADER_SCAN_ROWS = 11
HEADER_SCAN_COLS = 6


class WorkbookImportError(ValueError):
    """Raised with a user-facing message when a workbook cannot be imported."""


@dataclass
class ClientImportResult:
    clients: list[ClientRecord]
    rows_read: int
    rows_skipped: int


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and value != value:  # NaN
        return True
    return isinstance(value, str) and not value.strip()


def _text(value: Any) -> str:
    return "" if _is_blank(value) else str(value).strip()


def _read_raw(path: Path) -> pd.DataFrame:
    if path.suffix.lower() == ".csv":
        return pd.read_csv(path, header=None, dtype=object)
    return pd.read_excel(path, sheet_name=0, header=None, dtype=object)


def _find_header_row(frame: pd.DataFrame) -> int:
    for row in range(min(HEADER_SCAN_ROWS, len(frame.index))):
        for col in range(min(HEADER_SCAN_COLS, len(frame.columns))):
            value = frame.iat[row, col]
            if _is_blank(value):
                continue
            if any(keyword in str(value) for keyword in HEADER_KEYWORDS):
                return row
    return 0


def _apply_header(frame: pd.DataFrame, header_row: int) -> pd.DataFrame:
    header = [
        _text(value) or f"column_{index}" for index, value in enumerate(frame.iloc[header_row].tolist())
    ]
    body = frame.iloc[header_row + 1 :].copy()
    body.columns = header
    return body.dropna(how="all")


def _find_column(columns: list[str], keywords: list[str]) -> str | None:
    for keyword in keywords:
        for column in columns:
            if keyword in column:
                return column
    return None


def _parse_hours(value: Any) -> float:
    if _is_blank(value):
        return 0.0
    try:
        hours = float(str(value).replace(",", "").strip())
    except ValueError:
        return 0.0
    if not math.isfinite(hours):
        return 0.0
    return max(0.0, hours)


def _parse_year_end(value: Any) -> int:
    if _is_blank(value):
        return 1
    try:
        year_end = int(float(str(value).strip()))
    except (ValueError, OverflowError):
        return 1
    if year_end == 0:
        return 1
    return max(1, min(12, year_end))


def _parse_wip_month(value: Any, year_end: int) -> str:
    """Month a WIP date falls in, or the month after year end when unusable."""

    if isinstance(value, (datetime, date)):
        return MONTH_NAMES[value.month - 1]
    if _is_blank(value):
        return month_after(year_end)
    parsed = pd.to_datetime(str(value).strip(), errors="coerce")
    if pd.isna(parsed):
        return month_after(year_end)
    return MONTH_NAMES[parsed.month - 1]


def parse(path: Path) -> ClientImportResult:
    path = Path(path)
    try:
        raw = _read_raw(path)
    except FileNotFoundError as exc:
        raise WorkbookImportError("Excel file not found. Please check the file path and try again.") from exc
    except ValueError as exc:
        raise WorkbookImportError("Unsupported file format. Please use .xlsx or .xls files only.") from exc
    except Exception as exc:  # pandas/openpyxl raise a variety of errors on corrupt files
        raise WorkbookImportError(
            f"Failed to import Excel file: {exc}. Please check the file format and try again."
        ) from exc

    if raw.empty:
        raise WorkbookImportError("No data found in Excel file. Please check that the file contains client data.")

    header_row = _find_header_row(raw)
    frame = _apply_header(raw, header_row)
    if frame.empty:
        raise WorkbookImportError("No data found in Excel file. Please check that the file contains client data.")

    columns = list(frame.columns)
    missing = [name for name in REQUIRED_COLUMNS if _find_column(columns, [name]) is None]
    if missing:
        raise WorkbookImportError(
            f"Missing required columns: {', '.join(missing)}. Please ensure your Excel file has these columns."
        )

    client_column = _find_column(columns, ["Client Name"])
    hours_column = _find_column(columns, ["PTD BHrs"])
    wip_column = _find_column(columns, ["WIP Date"])
    year_end_column = _find_column(columns, ["FYE"])
    group_column = _find_column(columns, ["Group"])
    partner_column = _find_column(columns, ["Primary Partner", "Partner"])
    type_column = _find_column(columns, ["Work Type"])

    aggregated: dict[str, dict[str, Any]] = {}
    rows_read = 0
    rows_skipped = 0
    for row in frame.to_dict(orient="records"):
        rows_read += 1
        name = _text(row.get(client_column))
        if not name:
            rows_skipped += 1
            continue
        year_end = _parse_year_end(row.get(year_end_column)) if year_end_column else 1
        month = _parse_wip_month(row.get(wip_column), year_end)

        entry = aggregated.get(name)
        if entry is None:
            entry = {
                "client": name,
                "group": _text(row.get(group_column)) if group_column else "",
                "partner": _text(row.get(partner_column)) if partner_column else "",
                "work_type": _text(row.get(type_column)) if type_column else "",
                "year_end": year_end,
                "months": empty_months(),
            }
            aggregated[name] = entry
        entry["months"][month] += _parse_hours(row.get(hours_column))

    if not aggregated:
        raise WorkbookImportError('No valid client records found. Please check that the "Client Name" column has data.')

    clients = [ClientRecord(**entry) for entry in aggregated.values()]
    logger.info(
        "imported %d clients from %s (%d rows, %d skipped)", len(clients), path.name, rows_read, rows_skipped
    )
    return ClientImportResult(clients=clients, rows_read=rows_read, rows_skipped=rows_skipped)
