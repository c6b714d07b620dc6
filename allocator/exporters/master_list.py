from __future__ import annotations

from pathlib import Path

import pandas as pd

from allocator.core.months import MONTH_NAMES
from allocator.core.summary import clients_for, month_totals, partner_breakdown
from allocator.domain import PlannerState

MASTER_SHEET = "Master Data"
BY_MONTH_SHEET = "Manager Time By Month"
BY_PARTNER_SHEET = "Manager Time By Partner"

MASTER_COLUMNS = ["Group", "Client", "Year-End", "Type", "Partner", "Locked", "Manager", *MONTH_NAMES, "Total"]
SUMMARY_COLUMNS = ["Row Labels", *[f"Sum of {month}" for month in MONTH_NAMES], "Sum of Total"]


def _summary_row(label: str, totals: dict[str, float] | None) -> dict[str, object]:
    row: dict[str, object] = {"Row Labels": label}
    for month in MONTH_NAMES:
        row[f"Sum of {month}"] = totals[month] if totals is not None else None
    row["Sum of Total"] = sum(totals.values()) if totals is not None else None
    return row


def master_data_frame(state: PlannerState) -> pd.DataFrame:
    records = []
    for client in state.clients:
        months = client.get("months") or {}
        record: dict[str, object] = {
            "Group": client.get("group") or "",
            "Client": client.get("client") or "",
            "Year-End": client.get("year_end"),
            "Type": client.get("work_type") or "",
            "Partner": client.get("partner") or "",
            "Locked": "Yes" if client.get("locked") else "",
            "Manager": client.get("manager") or "",
        }
        for month in MONTH_NAMES:
            record[month] = months.get(month) or None
        record["Total"] = None
        records.append(record)
    return pd.DataFrame(records, columns=MASTER_COLUMNS)


def by_month_frame(state: PlannerState) -> pd.DataFrame:
    rows = [_summary_row(manager, month_totals(clients_for(state.clients, manager))) for manager in state.managers]
    rows.append(_summary_row("Grand Total", month_totals(state.clients)))
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def by_partner_frame(state: PlannerState) -> pd.DataFrame:
    rows: list[dict[str, object]] = []
    for manager in state.managers:
        rows.append(_summary_row(manager, None))
        for partner, totals in partner_breakdown(clients_for(state.clients, manager)).items():
            rows.append(_summary_row(f"  {partner}", totals))
    rows.append(_summary_row("Grand Total", month_totals(state.clients)))
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def export_master_list(path: Path, state: PlannerState) -> Path:
    """Write the three-sheet allocation workbook and return its path."""

    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        master_data_frame(state).to_excel(writer, sheet_name=MASTER_SHEET, index=False)
        by_month_frame(state).to_excel(writer, sheet_name=BY_MONTH_SHEET, index=False)
        by_partner_frame(state).to_excel(writer, sheet_name=BY_PARTNER_SHEET, index=False)

        # Total is a live formula over the month columns H..S
        sheet = writer.sheets[MASTER_SHEET]
        total_column = MASTER_COLUMNS.index("Total") + 1
        for offset in range(len(state.clients)):
            row = offset + 2
            sheet.cell(row=row, column=total_column, value=f"=SUM(H{row}:S{row})")
    return path
