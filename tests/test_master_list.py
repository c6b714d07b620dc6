from __future__ import annotations

from openpyxl import load_workbook

from allocator.core.months import month_dict
from allocator.domain import PlannerState
from allocator.exporters.master_list import export_master_list

from conftest import months


def _state():
    return PlannerState(
        managers=["Alice", "Bob"],
        manager_capacity={"Alice": month_dict(100), "Bob": month_dict(100)},
        clients=[
            {"id": "1", "client": "Acme", "group": "A", "partner": "Avery", "year_end": 6, "work_type": "Tax",
             "manager": "Alice", "locked": True, "months": months(January=10, March=5), "total": 15},
            {"id": "2", "client": "Beta", "group": "", "partner": "Jordan", "year_end": 3, "work_type": "Audit",
             "manager": "Alice", "locked": False, "months": months(January=4), "total": 4},
            {"id": "3", "client": "Gamma", "group": "", "partner": "Avery", "year_end": 1, "work_type": "Tax",
             "manager": "Bob", "locked": False, "months": months(December=8), "total": 8},
        ],
    )


def test_workbook_has_three_sheets_and_live_totals(tmp_path):
    path = export_master_list(tmp_path / "out" / "Master_List.xlsx", _state())
    workbook = load_workbook(path)

    assert workbook.sheetnames == ["Master Data", "Manager Time By Month", "Manager Time By Partner"]

    master = workbook["Master Data"]
    assert master["B1"].value == "Client"
    assert master["G1"].value == "Manager"
    assert master["H1"].value == "January"
    assert master["S1"].value == "December"
    assert master["T1"].value == "Total"
    assert master["T2"].value == "=SUM(H2:S2)"
    assert master["T4"].value == "=SUM(H4:S4)"
    assert master["F2"].value == "Yes"
    assert master["H2"].value == 10


def test_manager_summaries(tmp_path):
    path = export_master_list(tmp_path / "Master_List.xlsx", _state())
    workbook = load_workbook(path)

    by_month = [row for row in workbook["Manager Time By Month"].iter_rows(min_row=2, values_only=True)]
    assert [row[0] for row in by_month] == ["Alice", "Bob", "Grand Total"]
    assert by_month[0][1] == 14
    assert by_month[0][-1] == 19
    assert by_month[2][-1] == 27

    by_partner = [row for row in workbook["Manager Time By Partner"].iter_rows(min_row=2, values_only=True)]
    labels = [row[0] for row in by_partner]
    assert labels == ["Alice", "  Avery", "  Jordan", "Bob", "  Avery", "Grand Total"]
    assert by_partner[1][-1] == 15
