#!/usr/bin/env python
from __future__ import annotations

import argparse
import random
from datetime import date
from pathlib import Path

from openpyxl import Workbook


HEADER = [
    "Client Name",
    "Group",
    "Primary Partner",
    "FYE (Month 1-12)",
    "Work Type",
    "PTD BHrs",
    "WIP Date",
]

PARTNERS = ["Avery", "Jordan", "Morgan"]
WORK_TYPES = ["Accounts", "Tax", "Audit"]


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a sample WIP client workbook")
    parser.add_argument("--output", required=True, help="output file path (.xlsx)")
    parser.add_argument("--clients", type=int, default=20, help="number of clients")
    parser.add_argument("--year", type=int, default=date.today().year, help="calendar year of the WIP dates")
    parser.add_argument("--seed", type=int, default=7, help="random seed")
    args = parser.parse_args()

    rng = random.Random(args.seed)
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "WIP"
    sheet.append(["WIP report", f"{args.year}"])
    sheet.append([])
    sheet.append(HEADER)

    for index in range(1, args.clients + 1):
        group = f"Group {rng.randint(1, 3)}" if rng.random() < 0.3 else ""
        year_end = rng.randint(1, 12)
        partner = rng.choice(PARTNERS)
        work_type = rng.choice(WORK_TYPES)
        for _ in range(rng.randint(1, 3)):
            sheet.append(
                [
                    f"Client {index:03d}",
                    group,
                    partner,
                    year_end,
                    work_type,
                    round(rng.uniform(2, 40), 1),
                    date(args.year, rng.randint(1, 12), rng.randint(1, 28)),
                ]
            )

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(output)
    print(f"sample client workbook written: {output}")


if __name__ == "__main__":
    main()
