#!/usr/bin/env python
from __future__ import annotations

import argparse
from pathlib import Path

from openpyxl import Workbook


HEADER = ["Group", "Client Name", "Partner", "Proposed Manager"]


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a partner preference workbook template")
    parser.add_argument("--output", required=True, help="output file path (.xlsx)")
    parser.add_argument("--client", default="Client 001", help="client to pin")
    parser.add_argument("--group", default="", help="group to pin instead of a single client")
    parser.add_argument("--manager", required=True, help="proposed manager")
    args = parser.parse_args()

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Preferences"
    sheet.append(HEADER)
    sheet.append([args.group, "" if args.group else args.client, "", args.manager])

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(output)
    print(f"preference workbook written: {output}")


if __name__ == "__main__":
    main()
