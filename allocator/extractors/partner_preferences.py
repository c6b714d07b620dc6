"""Partner preference sheets: pin clients or whole groups to a manager."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

import pandas as pd

from allocator.core.name_normalize import normalize
from allocator.core.schema import PartnerPreference, PreferenceReport

logger = logging.getLogger(__name__)


def _text(value: Any) -> str:
    if value is None or (isinstance(value, float) and value != value):
        return ""
    return str(value).strip()


def _first_present(row: dict[str, Any], keys: list[str]) -> str:
    for key in keys:
        value = _text(row.get(key))
        if value:
            return value
    return ""


def parse(path: Path) -> list[PartnerPreference]:
    path = Path(path)
    if path.suffix.lower() == ".csv":
        frame = pd.read_csv(path, dtype=object)
    else:
        frame = pd.read_excel(path, sheet_name=0, dtype=object)
    frame = frame.rename(columns={col: str(col).strip() for col in frame.columns}).dropna(how="all")

    preferences: list[PartnerPreference] = []
    for row in frame.to_dict(orient="records"):
        manager = _first_present(row, ["Proposed Manager", "Manager"])
        if not manager:
            continue
        preferences.append(
            PartnerPreference(
                group=_text(row.get("Group")),
                client=_first_present(row, ["Client Name", "Client"]),
                partner=_text(row.get("Partner")),
                proposed_manager=manager,
            )
        )
    return preferences


def apply_preferences(
    clients: list[dict[str, Any]],
    preferences: Iterable[PartnerPreference],
    managers: list[str],
) -> PreferenceReport:
    """Lock matching clients to their proposed manager, in place.

    A preference naming a group locks every client of that group; otherwise
    the client name is matched case-insensitively.  Preferences for managers
    that do not exist are reported and skipped.
    """

    report = PreferenceReport()
    live = set(managers)
    by_name: dict[str, dict[str, Any]] = {}
    for client in clients:
        by_name.setdefault(normalize(client.get("client", "")), client)

    for pref in preferences:
        if pref.proposed_manager not in live:
            report.unmatched_managers.append({"manager": pref.proposed_manager, "client": pref.client or pref.group})
            continue

        targets: list[dict[str, Any]] = []
        if pref.group:
            targets = [client for client in clients if client.get("group") == pref.group]
        if not targets and pref.client:
            match = by_name.get(normalize(pref.client))
            if match is not None:
                targets = [match]

        if not targets:
            report.unmatched_clients.append(
                {"client": pref.client, "group": pref.group, "manager": pref.proposed_manager}
            )
            continue

        for client in targets:
            client["manager"] = pref.proposed_manager
            client["locked"] = True
            report.locked_clients.append(
                {"client": client.get("client", ""), "group": client.get("group", ""), "manager": pref.proposed_manager}
            )
        report.matched += len(targets)

    logger.info(
        "applied partner preferences: %d locked, %d unmatched clients, %d unknown managers",
        report.matched,
        len(report.unmatched_clients),
        len(report.unmatched_managers),
    )
    return report
