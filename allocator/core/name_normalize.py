from __future__ import annotations

import unicodedata


def normalize(name: str) -> str:
    normalized = unicodedata.normalize("NFKC", name or "").strip().casefold()
    return " ".join(normalized.split())
