from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO
from uuid import uuid4


DEFAULT_SUBDIRS = [
    "data",
    "uploads",
    "output",
]


def _base_root() -> Path:
    env_root = os.getenv("ALLOCATOR_DATA_ROOT")
    if env_root:
        return Path(env_root).expanduser().resolve()
    return Path(__file__).resolve().parents[2] / "var"


def ensure_data_root() -> Path:
    """Ensure the data folders exist and return the root path."""

    root = _base_root()
    for sub in DEFAULT_SUBDIRS:
        (root / sub).mkdir(parents=True, exist_ok=True)
    return root


def state_path() -> Path:
    return ensure_data_root() / "data" / "state.json"


def output_path(filename: str) -> Path:
    return ensure_data_root() / "output" / Path(filename).name


def save_upload(
    filename: str,
    source: BinaryIO,
    max_bytes: int | None = None,
    chunk_size: int = 1024 * 1024,
) -> Path:
    """Persist an uploaded file under the uploads directory.

    Every call gets its own file, so concurrent uploads sharing a name never
    overwrite each other.  Copying stops as soon as the upload grows past
    ``max_bytes``; the partial file is removed and ``ValueError`` is raised.
    """

    safe_name = Path(filename).name
    target = ensure_data_root() / "uploads" / f"{uuid4().hex}_{safe_name}"
    written = 0
    try:
        with target.open("wb") as buffer:
            while True:
                chunk = source.read(chunk_size)
                if not chunk:
                    break
                written += len(chunk)
                if max_bytes is not None and written > max_bytes:
                    raise ValueError(f"upload exceeds the {max_bytes // (1024 * 1024)} MB limit")
                buffer.write(chunk)
    except BaseException:
        target.unlink(missing_ok=True)
        raise
    return target
