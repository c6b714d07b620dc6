from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, UploadFile

from allocator.application import NotFoundError
from allocator.core.settings import Settings
from allocator.core.storage import save_upload
from allocator.domain import PlannerState
from allocator.workers.pipeline import get_allocation_worker

T = TypeVar("T")


async def run_service(operation: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run an operation on the serial worker and map domain errors to HTTP errors."""

    worker = get_allocation_worker()
    try:
        return await worker.submit(operation, *args, **kwargs)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def state_response(state: PlannerState, message: str | None = None, **extra: Any) -> dict:
    payload: dict[str, Any] = {"success": True}
    if message:
        payload["message"] = message
    payload.update(extra)
    payload["state"] = state.to_dict()
    return payload


def store_upload(upload: UploadFile, settings: Settings) -> Path:
    if not upload.filename:
        raise HTTPException(status_code=400, detail="Uploaded file must have a filename")
    safe_name = Path(upload.filename).name
    if Path(safe_name).suffix.lower() not in settings.upload_extensions:
        raise HTTPException(status_code=400, detail="Only Excel files (.xlsx, .xls) or CSV are accepted")
    try:
        return save_upload(safe_name, upload.file, max_bytes=settings.upload_max_bytes)
    except ValueError as exc:
        raise HTTPException(status_code=413, detail=str(exc)) from exc
