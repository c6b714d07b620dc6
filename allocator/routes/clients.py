from __future__ import annotations

import asyncio

from fastapi import APIRouter, File, HTTPException, UploadFile

from allocator.application import get_planner_service
from allocator.core.settings import load_settings
from allocator.extractors import client_workbook, partner_preferences
from allocator.routes.common import run_service, state_response, store_upload

router = APIRouter(tags=["clients"])


@router.post("/import")
async def import_clients(file: UploadFile = File(...)) -> dict:
    """Replace the client list with the contents of a WIP workbook."""
    path = store_upload(file, load_settings())
    try:
        try:
            result = await asyncio.to_thread(client_workbook.parse, path)
        except client_workbook.WorkbookImportError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        service = get_planner_service()
        state = await run_service(service.replace_clients, result.clients)
    finally:
        path.unlink(missing_ok=True)
        await file.close()
    return state_response(
        state,
        f"Imported {len(result.clients)} clients",
        rows_read=result.rows_read,
        rows_skipped=result.rows_skipped,
    )


@router.post("/preferences")
async def import_preferences(file: UploadFile = File(...)) -> dict:
    """Lock clients to the managers proposed in a partner preference sheet."""
    path = store_upload(file, load_settings())
    try:
        try:
            preferences = await asyncio.to_thread(partner_preferences.parse, path)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=f"Could not read preference sheet: {exc}") from exc
        service = get_planner_service()
        state, report = await run_service(service.apply_preferences, preferences)
    finally:
        path.unlink(missing_ok=True)
        await file.close()
    return state_response(state, f"Locked {report.matched} clients", report=report.model_dump())


@router.patch("/clients/{client_id}")
async def update_client(client_id: str, payload: dict) -> dict:
    locked = payload.get("locked")
    if locked is not None and not isinstance(locked, bool):
        raise HTTPException(status_code=400, detail="locked must be a boolean")
    manager = payload.get("manager", payload.get("Manager"))
    service = get_planner_service()
    state = await run_service(service.update_client, client_id, manager, locked=locked)
    return state_response(state)
