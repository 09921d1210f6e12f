from __future__ import annotations

import asyncio

from fastapi import APIRouter, HTTPException, Query

from hrm_payroll.application import get_payroll_service
from hrm_payroll.core.validation import DataUnavailable

router = APIRouter(prefix="/staff", tags=["attendance"])


@router.get("")
async def list_staff() -> dict:
    service = get_payroll_service()
    try:
        rows = await asyncio.to_thread(service.list_staff)
    except DataUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return {"items": [row.model_dump(mode="json", by_alias=True) for row in rows]}


@router.get("/{staff_id}/attendance-summary")
async def attendance_summary(staff_id: str, month: str = Query(...), year: int = Query(...)) -> dict:
    service = get_payroll_service()
    try:
        summary = await asyncio.to_thread(service.attendance_summary, staff_id, month, year)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if summary is None:
        raise HTTPException(status_code=503, detail="attendance or leave data unavailable")
    return summary.model_dump(mode="json", by_alias=True)
