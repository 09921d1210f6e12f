from __future__ import annotations

import asyncio
import math
from decimal import Decimal
from typing import Any

from fastapi import APIRouter, HTTPException, Query
from fastapi.encoders import jsonable_encoder

from hrm_payroll.application import get_payroll_service
from hrm_payroll.core.salary import compute
from hrm_payroll.core.schema import Payroll
from hrm_payroll.core.validation import DataUnavailable, is_bounded

router = APIRouter(prefix="/payrolls", tags=["payroll"])


def _number(payload: dict, key: str) -> Any:
    value = payload.get(key, 0)
    if value is None or value == "":
        return 0
    try:
        finite = math.isfinite(float(value))
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=f"{key} must be a number") from exc
    if not finite:
        raise HTTPException(status_code=400, detail=f"{key} must be a finite number")
    if not is_bounded(Decimal(float(value))):
        raise HTTPException(status_code=400, detail=f"{key} is out of range")
    return value


@router.get("")
async def list_payrolls(
    month: str = Query(default="All"),
    year: str = Query(default="All"),
    status: str = Query(default="All"),
    search: str | None = Query(default=None),
) -> dict:
    service = get_payroll_service()
    try:
        rows = await asyncio.to_thread(service.list_payrolls, month, year, status=status, search=search)
    except DataUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return {"month": month, "year": year, "items": [row.model_dump(mode="json", by_alias=True) for row in rows]}


@router.get("/summary")
async def payroll_summary(month: str = Query(default="All"), year: str = Query(default="All")) -> dict:
    service = get_payroll_service()
    try:
        summary = await asyncio.to_thread(service.summary, month, year)
    except DataUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return {"month": month, "year": year, **jsonable_encoder(summary)}


@router.post("/compute")
async def compute_salary(payload: dict) -> dict:
    """Recompute net salary and deductions while a payroll is being edited."""
    result = compute(
        _number(payload, "basicSalary"),
        _number(payload, "totalDays"),
        _number(payload, "daysWorked"),
        _number(payload, "paidLeaves"),
    )
    return result.model_dump(mode="json", by_alias=True)


@router.post("/preview")
async def preview_payroll(payload: dict) -> dict:
    staff_id = payload.get("staffId")
    month = payload.get("month")
    year = payload.get("year")
    if not staff_id or not month or not year:
        raise HTTPException(status_code=400, detail="staffId, month and year are required")
    basic_salary = payload.get("basicSalary")
    if basic_salary is not None:
        basic_salary = _number(payload, "basicSalary")

    service = get_payroll_service()
    try:
        preview = await asyncio.to_thread(service.preview, str(staff_id), month, year, basic_salary)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if preview is None:
        raise HTTPException(status_code=503, detail="attendance or leave data unavailable")
    return preview.model_dump(mode="json", by_alias=True)


@router.post("/submit")
async def submit_payroll(payload: Payroll) -> dict:
    service = get_payroll_service()
    try:
        return await asyncio.to_thread(service.submit, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except DataUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
