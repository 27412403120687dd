# erp_console/routers/hr.py
"""
Salary (bảng lương) & attendance (chấm công)
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, File, Query, UploadFile
from fastapi.concurrency import run_in_threadpool

from ..calculations import attendance_flags, salary_total
from ..constants import ATTENDANCE_STATUS_LABELS, SALARY_STATUS_LABELS, label
from ..deps import Console, decorate, get_console, query_params
from ..errors import ValidationFailed
from ..formatting import format_month
from ..models import (
    MONTH_RE,
    CheckInIn,
    LeaveApprovalIn,
    LeaveRequestIn,
    NotesIn,
    SalaryCalculateIn,
    SalaryPayIn,
    SalaryUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["hr"])


def _require_month(month: str) -> str:
    if not MONTH_RE.match(month or ""):
        raise ValidationFailed("Tháng phải có định dạng YYYYMM (ví dụ: 202501)")
    return month


def _attendance_view(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        **row,
        "statusLabel": label(ATTENDANCE_STATUS_LABELS, row.get("status")),
        "flags": attendance_flags(row),
    }


def _attendance_rows(body: Dict[str, Any]) -> Dict[str, Any]:
    if isinstance(body.get("data"), list):
        return {**body, "data": [_attendance_view(r) for r in body["data"]]}
    return body


# -----------------------------------------------------------------------------
# Salary
# -----------------------------------------------------------------------------
@router.get("/salary")
def list_salaries(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    body = console.salary.list(params)
    if isinstance(body.get("data"), list):
        rows = [
            {**r, "statusLabel": label(SALARY_STATUS_LABELS, r.get("status")), "monthLabel": format_month(r.get("month"))}
            for r in body["data"]
        ]
        return {**body, "data": rows}
    return body


@router.get("/salary/summary")
def salary_summary(
    from_month: Optional[str] = Query(None, alias="fromMonth"),
    to_month: Optional[str] = Query(None, alias="toMonth"),
    console: Console = Depends(get_console),
):
    return console.salary.summary(from_month, to_month)


@router.post("/salary/calculate")
def calculate_salary(payload: SalaryCalculateIn, console: Console = Depends(get_console)):
    return console.salary.calculate(payload)


@router.get("/salary/{id}")
def get_salary(id: int, console: Console = Depends(get_console)):
    body = console.salary.get(id)
    salary = body.get("data")
    if not isinstance(salary, dict):
        return body
    return decorate(
        body,
        statusLabel=label(SALARY_STATUS_LABELS, salary.get("status")),
        monthLabel=format_month(salary.get("month")),
        computedTotal=salary_total(salary),
    )


@router.get("/salary/{user_id}/{month}")
def salary_by_user_month(user_id: int, month: str, console: Console = Depends(get_console)):
    return console.salary.by_user_month(user_id, _require_month(month))


@router.put("/salary/{id}")
def update_salary(id: int, payload: SalaryUpdate, console: Console = Depends(get_console)):
    return console.salary.update(id, payload)


@router.delete("/salary/{id}")
def delete_salary(id: int, console: Console = Depends(get_console)):
    return console.salary.delete(id)


@router.put("/salary/{id}/approve")
def approve_salary(id: int, payload: Optional[NotesIn] = None, console: Console = Depends(get_console)):
    return console.salary.approve(id, payload.notes if payload else None)


@router.post("/salary/{id}/recalculate")
def recalculate_salary(id: int, console: Console = Depends(get_console)):
    return console.salary.recalculate(id)


@router.post("/salary/{id}/pay")
def pay_salary(id: int, payload: SalaryPayIn, console: Console = Depends(get_console)):
    return console.salary.pay(id, payload)


# -----------------------------------------------------------------------------
# Attendance
# -----------------------------------------------------------------------------
@router.get("/attendance")
def list_attendance(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return _attendance_rows(console.attendance.list(params))


@router.get("/attendance/my")
def my_attendance(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return _attendance_rows(console.attendance.my(params))


@router.get("/attendance/today")
def today_attendance(console: Console = Depends(get_console)):
    body = _attendance_rows(console.attendance.today())
    rows = body.get("data") or []
    return {**body, "data": rows[0] if rows else None}


@router.get("/attendance/statistics")
def attendance_statistics(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return console.attendance.statistics(params)


@router.get("/attendance/report")
def attendance_report(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return console.attendance.report(params)


@router.post("/attendance/check-in")
def check_in(payload: Optional[CheckInIn] = None, console: Console = Depends(get_console)):
    return console.attendance.check_in(payload)


@router.post("/attendance/check-out")
def check_out(payload: Optional[CheckInIn] = None, console: Console = Depends(get_console)):
    return console.attendance.check_out(payload)


@router.post("/attendance/leave")
def request_leave(payload: LeaveRequestIn, console: Console = Depends(get_console)):
    return console.attendance.request_leave(payload)


@router.post("/attendance/lock-month")
def lock_month(month: str = Body(..., embed=True), console: Console = Depends(get_console)):
    return console.attendance.lock_month(_require_month(month))


@router.post("/attendance/import")
async def import_attendance(file: UploadFile = File(...), console: Console = Depends(get_console)):
    content = await file.read()
    logger.info("Importing attendance file %s (%d bytes)", file.filename, len(content))
    return await run_in_threadpool(
        console.attendance.import_file,
        file.filename or "attendance.xlsx", content, file.content_type or "application/octet-stream",
    )


@router.get("/attendance/{id}")
def get_attendance(id: int, console: Console = Depends(get_console)):
    body = console.attendance.get(id)
    if isinstance(body.get("data"), dict):
        return {**body, "data": _attendance_view(body["data"])}
    return body


@router.put("/attendance/{id}/approve")
def approve_leave(id: int, payload: LeaveApprovalIn, console: Console = Depends(get_console)):
    return console.attendance.approve_leave(id, payload)
