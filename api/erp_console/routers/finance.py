# erp_console/routers/finance.py
"""
Phiếu thu / phiếu chi / đối chiếu công nợ.

Print, PDF and export endpoints stream the backend's file back unchanged.
The reconciliation detail adds balanceCheck: opening + transactions -
payments - returns - adjustments compared against the stored closing balance.
"""
from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Body, Depends

from ..calculations import reconciliation_check
from ..constants import RECONCILIATION_STATUS_LABELS, label
from ..deps import Console, decorate, download, get_console, query_params
from ..models import (
    BulkDeleteIn,
    DebtReconciliationIn,
    NotesIn,
    PaymentReceiptIn,
    PaymentVoucherIn,
    ReconciliationConfirmIn,
    ReconciliationDisputeIn,
    ReconciliationEmailIn,
)

router = APIRouter(tags=["finance"])


# -----------------------------------------------------------------------------
# Payment receipts
# -----------------------------------------------------------------------------
@router.get("/payment-receipts")
def list_receipts(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return console.payment_receipts.list(params)


@router.get("/payment-receipts/statistics")
def receipt_statistics(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return console.payment_receipts.statistics(params)


@router.get("/payment-receipts/export")
def export_receipts(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    content, ctype, filename = console.payment_receipts.export(params)
    return download(content, ctype, filename, "phieu-thu.xlsx")


@router.get("/payment-receipts/{id}")
def get_receipt(id: int, console: Console = Depends(get_console)):
    return console.payment_receipts.get(id)


@router.get("/payment-receipts/{id}/print")
def print_receipt(id: int, console: Console = Depends(get_console)):
    content, ctype, filename = console.payment_receipts.print(id)
    return download(content, ctype, filename, f"phieu-thu-{id}.pdf")


@router.post("/payment-receipts")
def create_receipt(payload: PaymentReceiptIn, console: Console = Depends(get_console)):
    return console.payment_receipts.create(payload)


@router.put("/payment-receipts/{id}")
def update_receipt(id: int, payload: PaymentReceiptIn, console: Console = Depends(get_console)):
    return console.payment_receipts.update(id, payload)


@router.delete("/payment-receipts/{id}")
def delete_receipt(id: int, console: Console = Depends(get_console)):
    return console.payment_receipts.delete(id)


@router.put("/payment-receipts/{id}/approve")
def approve_receipt(id: int, payload: Optional[NotesIn] = None, console: Console = Depends(get_console)):
    return console.payment_receipts.approve(id, payload.notes if payload else None)


# -----------------------------------------------------------------------------
# Payment vouchers
# -----------------------------------------------------------------------------
@router.get("/payment-vouchers")
def list_vouchers(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return console.payment_vouchers.list(params)


@router.get("/payment-vouchers/statistics")
def voucher_statistics(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return console.payment_vouchers.statistics(params)


@router.get("/payment-vouchers/export")
def export_vouchers(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    content, ctype, filename = console.payment_vouchers.export(params)
    return download(content, ctype, filename, "phieu-chi.xlsx")


@router.post("/payment-vouchers/bulk-delete")
def bulk_delete_vouchers(payload: BulkDeleteIn, console: Console = Depends(get_console)):
    return console.payment_vouchers.bulk_delete(payload.ids)


@router.get("/payment-vouchers/{id}")
def get_voucher(id: int, console: Console = Depends(get_console)):
    return console.payment_vouchers.get(id)


@router.get("/payment-vouchers/{id}/print")
def print_voucher(id: int, console: Console = Depends(get_console)):
    content, ctype, filename = console.payment_vouchers.print(id)
    return download(content, ctype, filename, f"phieu-chi-{id}.pdf")


@router.post("/payment-vouchers")
def create_voucher(payload: PaymentVoucherIn, console: Console = Depends(get_console)):
    return console.payment_vouchers.create(payload)


@router.put("/payment-vouchers/{id}")
def update_voucher(id: int, payload: PaymentVoucherIn, console: Console = Depends(get_console)):
    return console.payment_vouchers.update(id, payload)


@router.delete("/payment-vouchers/{id}")
def delete_voucher(id: int, console: Console = Depends(get_console)):
    return console.payment_vouchers.delete(id)


@router.put("/payment-vouchers/{id}/approve")
def approve_voucher(id: int, payload: Optional[NotesIn] = None, console: Console = Depends(get_console)):
    return console.payment_vouchers.approve(id, payload.notes if payload else None)


# -----------------------------------------------------------------------------
# Debt reconciliation
# -----------------------------------------------------------------------------
@router.get("/debt-reconciliation")
def list_reconciliations(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    body = console.debt_reconciliation.list(params)
    if isinstance(body.get("data"), list):
        rows = [{**r, "statusLabel": label(RECONCILIATION_STATUS_LABELS, r.get("status"))} for r in body["data"]]
        return {**body, "data": rows}
    return body


@router.get("/debt-reconciliation/statistics")
def reconciliation_statistics(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return console.debt_reconciliation.statistics(params)


@router.post("/debt-reconciliation")
def create_reconciliation(payload: DebtReconciliationIn, console: Console = Depends(get_console)):
    return console.debt_reconciliation.create(payload)


@router.post("/debt-reconciliation/{period_type}")
def create_period_reconciliation(
    period_type: Literal["monthly", "quarterly", "yearly"],
    payload: Dict[str, Any] = Body(...),
    console: Console = Depends(get_console),
):
    model = DebtReconciliationIn.model_validate({**payload, "reconciliationType": period_type})
    return console.debt_reconciliation.create(model)


@router.get("/debt-reconciliation/{id}")
def get_reconciliation(id: int, console: Console = Depends(get_console)):
    body = console.debt_reconciliation.get(id)
    rec = body.get("data")
    if not isinstance(rec, dict):
        return body
    return decorate(
        body,
        statusLabel=label(RECONCILIATION_STATUS_LABELS, rec.get("status")),
        balanceCheck=reconciliation_check(rec),
    )


@router.get("/debt-reconciliation/{id}/pdf")
def reconciliation_pdf(id: int, console: Console = Depends(get_console)):
    content, ctype, filename = console.debt_reconciliation.pdf(id)
    return download(content, ctype, filename, f"doi-chieu-cong-no-{id}.pdf")


@router.put("/debt-reconciliation/{id}/confirm")
def confirm_reconciliation(id: int, payload: ReconciliationConfirmIn, console: Console = Depends(get_console)):
    return console.debt_reconciliation.confirm(id, payload)


@router.put("/debt-reconciliation/{id}/dispute")
def dispute_reconciliation(id: int, payload: ReconciliationDisputeIn, console: Console = Depends(get_console)):
    return console.debt_reconciliation.dispute(id, payload)


@router.post("/debt-reconciliation/{id}/send-email")
def email_reconciliation(id: int, payload: ReconciliationEmailIn, console: Console = Depends(get_console)):
    return console.debt_reconciliation.send_email(id, payload)


@router.delete("/debt-reconciliation/{id}")
def delete_reconciliation(id: int, console: Console = Depends(get_console)):
    return console.debt_reconciliation.delete(id)
