# erp_console/routers/purchasing.py
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from ..deps import Console, get_console, query_params
from ..models import (
    NotesIn,
    PurchaseOrderIn,
    PurchaseOrderUpdate,
    ReceivePurchaseOrderIn,
    SupplierIn,
)

router = APIRouter(tags=["purchasing"])


# -----------------------------------------------------------------------------
# Suppliers
# -----------------------------------------------------------------------------
@router.get("/suppliers")
def list_suppliers(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return console.suppliers.list(params)


@router.get("/suppliers/{id}")
def get_supplier(id: int, console: Console = Depends(get_console)):
    return console.suppliers.get(id)


@router.get("/suppliers/{id}/statistics")
def supplier_statistics(id: int, console: Console = Depends(get_console)):
    return console.suppliers.statistics(id)


@router.post("/suppliers")
def create_supplier(payload: SupplierIn, console: Console = Depends(get_console)):
    return console.suppliers.create(payload)


@router.put("/suppliers/{id}")
def update_supplier(id: int, payload: SupplierIn, console: Console = Depends(get_console)):
    return console.suppliers.update(id, payload)


@router.delete("/suppliers/{id}")
def delete_supplier(id: int, console: Console = Depends(get_console)):
    return console.suppliers.delete(id)


# -----------------------------------------------------------------------------
# Purchase orders
# -----------------------------------------------------------------------------
@router.get("/purchase-orders")
def list_purchase_orders(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return console.purchase_orders.list(params)


@router.get("/purchase-orders/{id}")
def get_purchase_order(id: int, console: Console = Depends(get_console)):
    return console.purchase_orders.get(id)


@router.post("/purchase-orders")
def create_purchase_order(payload: PurchaseOrderIn, console: Console = Depends(get_console)):
    return console.purchase_orders.create(payload)


@router.put("/purchase-orders/{id}")
def update_purchase_order(id: int, payload: PurchaseOrderUpdate, console: Console = Depends(get_console)):
    return console.purchase_orders.update(id, payload)


@router.delete("/purchase-orders/{id}")
def delete_purchase_order(id: int, console: Console = Depends(get_console)):
    return console.purchase_orders.delete(id)


@router.put("/purchase-orders/{id}/approve")
def approve_purchase_order(id: int, payload: Optional[NotesIn] = None, console: Console = Depends(get_console)):
    return console.purchase_orders.approve(id, payload.notes if payload else None)


@router.put("/purchase-orders/{id}/cancel")
def cancel_purchase_order(
    id: int,
    payload: Optional[Dict[str, Any]] = None,
    console: Console = Depends(get_console),
):
    return console.purchase_orders.cancel(id, (payload or {}).get("reason"))


@router.put("/purchase-orders/{id}/receive")
def receive_purchase_order(
    id: int,
    payload: Optional[ReceivePurchaseOrderIn] = None,
    console: Console = Depends(get_console),
):
    return console.purchase_orders.receive(id, payload)


@router.put("/purchase-orders/{id}/send-email")
def email_purchase_order(id: int, console: Console = Depends(get_console)):
    return console.purchase_orders.send_email(id)
