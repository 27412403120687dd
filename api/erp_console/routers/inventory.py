# erp_console/routers/inventory.py
"""
Inventory (tồn kho), warehouses and stock transactions.
Inventory rows carry a stockLevel band computed from quantity, reservedQuantity
and the product's minStockLevel.
"""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Body, Depends

from ..calculations import stock_level
from ..constants import TRANSACTION_STATUS_LABELS, TRANSACTION_TYPE_LABELS, label
from ..deps import Console, get_console, query_params
from ..models import (
    CancelIn,
    InventoryAdjustIn,
    NotesIn,
    ReserveIn,
    StockTransactionIn,
    WarehouseIn,
)

router = APIRouter(tags=["inventory"])

TransactionType = Literal["import", "export", "transfer", "disposal", "stocktake"]


def _with_level(row: Dict[str, Any]) -> Dict[str, Any]:
    product = row.get("product") or {}
    minimum = row.get("minStockLevel", product.get("minStockLevel"))
    return {
        **row,
        "stockLevel": stock_level(row.get("quantity"), minimum, row.get("reservedQuantity")),
    }


def _with_levels(body: Dict[str, Any]) -> Dict[str, Any]:
    data = body.get("data")
    if isinstance(data, list):
        return {**body, "data": [_with_level(r) for r in data]}
    return body


# -----------------------------------------------------------------------------
# Inventory
# -----------------------------------------------------------------------------
@router.get("/inventory")
def list_inventory(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return _with_levels(console.inventory.list(params))


@router.get("/inventory/warehouse/{warehouse_id}")
def inventory_by_warehouse(
    warehouse_id: int,
    params: Dict[str, Any] = Depends(query_params),
    console: Console = Depends(get_console),
):
    return _with_levels(console.inventory.by_warehouse(warehouse_id, params))


@router.get("/inventory/product/{product_id}")
def inventory_by_product(product_id: int, console: Console = Depends(get_console)):
    return _with_levels(console.inventory.by_product(product_id))


@router.get("/inventory/alerts")
def inventory_alerts(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return console.inventory.alerts(params)


@router.get("/inventory/low-stock-alerts")
def low_stock_alerts(console: Console = Depends(get_console)):
    return console.inventory.low_stock_alerts()


@router.get("/inventory/stats")
def inventory_stats(console: Console = Depends(get_console)):
    return console.inventory.stats()


@router.get("/inventory/value-report")
def inventory_value_report(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return console.inventory.value_report(params)


@router.post("/inventory/check")
def check_inventory(items: List[Dict[str, Any]] = Body(..., embed=True), console: Console = Depends(get_console)):
    return console.inventory.check(items)


@router.post("/inventory/adjust")
def adjust_inventory(payload: InventoryAdjustIn, console: Console = Depends(get_console)):
    return console.inventory.adjust(payload)


@router.put("/inventory/update")
def update_inventory(payload: Dict[str, Any] = Body(...), console: Console = Depends(get_console)):
    return console.inventory.update_stock(payload)


@router.post("/inventory/reserve")
def reserve_stock(payload: ReserveIn, console: Console = Depends(get_console)):
    return console.inventory.reserve(payload)


@router.post("/inventory/release-reserved")
def release_reserved(payload: ReserveIn, console: Console = Depends(get_console)):
    return console.inventory.release_reserved(payload)


# -----------------------------------------------------------------------------
# Warehouses
# -----------------------------------------------------------------------------
@router.get("/warehouses")
def list_warehouses(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return console.warehouses.list(params)


@router.get("/warehouses/{id}")
def get_warehouse(id: int, console: Console = Depends(get_console)):
    return console.warehouses.get(id)


@router.post("/warehouses")
def create_warehouse(payload: WarehouseIn, console: Console = Depends(get_console)):
    return console.warehouses.create(payload)


@router.put("/warehouses/{id}")
def update_warehouse(id: int, payload: WarehouseIn, console: Console = Depends(get_console)):
    return console.warehouses.update(id, payload)


@router.delete("/warehouses/{id}")
def delete_warehouse(id: int, console: Console = Depends(get_console)):
    return console.warehouses.delete(id)


# -----------------------------------------------------------------------------
# Stock transactions
# -----------------------------------------------------------------------------
def _transaction_view(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        **row,
        "transactionTypeLabel": label(TRANSACTION_TYPE_LABELS, row.get("transactionType")),
        "statusLabel": label(TRANSACTION_STATUS_LABELS, row.get("status")),
    }


@router.get("/stock-transactions")
def list_stock_transactions(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    body = console.stock_transactions.list(params)
    if isinstance(body.get("data"), list):
        return {**body, "data": [_transaction_view(r) for r in body["data"]]}
    return body


@router.get("/stock-transactions/{id}")
def get_stock_transaction(id: int, console: Console = Depends(get_console)):
    body = console.stock_transactions.get(id)
    if isinstance(body.get("data"), dict):
        return {**body, "data": _transaction_view(body["data"])}
    return body


@router.post("/stock-transactions")
def create_stock_transaction(payload: StockTransactionIn, console: Console = Depends(get_console)):
    return console.stock_transactions.create_typed(payload.transaction_type, payload)


@router.post("/stock-transactions/{transaction_type}")
def create_typed_stock_transaction(
    transaction_type: TransactionType,
    payload: Dict[str, Any] = Body(...),
    console: Console = Depends(get_console),
):
    model = StockTransactionIn.model_validate({**payload, "transactionType": transaction_type})
    return console.stock_transactions.create_typed(transaction_type, model)


@router.put("/stock-transactions/{id}/approve")
def approve_stock_transaction(
    id: int,
    payload: Optional[NotesIn] = None,
    console: Console = Depends(get_console),
):
    return console.stock_transactions.approve(id, payload.notes if payload else None)


@router.put("/stock-transactions/{id}/cancel")
def cancel_stock_transaction(id: int, payload: CancelIn, console: Console = Depends(get_console)):
    return console.stock_transactions.cancel(id, payload.reason)
