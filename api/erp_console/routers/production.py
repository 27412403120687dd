# erp_console/routers/production.py
"""
BOM + production orders.

Detail views add the numbers the production screens show:
  GET /production-orders/{id}          -> materialRequirements, shortages
  GET /production-orders/{id}/wastage  -> summary
  POST /bom/{id}/calculate             -> materials for a quantity, computed locally
"""
from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse

from ..calculations import material_requirements, shortages_from_availability, wastage_summary
from ..client import iter_pages
from ..constants import BOM_STATUS_LABELS, PRODUCTION_STATUS_LABELS, label
from ..deps import Console, decorate, get_console, query_params
from ..exports import MEDIA_TYPES, export_production_orders
from ..models import (
    BomIn,
    CalculateMaterialsIn,
    CancelIn,
    CompleteProductionIn,
    NotesIn,
    ProductionOrderIn,
    ProductionOrderUpdate,
    StartProductionIn,
)

router = APIRouter(tags=["production"])


# -----------------------------------------------------------------------------
# BOM
# -----------------------------------------------------------------------------
@router.get("/bom")
def list_boms(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    body = console.boms.list(params)
    if isinstance(body.get("data"), list):
        rows = [{**r, "statusLabel": label(BOM_STATUS_LABELS, r.get("status"))} for r in body["data"]]
        return {**body, "data": rows}
    return body


@router.post("/bom/calculate")
def calculate_materials(payload: CalculateMaterialsIn, console: Console = Depends(get_console)):
    return console.boms.calculate(payload)


@router.get("/bom/product/{product_id}")
def boms_by_product(product_id: int, console: Console = Depends(get_console)):
    return console.boms.by_product(product_id)


@router.get("/bom/{id}")
def get_bom(id: int, console: Console = Depends(get_console)):
    return console.boms.get(id)


@router.post("/bom/{id}/calculate")
def estimate_materials(id: int, payload: CalculateMaterialsIn, console: Console = Depends(get_console)):
    return console.boms.estimate(id, payload.production_quantity)


@router.post("/bom")
def create_bom(payload: BomIn, console: Console = Depends(get_console)):
    return console.boms.create(payload)


@router.put("/bom/{id}")
def update_bom(id: int, payload: BomIn, console: Console = Depends(get_console)):
    return console.boms.update(id, payload)


@router.delete("/bom/{id}")
def delete_bom(id: int, console: Console = Depends(get_console)):
    return console.boms.delete(id)


@router.put("/bom/{id}/approve")
def approve_bom(id: int, payload: Optional[NotesIn] = None, console: Console = Depends(get_console)):
    return console.boms.approve(id, payload.notes if payload else None)


@router.put("/bom/{id}/inactive")
def inactivate_bom(id: int, payload: Optional[Dict[str, Any]] = None, console: Console = Depends(get_console)):
    return console.boms.inactivate(id, (payload or {}).get("reason"))


# -----------------------------------------------------------------------------
# Production orders
# -----------------------------------------------------------------------------
@router.get("/production-orders")
def list_production_orders(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    body = console.production_orders.list(params)
    if isinstance(body.get("data"), list):
        rows = [{**r, "statusLabel": label(PRODUCTION_STATUS_LABELS, r.get("status"))} for r in body["data"]]
        return {**body, "data": rows}
    return body


@router.get("/production-orders/export")
def export_production_orders_file(
    fmt: Literal["xlsx", "csv"] = Query("xlsx", alias="format"),
    params: Dict[str, Any] = Depends(query_params),
    console: Console = Depends(get_console),
):
    params.pop("format", None)
    orders = list(iter_pages(console.client, console.production_orders.path, params))
    path, filename = export_production_orders(orders, console.data_root, fmt)
    return FileResponse(path, media_type=MEDIA_TYPES[fmt], filename=filename)


@router.get("/production-orders/{id}")
def get_production_order(id: int, console: Console = Depends(get_console)):
    body = console.production_orders.get(id)
    order = body.get("data")
    if not isinstance(order, dict):
        return body
    shortages = shortages_from_availability(order)
    return decorate(
        body,
        statusLabel=label(PRODUCTION_STATUS_LABELS, order.get("status")),
        shortages=shortages,
        materialRequirements=material_requirements(order.get("materials") or [], shortages),
    )


@router.get("/production-orders/{id}/wastage")
def production_wastage(id: int, console: Console = Depends(get_console)):
    body = console.production_orders.wastage(id)
    report = body.get("data")
    if not isinstance(report, dict):
        return body
    return decorate(body, summary=wastage_summary(report))


@router.post("/production-orders")
def create_production_order(payload: ProductionOrderIn, console: Console = Depends(get_console)):
    return console.production_orders.create(payload)


@router.put("/production-orders/{id}")
def update_production_order(id: int, payload: ProductionOrderUpdate, console: Console = Depends(get_console)):
    return console.production_orders.update(id, payload)


@router.delete("/production-orders/{id}")
def delete_production_order(id: int, console: Console = Depends(get_console)):
    return console.production_orders.delete(id)


@router.put("/production-orders/{id}/start")
def start_production(
    id: int,
    payload: Optional[StartProductionIn] = None,
    console: Console = Depends(get_console),
):
    return console.production_orders.start(id, payload)


@router.put("/production-orders/{id}/complete")
def complete_production(id: int, payload: CompleteProductionIn, console: Console = Depends(get_console)):
    return console.production_orders.complete(id, payload)


@router.put("/production-orders/{id}/cancel")
def cancel_production(id: int, payload: CancelIn, console: Console = Depends(get_console)):
    return console.production_orders.cancel(id, payload)
