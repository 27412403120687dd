# erp_console/routers/reports.py
from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Depends, Query

from ..deps import Console, get_console, query_params

router = APIRouter(prefix="/reports", tags=["reports"])

ReportKind = Literal["revenue", "sales", "inventory", "production", "financial"]


# -----------------------------------------------------------------------------
# Dashboard widgets
# -----------------------------------------------------------------------------
@router.get("/dashboard")
def dashboard(console: Console = Depends(get_console)):
    return console.dashboard.overview()


@router.get("/dashboard/metrics")
def dashboard_metrics(console: Console = Depends(get_console)):
    return console.dashboard.metrics()


@router.get("/dashboard/revenue")
def dashboard_revenue(period: Optional[str] = Query(None), console: Console = Depends(get_console)):
    return console.dashboard.revenue(period)


@router.get("/dashboard/top-products")
def dashboard_top_products(limit: int = Query(10, ge=1, le=100), console: Console = Depends(get_console)):
    return console.dashboard.top_products(limit)


@router.get("/dashboard/sales-channels")
def dashboard_sales_channels(console: Console = Depends(get_console)):
    return console.dashboard.sales_channels()


@router.get("/dashboard/inventory-by-type")
def dashboard_inventory_by_type(console: Console = Depends(get_console)):
    return console.dashboard.inventory_by_type()


@router.get("/dashboard/recent-orders")
def dashboard_recent_orders(limit: int = Query(10, ge=1, le=100), console: Console = Depends(get_console)):
    return console.dashboard.recent_orders(limit)


@router.get("/dashboard/overdue-debts")
def dashboard_overdue_debts(console: Console = Depends(get_console)):
    return console.dashboard.overdue_debts()


@router.get("/dashboard/low-stock")
def dashboard_low_stock(console: Console = Depends(get_console)):
    return console.dashboard.low_stock()


# -----------------------------------------------------------------------------
# Reports
# -----------------------------------------------------------------------------
@router.get("/{kind}")
def report(kind: ReportKind, params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return console.reports.report(kind, params)
