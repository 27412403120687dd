# erp_console/services/reports.py
"""
Dashboard widgets and report pages. All read-only; each widget has its own
stale time so the cheap, fast-moving numbers refresh more often.
"""
from __future__ import annotations
from typing import Any, Dict, Optional

from ..cache import freeze
from .base import ResourceService

METRICS_STALE = 30.0
RECENT_ORDERS_STALE = 15.0
WIDGET_STALE = 5 * 60.0
LOW_STOCK_STALE = 30.0


class DashboardService(ResourceService):
    path = "/reports/dashboard"
    key = "dashboard"
    label = "tổng quan"

    def _widget(self, name: str, stale: float, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._query((self.key, name, freeze(params)), f"{self.path}/{name}", params, stale)

    def overview(self) -> Dict[str, Any]:
        return self._query((self.key, "full"), self.path, stale_time=WIDGET_STALE)

    def metrics(self) -> Dict[str, Any]:
        return self._widget("metrics", METRICS_STALE)

    def revenue(self, period: Optional[str] = None) -> Dict[str, Any]:
        return self._widget("revenue", WIDGET_STALE, {"period": period})

    def top_products(self, limit: int = 10) -> Dict[str, Any]:
        return self._widget("top-products", WIDGET_STALE, {"limit": limit})

    def sales_channels(self) -> Dict[str, Any]:
        return self._widget("sales-channels", WIDGET_STALE)

    def inventory_by_type(self) -> Dict[str, Any]:
        return self._widget("inventory-by-type", WIDGET_STALE)

    def recent_orders(self, limit: int = 10) -> Dict[str, Any]:
        return self._widget("recent-orders", RECENT_ORDERS_STALE, {"limit": limit})

    def overdue_debts(self) -> Dict[str, Any]:
        return self._widget("overdue-debts", METRICS_STALE)

    def low_stock(self) -> Dict[str, Any]:
        return self._query((self.key, "low-stock"), "/inventory/low-stock-alerts", stale_time=LOW_STOCK_STALE)


class ReportService(ResourceService):
    path = "/reports"
    key = "reports"
    label = "báo cáo"

    KINDS = ("revenue", "sales", "inventory", "production", "financial")

    def report(self, kind: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if kind not in self.KINDS:
            raise ValueError(f"unknown report: {kind}")
        return self._query((self.key, kind, freeze(params)), f"{self.path}/{kind}", params)
