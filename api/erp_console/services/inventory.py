# erp_console/services/inventory.py
"""
Inventory, warehouses and stock transactions (phiếu nhập/xuất/chuyển/hủy/kiểm kê).

Every stock transaction mutation also marks the whole ("inventory",)
namespace stale: approving a receipt changes on-hand quantities.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional

from ..cache import freeze
from .base import ResourceService

INVENTORY_REFETCH = 60.0
ALERTS_STALE = 30.0

TRANSACTION_MESSAGES = {
    "import": "Tạo phiếu nhập kho thành công!",
    "export": "Tạo phiếu xuất kho thành công!",
    "transfer": "Tạo phiếu chuyển kho thành công!",
    "disposal": "Tạo phiếu xuất hủy thành công!",
    "stocktake": "Tạo phiếu kiểm kê thành công!",
}


class InventoryService(ResourceService):
    path = "/inventory"
    key = "inventory"
    label = "tồn kho"
    list_stale = INVENTORY_REFETCH

    def by_warehouse(self, warehouse_id: Any, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._query(
            (self.key, "warehouse", warehouse_id, freeze(params)),
            f"{self.path}/warehouse/{warehouse_id}", params, INVENTORY_REFETCH,
        )

    def by_product(self, product_id: Any) -> Dict[str, Any]:
        return self._query((self.key, "product", product_id), f"{self.path}/product/{product_id}", stale_time=INVENTORY_REFETCH)

    def alerts(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._query((self.key, "alerts", freeze(params)), f"{self.path}/alerts", params, ALERTS_STALE)

    def low_stock_alerts(self) -> Dict[str, Any]:
        return self._query((self.key, "low-stock-alerts"), f"{self.path}/low-stock-alerts", stale_time=ALERTS_STALE)

    def stats(self) -> Dict[str, Any]:
        return self._query((self.key, "stats"), f"{self.path}/stats")

    def value_report(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._query((self.key, "value-report", freeze(params)), f"{self.path}/value-report", params)

    def check(self, items: List[Dict[str, Any]]) -> Dict[str, Any]:
        # availability check is a read even though it is a POST; never cached
        return self.client.post(f"{self.path}/check", {"items": items})

    def adjust(self, payload: Any) -> Dict[str, Any]:
        return self._mutate("POST", f"{self.path}/adjust", payload,
                            invalidate=[self.all_key()], message="Điều chỉnh tồn kho thành công!")

    def update_stock(self, payload: Any) -> Dict[str, Any]:
        return self._mutate("PUT", f"{self.path}/update", payload,
                            invalidate=[self.all_key()], message="Cập nhật tồn kho thành công!")

    def reserve(self, payload: Any) -> Dict[str, Any]:
        return self._mutate("POST", f"{self.path}/reserve", payload,
                            invalidate=[self.all_key()], message="Đặt giữ hàng thành công!")

    def release_reserved(self, payload: Any) -> Dict[str, Any]:
        return self._mutate("POST", f"{self.path}/release-reserved", payload,
                            invalidate=[self.all_key()], message="Hủy đặt giữ hàng thành công!")


class WarehouseService(ResourceService):
    path = "/warehouses"
    key = "warehouses"
    label = "kho"


class StockTransactionService(ResourceService):
    path = "/stock-transactions"
    key = "stock-transactions"
    label = "phiếu kho"

    def _touched(self, id: Any = None):
        return super()._touched(id) + (("inventory",),)

    def create_typed(self, transaction_type: str, payload: Any) -> Dict[str, Any]:
        if transaction_type not in TRANSACTION_MESSAGES:
            raise ValueError(f"unknown transaction type: {transaction_type}")
        return self._mutate(
            "POST", f"{self.path}/{transaction_type}", payload,
            invalidate=self._touched(),
            message=TRANSACTION_MESSAGES[transaction_type],
        )

    def approve(self, id: Any, notes: Optional[str] = None) -> Dict[str, Any]:
        return self._action(id, "approve", {"notes": notes} if notes else None, message="Phê duyệt phiếu thành công!")

    def cancel(self, id: Any, reason: Optional[str] = None) -> Dict[str, Any]:
        return self._action(id, "cancel", {"reason": reason} if reason else None, message="Hủy phiếu thành công!")
