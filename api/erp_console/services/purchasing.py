# erp_console/services/purchasing.py
from __future__ import annotations
from typing import Any, Dict, Optional

from .base import ResourceService


class SupplierService(ResourceService):
    path = "/suppliers"
    key = "suppliers"
    label = "nhà cung cấp"

    def statistics(self, id: Any) -> Dict[str, Any]:
        return self._query(self.detail_key(id, "statistics"), f"{self.path}/{id}/statistics")


class PurchaseOrderService(ResourceService):
    path = "/purchase-orders"
    key = "purchase-orders"
    label = "đơn đặt hàng"

    def approve(self, id: Any, notes: Optional[str] = None) -> Dict[str, Any]:
        return self._action(id, "approve", {"notes": notes} if notes else {},
                            message="Phê duyệt đơn đặt hàng thành công!")

    def cancel(self, id: Any, reason: Optional[str] = None) -> Dict[str, Any]:
        return self._action(id, "cancel", {"reason": reason} if reason else {},
                            message="Hủy đơn đặt hàng thành công!")

    def receive(self, id: Any, payload: Any = None) -> Dict[str, Any]:
        return self._action(id, "receive", payload if payload is not None else {},
                            message="Nhận hàng thành công! Phiếu nhập kho đã được tạo.",
                            also=[("stock-transactions",), ("inventory",)])

    def send_email(self, id: Any) -> Dict[str, Any]:
        return self._action(id, "send-email", {}, message="Gửi email thành công!")
