# erp_console/services/sales.py
from __future__ import annotations
from typing import Any, Dict, Optional

from ..cache import freeze
from .base import ResourceService


class SalesOrderService(ResourceService):
    path = "/sales-orders"
    key = "sales-orders"
    label = "đơn hàng"

    def create(self, payload: Any) -> Dict[str, Any]:
        body = super().create(payload)
        if (body.get("warnings") or {}).get("inventoryShortages"):
            body["message"] = "Tạo đơn hàng thành công! (Có cảnh báo thiếu hàng)"
        # a new order reserves stock and adds customer debt
        self.cache.invalidate(("inventory",))
        self.cache.invalidate(("customers",))
        return body

    def approve(self, id: Any, notes: Optional[str] = None) -> Dict[str, Any]:
        return self._action(id, "approve", {"notes": notes} if notes else {}, message="Duyệt đơn hàng thành công!")

    def complete(self, id: Any) -> Dict[str, Any]:
        return self._action(id, "complete", {}, message="Hoàn thành đơn hàng thành công!",
                            also=[("inventory",)])

    def cancel(self, id: Any, payload: Any) -> Dict[str, Any]:
        return self._action(id, "cancel", payload, message="Hủy đơn hàng thành công!",
                            also=[("inventory",), ("customers",)])

    def pay(self, id: Any, payload: Any) -> Dict[str, Any]:
        return self._action(id, "payment", payload, method="POST", message="Thanh toán thành công!",
                            also=[("customers",), ("payment-receipts",)])

    def validate_credit_limit(self, customer_id: int, order_amount: float) -> Dict[str, Any]:
        return self.client.post("/sales/validate-credit-limit",
                                {"customer_id": customer_id, "order_amount": order_amount})


class CustomerService(ResourceService):
    path = "/customers"
    key = "customers"
    label = "khách hàng"

    def debt(self, id: Any) -> Dict[str, Any]:
        return self._query(self.detail_key(id, "debt"), f"{self.path}/{id}/debt")

    def orders(self, id: Any, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._query(self.detail_key(id, "orders", freeze(params)), f"{self.path}/{id}/orders", params)

    def overdue_debt(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._query((self.key, "overdue-debt", freeze(params)), f"{self.path}/overdue-debt", params)

    def update_credit_limit(self, id: Any, payload: Any) -> Dict[str, Any]:
        return self._action(id, "credit-limit", payload, message="Cập nhật hạn mức công nợ thành công!")

    def update_status(self, id: Any, payload: Any) -> Dict[str, Any]:
        return self._action(id, "status", payload, method="PATCH",
                            message="Cập nhật trạng thái khách hàng thành công!")


class DeliveryService(ResourceService):
    path = "/deliveries"
    key = "deliveries"
    label = "phiếu giao hàng"

    def _touched(self, id: Any = None):
        return super()._touched(id) + ((self.key, "statistics"),)

    def statistics(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._query((self.key, "statistics", freeze(params)), f"{self.path}/statistics", params)

    def update_status(self, id: Any, payload: Any) -> Dict[str, Any]:
        return self._action(id, "status", payload, message="Cập nhật trạng thái giao hàng thành công!",
                            also=[("sales-orders",)])

    def assign(self, id: Any, payload: Any) -> Dict[str, Any]:
        return self._action(id, "assign", payload, method="PATCH",
                            message="Phân công nhân viên giao hàng thành công!")

    def upload_proof(self, id: Any, filename: str, content: bytes, content_type: str) -> Dict[str, Any]:
        return self._mutate(
            "POST", f"{self.path}/{id}/proof",
            invalidate=self._touched(id),
            message="Tải ảnh chứng minh thành công!",
            files={"proof": (filename, content, content_type)},
        )

    def settle(self, id: Any, payload: Any) -> Dict[str, Any]:
        return self._action(id, "settle", payload, method="POST", message="Quyết toán giao hàng thành công!")


class PromotionService(ResourceService):
    path = "/promotions"
    key = "promotions"
    label = "chương trình khuyến mãi"

    def _touched(self, id: Any = None):
        return super()._touched(id) + ((self.key, "active"), (self.key, "statistics"))

    def active(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._query((self.key, "active", freeze(params)), f"{self.path}/active", params)

    def statistics(self) -> Dict[str, Any]:
        return self._query((self.key, "statistics"), f"{self.path}/statistics")

    def approve(self, id: Any) -> Dict[str, Any]:
        return self._action(id, "approve", {}, message="Phê duyệt chương trình khuyến mãi thành công!")

    def apply(self, id: Any, payload: Any) -> Dict[str, Any]:
        # preview of the discount for an order; nothing changes server-side
        return self.client.post(f"{self.path}/{id}/apply", payload)

    def auto_expire(self) -> Dict[str, Any]:
        return self._mutate("POST", f"{self.path}/auto-expire", invalidate=[self.all_key()],
                            message="Đã cập nhật các chương trình khuyến mãi hết hạn!")
