# erp_console/services/production.py
"""
BOM (công thức sản xuất) and production orders (lệnh sản xuất).

Starting an order makes the backend issue a material export ticket and
completing it issues a finished-goods import ticket; both codes come back in
meta.stockTransaction.code and are surfaced in the success message.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..calculations import bom_materials
from ..formatting import format_number
from .base import ResourceService, dump

logger = logging.getLogger(__name__)


class BomService(ResourceService):
    path = "/bom"
    key = "bom"
    label = "BOM"

    def _touched(self, id: Any = None):
        return super()._touched(id) + ((self.key, "product"),)

    def by_product(self, product_id: Any) -> Dict[str, Any]:
        return self._query((self.key, "product", product_id), f"{self.path}/product/{product_id}")

    def approve(self, id: Any, notes: Optional[str] = None) -> Dict[str, Any]:
        return self._action(id, "approve", {"notes": notes} if notes else {}, message="Phê duyệt BOM thành công!")

    def inactivate(self, id: Any, reason: Optional[str] = None) -> Dict[str, Any]:
        return self._action(id, "inactive", {"reason": reason} if reason else {},
                            message="Đã đặt BOM thành không hoạt động!")

    def calculate(self, payload: Any) -> Dict[str, Any]:
        """Server-side material calculation (POST /bom/calculate)."""
        data = dump(payload)
        key = (self.key, "calculate", data.get("bomId"), data.get("productionQuantity"))
        return self.cache.fetch(key, lambda: self.client.post(f"{self.path}/calculate", data))

    def estimate(self, id: Any, production_quantity: Any) -> Dict[str, Any]:
        """Same numbers as calculate(), computed locally from the cached BOM."""
        bom = self.get(id).get("data") or {}
        return {"success": True, "data": bom_materials(bom, production_quantity)}


class ProductionOrderService(ResourceService):
    path = "/production-orders"
    key = "production-orders"
    label = "lệnh sản xuất"

    def wastage(self, id: Any) -> Dict[str, Any]:
        return self._query(self.detail_key(id, "wastage"), f"{self.path}/{id}/wastage")

    def create(self, payload: Any) -> Dict[str, Any]:
        body = super().create(payload)
        shortages = (body.get("warnings") or {}).get("materialShortages")
        if shortages:
            body["message"] = (
                f"Lệnh sản xuất đã tạo nhưng thiếu {len(shortages)} nguyên liệu. "
                "Vui lòng nhập kho trước khi bắt đầu!"
            )
            logger.warning("production order created with %d material shortages", len(shortages))
        return body

    def start(self, id: Any, payload: Any = None) -> Dict[str, Any]:
        body = self._action(id, "start", payload if payload is not None else {}, also=[("inventory",)])
        code = _transaction_code(body)
        body["message"] = f"Bắt đầu sản xuất thành công! Phiếu xuất kho: {code}"
        return body

    def complete(self, id: Any, payload: Any) -> Dict[str, Any]:
        body = self._action(id, "complete", payload, also=[("inventory",)])
        # _touched(id) already covers (key, "detail", id, "wastage") by prefix
        code = _transaction_code(body)
        total_wastage = (body.get("meta") or {}).get("totalWastage") or 0
        if total_wastage > 0:
            body["message"] = (
                f"Hoàn thành sản xuất! Phiếu nhập kho: {code}. "
                f"Hao hụt: {format_number(total_wastage)} VNĐ"
            )
        else:
            body["message"] = f"Hoàn thành sản xuất thành công! Phiếu nhập kho: {code}"
        return body

    def cancel(self, id: Any, payload: Any) -> Dict[str, Any]:
        body = self._action(id, "cancel", payload)
        body["message"] = "Đã hủy lệnh sản xuất"
        return body


def _transaction_code(body: Dict[str, Any]) -> Optional[str]:
    meta = body.get("meta") or {}
    return (meta.get("stockTransaction") or {}).get("code")
