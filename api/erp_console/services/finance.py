# erp_console/services/finance.py
"""
Phiếu thu (payment receipts), phiếu chi (payment vouchers) and debt
reconciliation. Print/PDF/export endpoints return binary content and are
never cached.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple

from ..cache import freeze
from .base import ResourceService

Download = Tuple[bytes, str, Optional[str]]

PERIOD_MESSAGES = {
    "monthly": "Tạo đối chiếu công nợ thành công!",
    "quarterly": "Tạo đối chiếu công nợ quý thành công!",
    "yearly": "Tạo đối chiếu công nợ năm thành công!",
}


class _DocumentService(ResourceService):
    def _touched(self, id: Any = None):
        return super()._touched(id) + ((self.key, "statistics"),)

    def statistics(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._query((self.key, "statistics", freeze(params)), f"{self.path}/statistics", params)

    def print(self, id: Any) -> Download:
        return self.client.download(f"{self.path}/{id}/print")

    def export(self, params: Optional[Dict[str, Any]] = None) -> Download:
        return self.client.download(f"{self.path}/export", params)


class PaymentReceiptService(_DocumentService):
    path = "/payment-receipts"
    key = "payment-receipts"
    label = "phiếu thu"

    def approve(self, id: Any, notes: Optional[str] = None) -> Dict[str, Any]:
        # approval posts the amount against the customer's debt and the order
        return self._action(id, "approve", {"notes": notes} if notes else {},
                            message="Phê duyệt phiếu thu thành công!",
                            also=[("customers",), ("sales-orders",)])


class PaymentVoucherService(_DocumentService):
    path = "/payment-vouchers"
    key = "payment-vouchers"
    label = "phiếu chi"

    def approve(self, id: Any, notes: Optional[str] = None) -> Dict[str, Any]:
        return self._action(id, "approve", {"notes": notes} if notes else {},
                            message="Phê duyệt phiếu chi thành công!",
                            also=[("suppliers",)])

    def bulk_delete(self, ids: List[int]) -> Dict[str, Any]:
        return self._mutate("POST", f"{self.path}/bulk-delete", {"ids": ids},
                            invalidate=self._touched(),
                            message=f"Đã xóa {len(ids)} phiếu chi thành công!")


class DebtReconciliationService(ResourceService):
    path = "/debt-reconciliation"
    key = "debt-reconciliation"
    label = "đối chiếu công nợ"

    def _touched(self, id: Any = None):
        return super()._touched(id) + ((self.key, "statistics"),)

    def statistics(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._query((self.key, "statistics", freeze(params)), f"{self.path}/statistics", params)

    def create(self, payload: Any) -> Dict[str, Any]:
        data = payload.payload() if hasattr(payload, "payload") else dict(payload)
        period_type = data.pop("reconciliationType", "monthly")
        return self.create_period(period_type, data)

    def create_period(self, period_type: str, payload: Any) -> Dict[str, Any]:
        if period_type not in PERIOD_MESSAGES:
            raise ValueError(f"unknown reconciliation type: {period_type}")
        return self._mutate("POST", f"{self.path}/{period_type}", payload,
                            invalidate=self._touched(), message=PERIOD_MESSAGES[period_type])

    def confirm(self, id: Any, payload: Any) -> Dict[str, Any]:
        return self._action(id, "confirm", payload, message="Xác nhận đối chiếu thành công!",
                            also=[("customers",)])

    def dispute(self, id: Any, payload: Any) -> Dict[str, Any]:
        return self._action(id, "dispute", payload, message="Đã ghi nhận tranh chấp!")

    def send_email(self, id: Any, payload: Any) -> Dict[str, Any]:
        return self._mutate("POST", f"{self.path}/{id}/send-email", payload,
                            message="Đã gửi email đối chiếu!")

    def pdf(self, id: Any) -> Download:
        return self.client.download(f"{self.path}/{id}/pdf")
