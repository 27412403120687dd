# erp_console/services/hr.py
"""
Payroll (bảng lương) and attendance (chấm công).

Salary figures are computed by the backend from attendance and sales; the
console only triggers calculate/recalculate and shows the result.
"""
from __future__ import annotations
from datetime import date
from typing import Any, Dict, Optional

from ..cache import freeze
from .base import ResourceService

MY_ATTENDANCE_REFETCH = 60.0


class SalaryService(ResourceService):
    path = "/salary"
    key = "salary"
    label = "bảng lương"

    def by_user_month(self, user_id: Any, month: str) -> Dict[str, Any]:
        return self._query((self.key, "user", user_id, month), f"{self.path}/{user_id}/{month}")

    def summary(self, from_month: Optional[str] = None, to_month: Optional[str] = None) -> Dict[str, Any]:
        params = {"fromMonth": from_month, "toMonth": to_month}
        return self._query((self.key, "summary", freeze(params)), f"{self.path}/summary", params)

    def _touched(self, id: Any = None):
        return super()._touched(id) + ((self.key, "summary"), (self.key, "user"))

    def calculate(self, payload: Any) -> Dict[str, Any]:
        return self._mutate("POST", f"{self.path}/calculate", payload,
                            invalidate=self._touched(), message="Tính lương thành công!")

    def recalculate(self, id: Any) -> Dict[str, Any]:
        return self._action(id, "recalculate", method="POST", message="Tính lại lương thành công!")

    def approve(self, id: Any, notes: Optional[str] = None) -> Dict[str, Any]:
        return self._action(id, "approve", {"notes": notes} if notes else {},
                            message="Phê duyệt lương thành công!")

    def pay(self, id: Any, payload: Any) -> Dict[str, Any]:
        # paying creates a payment voucher on the backend
        return self._action(id, "pay", payload, method="POST", message="Thanh toán lương thành công!",
                            also=[("payment-vouchers",)])


class AttendanceService(ResourceService):
    path = "/attendance"
    key = "attendance"
    label = "chấm công"

    def my(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._query((self.key, "my", freeze(params)), f"{self.path}/my", params, MY_ATTENDANCE_REFETCH)

    def today(self, today: Optional[date] = None) -> Dict[str, Any]:
        day = (today or date.today()).isoformat()
        return self.my({"fromDate": day, "toDate": day})

    def statistics(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._query((self.key, "statistics", freeze(params)), f"{self.path}/statistics", params)

    def report(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._query((self.key, "report", freeze(params)), f"{self.path}/report", params)

    def _mine(self):
        return (self.lists_key(), (self.key, "my"))

    def check_in(self, payload: Any = None) -> Dict[str, Any]:
        return self._mutate("POST", f"{self.path}/check-in", payload if payload is not None else {},
                            invalidate=self._mine(), message="Chấm công vào thành công!")

    def check_out(self, payload: Any = None) -> Dict[str, Any]:
        return self._mutate("POST", f"{self.path}/check-out", payload if payload is not None else {},
                            invalidate=self._mine(), message="Chấm công ra thành công!")

    def request_leave(self, payload: Any) -> Dict[str, Any]:
        return self._mutate("POST", f"{self.path}/leave", payload,
                            invalidate=self._mine(), message="Yêu cầu nghỉ phép đã được gửi!")

    def approve_leave(self, id: Any, payload: Any) -> Dict[str, Any]:
        approved = payload.approved if hasattr(payload, "approved") else bool(payload.get("approved"))
        return self._action(id, "approve", payload,
                            message="Đã phê duyệt nghỉ phép!" if approved else "Đã từ chối nghỉ phép!")

    def lock_month(self, month: str) -> Dict[str, Any]:
        return self._mutate("POST", f"{self.path}/lock-month", {"month": month},
                            invalidate=[(self.key, "statistics")], message="Chốt công tháng thành công!")

    def import_file(self, filename: str, content: bytes, content_type: str) -> Dict[str, Any]:
        return self._mutate("POST", f"{self.path}/import", invalidate=[self.all_key()],
                            message="Nhập dữ liệu chấm công thành công!",
                            files={"file": (filename, content, content_type)})
