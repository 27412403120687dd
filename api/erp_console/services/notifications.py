# erp_console/services/notifications.py
from __future__ import annotations
import logging
from typing import Any, Dict

from .base import ResourceService

logger = logging.getLogger(__name__)

LIST_REFETCH = 30.0
COUNT_REFETCH = 15.0


def _count(body: Dict[str, Any]) -> int:
    data = body.get("data")
    if isinstance(data, dict):
        try:
            return int(data.get("count") or 0)
        except (TypeError, ValueError):
            logger.warning("Unexpected notification count %r", data.get("count"))
            return 0
    if isinstance(data, list):
        return len(data)
    return 0


class NotificationService(ResourceService):
    path = "/notifications"
    key = "notifications"
    label = "thông báo"
    list_stale = LIST_REFETCH

    def unread_key(self):
        return (self.key, "unread")

    def count_key(self):
        return (self.key, "unread-count")

    def _touched(self, id: Any = None):
        return super()._touched(id) + (self.unread_key(), self.count_key())

    def unread(self) -> Dict[str, Any]:
        return self._query(self.unread_key(), f"{self.path}/unread", stale_time=LIST_REFETCH)

    def unread_count(self) -> Dict[str, Any]:
        return self._query(self.count_key(), f"{self.path}/unread-count", stale_time=COUNT_REFETCH)

    def refresh_count(self) -> int:
        """Drop the cached count and fetch it again. Used by the poller."""
        self.cache.invalidate(self.count_key())
        return _count(self.unread_count())

    def mark_read(self, id: Any) -> Dict[str, Any]:
        return self._action(id, "read", {}, message="Đã đánh dấu đã đọc")

    def mark_all_read(self) -> Dict[str, Any]:
        body = self._mutate("PUT", f"{self.path}/read-all", {}, invalidate=self._touched())
        body["message"] = f"Đã đánh dấu {_count(body)} thông báo là đã đọc!"
        return body

    def delete_read(self) -> Dict[str, Any]:
        body = self._mutate("DELETE", f"{self.path}/read", invalidate=self._touched())
        body["message"] = f"Đã xóa {_count(body)} thông báo đã đọc!"
        return body

    def broadcast(self, payload: Any) -> Dict[str, Any]:
        body = self._mutate("POST", f"{self.path}/broadcast", payload, invalidate=self._touched())
        body["message"] = f"Đã gửi thông báo đến {_count(body)} người dùng!"
        return body
