# erp_console/services/base.py
"""
Base class for the domain services.

A service owns one backend resource (path) and one cache namespace (key).
Queries read through the QueryCache; mutations call the backend and then
mark the affected key prefixes stale:

    create         -> (key, "list")
    update/action  -> (key, "list"), (key, "detail", id)
    delete         -> (key, "list"), (key, "detail", id)
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional, Tuple

from ..cache import Key, QueryCache, freeze
from ..client import ErpClient

logger = logging.getLogger(__name__)


def dump(payload: Any) -> Any:
    """Request models expose payload(); plain dicts go through unchanged."""
    if payload is None:
        return None
    if hasattr(payload, "payload"):
        return payload.payload()
    return payload


def rows(body: Dict[str, Any]) -> list:
    data = body.get("data")
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        # some endpoints nest the page as {data: {items|rows: [...]}}
        for k in ("items", "rows", "data"):
            if isinstance(data.get(k), list):
                return data[k]
    return []


class ResourceService:
    path: str = ""
    key: str = ""
    label: str = ""
    list_stale: Optional[float] = None
    detail_stale: Optional[float] = None

    def __init__(self, client: ErpClient, cache: QueryCache):
        self.client = client
        self.cache = cache

    # =========================================================================
    # Keys
    # =========================================================================

    def all_key(self) -> Key:
        return (self.key,)

    def lists_key(self) -> Key:
        return (self.key, "list")

    def list_key(self, params: Optional[Dict[str, Any]] = None) -> Key:
        return (self.key, "list", freeze(params))

    def detail_key(self, id: Any, *rest: Any) -> Key:
        return (self.key, "detail", id) + tuple(rest)

    def _touched(self, id: Any = None) -> Tuple[Key, ...]:
        if id is None:
            return (self.lists_key(),)
        return (self.lists_key(), self.detail_key(id))

    # =========================================================================
    # Plumbing
    # =========================================================================

    def _query(
        self,
        key: Key,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        stale_time: Optional[float] = None,
    ) -> Dict[str, Any]:
        return self.cache.fetch(key, lambda: self.client.get(path, params), stale_time=stale_time)

    def _mutate(
        self,
        method: str,
        path: str,
        payload: Any = None,
        invalidate: Iterable[Key] = (),
        message: Optional[str] = None,
        files: Any = None,
    ) -> Dict[str, Any]:
        body = self.client.request(method, path, json=dump(payload), files=files)
        for prefix in invalidate:
            self.cache.invalidate(prefix)
        if message and not body.get("message"):
            body["message"] = message
        logger.info("%s %s ok", method, path)
        return body

    def _action(
        self,
        id: Any,
        action: str,
        payload: Any = None,
        method: str = "PUT",
        message: Optional[str] = None,
        also: Iterable[Key] = (),
    ) -> Dict[str, Any]:
        return self._mutate(
            method,
            f"{self.path}/{id}/{action}",
            payload,
            invalidate=self._touched(id) + tuple(also),
            message=message,
        )

    # =========================================================================
    # CRUD
    # =========================================================================

    def list(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._query(self.list_key(params), self.path, params, self.list_stale)

    def get(self, id: Any) -> Dict[str, Any]:
        return self._query(self.detail_key(id), f"{self.path}/{id}", stale_time=self.detail_stale)

    def create(self, payload: Any) -> Dict[str, Any]:
        return self._mutate(
            "POST", self.path, payload,
            invalidate=self._touched(),
            message=f"Tạo {self.label} thành công!",
        )

    def update(self, id: Any, payload: Any) -> Dict[str, Any]:
        return self._mutate(
            "PUT", f"{self.path}/{id}", payload,
            invalidate=self._touched(id),
            message=f"Cập nhật {self.label} thành công!",
        )

    def delete(self, id: Any) -> Dict[str, Any]:
        return self._mutate(
            "DELETE", f"{self.path}/{id}",
            invalidate=self._touched(id),
            message=f"Xóa {self.label} thành công!",
        )
