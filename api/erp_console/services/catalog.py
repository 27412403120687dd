# erp_console/services/catalog.py
from __future__ import annotations
from typing import Any, Dict, Optional

from ..cache import freeze
from .base import ResourceService


class ProductService(ResourceService):
    path = "/products"
    key = "products"
    label = "sản phẩm"

    def toggle_status(self, id: Any) -> Dict[str, Any]:
        return self._action(id, "toggle-status", method="PATCH", message="Cập nhật trạng thái sản phẩm thành công!")


class CategoryService(ResourceService):
    path = "/categories"
    key = "categories"
    label = "danh mục"

    def tree(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._query((self.key, "tree", freeze(params)), f"{self.path}/tree", params)

    def _touched(self, id: Any = None):
        # the tree is derived from the same rows as the list
        return super()._touched(id) + ((self.key, "tree"),)
