# erp_console/routers/catalog.py
"""
Products & categories
"""
from __future__ import annotations

from typing import Any, Dict, Literal

from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse

from ..constants import PACKAGING_TYPE_LABELS, PRODUCT_TYPE_LABELS, label
from ..client import iter_pages
from ..deps import Console, get_console, query_params
from ..exports import MEDIA_TYPES, export_products
from ..models import CategoryIn, ProductIn

router = APIRouter(tags=["catalog"])


def _product_view(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        **row,
        "productTypeLabel": label(PRODUCT_TYPE_LABELS, row.get("productType")),
        "packagingTypeLabel": label(PACKAGING_TYPE_LABELS, row.get("packagingType")),
    }


# -----------------------------------------------------------------------------
# Products
# -----------------------------------------------------------------------------
@router.get("/products")
def list_products(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    body = console.products.list(params)
    rows = body.get("data")
    if isinstance(rows, list):
        return {**body, "data": [_product_view(r) for r in rows]}
    return body


@router.get("/products/export")
def export_products_file(
    fmt: Literal["xlsx", "csv"] = Query("xlsx", alias="format"),
    params: Dict[str, Any] = Depends(query_params),
    console: Console = Depends(get_console),
):
    params.pop("format", None)
    rows = list(iter_pages(console.client, console.products.path, params))
    path, filename = export_products(rows, console.data_root, fmt)
    return FileResponse(path, media_type=MEDIA_TYPES[fmt], filename=filename)


@router.get("/products/{id}")
def get_product(id: int, console: Console = Depends(get_console)):
    body = console.products.get(id)
    if isinstance(body.get("data"), dict):
        return {**body, "data": _product_view(body["data"])}
    return body


@router.post("/products")
def create_product(payload: ProductIn, console: Console = Depends(get_console)):
    return console.products.create(payload)


@router.put("/products/{id}")
def update_product(id: int, payload: ProductIn, console: Console = Depends(get_console)):
    return console.products.update(id, payload)


@router.patch("/products/{id}/toggle-status")
def toggle_product_status(id: int, console: Console = Depends(get_console)):
    return console.products.toggle_status(id)


@router.delete("/products/{id}")
def delete_product(id: int, console: Console = Depends(get_console)):
    return console.products.delete(id)


# -----------------------------------------------------------------------------
# Categories
# -----------------------------------------------------------------------------
@router.get("/categories")
def list_categories(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return console.categories.list(params)


@router.get("/categories/tree")
def category_tree(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return console.categories.tree(params)


@router.get("/categories/{id}")
def get_category(id: int, console: Console = Depends(get_console)):
    return console.categories.get(id)


@router.post("/categories")
def create_category(payload: CategoryIn, console: Console = Depends(get_console)):
    return console.categories.create(payload)


@router.put("/categories/{id}")
def update_category(id: int, payload: CategoryIn, console: Console = Depends(get_console)):
    return console.categories.update(id, payload)


@router.delete("/categories/{id}")
def delete_category(id: int, console: Console = Depends(get_console)):
    return console.categories.delete(id)
