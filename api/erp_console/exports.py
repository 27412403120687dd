# erp_console/exports.py
"""
Spreadsheet exports of backend lists.

Column headers are the Vietnamese titles users see in the console. Each export
is written to its own file under CONSOLE_DATA_ROOT/exports/ and served with
a dated download name:

  Lệnh sản xuất -> Lenh_san_xuat_<YYYY-MM-DD>.xlsx
  Sản phẩm      -> San_pham_<YYYY-MM-DD>.xlsx
"""
from __future__ import annotations

import csv
import logging
import uuid
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, List, Literal, Optional, Sequence, Tuple

import pandas as pd
from openpyxl.utils import get_column_letter

from .constants import PRODUCT_TYPE_LABELS, PRODUCTION_STATUS_LABELS, label
from .errors import ValidationFailed
from .formatting import format_date

logger = logging.getLogger(__name__)

EMPTY_EXPORT = "Không có dữ liệu để xuất!"

Format = Literal["xlsx", "csv"]

MEDIA_TYPES = {
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "csv": "text/csv; charset=utf-8",
}

PRODUCTION_ORDER_COLUMNS = [
    ("Mã lệnh", 15),
    ("Sản phẩm", 25),
    ("SKU", 12),
    ("BOM", 12),
    ("Phiên bản BOM", 12),
    ("SL Kế hoạch", 12),
    ("SL Thực tế", 12),
    ("Đơn vị", 10),
    ("Ngày bắt đầu", 15),
    ("Ngày kết thúc", 15),
    ("Trạng thái", 15),
    ("Kho đích", 15),
    ("Ghi chú", 20),
]

PRODUCT_COLUMNS = [
    ("SKU", 15),
    ("Tên sản phẩm", 30),
    ("Loại sản phẩm", 15),
    ("Danh mục", 20),
    ("Nhà cung cấp", 20),
    ("Đơn vị", 10),
    ("Barcode", 15),
    ("Giá nhập", 12),
    ("Giá bán lẻ", 12),
    ("Giá bán sỉ", 12),
    ("Giá VIP", 12),
    ("Tồn tối thiểu", 12),
    ("Trạng thái", 15),
]

PRODUCT_STATUS_TITLES = {
    "active": "Hoạt động",
    "inactive": "Tạm ngưng",
    "discontinued": "Ngừng kinh doanh",
}


def _sub(row: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = row.get(name)
    return value if isinstance(value, dict) else {}


def _require_rows(rows: Sequence[Dict[str, Any]]) -> None:
    if not rows:
        raise ValidationFailed(EMPTY_EXPORT)


def production_orders_frame(orders: Sequence[Dict[str, Any]]) -> pd.DataFrame:
    _require_rows(orders)
    records = []
    for o in orders:
        product = _sub(o, "finishedProduct")
        bom = _sub(o, "bom")
        records.append({
            "Mã lệnh": o.get("orderCode", ""),
            "Sản phẩm": product.get("productName", ""),
            "SKU": product.get("sku", ""),
            "BOM": bom.get("bomCode", ""),
            "Phiên bản BOM": bom.get("version") or "1.0",
            "SL Kế hoạch": o.get("plannedQuantity"),
            "SL Thực tế": o.get("actualQuantity") or 0,
            "Đơn vị": product.get("unit", ""),
            "Ngày bắt đầu": format_date(o.get("startDate")),
            "Ngày kết thúc": format_date(o.get("endDate")),
            "Trạng thái": label(PRODUCTION_STATUS_LABELS, o.get("status")),
            "Kho đích": _sub(o, "warehouse").get("warehouseName", ""),
            "Ghi chú": o.get("notes") or "",
        })
    df = pd.DataFrame.from_records(records, columns=[c for c, _ in PRODUCTION_ORDER_COLUMNS])
    for col in ("SL Kế hoạch", "SL Thực tế"):
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0)
    return df


def products_frame(products: Sequence[Dict[str, Any]]) -> pd.DataFrame:
    _require_rows(products)
    records = []
    for p in products:
        records.append({
            "SKU": p.get("sku", ""),
            "Tên sản phẩm": p.get("productName", ""),
            "Loại sản phẩm": label(PRODUCT_TYPE_LABELS, p.get("productType")),
            "Danh mục": _sub(p, "category").get("categoryName", ""),
            "Nhà cung cấp": _sub(p, "supplier").get("supplierName", ""),
            "Đơn vị": p.get("unit", ""),
            "Barcode": p.get("barcode") or "",
            "Giá nhập": p.get("purchasePrice") or 0,
            "Giá bán lẻ": p.get("sellingPriceRetail") or 0,
            "Giá bán sỉ": p.get("sellingPriceWholesale") or 0,
            "Giá VIP": p.get("sellingPriceVip") or 0,
            "Tồn tối thiểu": p.get("minStockLevel") or 0,
            "Trạng thái": PRODUCT_STATUS_TITLES.get(p.get("status"), "Ngừng kinh doanh"),
        })
    df = pd.DataFrame.from_records(records, columns=[c for c, _ in PRODUCT_COLUMNS])
    for col in ("Giá nhập", "Giá bán lẻ", "Giá bán sỉ", "Giá VIP", "Tồn tối thiểu"):
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0)
    return df


def export_filename(stem: str, fmt: Format = "xlsx", today: Optional[date] = None) -> str:
    return f"{stem}_{(today or date.today()).isoformat()}.{fmt}"


def _export_path(data_root: Path, filename: str) -> Path:
    stem, _, ext = filename.rpartition(".")
    return Path(data_root) / "exports" / f"{stem}_{uuid.uuid4().hex[:8]}.{ext}"


def write_frame(
    df: pd.DataFrame,
    path: Path,
    sheet_name: str,
    widths: Optional[Iterable[int]] = None,
    fmt: Format = "xlsx",
) -> Path:
    """Write df as XLSX (openpyxl) or CSV (utf-8-sig so Excel shows Vietnamese correctly)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "csv":
        df.to_csv(path, index=False, encoding="utf-8-sig", quoting=csv.QUOTE_MINIMAL)
    else:
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name=sheet_name, index=False)
            ws = writer.sheets[sheet_name]
            for i, width in enumerate(widths or [], start=1):
                ws.column_dimensions[get_column_letter(i)].width = width
    logger.info("Exported %d rows to %s", len(df), path)
    return path


def export_production_orders(
    orders: List[Dict[str, Any]],
    data_root: Path,
    fmt: Format = "xlsx",
    today: Optional[date] = None,
) -> Tuple[Path, str]:
    """Returns (written file, download name)."""
    df = production_orders_frame(orders)
    filename = export_filename("Lenh_san_xuat", fmt, today)
    path = write_frame(df, _export_path(data_root, filename), "Lệnh sản xuất",
                       [w for _, w in PRODUCTION_ORDER_COLUMNS], fmt)
    return path, filename


def export_products(
    products: List[Dict[str, Any]],
    data_root: Path,
    fmt: Format = "xlsx",
    today: Optional[date] = None,
) -> Tuple[Path, str]:
    df = products_frame(products)
    filename = export_filename("San_pham", fmt, today)
    path = write_frame(df, _export_path(data_root, filename), "Sản phẩm", [w for _, w in PRODUCT_COLUMNS], fmt)
    return path, filename
