# api/tests/test_exports.py
from __future__ import annotations

from datetime import date

import pandas as pd
import pytest
from openpyxl import load_workbook

from erp_console.errors import ValidationFailed
from erp_console.exports import (
    EMPTY_EXPORT,
    PRODUCTION_ORDER_COLUMNS,
    export_filename,
    export_production_orders,
    export_products,
    production_orders_frame,
    products_frame,
)

ORDERS = [
    {
        "orderCode": "LSX-0001",
        "finishedProduct": {"productName": "Phân bón NPK", "sku": "TP-01", "unit": "kg"},
        "bom": {"bomCode": "BOM-001", "version": "2.0"},
        "plannedQuantity": "100",
        "actualQuantity": 95,
        "startDate": "2025-01-15",
        "status": "completed",
        "warehouse": {"warehouseName": "Kho thành phẩm"},
    },
    {
        "orderCode": "LSX-0002",
        "finishedProduct": None,
        "plannedQuantity": 50,
        "status": "pending",
    },
]


def test_production_orders_frame():
    df = production_orders_frame(ORDERS)
    assert list(df.columns) == [c for c, _ in PRODUCTION_ORDER_COLUMNS]
    first = df.iloc[0]
    assert first["Mã lệnh"] == "LSX-0001"
    assert first["Phiên bản BOM"] == "2.0"
    assert first["SL Kế hoạch"] == 100
    assert first["Ngày bắt đầu"] == "15/01/2025"
    assert first["Trạng thái"] == "Hoàn thành"
    second = df.iloc[1]
    assert second["Sản phẩm"] == ""
    assert second["Phiên bản BOM"] == "1.0"
    assert second["SL Thực tế"] == 0
    assert second["Trạng thái"] == "Chờ sản xuất"


def test_products_frame_labels():
    df = products_frame([
        {"sku": "NL-01", "productName": "Urê", "productType": "raw_material", "status": "inactive",
         "category": {"categoryName": "Nguyên liệu"}, "purchasePrice": "15000"},
    ])
    row = df.iloc[0]
    assert row["Loại sản phẩm"] == "Nguyên liệu"
    assert row["Danh mục"] == "Nguyên liệu"
    assert row["Trạng thái"] == "Tạm ngưng"
    assert row["Giá nhập"] == 15000
    assert row["Giá VIP"] == 0


@pytest.mark.parametrize("frame", [production_orders_frame, products_frame])
def test_empty_list_cannot_be_exported(frame):
    with pytest.raises(ValidationFailed) as exc:
        frame([])
    assert exc.value.message == EMPTY_EXPORT


def test_export_filename():
    assert export_filename("Lenh_san_xuat", "xlsx", date(2025, 3, 9)) == "Lenh_san_xuat_2025-03-09.xlsx"


def test_xlsx_export(tmp_path):
    path, filename = export_production_orders(ORDERS, tmp_path, today=date(2025, 3, 9))

    assert filename == "Lenh_san_xuat_2025-03-09.xlsx"
    assert path.parent == tmp_path / "exports"
    assert path.name.startswith("Lenh_san_xuat_2025-03-09_")
    ws = load_workbook(path)["Lệnh sản xuất"]
    assert ws["A1"].value == "Mã lệnh"
    assert ws["A2"].value == "LSX-0001"
    assert ws.column_dimensions["B"].width == 25


def test_csv_export_is_excel_friendly(tmp_path):
    path, filename = export_products([{"sku": "BB-01", "productName": "Bao 25kg", "status": "active"}],
                                     tmp_path, fmt="csv", today=date(2025, 3, 9))

    assert filename == "San_pham_2025-03-09.csv"
    assert path.suffix == ".csv"
    assert path.read_bytes().startswith(b"\xef\xbb\xbf")
    df = pd.read_csv(path, encoding="utf-8-sig")
    assert df.loc[0, "Tên sản phẩm"] == "Bao 25kg"
    assert df.loc[0, "Trạng thái"] == "Hoạt động"


def test_exports_on_the_same_day_do_not_share_a_file(tmp_path):
    first, name_a = export_products([{"sku": "BB-01", "productName": "Bao 25kg"}], tmp_path, fmt="csv",
                                    today=date(2025, 3, 9))
    second, name_b = export_products([{"sku": "NL-01", "productName": "Urê"}], tmp_path, fmt="csv",
                                     today=date(2025, 3, 9))

    assert name_a == name_b
    assert first != second
    assert pd.read_csv(first, encoding="utf-8-sig").loc[0, "SKU"] == "BB-01"
    assert pd.read_csv(second, encoding="utf-8-sig").loc[0, "SKU"] == "NL-01"
