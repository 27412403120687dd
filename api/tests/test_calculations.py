# api/tests/test_calculations.py
from __future__ import annotations

import pytest

from erp_console.calculations import (
    attendance_flags,
    bom_materials,
    credit_check,
    debt_indicator,
    estimate_commission,
    estimate_overtime_pay,
    material_requirements,
    order_summary,
    percentage,
    reconciliation_check,
    salary_total,
    shortages_from_availability,
    stock_level,
    wastage_summary,
)
from erp_console.errors import ValidationFailed


def test_order_summary():
    items = [
        {"productId": 1, "unitPrice": 100000, "quantity": 2, "discountPercent": 10, "taxRate": 10},
        {"productId": 2, "unitPrice": "50000", "quantity": 1},
    ]
    s = order_summary(items, shipping_fee=30000)
    assert s["subtotal"] == 250000
    assert s["discount"] == 20000
    assert s["tax"] == 18000
    assert s["shipping"] == 30000
    assert s["total"] == 278000
    assert s["itemCount"] == 3
    assert s["lines"][0] == {"productId": 1, "subtotal": 200000, "discount": 20000, "tax": 18000, "total": 198000}


def test_order_summary_empty_cart():
    s = order_summary([])
    assert s["total"] == 0 and s["lines"] == []


def test_credit_check_exceeding_limit():
    customer = {"creditLimit": "1000000", "currentDebt": "800000"}
    c = credit_check(customer, 278000, 50000)
    assert c["debtAmount"] == 228000
    assert c["availableCredit"] == 200000
    assert c["canUseCredit"] is True
    assert c["willExceedLimit"] is True
    assert c["message"]


def test_credit_check_without_limit():
    c = credit_check({"creditLimit": 0, "currentDebt": 0}, 100, 100)
    assert c["canUseCredit"] is False
    assert c["willExceedLimit"] is False


def test_credit_check_without_customer():
    assert credit_check(None, 500)["availableCredit"] == 0


@pytest.mark.parametrize("debt, limit, status, pct", [
    (100, 1000, "safe", 10.0),
    (800, 1000, "warning", 80.0),
    (1000, 1000, "over_limit", 100.0),
    (1500, 1000, "over_limit", 150.0),
    (100, 0, "safe", 0.0),
])
def test_debt_indicator(debt, limit, status, pct):
    d = debt_indicator(debt, limit)
    assert d["status"] == status
    assert d["percentage"] == pct


def test_debt_indicator_available_never_negative():
    assert debt_indicator(1500, 1000)["availableCredit"] == 0
    assert debt_indicator(1500, 1000)["label"] == "Vượt hạn"


@pytest.mark.parametrize("current, minimum, reserved, level", [
    (20, 20, 0, "green"),
    (10, 20, 0, "yellow"),
    (30, 20, 15, "yellow"),
    (5, 20, 0, "orange"),
    (4, 20, 0, "red"),
    (0, 0, 0, "green"),
])
def test_stock_level(current, minimum, reserved, level):
    assert stock_level(current, minimum, reserved)["level"] == level


def test_stock_level_available():
    assert stock_level("30.5", 20, "10")["available"] == 20.5


BOM = {
    "id": 1,
    "bomCode": "BOM-001",
    "outputQuantity": "10",
    "efficiencyRate": 95,
    "finishedProduct": {"id": 7, "productName": "Phân bón NPK", "unit": "kg"},
    "materials": [
        {
            "materialId": 3,
            "quantity": "2",
            "materialType": "raw_material",
            "unit": "kg",
            "material": {"productName": "Urê", "sku": "NL-01", "purchasePrice": "15000"},
        },
        {
            "materialId": 4,
            "quantity": 1,
            "materialType": "packaging",
            "material": {"productName": "Bao 25kg", "sku": "BB-01", "purchasePrice": 2000, "unit": "cái"},
        },
    ],
}


def test_bom_materials_multiplies_by_batch_count():
    r = bom_materials(BOM, 25)
    assert r["batchCount"] == 2.5
    urea, bag = r["materials"]
    assert urea["totalQuantityNeeded"] == 5.0
    assert urea["estimatedCost"] == 75000
    assert bag["totalQuantityNeeded"] == 2.5
    assert bag["unit"] == "cái"
    assert r["totalEstimatedCost"] == 80000
    assert r["costPerUnit"] == 3200
    assert r["finishedProduct"] == {"id": 7, "name": "Phân bón NPK", "unit": "kg"}


@pytest.mark.parametrize("qty", [0, -5, None, "abc", "NaN", float("inf")])
def test_bom_materials_rejects_bad_quantity(qty):
    with pytest.raises(ValidationFailed) as exc:
        bom_materials(BOM, qty)
    assert exc.value.message == "Vui lòng nhập số lượng sản xuất hợp lệ!"


def test_bom_materials_rejects_bad_output_quantity():
    with pytest.raises(ValidationFailed):
        bom_materials({**BOM, "outputQuantity": 0}, 10)


def test_shortages_from_availability():
    order = {"materialAvailability": {"isAvailable": False, "missingItems": [
        {"materialId": 3, "materialName": "Urê", "required": 5, "available": 3, "missing": 2, "unit": "kg"},
    ]}}
    assert shortages_from_availability(order) == [
        {"materialId": 3, "materialName": "Urê", "required": 5, "available": 3, "shortage": 2, "unit": "kg"},
    ]
    assert shortages_from_availability({}) == []


def test_material_requirements_groups_and_flags_shortages():
    materials = [
        {"materialId": 4, "materialType": "packaging", "plannedQuantity": 10, "unitPrice": 2000},
        {"materialId": 3, "materialType": "raw_material", "plannedQuantity": "5", "unitPrice": "15000",
         "material": {"productName": "Urê", "unit": "kg"}},
    ]
    r = material_requirements(materials, [{"materialId": 3, "shortage": 2}])
    raw, packaging = r["groups"]
    assert raw["title"] == "Nguyên liệu"
    assert raw["totalCost"] == 75000
    assert raw["rows"][0]["isShortage"] is True
    assert raw["rows"][0]["shortage"] == 2
    assert packaging["title"] == "Bao bì"
    assert packaging["rows"][0]["materialName"] == "Material #4"
    assert packaging["rows"][0]["isShortage"] is False
    assert r["totalCost"] == 95000
    assert r["hasShortages"] is True
    assert r["shortageCount"] == 1


def test_wastage_summary():
    report = {
        "plannedQuantity": 100,
        "actualQuantity": 92,
        "materials": [
            {"materialId": 1, "materialName": "A", "plannedQuantity": 50, "actualQuantity": 56, "unitPrice": 1000},
            {"materialId": 2, "materialName": "B", "plannedQuantity": 100, "actualQuantity": 106},
            {"materialId": 3, "materialName": "C", "plannedQuantity": 100, "actualQuantity": 100},
        ],
    }
    s = wastage_summary(report)
    assert s["efficiencyRate"] == 92
    assert s["efficiencyBand"] == "fair"
    assert s["quantityDifference"] == -8
    assert [m["severity"] for m in s["materials"]] == ["high", "medium", "low"]
    assert s["materials"][0]["wastagePercentage"] == 12
    assert s["totalWastageValue"] == 6000
    assert s["hasWastage"] is True


def test_wastage_summary_prefers_server_figures():
    report = {
        "efficiencyRate": "97.5",
        "totalWastageValue": "12345",
        "materials": [{"materialId": 1, "plannedQuantity": 10, "actualQuantity": 10,
                       "wastage": 1, "wastagePercentage": 10, "wastageValue": 500}],
    }
    s = wastage_summary(report)
    assert s["efficiencyBand"] == "good"
    assert s["totalWastageValue"] == 12345
    assert s["materials"][0]["severity"] == "medium"


def test_reconciliation_check():
    rec = {
        "openingBalance": "1000", "transactionsAmount": "500", "paymentAmount": "300",
        "returnAmount": "50", "adjustmentAmount": "0", "closingBalance": "1150",
    }
    assert reconciliation_check(rec)["matches"] is True
    off = reconciliation_check({**rec, "closingBalance": "1200"})
    assert off["matches"] is False
    assert off["difference"] == 50
    assert off["expectedClosingBalance"] == 1150


def test_salary_total():
    salary = {
        "basicSalary": 10000000, "allowance": 1000000, "overtimePay": 500000, "bonus": None,
        "commission": 200000, "deduction": 300000, "advance": 1000000,
    }
    assert salary_total(salary) == 10400000


def test_overtime_and_commission_estimates():
    assert estimate_overtime_pay(10400000, 2) == 150000
    assert estimate_commission(5000000) == 100000


def test_attendance_flags_late_with_overtime():
    f = attendance_flags({"checkInTime": "08:20:00", "checkOutTime": "18:20:00"})
    assert f["isLate"] is True
    assert f["lateMinutes"] == 20
    assert f["workHours"] == 10
    assert f["overtimeHours"] == 2


def test_attendance_flags_within_grace_period():
    f = attendance_flags({"check_in_time": "08:10:00"})
    assert f["isLate"] is False
    assert f["hasCheckedIn"] is True
    assert f["hasCheckedOut"] is False
    assert f["workHours"] == 0


def test_attendance_flags_uses_server_work_hours():
    assert attendance_flags({"checkInTime": "07:55:00", "workHours": "8.5"})["overtimeHours"] == 0.5


def test_percentage():
    assert percentage(1, 3) == 33.33
    assert percentage(5, 0) == 0
