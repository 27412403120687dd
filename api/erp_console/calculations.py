# erp_console/calculations.py
"""
Display arithmetic on top of backend JSON.

Nothing here is authoritative: stock, debt, wastage and salary figures are
computed by the ERP backend. These helpers only derive the numbers the
console shows next to them (totals, percentages, bands).
"""
from __future__ import annotations

from datetime import datetime, time
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .constants import (
    COMMISSION_RATE,
    LATE_THRESHOLD_MINUTES,
    MATERIAL_TYPE_LABELS,
    OVERTIME_RATE,
    STANDARD_CHECK_IN,
    STANDARD_HOURS,
    STANDARD_WORK_DAYS,
    label,
)
from .errors import ValidationFailed

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


def _d(value: Any) -> Decimal:
    # backend DECIMAL columns arrive as strings ("12.50")
    if value is None or value == "":
        return ZERO
    try:
        d = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return ZERO
    return d if d.is_finite() else ZERO


def _out(value: Decimal, places: Decimal = CENT) -> float:
    return float(value.quantize(places, rounding=ROUND_HALF_UP))


def _get(row: Mapping[str, Any], *names: str, default: Any = None) -> Any:
    for n in names:
        if n in row and row[n] is not None:
            return row[n]
    return default


def percentage(part: Any, whole: Any) -> float:
    whole_d = _d(whole)
    if whole_d == 0:
        return 0.0
    return _out(_d(part) / whole_d * HUNDRED)


# ---------------------------------------------------------------------------
# Sales
# ---------------------------------------------------------------------------

def order_summary(items: Iterable[Mapping[str, Any]], shipping_fee: Any = 0) -> Dict[str, Any]:
    """
    Cart totals for a sales order.

    Per line: subtotal = unitPrice * quantity, discount = subtotal * discountPercent / 100,
    tax = (subtotal - discount) * taxRate / 100.
    total = sum(subtotal) - sum(discount) + sum(tax) + shipping.
    """
    subtotal = discount = tax = ZERO
    item_count = ZERO
    lines: List[Dict[str, Any]] = []
    for item in items:
        qty = _d(_get(item, "quantity"))
        price = _d(_get(item, "unitPrice", "unit_price"))
        line_sub = price * qty
        line_disc = line_sub * _d(_get(item, "discountPercent", "discount_percent")) / HUNDRED
        line_tax = (line_sub - line_disc) * _d(_get(item, "taxRate", "tax_rate")) / HUNDRED
        subtotal += line_sub
        discount += line_disc
        tax += line_tax
        item_count += qty
        lines.append({
            "productId": _get(item, "productId", "product_id"),
            "subtotal": _out(line_sub),
            "discount": _out(line_disc),
            "tax": _out(line_tax),
            "total": _out(line_sub - line_disc + line_tax),
        })
    shipping = _d(shipping_fee)
    total = subtotal - discount + tax + shipping
    return {
        "subtotal": _out(subtotal),
        "discount": _out(discount),
        "tax": _out(tax),
        "shipping": _out(shipping),
        "total": _out(total),
        "itemCount": _out(item_count, Decimal("0.001")),
        "lines": lines,
    }


def credit_check(customer: Optional[Mapping[str, Any]], order_total: Any, paid_amount: Any = 0) -> Dict[str, Any]:
    debt_amount = _d(order_total) - _d(paid_amount)
    if not customer:
        return {
            "debtAmount": _out(debt_amount),
            "availableCredit": 0.0,
            "canUseCredit": False,
            "willExceedLimit": False,
            "message": None,
        }
    limit = _d(_get(customer, "creditLimit", "credit_limit"))
    current = _d(_get(customer, "currentDebt", "current_debt"))
    available = max(ZERO, limit - current)
    exceed = debt_amount > available
    return {
        "debtAmount": _out(debt_amount),
        "availableCredit": _out(available),
        "canUseCredit": limit > 0,
        "willExceedLimit": exceed,
        "message": "Số nợ của đơn hàng vượt quá hạn mức công nợ còn lại" if exceed else None,
    }


DEBT_STATUS_LABELS = {
    "safe": "An toàn",
    "warning": "Cảnh báo",
    "over_limit": "Vượt hạn",
}


def debt_indicator(current_debt: Any, credit_limit: Any) -> Dict[str, Any]:
    limit = _d(credit_limit)
    current = _d(current_debt)
    pct = (current / limit * HUNDRED) if limit > 0 else ZERO
    if pct >= 100:
        status = "over_limit"
    elif pct >= 80:
        status = "warning"
    else:
        status = "safe"
    return {
        "currentDebt": _out(current),
        "creditLimit": _out(limit),
        "percentage": _out(pct, Decimal("0.1")),
        "availableCredit": _out(max(ZERO, limit - current)),
        "status": status,
        "label": DEBT_STATUS_LABELS[status],
    }


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------

def stock_level(current: Any, minimum: Any, reserved: Any = 0) -> Dict[str, Any]:
    available = _d(current) - _d(reserved)
    min_d = _d(minimum)
    pct = (available / min_d * HUNDRED) if min_d > 0 else HUNDRED
    if pct >= 100:
        level = "green"
    elif pct >= 50:
        level = "yellow"
    elif pct >= 25:
        level = "orange"
    else:
        level = "red"
    return {
        "available": _out(available, Decimal("0.001")),
        "percentage": _out(pct),
        "level": level,
    }


# ---------------------------------------------------------------------------
# Production
# ---------------------------------------------------------------------------

def bom_materials(bom: Mapping[str, Any], production_quantity: Any) -> Dict[str, Any]:
    """
    Materials needed to produce production_quantity from one BOM.

    batchCount = productionQuantity / outputQuantity (per batch);
    each material's quantity per batch is multiplied by batchCount.
    """
    qty = _d(production_quantity)
    if qty <= 0:
        raise ValidationFailed("Vui lòng nhập số lượng sản xuất hợp lệ!")
    per_batch = _d(_get(bom, "outputQuantity", "output_quantity"))
    if per_batch <= 0:
        raise ValidationFailed("Sản lượng mỗi mẻ của BOM không hợp lệ")
    batches = qty / per_batch

    materials: List[Dict[str, Any]] = []
    total_cost = ZERO
    for m in bom.get("materials") or []:
        product = m.get("material") or {}
        base = _d(m.get("quantity"))
        needed = base * batches
        price = _d(_get(product, "purchasePrice", "purchase_price"))
        cost = needed * price
        total_cost += cost
        materials.append({
            "materialId": _get(m, "materialId", "material_id"),
            "materialName": _get(product, "productName", "product_name", default=""),
            "materialSku": product.get("sku", ""),
            "materialType": _get(m, "materialType", "material_type"),
            "unit": m.get("unit") or product.get("unit", ""),
            "baseQuantityPerBatch": _out(base, Decimal("0.001")),
            "totalQuantityNeeded": _out(needed, Decimal("0.001")),
            "unitPrice": _out(price),
            "estimatedCost": _out(cost),
        })

    finished = bom.get("finishedProduct") or {}
    return {
        "bomId": bom.get("id"),
        "bomCode": bom.get("bomCode"),
        "finishedProduct": {
            "id": finished.get("id", bom.get("finishedProductId")),
            "name": finished.get("productName", ""),
            "unit": finished.get("unit", ""),
        },
        "productionQuantity": _out(qty, Decimal("0.001")),
        "outputQuantityPerBatch": _out(per_batch, Decimal("0.001")),
        "batchCount": _out(batches, Decimal("0.0001")),
        "efficiencyRate": _out(_d(bom.get("efficiencyRate", 100))),
        "materials": materials,
        "totalEstimatedCost": _out(total_cost),
        "costPerUnit": _out(total_cost / qty),
    }


def shortages_from_availability(order: Mapping[str, Any]) -> List[Dict[str, Any]]:
    avail = order.get("materialAvailability") or {}
    out = []
    for item in avail.get("missingItems") or []:
        out.append({
            "materialId": item.get("materialId"),
            "materialName": item.get("materialName"),
            "required": item.get("required"),
            "available": item.get("available"),
            "shortage": item.get("missing"),
            "unit": item.get("unit"),
        })
    return out


def material_requirements(
    materials: Iterable[Mapping[str, Any]],
    shortages: Iterable[Mapping[str, Any]] = (),
) -> Dict[str, Any]:
    """Group production-order materials by type with planned cost and shortage flags."""
    short_by_id = {s.get("materialId"): s for s in shortages}
    groups: Dict[str, Dict[str, Any]] = {}
    grand = ZERO
    for m in materials:
        mtype = _get(m, "materialType", "material_type", default="raw_material")
        planned = _d(_get(m, "plannedQuantity", "planned_quantity"))
        price = _d(_get(m, "unitPrice", "unit_price"))
        cost = planned * price
        grand += cost
        shortage = short_by_id.get(_get(m, "materialId", "material_id"))
        group = groups.setdefault(mtype, {
            "materialType": mtype,
            "title": label(MATERIAL_TYPE_LABELS, mtype),
            "rows": [],
            "totalCost": ZERO,
        })
        group["totalCost"] += cost
        group["rows"].append({
            "materialId": _get(m, "materialId", "material_id"),
            "materialName": (m.get("material") or {}).get("productName") or f"Material #{_get(m, 'materialId', 'material_id')}",
            "unit": (m.get("material") or {}).get("unit", ""),
            "plannedQuantity": _out(planned, Decimal("0.001")),
            "actualQuantity": _out(_d(_get(m, "actualQuantity", "actual_quantity")), Decimal("0.001")),
            "wastage": _out(_d(m.get("wastage")), Decimal("0.001")),
            "unitPrice": _out(price),
            "plannedCost": _out(cost),
            "isShortage": shortage is not None,
            "shortage": shortage.get("shortage") if shortage else None,
        })
    ordered = [groups[k] for k in ("raw_material", "packaging") if k in groups]
    ordered += [g for k, g in groups.items() if k not in ("raw_material", "packaging")]
    for g in ordered:
        g["totalCost"] = _out(g["totalCost"])
    return {
        "groups": ordered,
        "totalCost": _out(grand),
        "hasShortages": bool(short_by_id),
        "shortageCount": len(short_by_id),
    }


def wastage_summary(report: Mapping[str, Any]) -> Dict[str, Any]:
    """Efficiency band, quantity difference and per-material wastage severity."""
    finished = report.get("finishedProduct")
    finished = finished if isinstance(finished, dict) else {}
    planned = _d(_get(report, "plannedQuantity", default=finished.get("plannedQuantity")))
    actual = _d(_get(report, "actualQuantity", default=finished.get("actualQuantity")))
    if report.get("efficiencyRate") is not None:
        efficiency = _d(report["efficiencyRate"])
    else:
        efficiency = (actual / planned * HUNDRED) if planned > 0 else ZERO

    if efficiency >= 95:
        band = "good"
    elif efficiency >= 90:
        band = "fair"
    else:
        band = "poor"

    rows = []
    total_value = ZERO
    for m in report.get("materials") or []:
        m_planned = _d(m.get("plannedQuantity"))
        m_actual = _d(m.get("actualQuantity"))
        wastage = _d(m["wastage"]) if m.get("wastage") is not None else m_actual - m_planned
        if m.get("wastagePercentage") is not None:
            pct = _d(m["wastagePercentage"])
        else:
            pct = (wastage / m_planned * HUNDRED) if m_planned > 0 else ZERO
        value = _d(m["wastageValue"]) if m.get("wastageValue") is not None else wastage * _d(m.get("unitPrice"))
        total_value += value
        if pct > 10:
            severity = "high"
        elif pct > 5:
            severity = "medium"
        else:
            severity = "low"
        rows.append({
            "materialId": m.get("materialId"),
            "materialName": m.get("materialName"),
            "wastage": _out(wastage, Decimal("0.001")),
            "wastagePercentage": _out(pct),
            "wastageValue": _out(value),
            "severity": severity,
        })

    reported_total = _get(report, "totalWastageValue", "totalWastageCost")
    total = _d(reported_total) if reported_total is not None else total_value
    return {
        "efficiencyRate": _out(efficiency),
        "efficiencyBand": band,
        "quantityDifference": _out(actual - planned, Decimal("0.001")),
        "totalWastageValue": _out(total),
        "hasWastage": total > 0,
        "materials": rows,
    }


# ---------------------------------------------------------------------------
# Finance
# ---------------------------------------------------------------------------

def reconciliation_check(rec: Mapping[str, Any]) -> Dict[str, Any]:
    """closing = opening + transactions - payment - return - adjustment"""
    expected = (
        _d(rec.get("openingBalance"))
        + _d(rec.get("transactionsAmount"))
        - _d(rec.get("paymentAmount"))
        - _d(rec.get("returnAmount"))
        - _d(rec.get("adjustmentAmount"))
    )
    reported = _d(rec.get("closingBalance"))
    diff = reported - expected
    return {
        "expectedClosingBalance": _out(expected),
        "closingBalance": _out(reported),
        "difference": _out(diff),
        "matches": abs(diff) < CENT,
    }


# ---------------------------------------------------------------------------
# HR
# ---------------------------------------------------------------------------

SALARY_ADDITIONS = ("basicSalary", "allowance", "overtimePay", "bonus", "commission")
SALARY_SUBTRACTIONS = ("deduction", "advance")


def salary_total(components: Mapping[str, Any]) -> float:
    total = sum((_d(components.get(k)) for k in SALARY_ADDITIONS), ZERO)
    total -= sum((_d(components.get(k)) for k in SALARY_SUBTRACTIONS), ZERO)
    return _out(total)


def estimate_overtime_pay(basic_salary: Any, overtime_hours: Any) -> float:
    hourly = _d(basic_salary) / STANDARD_WORK_DAYS / STANDARD_HOURS
    return _out(hourly * Decimal(str(OVERTIME_RATE)) * _d(overtime_hours))


def estimate_commission(total_sales: Any) -> float:
    return _out(_d(total_sales) * Decimal(str(COMMISSION_RATE)))


def _parse_time(value: Any) -> Optional[time]:
    if not value:
        return None
    text = str(value)
    try:
        if "T" in text:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).time()
        return time.fromisoformat(text)
    except ValueError:
        return None


def _minutes(t: time) -> float:
    return t.hour * 60 + t.minute + t.second / 60


def attendance_flags(record: Mapping[str, Any], standard_check_in: str = STANDARD_CHECK_IN) -> Dict[str, Any]:
    check_in = _parse_time(_get(record, "check_in_time", "checkInTime"))
    check_out = _parse_time(_get(record, "check_out_time", "checkOutTime"))
    standard = time.fromisoformat(standard_check_in)

    late_minutes = 0.0
    if check_in is not None:
        late_minutes = max(0.0, _minutes(check_in) - _minutes(standard))

    work_hours = _get(record, "work_hours", "workHours")
    if work_hours is not None:
        hours = _d(work_hours)
    elif check_in is not None and check_out is not None:
        hours = max(ZERO, Decimal(str((_minutes(check_out) - _minutes(check_in)) / 60)))
    else:
        hours = ZERO

    return {
        "isLate": late_minutes > LATE_THRESHOLD_MINUTES,
        "lateMinutes": round(late_minutes),
        "workHours": _out(hours),
        "overtimeHours": _out(max(ZERO, hours - STANDARD_HOURS)),
        "hasCheckedIn": check_in is not None,
        "hasCheckedOut": check_out is not None,
    }
