# erp_console/routers/sales.py
"""
Sales orders, customers, deliveries, promotions.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from ..calculations import credit_check, debt_indicator, order_summary
from ..constants import (
    ALLOWED_IMAGE_TYPES,
    CUSTOMER_CLASSIFICATION_LABELS,
    CUSTOMER_TYPE_LABELS,
    DELIVERY_STATUS_LABELS,
    MAX_FILE_SIZE,
    ORDER_STATUS_LABELS,
    PAYMENT_STATUS_LABELS,
    label,
)
from ..deps import Console, decorate, get_console, query_params
from ..errors import ValidationFailed
from ..models import (
    CartIn,
    CreditLimitIn,
    CustomerIn,
    CustomerStatusIn,
    CustomerUpdate,
    DeliveryAssignIn,
    DeliveryIn,
    DeliverySettleIn,
    DeliveryStatusIn,
    NotesIn,
    OrderPaymentIn,
    PromotionIn,
    PromotionUpdate,
    SalesCancelIn,
    SalesOrderIn,
    SalesOrderUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sales"])


def _order_view(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        **row,
        "orderStatusLabel": label(ORDER_STATUS_LABELS, row.get("orderStatus")),
        "paymentStatusLabel": label(PAYMENT_STATUS_LABELS, row.get("paymentStatus")),
    }


# -----------------------------------------------------------------------------
# Sales orders
# -----------------------------------------------------------------------------
@router.get("/sales-orders")
def list_sales_orders(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    body = console.sales_orders.list(params)
    if isinstance(body.get("data"), list):
        return {**body, "data": [_order_view(r) for r in body["data"]]}
    return body


@router.post("/sales-orders/summary")
def cart_summary(cart: CartIn, console: Console = Depends(get_console)):
    """
    Totals for an order being composed. With customerId the customer's credit
    position is checked against the unpaid part of the order.
    """
    items = [i.model_dump(by_alias=True) for i in cart.items]
    summary = order_summary(items, cart.shipping_fee)
    data: Dict[str, Any] = {"summary": summary}
    if cart.customer_id:
        customer = console.customers.get(cart.customer_id).get("data")
        data["creditCheck"] = credit_check(customer, summary["total"], cart.paid_amount)
    return {"success": True, "data": data}


@router.get("/sales-orders/{id}")
def get_sales_order(id: int, console: Console = Depends(get_console)):
    body = console.sales_orders.get(id)
    if isinstance(body.get("data"), dict):
        return {**body, "data": _order_view(body["data"])}
    return body


@router.post("/sales-orders")
def create_sales_order(payload: SalesOrderIn, console: Console = Depends(get_console)):
    return console.sales_orders.create(payload)


@router.put("/sales-orders/{id}")
def update_sales_order(id: int, payload: SalesOrderUpdate, console: Console = Depends(get_console)):
    return console.sales_orders.update(id, payload)


@router.delete("/sales-orders/{id}")
def delete_sales_order(id: int, console: Console = Depends(get_console)):
    return console.sales_orders.delete(id)


@router.put("/sales-orders/{id}/approve")
def approve_sales_order(id: int, payload: Optional[NotesIn] = None, console: Console = Depends(get_console)):
    return console.sales_orders.approve(id, payload.notes if payload else None)


@router.put("/sales-orders/{id}/complete")
def complete_sales_order(id: int, console: Console = Depends(get_console)):
    return console.sales_orders.complete(id)


@router.put("/sales-orders/{id}/cancel")
def cancel_sales_order(id: int, payload: SalesCancelIn, console: Console = Depends(get_console)):
    return console.sales_orders.cancel(id, payload)


@router.post("/sales-orders/{id}/payment")
def pay_sales_order(id: int, payload: OrderPaymentIn, console: Console = Depends(get_console)):
    return console.sales_orders.pay(id, payload)


@router.post("/sales/validate-credit-limit")
def validate_credit_limit(payload: Dict[str, Any], console: Console = Depends(get_console)):
    customer_id = payload.get("customerId", payload.get("customer_id"))
    amount = payload.get("orderAmount", payload.get("order_amount"))
    return console.sales_orders.validate_credit_limit(customer_id, amount)


# -----------------------------------------------------------------------------
# Customers
# -----------------------------------------------------------------------------
def _customer_view(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        **row,
        "customerTypeLabel": label(CUSTOMER_TYPE_LABELS, row.get("customerType")),
        "classificationLabel": label(CUSTOMER_CLASSIFICATION_LABELS, row.get("classification")),
    }


@router.get("/customers")
def list_customers(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    body = console.customers.list(params)
    if isinstance(body.get("data"), list):
        return {**body, "data": [_customer_view(r) for r in body["data"]]}
    return body


@router.get("/customers/overdue-debt")
def overdue_debt(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return console.customers.overdue_debt(params)


@router.get("/customers/{id}")
def get_customer(id: int, console: Console = Depends(get_console)):
    body = console.customers.get(id)
    customer = body.get("data")
    if not isinstance(customer, dict):
        return body
    view = _customer_view(customer)
    view["debtIndicator"] = debt_indicator(customer.get("currentDebt"), customer.get("creditLimit"))
    return {**body, "data": view}


@router.get("/customers/{id}/debt")
def customer_debt(id: int, console: Console = Depends(get_console)):
    return console.customers.debt(id)


@router.get("/customers/{id}/orders")
def customer_orders(id: int, params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return console.customers.orders(id, params)


@router.post("/customers")
def create_customer(payload: CustomerIn, console: Console = Depends(get_console)):
    return console.customers.create(payload)


@router.put("/customers/{id}")
def update_customer(id: int, payload: CustomerUpdate, console: Console = Depends(get_console)):
    return console.customers.update(id, payload)


@router.delete("/customers/{id}")
def delete_customer(id: int, console: Console = Depends(get_console)):
    return console.customers.delete(id)


@router.put("/customers/{id}/credit-limit")
def update_credit_limit(id: int, payload: CreditLimitIn, console: Console = Depends(get_console)):
    return console.customers.update_credit_limit(id, payload)


@router.patch("/customers/{id}/status")
def update_customer_status(id: int, payload: CustomerStatusIn, console: Console = Depends(get_console)):
    return console.customers.update_status(id, payload)


# -----------------------------------------------------------------------------
# Deliveries
# -----------------------------------------------------------------------------
@router.get("/deliveries")
def list_deliveries(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    body = console.deliveries.list(params)
    if isinstance(body.get("data"), list):
        rows = [{**r, "deliveryStatusLabel": label(DELIVERY_STATUS_LABELS, r.get("deliveryStatus"))}
                for r in body["data"]]
        return {**body, "data": rows}
    return body


@router.get("/deliveries/statistics")
def delivery_statistics(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return console.deliveries.statistics(params)


@router.get("/deliveries/{id}")
def get_delivery(id: int, console: Console = Depends(get_console)):
    body = console.deliveries.get(id)
    delivery = body.get("data")
    if not isinstance(delivery, dict):
        return body
    return decorate(body, deliveryStatusLabel=label(DELIVERY_STATUS_LABELS, delivery.get("deliveryStatus")))


@router.post("/deliveries")
def create_delivery(payload: DeliveryIn, console: Console = Depends(get_console)):
    return console.deliveries.create(payload)


@router.put("/deliveries/{id}")
def update_delivery(id: int, payload: DeliveryIn, console: Console = Depends(get_console)):
    return console.deliveries.update(id, payload)


@router.delete("/deliveries/{id}")
def delete_delivery(id: int, console: Console = Depends(get_console)):
    return console.deliveries.delete(id)


@router.put("/deliveries/{id}/status")
def update_delivery_status(id: int, payload: DeliveryStatusIn, console: Console = Depends(get_console)):
    return console.deliveries.update_status(id, payload)


@router.patch("/deliveries/{id}/assign")
def assign_delivery(id: int, payload: DeliveryAssignIn, console: Console = Depends(get_console)):
    return console.deliveries.assign(id, payload)


@router.post("/deliveries/{id}/proof")
async def upload_delivery_proof(id: int, file: UploadFile = File(...), console: Console = Depends(get_console)):
    content = await file.read()
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationFailed("Ảnh chứng minh chỉ hỗ trợ PNG, JPG, WEBP")
    if len(content) > MAX_FILE_SIZE:
        raise ValidationFailed("Ảnh chứng minh tối đa 5MB")
    logger.info("Uploading delivery proof %s (%d bytes) for delivery %s", file.filename, len(content), id)
    return await run_in_threadpool(
        console.deliveries.upload_proof,
        id, file.filename or "proof.jpg", content, file.content_type or "application/octet-stream",
    )


@router.post("/deliveries/{id}/settle")
def settle_delivery(id: int, payload: DeliverySettleIn, console: Console = Depends(get_console)):
    return console.deliveries.settle(id, payload)


# -----------------------------------------------------------------------------
# Promotions
# -----------------------------------------------------------------------------
@router.get("/promotions")
def list_promotions(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return console.promotions.list(params)


@router.get("/promotions/active")
def active_promotions(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return console.promotions.active(params)


@router.get("/promotions/statistics")
def promotion_statistics(console: Console = Depends(get_console)):
    return console.promotions.statistics()


@router.post("/promotions/auto-expire")
def auto_expire_promotions(console: Console = Depends(get_console)):
    return console.promotions.auto_expire()


@router.get("/promotions/{id}")
def get_promotion(id: int, console: Console = Depends(get_console)):
    return console.promotions.get(id)


@router.post("/promotions")
def create_promotion(payload: PromotionIn, console: Console = Depends(get_console)):
    return console.promotions.create(payload)


@router.put("/promotions/{id}")
def update_promotion(id: int, payload: PromotionUpdate, console: Console = Depends(get_console)):
    return console.promotions.update(id, payload)


@router.delete("/promotions/{id}")
def delete_promotion(id: int, console: Console = Depends(get_console)):
    return console.promotions.delete(id)


@router.put("/promotions/{id}/approve")
def approve_promotion(id: int, console: Console = Depends(get_console)):
    return console.promotions.approve(id)


@router.post("/promotions/{id}/apply")
def apply_promotion(id: int, payload: Dict[str, Any], console: Console = Depends(get_console)):
    return console.promotions.apply(id, payload)
