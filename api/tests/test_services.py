# api/tests/test_services.py
from __future__ import annotations

import pytest

from conftest import body_of, fail, ok

from erp_console.errors import ErpApiError
from erp_console.models import CancelIn, DebtReconciliationIn, LoginIn, StockTransactionIn


def test_list_is_cached_until_a_mutation(console, backend, logged_in):
    backend.on("GET", "/products", ok([{"id": 1}]))
    backend.on("POST", "/products", ok({"id": 2}))

    console.products.list({"page": 1})
    console.products.list({"page": 1})
    assert backend.count("GET", "/products") == 1

    body = console.products.create({"productName": "Urê"})
    assert body["message"] == "Tạo sản phẩm thành công!"

    console.products.list({"page": 1})
    assert backend.count("GET", "/products") == 2


def test_backend_message_wins_over_default(console, backend, logged_in):
    backend.on("PUT", "/warehouses/3", ok({"id": 3}, message="Đã lưu kho"))
    assert console.warehouses.update(3, {"warehouseName": "Kho A"})["message"] == "Đã lưu kho"


def test_update_marks_only_that_detail_stale(console, backend, logged_in):
    backend.on("GET", "/customers/1", ok({"id": 1}))
    backend.on("GET", "/customers/2", ok({"id": 2}))
    backend.on("PUT", "/customers/1", ok({"id": 1}))

    console.customers.get(1)
    console.customers.get(2)
    console.customers.update(1, {"notes": "VIP"})
    console.customers.get(1)
    console.customers.get(2)

    assert backend.count("GET", "/customers/1") == 2
    assert backend.count("GET", "/customers/2") == 1


def test_failed_mutation_keeps_cache(console, backend, logged_in):
    backend.on("GET", "/categories", ok([]))
    backend.on("DELETE", "/categories/4", fail(409, "Danh mục đang có sản phẩm", "CONFLICT"))

    console.categories.list()
    with pytest.raises(ErpApiError):
        console.categories.delete(4)
    console.categories.list()
    assert backend.count("GET", "/categories") == 1


def test_stock_transaction_posts_to_typed_endpoint(console, backend, logged_in):
    backend.on("GET", "/inventory", ok([]))
    backend.on("POST", "/stock-transactions/transfer", ok({"id": 9, "transactionCode": "CK-0009"}))

    console.inventory.list()
    tx = StockTransactionIn(transactionType="transfer", sourceWarehouseId=1, destinationWarehouseId=2,
                            details=[{"productId": 5, "quantity": 3}])
    body = console.stock_transactions.create_typed("transfer", tx)

    assert body["message"] == "Tạo phiếu chuyển kho thành công!"
    sent = body_of(backend.last("POST", "/stock-transactions/transfer"))
    assert "transactionType" not in sent
    assert sent["sourceWarehouseId"] == 1

    console.inventory.list()
    assert backend.count("GET", "/inventory") == 2


def test_unknown_transaction_type(console):
    with pytest.raises(ValueError):
        console.stock_transactions.create_typed("gift", {})


def test_production_start_reports_export_ticket(console, backend, logged_in):
    backend.on("PUT", "/production-orders/7/start", ok({"id": 7}, meta={"stockTransaction": {"code": "XK-0031"}}))
    body = console.production_orders.start(7)
    assert body["message"] == "Bắt đầu sản xuất thành công! Phiếu xuất kho: XK-0031"
    assert body_of(backend.last("PUT", "/production-orders/7/start")) == {}


def test_production_complete_reports_wastage(console, backend, logged_in):
    backend.on("PUT", "/production-orders/7/complete", ok(
        {"id": 7}, meta={"stockTransaction": {"code": "NK-0032"}, "totalWastage": 1250000},
    ))
    body = console.production_orders.complete(7, {"actualQuantity": 95})
    assert body["message"] == "Hoàn thành sản xuất! Phiếu nhập kho: NK-0032. Hao hụt: 1.250.000 VNĐ"


def test_production_complete_without_wastage(console, backend, logged_in):
    backend.on("PUT", "/production-orders/8/complete", ok({"id": 8}, meta={"stockTransaction": {"code": "NK-0040"}}))
    body = console.production_orders.complete(8, {"actualQuantity": 100})
    assert body["message"] == "Hoàn thành sản xuất thành công! Phiếu nhập kho: NK-0040"


def test_production_create_warns_about_shortages(console, backend, logged_in):
    backend.on("POST", "/production-orders", ok(
        {"id": 10}, warnings={"materialShortages": [{"materialId": 1}, {"materialId": 2}]},
    ))
    body = console.production_orders.create({"bomId": 1, "plannedQuantity": 10})
    assert "thiếu 2 nguyên liệu" in body["message"]


def test_production_cancel_message(console, backend, logged_in):
    backend.on("PUT", "/production-orders/3/cancel", ok({"id": 3}))
    body = console.production_orders.cancel(3, CancelIn(reason="Thiếu nguyên liệu đầu vào"))
    assert body["message"] == "Đã hủy lệnh sản xuất"
    assert body_of(backend.last("PUT", "/production-orders/3/cancel")) == {"reason": "Thiếu nguyên liệu đầu vào"}


def test_bom_estimate_uses_cached_bom(console, backend, logged_in):
    backend.on("GET", "/bom/1", ok({
        "id": 1, "outputQuantity": 10,
        "materials": [{"materialId": 3, "quantity": 2, "material": {"purchasePrice": 1000}}],
    }))
    first = console.boms.estimate(1, 20)
    console.boms.estimate(1, 30)
    assert first["data"]["totalEstimatedCost"] == 4000
    assert backend.count("GET", "/bom/1") == 1


def test_sales_order_create_invalidates_inventory_and_customers(console, backend, logged_in):
    backend.on("GET", "/customers/1", ok({"id": 1}))
    backend.on("POST", "/sales-orders", ok({"id": 1}, warnings={"inventoryShortages": [{"productId": 2}]}))

    console.customers.get(1)
    body = console.sales_orders.create({"customerId": 1})
    console.customers.get(1)

    assert body["message"] == "Tạo đơn hàng thành công! (Có cảnh báo thiếu hàng)"
    assert backend.count("GET", "/customers/1") == 2


def test_reconciliation_is_routed_by_period_type(console, backend, logged_in):
    backend.on("POST", "/debt-reconciliation/quarterly", ok({"id": 5}))
    rec = DebtReconciliationIn(reconciliationType="quarterly", period="2025Q1", customerId=4,
                               reconciliationDate="2025-03-31")
    body = console.debt_reconciliation.create(rec)

    assert body["message"] == "Tạo đối chiếu công nợ quý thành công!"
    assert body_of(backend.last("POST", "/debt-reconciliation/quarterly")) == {
        "period": "2025Q1", "customerId": 4, "reconciliationDate": "2025-03-31",
    }


def test_bulk_delete_vouchers(console, backend, logged_in):
    backend.on("POST", "/payment-vouchers/bulk-delete", ok(None))
    body = console.payment_vouchers.bulk_delete([1, 2, 3])
    assert body["message"] == "Đã xóa 3 phiếu chi thành công!"
    assert body_of(backend.last("POST", "/payment-vouchers/bulk-delete")) == {"ids": [1, 2, 3]}


# -----------------------------------------------------------------------------
# Auth
# -----------------------------------------------------------------------------
def test_login_with_otp_does_not_store_tokens(console, backend, session):
    backend.on("POST", "/auth/login", ok({"requireOTP": True, "email": "admin@example.com"}))
    body = console.auth.login(LoginIn(email="admin@example.com", password="Secret123"))
    assert body["data"]["requireOTP"] is True
    assert not session.is_authenticated


def test_verify_otp_stores_session_and_primes_me(console, backend, session):
    user = {"id": 1, "email": "admin@example.com", "role": {"roleKey": "admin"}}
    backend.on("POST", "/auth/verify-otp", ok({
        "user": user, "tokens": {"accessToken": "a-1", "refreshToken": "r-1"},
    }))
    body = console.auth.verify_otp({"email": "admin@example.com", "code": "123456"})

    assert body["message"] == "Xác thực thành công!"
    assert session.access_token == "a-1"
    assert session.user == user
    assert console.auth.me()["data"] == user
    assert backend.count("GET", "/auth/me") == 0


def test_verify_otp_without_tokens_fails(console, backend, session):
    backend.on("POST", "/auth/verify-otp", ok({"user": {"id": 1}}))
    with pytest.raises(ErpApiError) as exc:
        console.auth.verify_otp({"email": "a@b.vn", "code": "000000"})
    assert exc.value.status_code == 401


def test_direct_login_stores_tokens(console, backend, session):
    backend.on("POST", "/auth/login", ok({
        "user": {"id": 2, "email": "kho@example.com"}, "tokens": {"accessToken": "a-2", "refreshToken": "r-2"},
    }))
    body = console.auth.login({"email": "kho@example.com", "password": "Secret123"})
    assert body["message"] == "Đăng nhập thành công!"
    assert session.refresh_token == "r-2"


def test_logout_clears_session_even_when_backend_fails(console, backend, logged_in, cache):
    cache.set(("products", "list", ()), {"data": []})
    backend.on("POST", "/auth/logout", fail(500, "boom"))

    body = console.auth.logout()

    assert body["message"] == "Đăng xuất thành công!"
    assert not logged_in.is_authenticated
    assert len(cache) == 0


def test_me_is_fetched_once(console, backend, logged_in):
    backend.on("GET", "/auth/me", ok({"id": 1, "email": "admin@example.com", "fullName": "Quản trị"}))
    console.auth.me()
    console.auth.me()
    assert backend.count("GET", "/auth/me") == 1
    assert logged_in.user["fullName"] == "Quản trị"


# -----------------------------------------------------------------------------
# Notifications
# -----------------------------------------------------------------------------
def test_refresh_count_bypasses_cache(console, backend, logged_in):
    backend.on("GET", "/notifications/unread-count", ok({"count": 2}), ok({"count": 5}))
    assert console.notifications.refresh_count() == 2
    assert console.notifications.refresh_count() == 5


def test_mark_all_read_reports_count(console, backend, logged_in):
    backend.on("GET", "/notifications/unread-count", ok({"count": 4}), ok({"count": 0}))
    backend.on("PUT", "/notifications/read-all", ok({"count": 4}))

    console.notifications.unread_count()
    body = console.notifications.mark_all_read()
    assert body["message"] == "Đã đánh dấu 4 thông báo là đã đọc!"
    assert console.notifications.unread_count()["data"] == {"count": 0}
