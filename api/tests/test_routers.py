# api/tests/test_routers.py
from __future__ import annotations

from datetime import date

from conftest import body_of, fail, ok


def test_health(api, logged_in):
    r = api.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["session"] == {"authenticated": True, "user": "admin@example.com"}
    assert body["poller"]["running"] is False
    assert body["cache"] == {"entries": 0, "stale": 0}


def test_session_state(api, logged_in):
    data = api.get("/auth/session").json()["data"]
    assert data["isAuthenticated"] is True
    assert data["roleLabel"] == "Quản trị viên"


def test_session_state_logged_out(api):
    data = api.get("/auth/session").json()["data"]
    assert data == {"isAuthenticated": False, "user": None, "roleLabel": None}


# -----------------------------------------------------------------------------
# Errors
# -----------------------------------------------------------------------------
def test_backend_error_is_passed_through(api, backend, logged_in):
    backend.on("DELETE", "/products/5", fail(409, "Sản phẩm đang được sử dụng", "CONFLICT"))
    r = api.delete("/products/5")
    assert r.status_code == 409
    assert r.json() == {"success": False, "error": {"code": "CONFLICT", "message": "Sản phẩm đang được sử dụng"}}


def test_request_validation_uses_error_envelope(api, backend, logged_in):
    r = api.post("/production-orders", json={"bomId": 1, "plannedQuantity": 10, "startDate": "2000-01-01"})

    assert r.status_code == 422
    error = r.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["message"] == "Ngày bắt đầu không được trong quá khứ"
    assert error["details"] == [{"field": "startDate", "message": "Ngày bắt đầu không được trong quá khứ"}]
    assert backend.count("POST", "/production-orders") == 0


def test_typed_transaction_validation_uses_error_envelope(api, backend, logged_in):
    r = api.post("/stock-transactions/transfer", json={
        "sourceWarehouseId": 1, "destinationWarehouseId": 1, "details": [{"productId": 1, "quantity": 2}],
    })
    assert r.status_code == 422
    assert r.json()["error"]["message"] == "Kho nguồn và kho đích không được trùng nhau"


def test_login_validation(api, backend):
    r = api.post("/auth/login", json={"email": "admin", "password": "Secret123"})
    assert r.status_code == 422
    assert r.json()["error"]["message"] == "Email không hợp lệ"
    assert backend.count("POST", "/auth/login") == 0


# -----------------------------------------------------------------------------
# Production
# -----------------------------------------------------------------------------
ORDER = {
    "id": 7,
    "orderCode": "LSX-0007",
    "status": "pending",
    "materials": [
        {"materialId": 3, "materialType": "raw_material", "plannedQuantity": 5, "unitPrice": 15000,
         "material": {"productName": "Urê", "unit": "kg"}},
        {"materialId": 4, "materialType": "packaging", "plannedQuantity": 10, "unitPrice": 2000},
    ],
    "materialAvailability": {"isAvailable": False, "missingItems": [
        {"materialId": 3, "materialName": "Urê", "required": 5, "available": 3, "missing": 2, "unit": "kg"},
    ]},
}


def test_production_order_detail_is_decorated(api, backend, console, logged_in):
    backend.on("GET", "/production-orders/7", ok(ORDER))

    data = api.get("/production-orders/7").json()["data"]

    assert data["statusLabel"] == "Chờ sản xuất"
    assert data["shortages"][0]["shortage"] == 2
    req = data["materialRequirements"]
    assert req["totalCost"] == 95000
    assert req["hasShortages"] is True
    assert "statusLabel" not in console.cache.peek(("production-orders", "detail", 7))["data"]


def test_wastage_summary(api, backend, logged_in):
    backend.on("GET", "/production-orders/7/wastage", ok({
        "plannedQuantity": 100, "actualQuantity": 92,
        "materials": [{"materialId": 1, "plannedQuantity": 50, "actualQuantity": 56, "unitPrice": 1000}],
    }))
    summary = api.get("/production-orders/7/wastage").json()["data"]["summary"]
    assert summary["efficiencyBand"] == "fair"
    assert summary["totalWastageValue"] == 6000


def test_production_start_message(api, backend, logged_in):
    backend.on("PUT", "/production-orders/7/start", ok({"id": 7}, meta={"stockTransaction": {"code": "XK-0001"}}))
    r = api.put("/production-orders/7/start")
    assert r.json()["message"] == "Bắt đầu sản xuất thành công! Phiếu xuất kho: XK-0001"


def test_production_orders_export(api, backend, console, logged_in):
    backend.on("GET", "/production-orders", ok(
        [{"orderCode": "LSX-0001", "plannedQuantity": 10, "status": "completed"}],
        meta={"page": 1, "totalPages": 1},
    ))

    r = api.get("/production-orders/export", params={"format": "csv", "status": "completed"})

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    name = f"Lenh_san_xuat_{date.today().isoformat()}.csv"
    assert name in r.headers["content-disposition"]
    assert "LSX-0001" in r.content.decode("utf-8-sig")
    assert len(list((console.data_root / "exports").glob("Lenh_san_xuat_*.csv"))) == 1
    params = backend.last("GET", "/production-orders").url.params
    assert params["status"] == "completed"
    assert "format" not in params


def test_empty_export_is_rejected(api, backend, logged_in):
    backend.on("GET", "/production-orders", ok([], meta={"page": 1, "totalPages": 1}))
    r = api.get("/production-orders/export")
    assert r.status_code == 422
    assert r.json()["error"]["message"] == "Không có dữ liệu để xuất!"


# -----------------------------------------------------------------------------
# Sales / inventory
# -----------------------------------------------------------------------------
def test_cart_summary_with_credit_check(api, backend, logged_in):
    backend.on("GET", "/customers/5", ok({"id": 5, "creditLimit": 1000000, "currentDebt": 900000}))

    r = api.post("/sales-orders/summary", json={
        "items": [{"productId": 1, "quantity": 2, "unitPrice": 100000}],
        "customerId": 5,
    })

    data = r.json()["data"]
    assert data["summary"]["total"] == 200000
    assert data["creditCheck"]["availableCredit"] == 100000
    assert data["creditCheck"]["willExceedLimit"] is True


def test_cart_summary_without_customer(api, backend):
    r = api.post("/sales-orders/summary", json={
        "items": [{"productId": 1, "quantity": 1, "unitPrice": 50000}], "shippingFee": 20000,
    })
    data = r.json()["data"]
    assert data["summary"]["total"] == 70000
    assert "creditCheck" not in data
    assert backend.requests == []


def test_customer_detail_has_debt_indicator(api, backend, logged_in):
    backend.on("GET", "/customers/2", ok({
        "id": 2, "customerType": "company", "creditLimit": "1000000", "currentDebt": "850000",
    }))
    data = api.get("/customers/2").json()["data"]
    assert data["debtIndicator"]["status"] == "warning"
    assert data["debtIndicator"]["percentage"] == 85
    assert data["customerTypeLabel"]


def test_inventory_rows_have_stock_level(api, backend, logged_in):
    backend.on("GET", "/inventory", ok([
        {"id": 1, "quantity": 5, "reservedQuantity": 0, "product": {"minStockLevel": 20}},
        {"id": 2, "quantity": 40, "minStockLevel": 20},
    ]))
    rows = api.get("/inventory", params={"warehouseId": 1}).json()["data"]
    assert [r["stockLevel"]["level"] for r in rows] == ["orange", "green"]
    assert backend.last("GET", "/inventory").url.params["warehouseId"] == "1"


# -----------------------------------------------------------------------------
# Finance / HR / notifications
# -----------------------------------------------------------------------------
def test_reconciliation_detail_has_balance_check(api, backend, logged_in):
    backend.on("GET", "/debt-reconciliation/2", ok({
        "id": 2, "status": "unpaid",
        "openingBalance": 1000, "transactionsAmount": 500, "paymentAmount": 300,
        "returnAmount": 0, "adjustmentAmount": 0, "closingBalance": 1200,
    }))
    data = api.get("/debt-reconciliation/2").json()["data"]
    assert data["statusLabel"] == "Chưa thanh toán"
    assert data["balanceCheck"]["matches"] is True


def test_reconciliation_created_by_period(api, backend, logged_in):
    backend.on("POST", "/debt-reconciliation/yearly", ok({"id": 9}))
    r = api.post("/debt-reconciliation/yearly", json={
        "period": "2024", "supplierId": 3, "reconciliationDate": "2024-12-31",
    })
    assert r.json()["message"] == "Tạo đối chiếu công nợ năm thành công!"
    assert body_of(backend.last("POST", "/debt-reconciliation/yearly"))["supplierId"] == 3


def test_salary_detail_has_computed_total(api, backend, logged_in):
    backend.on("GET", "/salary/3", ok({
        "id": 3, "status": "paid", "month": "202501",
        "basicSalary": 10000000, "allowance": 1000000, "deduction": 600000,
    }))
    data = api.get("/salary/3").json()["data"]
    assert data["statusLabel"] == "Đã thanh toán"
    assert data["monthLabel"] == "01/2025"
    assert data["computedTotal"] == 10400000


def test_unread_count_includes_poller_state(api, backend, logged_in):
    backend.on("GET", "/notifications/unread-count", ok({"count": 3}))
    data = api.get("/notifications/unread-count").json()["data"]
    assert data["count"] == 3
    assert data["poller"]["running"] is False
    assert data["poller"]["intervalSeconds"] == 0.01


def test_logout_ends_session(api, backend, logged_in):
    backend.on("POST", "/auth/logout", ok(None))
    r = api.post("/auth/logout")
    assert r.json()["message"] == "Đăng xuất thành công!"
    assert api.get("/auth/session").json()["data"]["isAuthenticated"] is False


def test_expired_session_drops_cached_user(api, backend, logged_in):
    backend.on("GET", "/auth/me", ok({"id": 1, "email": "admin@example.com"}), fail(401, "Unauthorized"))
    backend.on("GET", "/products", fail(401, "Token expired"))
    backend.on("POST", "/auth/refresh-token", fail(401, "Refresh token invalid"))

    assert api.get("/auth/me").status_code == 200
    assert api.get("/products").status_code == 401
    assert logged_in.access_token is None

    r = api.get("/auth/me")
    assert r.status_code == 401
    assert r.json()["success"] is False
    assert backend.count("GET", "/auth/me") == 2


def test_non_finite_quantity_is_a_validation_error(api, backend, logged_in):
    r = api.post("/bom/1/calculate", json={"productionQuantity": "NaN"})
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"
    assert backend.count("GET", "/bom/1") == 0


# -----------------------------------------------------------------------------
# Purchasing / users
# -----------------------------------------------------------------------------
def test_supplier_is_validated_before_backend(api, backend, logged_in):
    r = api.post("/suppliers", json={"supplierCode": "NCC-01", "supplierName": "", "supplierType": "local"})
    assert r.status_code == 422
    assert backend.count("POST", "/suppliers") == 0


def test_purchase_order_create(api, backend, logged_in):
    backend.on("POST", "/purchase-orders", ok({"id": 4}))
    r = api.post("/purchase-orders", json={
        "supplierId": 2, "warehouseId": 1, "orderDate": "2025-01-15",
        "details": [{"productId": 3, "quantity": 10, "unitPrice": 15000}],
    })
    assert r.json()["message"] == "Tạo đơn đặt hàng thành công!"
    sent = body_of(backend.last("POST", "/purchase-orders"))
    assert sent["orderDate"] == "2025-01-15"
    assert sent["taxRate"] == 0


def test_role_crud(api, backend, logged_in):
    backend.on("POST", "/roles", ok({"id": 5}))
    backend.on("PUT", "/roles/5", ok({"id": 5}))
    backend.on("DELETE", "/roles/5", ok(None))

    r = api.post("/roles", json={"roleKey": "kho_vien", "roleName": "Thủ kho"})
    assert r.json()["message"] == "Tạo vai trò thành công!"
    assert body_of(backend.last("POST", "/roles")) == {"roleKey": "kho_vien", "roleName": "Thủ kho", "status": "active"}

    assert api.put("/roles/5", json={"status": "inactive"}).json()["message"] == "Cập nhật vai trò thành công!"
    assert body_of(backend.last("PUT", "/roles/5")) == {"status": "inactive"}
    assert api.delete("/roles/5").json()["message"] == "Xóa vai trò thành công!"
    assert api.post("/roles", json={"roleKey": "Kho Vien", "roleName": "Thủ kho"}).status_code == 422


def test_delivery_proof_upload_limits(api, backend, logged_in):
    backend.on("POST", "/deliveries/8/proof", ok({"id": 8}))

    r = api.post("/deliveries/8/proof", files={"file": ("proof.pdf", b"%PDF-1.4", "application/pdf")})
    assert r.status_code == 422
    assert r.json()["error"]["message"] == "Ảnh chứng minh chỉ hỗ trợ PNG, JPG, WEBP"

    big = b"\x00" * (5 * 1024 * 1024 + 1)
    r = api.post("/deliveries/8/proof", files={"file": ("proof.png", big, "image/png")})
    assert r.json()["error"]["message"] == "Ảnh chứng minh tối đa 5MB"
    assert backend.count("POST", "/deliveries/8/proof") == 0

    r = api.post("/deliveries/8/proof", files={"file": ("proof.png", b"\x89PNG", "image/png")})
    assert r.json()["message"] == "Tải ảnh chứng minh thành công!"
