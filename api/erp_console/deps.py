# erp_console/deps.py
"""
Shared objects built once in the app lifespan and handed to routers via
Depends(get_console).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx
from fastapi import Request
from fastapi.responses import Response

from .cache import QueryCache
from .client import ErpClient
from .poller import NotificationPoller
from .services import (
    AttendanceService,
    AuthService,
    BomService,
    CategoryService,
    CustomerService,
    DashboardService,
    DebtReconciliationService,
    DeliveryService,
    InventoryService,
    NotificationService,
    PaymentReceiptService,
    PaymentVoucherService,
    ProductionOrderService,
    ProductService,
    PromotionService,
    PurchaseOrderService,
    ReportService,
    RoleService,
    SalaryService,
    SalesOrderService,
    StockTransactionService,
    SupplierService,
    UserService,
    WarehouseService,
)
from .session import SessionStore


@dataclass
class Console:
    data_root: Path
    session: SessionStore
    client: ErpClient
    cache: QueryCache
    poller: Optional[NotificationPoller] = None

    products: ProductService = field(init=False)
    categories: CategoryService = field(init=False)
    inventory: InventoryService = field(init=False)
    warehouses: WarehouseService = field(init=False)
    stock_transactions: StockTransactionService = field(init=False)
    boms: BomService = field(init=False)
    production_orders: ProductionOrderService = field(init=False)
    sales_orders: SalesOrderService = field(init=False)
    customers: CustomerService = field(init=False)
    deliveries: DeliveryService = field(init=False)
    promotions: PromotionService = field(init=False)
    suppliers: SupplierService = field(init=False)
    purchase_orders: PurchaseOrderService = field(init=False)
    payment_receipts: PaymentReceiptService = field(init=False)
    payment_vouchers: PaymentVoucherService = field(init=False)
    debt_reconciliation: DebtReconciliationService = field(init=False)
    salary: SalaryService = field(init=False)
    attendance: AttendanceService = field(init=False)
    notifications: NotificationService = field(init=False)
    users: UserService = field(init=False)
    roles: RoleService = field(init=False)
    auth: AuthService = field(init=False)
    dashboard: DashboardService = field(init=False)
    reports: ReportService = field(init=False)

    def __post_init__(self) -> None:
        c, q = self.client, self.cache
        c.on_session_expired = q.clear
        self.products = ProductService(c, q)
        self.categories = CategoryService(c, q)
        self.inventory = InventoryService(c, q)
        self.warehouses = WarehouseService(c, q)
        self.stock_transactions = StockTransactionService(c, q)
        self.boms = BomService(c, q)
        self.production_orders = ProductionOrderService(c, q)
        self.sales_orders = SalesOrderService(c, q)
        self.customers = CustomerService(c, q)
        self.deliveries = DeliveryService(c, q)
        self.promotions = PromotionService(c, q)
        self.suppliers = SupplierService(c, q)
        self.purchase_orders = PurchaseOrderService(c, q)
        self.payment_receipts = PaymentReceiptService(c, q)
        self.payment_vouchers = PaymentVoucherService(c, q)
        self.debt_reconciliation = DebtReconciliationService(c, q)
        self.salary = SalaryService(c, q)
        self.attendance = AttendanceService(c, q)
        self.notifications = NotificationService(c, q)
        self.users = UserService(c, q)
        self.roles = RoleService(c, q)
        self.auth = AuthService(c, q, self.session)
        self.dashboard = DashboardService(c, q)
        self.reports = ReportService(c, q)

    def close(self) -> None:
        self.client.close()


def build_console(settings, transport: Optional[httpx.BaseTransport] = None) -> Console:
    data_root = Path(settings.CONSOLE_DATA_ROOT).expanduser()
    session = SessionStore(data_root)
    client = ErpClient(
        settings.ERP_API_URL,
        session,
        timeout=settings.ERP_REQUEST_TIMEOUT,
        verify=settings.ERP_VERIFY_SSL,
        query_retry=settings.ERP_QUERY_RETRY,
        transport=transport,
    )
    cache = QueryCache(stale_time=settings.CACHE_STALE_SECONDS, gc_time=settings.CACHE_GC_SECONDS)
    console = Console(data_root=data_root, session=session, client=client, cache=cache)
    console.poller = NotificationPoller(console.notifications, session, settings.NOTIFICATION_POLL_SECONDS)
    return console


def get_console(request: Request) -> Console:
    return request.app.state.console


def query_params(request: Request) -> Dict[str, Any]:
    """Pass list filters (page, limit, search, status, ...) through to the backend as sent."""
    out: Dict[str, Any] = {}
    for k in request.query_params.keys():
        values = request.query_params.getlist(k)
        out[k] = values if len(values) > 1 else values[0]
    return out


def decorate(body: Dict[str, Any], **fields: Any) -> Dict[str, Any]:
    """Copy of a (possibly cached) envelope with display fields added to data."""
    data = body.get("data")
    data = dict(data) if isinstance(data, dict) else {}
    data.update(fields)
    return {**body, "data": data}


def download(content: bytes, media_type: str, filename: Optional[str], fallback: str) -> Response:
    name = filename or fallback
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(name)}"},
    )
