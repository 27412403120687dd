# erp_console/services/__init__.py
"""
Domain services for the ERP console. One class per backend resource.
"""
from erp_console.services.base import ResourceService
from erp_console.services.catalog import CategoryService, ProductService
from erp_console.services.finance import (
    DebtReconciliationService,
    PaymentReceiptService,
    PaymentVoucherService,
)
from erp_console.services.hr import AttendanceService, SalaryService
from erp_console.services.inventory import (
    InventoryService,
    StockTransactionService,
    WarehouseService,
)
from erp_console.services.notifications import NotificationService
from erp_console.services.production import BomService, ProductionOrderService
from erp_console.services.purchasing import PurchaseOrderService, SupplierService
from erp_console.services.reports import DashboardService, ReportService
from erp_console.services.sales import (
    CustomerService,
    DeliveryService,
    PromotionService,
    SalesOrderService,
)
from erp_console.services.users import AuthService, RoleService, UserService

__all__ = [
    "ResourceService",
    "ProductService",
    "CategoryService",
    "InventoryService",
    "WarehouseService",
    "StockTransactionService",
    "BomService",
    "ProductionOrderService",
    "SalesOrderService",
    "CustomerService",
    "DeliveryService",
    "PromotionService",
    "SupplierService",
    "PurchaseOrderService",
    "PaymentReceiptService",
    "PaymentVoucherService",
    "DebtReconciliationService",
    "SalaryService",
    "AttendanceService",
    "NotificationService",
    "UserService",
    "RoleService",
    "AuthService",
    "DashboardService",
    "ReportService",
]
