# erp_console/constants.py
"""
Status/type codes used by the ERP backend and their Vietnamese display labels.
"""
from __future__ import annotations
from typing import Dict, Mapping, Optional

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB
ALLOWED_IMAGE_TYPES = ["image/jpeg", "image/png", "image/jpg", "image/webp"]

PRODUCT_TYPE_LABELS: Dict[str, str] = {
    "raw_material": "Nguyên liệu",
    "packaging": "Bao bì",
    "finished_product": "Thành phẩm",
    "goods": "Hàng hóa",
}

PACKAGING_TYPE_LABELS: Dict[str, str] = {
    "bottle": "Chai/Lọ",
    "box": "Hộp",
    "bag": "Túi",
    "label": "Nhãn",
    "other": "Khác",
}

WAREHOUSE_TYPE_LABELS: Dict[str, str] = {
    "raw_material": "Kho nguyên liệu",
    "packaging": "Kho bao bì",
    "finished_product": "Kho thành phẩm",
    "goods": "Kho hàng hóa",
}

MATERIAL_TYPE_LABELS: Dict[str, str] = {
    "raw_material": "Nguyên liệu",
    "packaging": "Bao bì",
}

TRANSACTION_TYPE_LABELS: Dict[str, str] = {
    "import": "Nhập kho",
    "export": "Xuất kho",
    "transfer": "Chuyển kho",
    "disposal": "Xuất hủy",
    "stocktake": "Kiểm kê",
}

TRANSACTION_STATUS_LABELS: Dict[str, str] = {
    "draft": "Nháp",
    "pending": "Chờ duyệt",
    "approved": "Đã duyệt",
    "completed": "Hoàn thành",
    "cancelled": "Đã hủy",
}

CUSTOMER_TYPE_LABELS: Dict[str, str] = {
    "individual": "Cá nhân",
    "company": "Công ty",
}

CUSTOMER_CLASSIFICATION_LABELS: Dict[str, str] = {
    "retail": "Bán lẻ",
    "wholesale": "Bán sỉ",
    "vip": "VIP",
    "distributor": "Đại lý",
}

CUSTOMER_STATUS_LABELS: Dict[str, str] = {
    "active": "Hoạt động",
    "inactive": "Không hoạt động",
    "blacklisted": "Danh sách đen",
}

ORDER_STATUS_LABELS: Dict[str, str] = {
    "pending": "Chờ xác nhận",
    "approved": "Đã duyệt",
    "in_progress": "Đang xử lý",
    "completed": "Hoàn thành",
    "cancelled": "Đã hủy",
}

PRODUCTION_STATUS_LABELS: Dict[str, str] = {
    "pending": "Chờ sản xuất",
    "in_progress": "Đang sản xuất",
    "completed": "Hoàn thành",
    "cancelled": "Đã hủy",
}

BOM_STATUS_LABELS: Dict[str, str] = {
    "draft": "Nháp",
    "active": "Đang áp dụng",
    "inactive": "Ngừng áp dụng",
}

PAYMENT_METHOD_LABELS: Dict[str, str] = {
    "cash": "Tiền mặt",
    "bank_transfer": "Chuyển khoản",
    "transfer": "Chuyển khoản",
    "credit": "Trả góp/Ghi nợ",
    "installment": "Trả góp",
    "cod": "COD",
    "check": "Séc",
}

PAYMENT_STATUS_LABELS: Dict[str, str] = {
    "unpaid": "Chưa thanh toán",
    "partial": "Thanh toán một phần",
    "paid": "Đã thanh toán",
}

SALES_CHANNEL_LABELS: Dict[str, str] = {
    "retail": "Bán lẻ",
    "wholesale": "Bán sỉ",
    "online": "Trực tuyến",
    "distributor": "Đại lý",
}

DELIVERY_STATUS_LABELS: Dict[str, str] = {
    "pending": "Chờ giao",
    "in_transit": "Đang giao",
    "delivered": "Đã giao",
    "failed": "Giao thất bại",
    "returned": "Hoàn hàng",
}

RECONCILIATION_STATUS_LABELS: Dict[str, str] = {
    "paid": "Đã thanh toán",
    "unpaid": "Chưa thanh toán",
}

RECEIPT_TYPE_LABELS: Dict[str, str] = {
    "order_payment": "Thu tiền đơn hàng",
    "deposit": "Đặt cọc",
    "refund": "Hoàn tiền",
    "other": "Khác",
}

VOUCHER_TYPE_LABELS: Dict[str, str] = {
    "purchase_payment": "Thanh toán nhà cung cấp",
    "salary": "Lương",
    "expense": "Chi phí",
    "tax": "Thuế",
    "other": "Khác",
}

SALARY_STATUS_LABELS: Dict[str, str] = {
    "pending": "Chờ duyệt",
    "approved": "Đã duyệt",
    "paid": "Đã thanh toán",
}

SALARY_COMPONENT_LABELS: Dict[str, str] = {
    "basicSalary": "Lương cơ bản",
    "allowance": "Phụ cấp",
    "overtimePay": "Lương làm thêm",
    "bonus": "Thưởng",
    "commission": "Hoa hồng",
    "deduction": "Khấu trừ",
    "advance": "Tạm ứng",
    "totalSalary": "Tổng lương",
}

ATTENDANCE_STATUS_LABELS: Dict[str, str] = {
    "present": "Có mặt",
    "absent": "Vắng mặt",
    "late": "Đi muộn",
    "leave": "Nghỉ phép",
    "work_from_home": "WFH",
}

LEAVE_TYPE_LABELS: Dict[str, str] = {
    "none": "Không phải nghỉ",
    "annual": "Nghỉ phép năm",
    "sick": "Nghỉ ốm",
    "unpaid": "Nghỉ không lương",
    "other": "Khác",
}

ROLE_LABELS: Dict[str, str] = {
    "admin": "Quản trị viên",
    "accountant": "Kế toán",
    "warehouse_manager": "Quản lý kho",
    "warehouse_staff": "Nhân viên kho",
    "production_manager": "Quản lý sản xuất",
    "sales_staff": "Nhân viên bán hàng",
    "delivery_staff": "Nhân viên giao hàng",
}

STATUS_LABELS: Dict[str, str] = {
    "active": "Hoạt động",
    "inactive": "Không hoạt động",
    "locked": "Đã khóa",
}

PROMOTION_TYPE_LABELS: Dict[str, str] = {
    "percent_discount": "Giảm giá %",
    "fixed_discount": "Giảm giá cố định",
    "buy_x_get_y": "Mua X tặng Y",
    "gift": "Tặng quà",
}

NOTIFICATION_TYPE_LABELS: Dict[str, str] = {
    "system": "Thông báo hệ thống",
    "low_stock": "Tồn kho thấp",
    "expiry_warning": "Sản phẩm sắp hết hạn",
    "debt_overdue": "Công nợ quá hạn",
    "order_new": "Đơn hàng mới",
    "approval_required": "Cần phê duyệt",
    "reminder": "Nhắc nhở",
    "announcement": "Thông báo",
    "material_shortage": "Thiếu nguyên liệu",
    "production_completed": "Hoàn thành sản xuất",
}

# payroll / attendance rules used for display estimates
OVERTIME_RATE = 1.5
COMMISSION_RATE = 0.02
STANDARD_WORK_DAYS = 26
STANDARD_HOURS = 8
LATE_THRESHOLD_MINUTES = 15
STANDARD_CHECK_IN = "08:00:00"
STANDARD_CHECK_OUT = "17:00:00"


def label(table: Mapping[str, str], value: Optional[str]) -> str:
    if value is None:
        return ""
    return table.get(value, value)
