# erp_console/models.py
"""
Request payloads accepted by the console before anything is sent to the ERP
backend. Field names follow the backend: camelCase for most resources,
snake_case for payment receipts/vouchers and password changes.

Every model dumps with by_alias=True, exclude_none=True (see payload()).
"""
from __future__ import annotations

import re
from datetime import date
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

PHONE_RE = re.compile(r"^[0-9]{10,11}$")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
CODE_RE = re.compile(r"^[A-Z0-9-]+$")
MONTH_RE = re.compile(r"^\d{6}$")
MOBILE_RE = re.compile(r"^(0|\+84)[0-9]{9,10}$")
ROLE_KEY_RE = re.compile(r"^[a-z_]+$")
PERSON_NAME_RE = re.compile(r"^(?:[^\W\d_]|\s)+$")

PaymentMethod = Literal["cash", "bank_transfer", "credit", "cod"]
SalesChannel = Literal["retail", "wholesale", "online", "distributor"]
ProductType = Literal["raw_material", "packaging", "finished_product", "goods"]
MaterialType = Literal["raw_material", "packaging"]
PromotionType = Literal["percent_discount", "fixed_discount", "buy_x_get_y", "gift"]
ApplicableTo = Literal["all", "category", "product_group", "specific_product", "customer_group"]


def _max_len(value: Optional[str], limit: int, message: str) -> Optional[str]:
    if value is not None and len(value) > limit:
        raise ValueError(message)
    return value


def _positive(value: Optional[float], message: str) -> Optional[float]:
    if value is not None and value <= 0:
        raise ValueError(message)
    return value


def _non_negative(value: Optional[float], message: str) -> Optional[float]:
    if value is not None and value < 0:
        raise ValueError(message)
    return value


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)

    def payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SnakeModel(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    def payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


# =========================================================================
# Auth
# =========================================================================

class LoginIn(CamelModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        if not v:
            raise ValueError("Email là bắt buộc")
        if not EMAIL_RE.match(v):
            raise ValueError("Email không hợp lệ")
        return v

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if not v:
            raise ValueError("Mật khẩu là bắt buộc")
        if len(v) < 8:
            raise ValueError("Mật khẩu phải có ít nhất 8 ký tự")
        return v


class VerifyOtpIn(CamelModel):
    email: str
    code: str

    @field_validator("code")
    @classmethod
    def _code(cls, v: str) -> str:
        if not re.fullmatch(r"\d{6}", v or ""):
            raise ValueError("Mã xác thực phải gồm 6 chữ số")
        return v


class ResendOtpIn(CamelModel):
    email: str


def _strong_password(v: str, field: str = "Mật khẩu") -> str:
    if len(v) < 8:
        raise ValueError(f"{field} phải có ít nhất 8 ký tự")
    if not re.search(r"[A-Z]", v):
        raise ValueError("Mật khẩu phải có ít nhất 1 chữ hoa")
    if not re.search(r"[a-z]", v):
        raise ValueError("Mật khẩu phải có ít nhất 1 chữ thường")
    if not re.search(r"[0-9]", v):
        raise ValueError("Mật khẩu phải có ít nhất 1 số")
    return v


class ChangePasswordIn(SnakeModel):
    current_password: str
    new_password: str
    confirm_password: str

    @field_validator("new_password")
    @classmethod
    def _new(cls, v: str) -> str:
        return _strong_password(v, "Mật khẩu mới")

    @model_validator(mode="after")
    def _match(self) -> "ChangePasswordIn":
        if self.new_password != self.confirm_password:
            raise ValueError("Mật khẩu xác nhận không khớp")
        if self.current_password == self.new_password:
            raise ValueError("Mật khẩu mới phải khác mật khẩu hiện tại")
        return self

    def payload(self) -> Dict[str, Any]:
        return {"current_password": self.current_password, "new_password": self.new_password}


class ForgotPasswordIn(CamelModel):
    email: str

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        if not EMAIL_RE.match(v or ""):
            raise ValueError("Email không hợp lệ")
        return v


class ResetPasswordIn(CamelModel):
    token: str
    password: str
    confirm_password: str

    @field_validator("password")
    @classmethod
    def _new(cls, v: str) -> str:
        return _strong_password(v)

    @model_validator(mode="after")
    def _match(self) -> "ResetPasswordIn":
        if not self.token:
            raise ValueError("Token không hợp lệ")
        if self.password != self.confirm_password:
            raise ValueError("Mật khẩu xác nhận không khớp")
        return self

    def payload(self) -> Dict[str, Any]:
        return {"token": self.token, "password": self.password}


# =========================================================================
# Users / roles
# =========================================================================

class UserUpdate(CamelModel):
    email: Optional[str] = None
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    gender: Optional[Literal["male", "female", "other"]] = None
    date_of_birth: Optional[date] = None
    role_id: Optional[int] = None
    warehouse_id: Optional[int] = None
    status: Optional[Literal["active", "inactive", "locked"]] = None

    @field_validator("email")
    @classmethod
    def _email(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not v:
            raise ValueError("Email là bắt buộc")
        if not EMAIL_RE.match(v):
            raise ValueError("Email không hợp lệ")
        return _max_len(v, 100, "Email không được quá 100 ký tự")

    @field_validator("full_name")
    @classmethod
    def _name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not v.strip():
            raise ValueError("Họ tên là bắt buộc")
        if not PERSON_NAME_RE.match(v):
            raise ValueError("Họ tên chỉ được chứa chữ cái và khoảng trắng")
        return _max_len(v, 200, "Họ tên không được quá 200 ký tự")

    @field_validator("phone")
    @classmethod
    def _phone(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        if not MOBILE_RE.match(v):
            raise ValueError("Số điện thoại không hợp lệ")
        return v

    @field_validator("address")
    @classmethod
    def _address(cls, v: Optional[str]) -> Optional[str]:
        return _max_len(v, 255, "Địa chỉ không được quá 255 ký tự")

    @field_validator("role_id")
    @classmethod
    def _role(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError("Vui lòng chọn vai trò")
        return v


class UserIn(UserUpdate):
    employee_code: str
    email: str
    password: str
    confirm_password: str
    full_name: str
    role_id: int
    status: Literal["active", "inactive", "locked"] = "active"

    @field_validator("employee_code")
    @classmethod
    def _code(cls, v: str) -> str:
        if not v:
            raise ValueError("Mã nhân viên là bắt buộc")
        if not CODE_RE.match(v):
            raise ValueError("Mã nhân viên chỉ được chứa chữ in hoa, số và dấu gạch ngang")
        return _max_len(v, 50, "Mã nhân viên không được quá 50 ký tự")

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        return _max_len(_strong_password(v), 100, "Mật khẩu không được quá 100 ký tự")

    @model_validator(mode="after")
    def _match(self) -> "UserIn":
        if self.password != self.confirm_password:
            raise ValueError("Mật khẩu xác nhận không khớp")
        return self

    def payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True, exclude={"confirm_password"})


class RoleUpdate(CamelModel):
    role_key: Optional[str] = None
    role_name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[Literal["active", "inactive"]] = None

    @field_validator("role_key")
    @classmethod
    def _key(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not v:
            raise ValueError("Mã vai trò là bắt buộc")
        if not ROLE_KEY_RE.match(v):
            raise ValueError("Mã vai trò chỉ được chứa chữ thường và dấu gạch dưới")
        return _max_len(v, 50, "Mã vai trò không được quá 50 ký tự")

    @field_validator("role_name")
    @classmethod
    def _name(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Tên vai trò là bắt buộc")
        return _max_len(v, 100, "Tên vai trò không được quá 100 ký tự")

    @field_validator("description")
    @classmethod
    def _description(cls, v: Optional[str]) -> Optional[str]:
        return _max_len(v, 500, "Mô tả không được quá 500 ký tự")


class RoleIn(RoleUpdate):
    role_key: str
    role_name: str
    status: Literal["active", "inactive"] = "active"


# =========================================================================
# Customers
# =========================================================================

class CustomerUpdate(CamelModel):
    customer_name: Optional[str] = None
    customer_type: Optional[Literal["individual", "company"]] = None
    classification: Optional[Literal["retail", "wholesale", "vip", "distributor"]] = None
    gender: Optional[Literal["male", "female", "other"]] = None
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    province: Optional[str] = None
    district: Optional[str] = None
    tax_code: Optional[str] = None
    credit_limit: Optional[float] = None
    notes: Optional[str] = None
    status: Optional[Literal["active", "inactive", "blacklisted"]] = None

    @field_validator("customer_name")
    @classmethod
    def _name(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Tên khách hàng là bắt buộc")
        return _max_len(v, 200, "Tên khách hàng không được quá 200 ký tự")

    @field_validator("phone")
    @classmethod
    def _phone(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not PHONE_RE.match(v):
            raise ValueError("Số điện thoại phải có 10-11 chữ số")
        return v

    @field_validator("email")
    @classmethod
    def _email(cls, v: Optional[str]) -> Optional[str]:
        if v == "":
            return None
        if v is not None and not EMAIL_RE.match(v):
            raise ValueError("Email không hợp lệ")
        return v

    @field_validator("credit_limit")
    @classmethod
    def _limit(cls, v: Optional[float]) -> Optional[float]:
        return _non_negative(v, "Hạn mức công nợ phải >= 0")

    @field_validator("notes", "address")
    @classmethod
    def _long_text(cls, v: Optional[str]) -> Optional[str]:
        return _max_len(v, 255, "Nội dung không được quá 255 ký tự")


class CustomerIn(CustomerUpdate):
    customer_name: str
    customer_type: Literal["individual", "company"]
    classification: Literal["retail", "wholesale", "vip", "distributor"]
    phone: str
    credit_limit: float = 0
    status: Literal["active", "inactive", "blacklisted"] = "active"

    @model_validator(mode="after")
    def _company_fields(self) -> "CustomerIn":
        if self.customer_type == "company" and (not self.tax_code or not self.contact_person):
            raise ValueError("Mã số thuế và người liên hệ là bắt buộc đối với công ty")
        return self


class CreditLimitIn(CamelModel):
    credit_limit: float
    reason: Optional[str] = None

    @field_validator("credit_limit")
    @classmethod
    def _limit(cls, v: float) -> float:
        return _non_negative(v, "Hạn mức công nợ phải >= 0")


class CustomerStatusIn(CamelModel):
    status: Literal["active", "inactive", "blacklisted"]
    reason: Optional[str] = None


# =========================================================================
# Catalog / warehouses
# =========================================================================

class ProductIn(CamelModel):
    sku: Optional[str] = None
    product_name: str
    product_type: ProductType
    packaging_type: Optional[Literal["bottle", "box", "bag", "label", "other"]] = None
    category_id: Optional[int] = None
    supplier_id: Optional[int] = None
    unit: str
    barcode: Optional[str] = None
    weight: Optional[float] = None
    dimensions: Optional[str] = None
    description: Optional[str] = None
    purchase_price: Optional[float] = None
    selling_price_retail: Optional[float] = None
    selling_price_wholesale: Optional[float] = None
    selling_price_vip: Optional[float] = None
    tax_rate: Optional[float] = None
    min_stock_level: Optional[float] = None
    expiry_date: Optional[date] = None
    status: Literal["active", "inactive", "discontinued"] = "active"

    @field_validator("product_name")
    @classmethod
    def _name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Tên sản phẩm là bắt buộc")
        return _max_len(v, 200, "Tên sản phẩm không được quá 200 ký tự")

    @field_validator("unit")
    @classmethod
    def _unit(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Đơn vị tính là bắt buộc")
        return _max_len(v, 50, "Đơn vị tính không được quá 50 ký tự")

    @field_validator(
        "purchase_price", "selling_price_retail", "selling_price_wholesale",
        "selling_price_vip", "weight", "min_stock_level",
    )
    @classmethod
    def _amounts(cls, v: Optional[float]) -> Optional[float]:
        return _non_negative(v, "Giá trị không được âm")

    @field_validator("tax_rate")
    @classmethod
    def _tax(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not 0 <= v <= 100:
            raise ValueError("Thuế suất phải từ 0-100")
        return v

    @model_validator(mode="after")
    def _packaging(self) -> "ProductIn":
        if self.product_type == "packaging" and not self.packaging_type:
            raise ValueError("Loại bao bì là bắt buộc khi sản phẩm là bao bì")
        return self


class CategoryIn(CamelModel):
    category_code: str
    category_name: str
    parent_id: Optional[int] = None
    description: Optional[str] = None
    status: Literal["active", "inactive"] = "active"

    @field_validator("category_code")
    @classmethod
    def _code(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Mã danh mục không được để trống")
        return _max_len(v, 50, "Mã danh mục không được quá 50 ký tự")

    @field_validator("category_name")
    @classmethod
    def _name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Tên danh mục là bắt buộc")
        return _max_len(v, 200, "Tên danh mục không được quá 200 ký tự")


class WarehouseIn(CamelModel):
    warehouse_code: str
    warehouse_name: str
    warehouse_type: ProductType
    address: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    description: Optional[str] = None
    manager_id: Optional[int] = None
    capacity: Optional[float] = None
    status: Optional[Literal["active", "inactive"]] = None

    @field_validator("warehouse_code")
    @classmethod
    def _code(cls, v: str) -> str:
        if not CODE_RE.match(v or ""):
            raise ValueError("Mã kho chỉ chứa chữ in hoa, số và dấu gạch ngang")
        return _max_len(v, 50, "Mã kho không được quá 50 ký tự")

    @field_validator("warehouse_name")
    @classmethod
    def _name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Tên kho là bắt buộc")
        return _max_len(v, 200, "Tên kho không được quá 200 ký tự")

    @field_validator("capacity")
    @classmethod
    def _capacity(cls, v: Optional[float]) -> Optional[float]:
        return _positive(v, "Sức chứa phải lớn hơn 0")


# =========================================================================
# BOM / production
# =========================================================================

class BomMaterialIn(CamelModel):
    material_id: int
    quantity: float
    unit: str
    material_type: MaterialType
    notes: Optional[str] = None

    @field_validator("material_id")
    @classmethod
    def _material(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("ID nguyên liệu không hợp lệ")
        return v

    @field_validator("quantity")
    @classmethod
    def _qty(cls, v: float) -> float:
        return _positive(v, "Số lượng phải lớn hơn 0")

    @field_validator("unit")
    @classmethod
    def _unit(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Đơn vị không được để trống")
        return v


class BomIn(CamelModel):
    bom_code: str
    finished_product_id: int
    version: str = "1.0"
    output_quantity: float
    efficiency_rate: float = 100
    production_time: Optional[int] = None
    notes: Optional[str] = None
    materials: List[BomMaterialIn]

    @field_validator("bom_code")
    @classmethod
    def _code(cls, v: str) -> str:
        if not v:
            raise ValueError("Mã BOM không được để trống")
        if not CODE_RE.match(v):
            raise ValueError("Mã BOM chỉ được chứa chữ hoa, số và dấu gạch ngang")
        return _max_len(v, 50, "Mã BOM không được quá 50 ký tự")

    @field_validator("output_quantity")
    @classmethod
    def _output(cls, v: float) -> float:
        return _positive(v, "Sản lượng đầu ra phải lớn hơn 0")

    @field_validator("efficiency_rate")
    @classmethod
    def _efficiency(cls, v: float) -> float:
        if not 0 <= v <= 100:
            raise ValueError("Tỷ lệ hiệu suất phải từ 0 đến 100")
        return v

    @field_validator("materials")
    @classmethod
    def _materials(cls, v: List[BomMaterialIn]) -> List[BomMaterialIn]:
        if not v:
            raise ValueError("Phải có ít nhất một nguyên liệu")
        if len(v) > 100:
            raise ValueError("Tối đa 100 nguyên liệu cho mỗi BOM")
        return v


class CalculateMaterialsIn(CamelModel):
    bom_id: Optional[int] = None
    production_quantity: float

    @field_validator("production_quantity")
    @classmethod
    def _qty(cls, v: float) -> float:
        return _positive(v, "Số lượng sản xuất phải lớn hơn 0")


def _check_range(start: Optional[date], end: Optional[date]) -> None:
    if start and end and end < start:
        raise ValueError("Ngày kết thúc phải sau ngày bắt đầu")


class ProductionOrderIn(CamelModel):
    bom_id: int
    planned_quantity: float
    warehouse_id: Optional[int] = None
    start_date: date
    end_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("bom_id")
    @classmethod
    def _bom(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Vui lòng chọn công thức sản xuất (BOM)")
        return v

    @field_validator("planned_quantity")
    @classmethod
    def _qty(cls, v: float) -> float:
        return _positive(v, "Số lượng phải lớn hơn 0")

    @field_validator("start_date")
    @classmethod
    def _start(cls, v: date) -> date:
        if v < date.today():
            raise ValueError("Ngày bắt đầu không được trong quá khứ")
        return v

    @field_validator("notes")
    @classmethod
    def _notes(cls, v: Optional[str]) -> Optional[str]:
        return _max_len(v, 255, "Ghi chú không được vượt quá 255 ký tự")

    @model_validator(mode="after")
    def _dates(self) -> "ProductionOrderIn":
        _check_range(self.start_date, self.end_date)
        return self


class ProductionOrderUpdate(CamelModel):
    planned_quantity: Optional[float] = None
    warehouse_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("planned_quantity")
    @classmethod
    def _qty(cls, v: Optional[float]) -> Optional[float]:
        return _positive(v, "Số lượng phải lớn hơn 0")

    @model_validator(mode="after")
    def _dates(self) -> "ProductionOrderUpdate":
        _check_range(self.start_date, self.end_date)
        return self


class StartProductionIn(CamelModel):
    actual_start_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("notes")
    @classmethod
    def _notes(cls, v: Optional[str]) -> Optional[str]:
        return _max_len(v, 255, "Ghi chú không được vượt quá 255 ký tự")


class ActualMaterialIn(CamelModel):
    material_id: int
    actual_quantity: float
    notes: Optional[str] = None

    @field_validator("actual_quantity")
    @classmethod
    def _qty(cls, v: float) -> float:
        return _non_negative(v, "Số lượng không được âm")


class CompleteProductionIn(CamelModel):
    actual_quantity: float
    actual_materials: Optional[List[ActualMaterialIn]] = None
    notes: Optional[str] = None

    @field_validator("actual_quantity")
    @classmethod
    def _qty(cls, v: float) -> float:
        return _positive(v, "Số lượng phải lớn hơn 0")


class CancelIn(CamelModel):
    reason: str

    @field_validator("reason")
    @classmethod
    def _reason(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 10:
            raise ValueError("Lý do hủy phải có ít nhất 10 ký tự")
        return _max_len(v, 255, "Lý do hủy không được vượt quá 255 ký tự")


class NotesIn(CamelModel):
    notes: Optional[str] = None


# =========================================================================
# Sales
# =========================================================================

class SalesOrderDetailIn(CamelModel):
    product_id: int
    warehouse_id: Optional[int] = None
    quantity: float
    unit_price: float
    discount_percent: float = 0
    tax_rate: float = 0
    batch_number: Optional[str] = None
    expiry_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("product_id")
    @classmethod
    def _product(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Sản phẩm không hợp lệ")
        return v

    @field_validator("quantity")
    @classmethod
    def _qty(cls, v: float) -> float:
        return _positive(v, "Số lượng phải lớn hơn 0")

    @field_validator("unit_price")
    @classmethod
    def _price(cls, v: float) -> float:
        return _non_negative(v, "Đơn giá không được âm")

    @field_validator("discount_percent")
    @classmethod
    def _discount(cls, v: float) -> float:
        if not 0 <= v <= 100:
            raise ValueError("Chiết khấu % phải từ 0-100")
        return v

    @field_validator("tax_rate")
    @classmethod
    def _tax(cls, v: float) -> float:
        if not 0 <= v <= 100:
            raise ValueError("Thuế suất phải từ 0-100")
        return v


class SalesOrderIn(CamelModel):
    customer_id: int
    warehouse_id: Optional[int] = None
    order_date: Optional[date] = None
    sales_channel: SalesChannel
    delivery_address: Optional[str] = None
    shipping_fee: float = 0
    payment_method: PaymentMethod
    paid_amount: float = 0
    notes: Optional[str] = None
    details: List[SalesOrderDetailIn]

    @field_validator("customer_id")
    @classmethod
    def _customer(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Vui lòng chọn khách hàng")
        return v

    @field_validator("shipping_fee")
    @classmethod
    def _shipping(cls, v: float) -> float:
        return _non_negative(v, "Phí vận chuyển không được âm")

    @field_validator("paid_amount")
    @classmethod
    def _paid(cls, v: float) -> float:
        return _non_negative(v, "Số tiền thanh toán không được âm")

    @field_validator("details")
    @classmethod
    def _details(cls, v: List[SalesOrderDetailIn]) -> List[SalesOrderDetailIn]:
        if not v:
            raise ValueError("Đơn hàng phải có ít nhất 1 sản phẩm")
        return v


class SalesOrderUpdate(CamelModel):
    delivery_address: Optional[str] = None
    shipping_fee: Optional[float] = None
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = None
    details: Optional[List[SalesOrderDetailIn]] = None


class SalesCancelIn(CamelModel):
    reason: str

    @field_validator("reason")
    @classmethod
    def _reason(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Lý do hủy là bắt buộc")
        return _max_len(v, 255, "Lý do không được quá 255 ký tự")


class OrderPaymentIn(CamelModel):
    amount: float
    payment_method: PaymentMethod
    payment_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("amount")
    @classmethod
    def _amount(cls, v: float) -> float:
        return _positive(v, "Số tiền phải lớn hơn 0")


class CartIn(CamelModel):
    items: List[SalesOrderDetailIn] = Field(default_factory=list)
    shipping_fee: float = 0
    paid_amount: float = 0
    customer_id: Optional[int] = None


class PromotionProductIn(CamelModel):
    product_id: int
    discount_value_override: Optional[float] = Field(default=None, ge=0)
    min_quantity: Optional[int] = Field(default=None, ge=1)
    gift_product_id: Optional[int] = Field(default=None, gt=0)
    gift_quantity: Optional[int] = Field(default=None, ge=0)
    note: Optional[str] = Field(default=None, max_length=255)

    @field_validator("product_id")
    @classmethod
    def _product(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Vui lòng chọn sản phẩm")
        return v


class PromotionUpdate(CamelModel):
    promotion_name: Optional[str] = None
    discount_value: Optional[float] = None
    max_discount_value: Optional[float] = Field(default=None, ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_recurring: Optional[bool] = None
    applicable_to: Optional[ApplicableTo] = None
    min_order_value: Optional[float] = Field(default=None, ge=0)
    min_quantity: Optional[int] = Field(default=None, ge=0)
    quantity_limit: Optional[int] = Field(default=None, gt=0)
    conditions: Optional[Any] = None
    products: Optional[List[PromotionProductIn]] = None

    @field_validator("promotion_name")
    @classmethod
    def _name(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Tên khuyến mãi là bắt buộc")
        return _max_len(v, 200, "Tên không được quá 200 ký tự")

    @field_validator("discount_value")
    @classmethod
    def _discount(cls, v: Optional[float]) -> Optional[float]:
        return _non_negative(v, "Giá trị giảm phải >= 0")

    @model_validator(mode="after")
    def _dates(self) -> "PromotionUpdate":
        _check_range(self.start_date, self.end_date)
        return self


class PromotionIn(PromotionUpdate):
    promotion_code: str
    promotion_name: str
    promotion_type: PromotionType
    discount_value: float
    start_date: date
    end_date: date
    applicable_to: ApplicableTo

    @field_validator("promotion_code")
    @classmethod
    def _code(cls, v: str) -> str:
        if not v:
            raise ValueError("Mã khuyến mãi là bắt buộc")
        if not CODE_RE.match(v):
            raise ValueError("Mã chỉ được chứa chữ in hoa, số và dấu gạch ngang")
        return _max_len(v, 50, "Mã không được quá 50 ký tự")

    @model_validator(mode="after")
    def _rules(self) -> "PromotionIn":
        if self.promotion_type == "percent_discount" and not 0 < self.discount_value <= 100:
            raise ValueError("Giảm theo % phải từ 0-100")
        if self.applicable_to == "specific_product" and not self.products:
            raise ValueError("Vui lòng chọn ít nhất 1 sản phẩm")
        return self


# =========================================================================
# Inventory
# =========================================================================

class StockDetailIn(CamelModel):
    product_id: int
    quantity: float
    unit_price: Optional[float] = None
    batch_number: Optional[str] = None
    expiry_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("quantity")
    @classmethod
    def _qty(cls, v: float) -> float:
        return _positive(v, "Số lượng phải > 0")

    @field_validator("unit_price")
    @classmethod
    def _price(cls, v: Optional[float]) -> Optional[float]:
        return _non_negative(v, "Giá phải >= 0")


class StockTransactionIn(CamelModel):
    transaction_type: Literal["import", "export", "transfer", "disposal", "stocktake"]
    warehouse_id: Optional[int] = None
    source_warehouse_id: Optional[int] = None
    destination_warehouse_id: Optional[int] = None
    reference_type: Optional[str] = None
    reference_id: Optional[int] = None
    reason: Optional[str] = None
    notes: Optional[str] = None
    details: List[StockDetailIn]

    @field_validator("details")
    @classmethod
    def _details(cls, v: List[StockDetailIn]) -> List[StockDetailIn]:
        if not v:
            raise ValueError("Phải thêm ít nhất 1 sản phẩm")
        return v

    @model_validator(mode="after")
    def _by_type(self) -> "StockTransactionIn":
        t = self.transaction_type
        if t == "import" and not self.warehouse_id:
            raise ValueError("Nhập kho cần chọn kho đích")
        if t == "export" and not self.warehouse_id:
            raise ValueError("Xuất kho cần chọn kho nguồn")
        if t == "transfer":
            if not self.source_warehouse_id:
                raise ValueError("Chuyển kho cần chọn kho nguồn")
            if not self.destination_warehouse_id:
                raise ValueError("Chuyển kho cần chọn kho đích")
            if self.source_warehouse_id == self.destination_warehouse_id:
                raise ValueError("Kho nguồn và kho đích không được trùng nhau")
        if t == "disposal":
            if not self.warehouse_id:
                raise ValueError("Xuất hủy cần chọn kho")
            if not self.reason:
                raise ValueError("Xuất hủy cần nhập lý do")
        if t == "stocktake" and not self.warehouse_id:
            raise ValueError("Kiểm kê cần chọn kho")
        return self

    def payload(self) -> Dict[str, Any]:
        # the type is carried by the endpoint (/stock-transactions/<type>)
        data = super().payload()
        data.pop("transactionType", None)
        return data


class InventoryAdjustIn(CamelModel):
    warehouse_id: int
    product_id: int
    quantity_change: float
    reason: str
    notes: Optional[str] = None

    @field_validator("quantity_change")
    @classmethod
    def _change(cls, v: float) -> float:
        if v == 0:
            raise ValueError("Số lượng thay đổi không được bằng 0")
        return v

    @field_validator("reason")
    @classmethod
    def _reason(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Lý do là bắt buộc")
        return _max_len(v, 255, "Lý do không được quá 255 ký tự")


class ReserveIn(CamelModel):
    product_id: int
    warehouse_id: int
    quantity: float

    @field_validator("quantity")
    @classmethod
    def _qty(cls, v: float) -> float:
        return _positive(v, "Số lượng phải lớn hơn 0")


# =========================================================================
# Purchasing
# =========================================================================

class SupplierIn(CamelModel):
    supplier_code: str
    supplier_name: str
    supplier_type: Literal["local", "foreign"]
    contact_name: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = Field(default=None, max_length=255)
    tax_code: Optional[str] = Field(default=None, max_length=50)
    payment_terms: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = Field(default=None, max_length=500)
    status: Literal["active", "inactive"] = "active"

    @field_validator("supplier_code")
    @classmethod
    def _code(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Mã nhà cung cấp là bắt buộc")
        return _max_len(v, 50, "Mã nhà cung cấp không được quá 50 ký tự")

    @field_validator("supplier_name")
    @classmethod
    def _name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Tên nhà cung cấp là bắt buộc")
        return _max_len(v, 200, "Tên nhà cung cấp không được quá 200 ký tự")

    @field_validator("phone")
    @classmethod
    def _phone(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        if not PHONE_RE.match(v):
            raise ValueError("Số điện thoại không hợp lệ")
        return v

    @field_validator("email")
    @classmethod
    def _email(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        if not EMAIL_RE.match(v):
            raise ValueError("Email không hợp lệ")
        return v


class PurchaseOrderDetailIn(CamelModel):
    id: Optional[int] = None
    product_id: int
    quantity: float
    unit_price: float
    notes: Optional[str] = None

    @field_validator("product_id")
    @classmethod
    def _product(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Vui lòng chọn sản phẩm")
        return v

    @field_validator("quantity")
    @classmethod
    def _qty(cls, v: float) -> float:
        return _positive(v, "Số lượng phải > 0")

    @field_validator("unit_price")
    @classmethod
    def _price(cls, v: float) -> float:
        return _non_negative(v, "Giá phải >= 0")


class PurchaseOrderUpdate(CamelModel):
    supplier_id: Optional[int] = None
    warehouse_id: Optional[int] = None
    order_date: Optional[date] = None
    expected_delivery_date: Optional[date] = None
    tax_rate: float = 0
    notes: Optional[str] = None
    details: Optional[List[PurchaseOrderDetailIn]] = None

    @field_validator("supplier_id")
    @classmethod
    def _supplier(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError("Vui lòng chọn nhà cung cấp")
        return v

    @field_validator("warehouse_id")
    @classmethod
    def _warehouse(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError("Vui lòng chọn kho")
        return v

    @field_validator("tax_rate")
    @classmethod
    def _tax(cls, v: float) -> float:
        if not 0 <= v <= 100:
            raise ValueError("Thuế suất phải từ 0-100")
        return v

    @field_validator("details")
    @classmethod
    def _details(cls, v: Optional[List[PurchaseOrderDetailIn]]) -> Optional[List[PurchaseOrderDetailIn]]:
        if v is not None and not v:
            raise ValueError("Phải thêm ít nhất 1 sản phẩm")
        return v


class PurchaseOrderIn(PurchaseOrderUpdate):
    supplier_id: int
    warehouse_id: int
    order_date: date
    details: List[PurchaseOrderDetailIn]


class ReceivedItemIn(CamelModel):
    product_id: int
    quantity: float
    unit_price: float
    batch_number: Optional[str] = None
    expiry_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("quantity")
    @classmethod
    def _qty(cls, v: float) -> float:
        return _positive(v, "Số lượng phải > 0")

    @field_validator("unit_price")
    @classmethod
    def _price(cls, v: float) -> float:
        return _non_negative(v, "Giá phải >= 0")


class ReceivePurchaseOrderIn(CamelModel):
    notes: Optional[str] = None
    details: Optional[List[ReceivedItemIn]] = None

    @field_validator("details")
    @classmethod
    def _details(cls, v: Optional[List[ReceivedItemIn]]) -> Optional[List[ReceivedItemIn]]:
        if v is not None and not v:
            raise ValueError("Phải thêm ít nhất 1 sản phẩm")
        return v


# =========================================================================
# Finance
# =========================================================================

class PaymentReceiptIn(SnakeModel):
    receipt_code: str
    customer_id: Optional[int] = None
    sales_order_id: Optional[int] = None
    receipt_date: date
    amount: float
    payment_method: PaymentMethod
    receipt_type: Literal["order_payment", "deposit", "refund", "other"]
    notes: Optional[str] = None

    @field_validator("receipt_code")
    @classmethod
    def _code(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Mã phiếu thu là bắt buộc")
        return _max_len(v, 50, "Mã phiếu thu không được quá 50 ký tự")

    @field_validator("amount")
    @classmethod
    def _amount(cls, v: float) -> float:
        return _positive(v, "Số tiền phải lớn hơn 0")

    @field_validator("notes")
    @classmethod
    def _notes(cls, v: Optional[str]) -> Optional[str]:
        return _max_len(v, 500, "Ghi chú không được quá 500 ký tự")


class PaymentVoucherIn(SnakeModel):
    voucher_code: str
    supplier_id: Optional[int] = None
    purchase_order_id: Optional[int] = None
    voucher_date: date
    amount: float
    payment_method: Literal["cash", "bank_transfer", "check"]
    voucher_type: Literal["purchase_payment", "salary", "expense", "tax", "other"]
    notes: Optional[str] = None

    @field_validator("voucher_code")
    @classmethod
    def _code(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Mã phiếu chi là bắt buộc")
        return _max_len(v, 50, "Mã phiếu chi không được quá 50 ký tự")

    @field_validator("amount")
    @classmethod
    def _amount(cls, v: float) -> float:
        return _positive(v, "Số tiền phải lớn hơn 0")

    @field_validator("notes")
    @classmethod
    def _notes(cls, v: Optional[str]) -> Optional[str]:
        return _max_len(v, 500, "Ghi chú không được quá 500 ký tự")


class BulkDeleteIn(CamelModel):
    ids: List[int]

    @field_validator("ids")
    @classmethod
    def _ids(cls, v: List[int]) -> List[int]:
        if not v:
            raise ValueError("Vui lòng chọn ít nhất 1 phiếu")
        return v


class DebtReconciliationIn(CamelModel):
    reconciliation_type: Literal["monthly", "quarterly", "yearly"]
    period: str
    customer_id: Optional[int] = None
    supplier_id: Optional[int] = None
    reconciliation_date: date
    notes: Optional[str] = None

    @field_validator("period")
    @classmethod
    def _period(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Kỳ đối chiếu không được để trống")
        return v

    @model_validator(mode="after")
    def _party(self) -> "DebtReconciliationIn":
        if not self.customer_id and not self.supplier_id:
            raise ValueError("Phải chọn Khách hàng hoặc Nhà cung cấp")
        return self


class ReconciliationConfirmIn(CamelModel):
    confirmed_by_name: str
    confirmed_by_email: Optional[str] = None
    notes: Optional[str] = None
    discrepancy_reason: Optional[str] = None

    @field_validator("confirmed_by_name")
    @classmethod
    def _name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Nhập tên người đại diện khách hàng đã xác nhận")
        return v

    @field_validator("confirmed_by_email")
    @classmethod
    def _email(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        if not EMAIL_RE.match(v):
            raise ValueError("Email không hợp lệ")
        return v


class ReconciliationDisputeIn(CamelModel):
    reason: str

    @field_validator("reason")
    @classmethod
    def _reason(cls, v: str) -> str:
        if len(v.strip()) < 5:
            raise ValueError("Vui lòng nhập chi tiết lý do khách hàng từ chối/báo sai")
        return v


class ReconciliationEmailIn(CamelModel):
    recipient_name: str
    recipient_email: str
    message: Optional[str] = None

    @field_validator("recipient_email")
    @classmethod
    def _email(cls, v: str) -> str:
        if not EMAIL_RE.match(v or ""):
            raise ValueError("Email người nhận không hợp lệ")
        return v


# =========================================================================
# HR
# =========================================================================

class SalaryCalculateIn(CamelModel):
    user_id: int
    month: str
    basic_salary: Optional[float] = None
    allowance: Optional[float] = None
    bonus: Optional[float] = None
    advance: Optional[float] = None
    notes: Optional[str] = None

    @field_validator("user_id")
    @classmethod
    def _user(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Vui lòng chọn nhân viên")
        return v

    @field_validator("month")
    @classmethod
    def _month(cls, v: str) -> str:
        if not MONTH_RE.match(v or ""):
            raise ValueError("Tháng phải có định dạng YYYYMM (ví dụ: 202501)")
        return v

    @field_validator("basic_salary", "allowance", "bonus", "advance")
    @classmethod
    def _amounts(cls, v: Optional[float]) -> Optional[float]:
        return _non_negative(v, "Giá trị phải >= 0")


class SalaryUpdate(CamelModel):
    basic_salary: Optional[float] = None
    allowance: Optional[float] = None
    overtime_pay: Optional[float] = None
    bonus: Optional[float] = None
    commission: Optional[float] = None
    deduction: Optional[float] = None
    advance: Optional[float] = None
    notes: Optional[str] = None

    @field_validator(
        "basic_salary", "allowance", "overtime_pay", "bonus",
        "commission", "deduction", "advance",
    )
    @classmethod
    def _amounts(cls, v: Optional[float]) -> Optional[float]:
        return _non_negative(v, "Giá trị phải >= 0")


class SalaryPayIn(CamelModel):
    payment_date: date
    payment_method: Literal["cash", "transfer"]
    notes: Optional[str] = None


class CheckInIn(CamelModel):
    location: Optional[str] = None
    notes: Optional[str] = None


class LeaveRequestIn(CamelModel):
    leave_date: date = Field(alias="date")
    leave_type: Literal["annual", "sick", "unpaid", "other"]
    notes: Optional[str] = None

    @field_validator("notes")
    @classmethod
    def _notes(cls, v: Optional[str]) -> Optional[str]:
        return _max_len(v, 255, "Ghi chú không được quá 255 ký tự")


class LeaveApprovalIn(CamelModel):
    approved: bool
    notes: Optional[str] = None


# =========================================================================
# Notifications / deliveries
# =========================================================================

class NotificationBroadcastIn(CamelModel):
    user_ids: Optional[List[int]] = None
    role_id: Optional[int] = None
    title: str
    message: str
    notification_type: Optional[str] = None
    priority: Optional[Literal["low", "normal", "high"]] = None
    reference_type: Optional[str] = None
    reference_id: Optional[int] = None

    @field_validator("title", "message")
    @classmethod
    def _required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Tiêu đề và nội dung là bắt buộc")
        return v


class DeliveryIn(CamelModel):
    order_id: int
    delivery_staff_id: int
    shipping_partner: Optional[str] = None
    delivery_date: date
    delivery_cost: float = 0
    cod_amount: float = 0
    notes: Optional[str] = None

    @field_validator("delivery_cost", "cod_amount")
    @classmethod
    def _amounts(cls, v: float) -> float:
        return _non_negative(v, "Số tiền không được âm")


class DeliveryStatusIn(CamelModel):
    delivery_status: Literal["pending", "in_transit", "delivered", "failed", "returned"]
    collected_amount: Optional[float] = None
    received_by: Optional[str] = None
    received_phone: Optional[str] = None
    failure_reason: Optional[str] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def _failure(self) -> "DeliveryStatusIn":
        if self.delivery_status == "failed" and not self.failure_reason:
            raise ValueError("Vui lòng nhập lý do giao hàng thất bại")
        return self


class DeliveryAssignIn(CamelModel):
    delivery_staff_id: int


class DeliverySettleIn(CamelModel):
    collected_amount: float
    notes: Optional[str] = None

    @field_validator("collected_amount")
    @classmethod
    def _amount(cls, v: float) -> float:
        return _non_negative(v, "Số tiền không được âm")
