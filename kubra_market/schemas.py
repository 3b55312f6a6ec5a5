from typing import Annotated, Optional, List, Literal
from pydantic import BaseModel, Field, field_validator, model_validator, PlainSerializer
from pydantic.alias_generators import to_camel
from datetime import datetime, timezone
from decimal import Decimal
from kubra_market.models.order import OrderStatus
from kubra_market.models.rental import MaintenancePriority, MaintenanceStatus


def _iso_utc(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")

def _to_utc(value: datetime) -> datetime:
    # Inputs without an offset are taken as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

# Money is Decimal in Python, a plain JSON number on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
UtcDateTime = Annotated[datetime, PlainSerializer(_iso_utc, return_type=str, when_used="json")]

# Request bounds matching the columns: Numeric(12, 2) money, 32-bit integers
MAX_INT = 2**31 - 1
Price = Annotated[Decimal, Field(gt=0, max_digits=12, decimal_places=2)]
Stock = Annotated[int, Field(ge=0, le=MAX_INT)]
RowId = Annotated[int, Field(le=MAX_INT)]


class CamelModel(BaseModel):
    """camelCase on the wire; snake_case names are accepted in requests too."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


def _require_text(v: str) -> str:
    if v is None or not v.strip():
        raise ValueError("must not be empty")
    return v.strip()

# --- Auth / Merchant Schemas ---
class LoginRequest(CamelModel):
    username: str
    password: str

    @field_validator('username', 'password')
    @classmethod
    def not_empty(cls, v):
        if not v: raise ValueError("is required")
        return v

class MerchantCreate(CamelModel):
    username: str
    password: str
    name: str
    email: str
    phone: str

    @field_validator('username', 'name', 'phone')
    @classmethod
    def not_blank(cls, v):
        return _require_text(v)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        if "@" not in v: raise ValueError("invalid email address")
        return v.strip()

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        if len(v) < 6: raise ValueError("password must be at least 6 characters")
        return v

class MerchantResponse(CamelModel):
    # password_hash is deliberately absent
    id: int
    username: str
    name: str
    email: str
    phone: str
    created_at: UtcDateTime
    updated_at: UtcDateTime

# --- Shop Schemas ---
class ShopBase(CamelModel):
    name: str
    phone: str
    address: str
    banner_url: Optional[str] = None
    logo_url: Optional[str] = None

class ShopCreate(ShopBase):
    @field_validator('name', 'phone', 'address')
    @classmethod
    def not_blank(cls, v):
        return _require_text(v)

class ShopUpdate(CamelModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    banner_url: Optional[str] = None
    logo_url: Optional[str] = None

    @field_validator('name', 'phone', 'address')
    @classmethod
    def not_blank(cls, v):
        return None if v is None else _require_text(v)

class ShopResponse(ShopBase):
    id: int
    merchant_id: int
    created_at: UtcDateTime
    updated_at: UtcDateTime

# --- Product Schemas ---
class ProductCreate(CamelModel):
    name: str
    description: str
    price: Price
    stock: Stock = 0
    image_url: Optional[str] = None
    category: Optional[str] = None

    @field_validator('name')
    @classmethod
    def not_blank(cls, v):
        return _require_text(v)

class ProductUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Price] = None
    stock: Optional[Stock] = None
    image_url: Optional[str] = None
    category: Optional[str] = None

    @field_validator('name')
    @classmethod
    def not_blank(cls, v):
        return None if v is None else _require_text(v)

class ProductResponse(CamelModel):
    id: int
    merchant_id: int
    shop_id: int
    name: str
    description: str
    price: Money
    stock: int
    image_url: Optional[str] = None
    category: Optional[str] = None
    created_at: UtcDateTime
    updated_at: UtcDateTime

# --- Order Schemas ---
class OrderItemCreate(CamelModel):
    product_id: RowId
    quantity: int = Field(gt=0, le=MAX_INT)

class OrderCreate(CamelModel):
    # Either an existing customer, or a new one built from the snapshot fields
    customer_id: Optional[RowId] = None
    customer_name: str
    customer_phone: str
    customer_address: str
    customer_email: Optional[str] = None
    payment_method: str
    is_paid: bool = False
    items: List[OrderItemCreate]

    @field_validator('customer_name', 'customer_phone', 'customer_address', 'payment_method')
    @classmethod
    def not_blank(cls, v):
        return _require_text(v)

    @field_validator('items')
    @classmethod
    def validate_items(cls, v):
        if not v: raise ValueError("an order needs at least one item")
        return v

class OrderStatusUpdate(CamelModel):
    status: OrderStatus

class OrderItemResponse(CamelModel):
    id: int
    order_id: int
    product_id: int
    quantity: int
    price: Money
    created_at: UtcDateTime
    updated_at: UtcDateTime
    product: Optional[ProductResponse] = None

class OrderResponse(CamelModel):
    id: int
    merchant_id: int
    customer_id: int
    customer_name: str
    customer_phone: str
    customer_address: str
    status: str
    total_amount: Money
    payment_method: str
    is_paid: bool
    created_at: UtcDateTime
    updated_at: UtcDateTime
    items: List[OrderItemResponse] = []

class OrderSummaryResponse(CamelModel):
    """Order row without its lines (dashboard list)."""
    id: int
    merchant_id: int
    customer_id: int
    customer_name: str
    customer_phone: str
    customer_address: str
    status: str
    total_amount: Money
    payment_method: str
    is_paid: bool
    created_at: UtcDateTime
    updated_at: UtcDateTime

class OrderPage(CamelModel):
    orders: List[OrderResponse]
    total: int
    page: int
    page_size: int
    total_pages: int

# --- Rental Schemas ---
class RentalCreate(CamelModel):
    amount: Price
    start_date: datetime
    due_date: datetime

    @field_validator('start_date', 'due_date')
    @classmethod
    def as_utc(cls, v):
        return _to_utc(v)

    @model_validator(mode='after')
    def check_dates(self):
        if self.due_date <= self.start_date:
            raise ValueError("due date must be after start date")
        return self

class RentalResponse(CamelModel):
    id: int
    merchant_id: int
    shop_id: int
    amount: Money
    start_date: UtcDateTime
    due_date: UtcDateTime
    is_paid: bool
    created_at: UtcDateTime
    updated_at: UtcDateTime

class CurrentRentalResponse(RentalResponse):
    shop_name: str = ""

class RentalPayRequest(CamelModel):
    rental_id: RowId

# --- Maintenance Schemas ---
class MaintenanceRequestCreate(CamelModel):
    issue_type: str
    description: str
    priority: MaintenancePriority = MaintenancePriority.MEDIUM

    @field_validator('issue_type', 'description')
    @classmethod
    def not_blank(cls, v):
        return _require_text(v)

class MaintenanceStatusUpdate(CamelModel):
    status: MaintenanceStatus

class MaintenanceRequestResponse(CamelModel):
    id: int
    merchant_id: int
    shop_id: int
    issue_type: str
    description: str
    priority: str
    status: str
    created_at: UtcDateTime
    updated_at: UtcDateTime

# --- Notification Schemas ---
class NotificationResponse(CamelModel):
    id: int
    merchant_id: int
    type: str
    title: str
    message: str
    is_read: bool
    created_at: UtcDateTime
    updated_at: UtcDateTime

class UnreadCount(CamelModel):
    count: int

# --- Sales / Dashboard Schemas ---
class SalesSummary(CamelModel):
    total_sale: Money
    order_count: int
    avg_order_value: Money

class TrendStat(CamelModel):
    value: int  # absolute percentage change
    trend: Literal["up", "down", "flat"]

class DashboardStats(CamelModel):
    orders_change: TrendStat
    revenue_change: TrendStat
    products_change: TrendStat

class DashboardAlert(CamelModel):
    title: str
    message: str

class DashboardResponse(CamelModel):
    recent_orders: List[OrderSummaryResponse]
    low_stock_products: List[ProductResponse]
    upcoming_rental: Optional[RentalResponse] = None
    stats: DashboardStats
    alerts: List[DashboardAlert] = []

class MessageResponse(CamelModel):
    message: str
