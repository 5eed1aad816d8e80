# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Literal, Optional
from decimal import Decimal
from datetime import datetime


class CartLine(BaseModel):
    """One product in a cart; the same shape for device and user carts."""

    id: str
    product_id: str
    title: str
    price: Decimal
    qty: int = Field(..., ge=1)
    images: List[str] = []


class Notice(BaseModel):
    """Non-blocking message for the UI (toast)."""

    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"


class CartOut(BaseModel):
    owner: Literal["device", "user"]
    user_id: Optional[str] = None
    items: List[CartLine]
    total_items: int
    total_amount: Decimal
    notices: List[Notice] = []


class ItemIn(BaseModel):
    product_id: str = Field(..., min_length=1)
    qty: int = Field(1, gt=0, description="Quantity to add (> 0)")


class QuantityIn(BaseModel):
    # 0 or less removes the line
    qty: int


class ProductIn(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    currency: str = "INR"
    images: List[str] = []
    in_stock: bool = True
    stock_qty: int = Field(0, ge=0)


class ProductPatch(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    images: Optional[List[str]] = None
    in_stock: Optional[bool] = None
    stock_qty: Optional[int] = Field(None, ge=0)


class ProductOut(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    price: Decimal
    currency: str
    images: List[str]
    in_stock: bool
    stock_qty: int


class BannerIn(BaseModel):
    title: str = Field(..., min_length=1)
    image_url: str = Field(..., min_length=1)
    link_url: Optional[str] = None
    active: bool = True
    display_order: int = 0


class BannerOut(BaseModel):
    id: str
    title: str
    image_url: str
    link_url: Optional[str] = None
    display_order: int


class ProfileIn(BaseModel):
    user_id: str
    email: Optional[str] = None
    full_name: Optional[str] = None


class ProfileOut(BaseModel):
    user_id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    phone: Optional[str] = None
    is_admin: bool


class AddressIn(BaseModel):
    full_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    alt_phone: Optional[str] = None
    email: Optional[str] = None
    house_flat: str = Field(..., min_length=1)
    road_area_colony: str = Field(..., min_length=1)
    landmark: Optional[str] = None
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    pincode: str = Field(..., pattern=r"^\d{6}$")
    is_default: bool = False


class AddressOut(AddressIn):
    id: str


class OrderCreate(BaseModel):
    user_id: str
    address_id: str
    device_id: Optional[str] = None


class PaymentIn(BaseModel):
    # length limits apply to the stripped reference
    model_config = ConfigDict(str_strip_whitespace=True)

    user_id: str
    utr: str = Field(..., min_length=6, max_length=32)


class StatusIn(BaseModel):
    status: str


class OrderLineOut(BaseModel):
    product_id: str
    title: str
    unit_price: Decimal
    qty: int
    subtotal: Decimal


class OrderOut(BaseModel):
    id: str
    order_id: str
    user_id: str
    address_id: str
    amount_total: Decimal
    currency: str
    status: str
    status_label: str
    progress: int
    payment_status: str
    payment_label: str
    payment_upi: Optional[str] = None
    payment_qr_expires_at: Optional[datetime] = None
    payment_utr: Optional[str] = None
    created_at: datetime
    items: List[OrderLineOut]


class AdminOverview(BaseModel):
    total_products: int
    total_orders: int
    revenue: Decimal
    active_banners: int
    recent_orders: List[OrderOut]


class AdminSettings(BaseModel):
    payment_upi: str
    payment_qr_ttl_minutes: int

    model_config = ConfigDict(frozen=True)
