"""
Order Domain Models

Represents storefront orders. Line items and the shipping address are
stored as JSON on the order row, frozen at purchase time.
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.money import to_money


class OrderStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    PACKING = "packing"
    SENT = "sent"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


STATUS_LABELS = {
    "pending": "Pendente",
    "paid": "Pago / Confirmado",
    "packing": "Embalando",
    "sent": "Enviado",
    "shipped": "Enviado",
    "delivered": "Entregue",
    "cancelled": "Cancelado",
}

# Older clients send "shipped" for what the dashboard calls "sent"
STATUS_ALIASES = {
    "shipped": OrderStatus.SENT,
}


def translate_order_status(status: Optional[str]) -> Optional[str]:
    """Portuguese label for a status; unknown statuses are returned unchanged"""
    if not status:
        return status
    return STATUS_LABELS.get(status.lower(), status)


def parse_order_status(status: str) -> OrderStatus:
    """
    Normalize a status coming from the dashboard

    Raises:
        ValueError: if the status is not a known order status
    """
    key = (status or "").strip().lower()
    if key in STATUS_ALIASES:
        return STATUS_ALIASES[key]
    try:
        return OrderStatus(key)
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValueError(f"Status inválido: {status}. Use um de: {allowed}")


class DeliveryMethod(str, Enum):
    SHIPPING = "shipping"
    PICKUP = "pickup"


class ShippingAddress(BaseModel):
    """Delivery data chosen at checkout"""
    type: DeliveryMethod = DeliveryMethod.SHIPPING
    rate_id: Optional[int] = None
    street: Optional[str] = None
    number: Optional[str] = None
    complement: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class OrderItem(BaseModel):
    """
    Order line item - snapshot of a cart item

    Fields:
        product_id: Reference to product catalog
        name: Product name at order time
        price: Unit price at order time
        quantity: Units ordered
        category_id: Category at order time (drives notification wording)
        image_url: Product image at order time
        size / flavor: Chosen variation (optional)
    """
    product_id: Optional[int] = Field(None, description="Product catalog ID")
    name: str = Field(..., description="Product name at order time")
    price: Decimal = Field(..., description="Unit price", ge=0)
    quantity: int = Field(..., description="Quantity ordered", ge=1)
    category_id: Optional[int] = Field(None, description="Category ID")
    image_url: Optional[str] = Field(None, description="Product image")
    size: Optional[str] = None
    flavor: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @property
    def line_total(self) -> Decimal:
        return to_money(self.price * self.quantity)

    def to_dict(self) -> dict:
        data = self.model_dump(exclude_none=True)
        data["price"] = float(self.price)
        return data


class Order(BaseModel):
    """
    Order domain model - represents a storefront order

    Fields:
        id: Internal order ID (primary key)
        user_id: Customer account ID (None for guest checkout)
        user_name / user_email / user_phone: Contact captured at checkout
        items: Line items
        subtotal: Sum of line totals
        discount_amount: Discount from the applied coupon/partner code
        coupon_code: Code applied (one per order)
        shipping_cost: Delivery fee (0 for pickup)
        total: Amount charged
        status: pending, paid, packing, sent, delivered, cancelled
        payment_id: Payment gateway reference
        shipping_address: Delivery data (JSON)
        channel: Sales channel (ecommerce, balcao, whatsapp...)
    """

    id: int = Field(..., description="Internal order ID")
    user_id: Optional[str] = Field(None, description="Customer ID (None = guest)")
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    user_phone: Optional[str] = None

    items: List[OrderItem] = Field(default_factory=list, description="Order items")

    subtotal: Decimal = Field(Decimal("0"), description="Subtotal before discount", ge=0)
    discount_amount: Decimal = Field(Decimal("0"), description="Discount amount", ge=0)
    coupon_code: Optional[str] = None
    shipping_cost: Decimal = Field(Decimal("0"), description="Shipping cost", ge=0)
    total: Decimal = Field(..., description="Total order amount", ge=0)

    status: str = Field(OrderStatus.PENDING.value, description="Order status")
    payment_id: Optional[str] = None
    payment_method: Optional[str] = None
    shipping_address: Optional[ShippingAddress] = None
    channel: str = Field("ecommerce", description="Sales channel")

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("shipping_address", mode="before")
    @classmethod
    def _legacy_address(cls, value):
        # Some early orders stored the address as a plain string
        if isinstance(value, str):
            kind = DeliveryMethod.PICKUP if "pickup" in value.lower() else DeliveryMethod.SHIPPING
            return {"type": kind, "street": value}
        return value

    # Computed properties
    @property
    def is_guest(self) -> bool:
        return not self.user_id

    @property
    def is_pickup(self) -> bool:
        return self.shipping_address is not None and self.shipping_address.type == DeliveryMethod.PICKUP

    @property
    def city(self) -> Optional[str]:
        if self.shipping_address is None:
            return None
        return self.shipping_address.city

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def short_id(self) -> str:
        """Reference shown to customers (#00000123)"""
        return str(self.id).zfill(8)

    @property
    def status_label(self) -> str:
        return translate_order_status(self.status)

    def to_dict(self) -> dict:
        """
        Convert to dictionary with computed fields

        Returns dict with all fields plus computed properties
        """
        data = self.model_dump(mode="json")

        data["items"] = [item.to_dict() for item in self.items]
        for field in ["subtotal", "discount_amount", "shipping_cost", "total"]:
            data[field] = float(getattr(self, field))

        data["status_label"] = self.status_label
        data["is_guest"] = self.is_guest
        data["is_pickup"] = self.is_pickup
        data["item_count"] = self.item_count
        data["total_quantity"] = self.total_quantity

        return data


class OrderCreate(BaseModel):
    """Schema for creating a new order"""
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    user_phone: Optional[str] = None
    items: List[OrderItem] = Field(..., min_length=1)
    subtotal: Optional[Decimal] = None
    discount_amount: Decimal = Decimal("0")
    coupon_code: Optional[str] = None
    shipping_cost: Decimal = Decimal("0")
    total: Decimal
    status: OrderStatus = OrderStatus.PENDING
    payment_id: Optional[str] = None
    payment_method: str = "credit_card"
    shipping_address: Optional[ShippingAddress] = None
    channel: str = "ecommerce"

    @property
    def computed_subtotal(self) -> Decimal:
        if self.subtotal is not None:
            return to_money(self.subtotal)
        return to_money(sum((item.line_total for item in self.items), Decimal("0")))


class OrderStatusUpdate(BaseModel):
    """Schema for changing an order status from the dashboard"""
    status: str
