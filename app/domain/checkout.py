"""
Checkout Domain Models

Request and result shapes of the storefront checkout and card payments.
"""
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from app.domain.order import OrderItem, ShippingAddress


class CheckoutContact(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class CheckoutRequest(BaseModel):
    """
    Cart submitted by the storefront

    Prices sent by the client are replaced by catalog prices when the
    product still exists.
    """
    items: List[OrderItem] = Field(..., min_length=1)
    coupon_code: Optional[str] = None
    shipping: ShippingAddress = Field(default_factory=ShippingAddress)
    contact: CheckoutContact = Field(default_factory=CheckoutContact)
    session_id: Optional[str] = Field(None, description="Synced cart session")


class CheckoutResult(BaseModel):
    success: bool
    message: Optional[str] = None
    url: Optional[str] = None
    order_id: Optional[int] = None
    subtotal: Optional[Decimal] = None
    discount_amount: Optional[Decimal] = None
    shipping_cost: Optional[Decimal] = None
    total: Optional[Decimal] = None

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json", exclude_none=True)
        for field in ("subtotal", "discount_amount", "shipping_cost", "total"):
            value = getattr(self, field)
            if value is not None:
                data[field] = float(value)
        return data


class PayerIdentification(BaseModel):
    type: Optional[str] = None
    number: Optional[str] = None


class Payer(BaseModel):
    email: str
    identification: PayerIdentification = Field(default_factory=PayerIdentification)


class PaymentForm(BaseModel):
    """Card data tokenized by the Payment Brick"""
    transaction_amount: Decimal = Field(..., gt=0)
    token: str
    description: Optional[str] = None
    installments: int = Field(1, ge=1)
    payment_method_id: str
    issuer_id: Optional[str] = None
    payer: Payer
    order_id: Optional[int] = Field(None, description="Order paid by this card")
