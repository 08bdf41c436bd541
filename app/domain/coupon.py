"""
Coupon Domain Models

Coupons, the result of validating a code at checkout and the discount
breakdown applied to a cart.
"""
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.domain.money import format_brl, format_number_br, to_money


class DiscountType(str, Enum):
    PERCENT = "percent"
    FIXED = "fixed"


class DiscountSource(str, Enum):
    COUPON = "coupon"
    PARTNER = "partner"


def normalize_code(code: Optional[str]) -> str:
    """Codes are stored and compared upper-case without surrounding spaces"""
    return (code or "").strip().upper()


class Coupon(BaseModel):
    """
    Coupon domain model - a discount code

    Fields:
        id: Internal coupon ID
        code: Upper-case code typed by the customer
        discount_type: percent or fixed
        discount_value: Percentage (0-100) or amount in BRL
        expiration_date: Moment after which the coupon stops working (optional)
        usage_limit: Maximum number of uses (None or 0 means unlimited)
        used_count: How many checkouts used the coupon
        active: Manual on/off switch from the dashboard
        partner_id / partner_name: Affiliate the coupon belongs to (optional)
    """

    id: int = Field(..., description="Coupon ID")
    code: str = Field(..., description="Coupon code (upper-case)")
    discount_type: DiscountType = Field(..., description="percent or fixed")
    discount_value: Decimal = Field(..., description="Discount value", ge=0)
    expiration_date: Optional[datetime] = Field(None, description="Expiration timestamp")
    usage_limit: Optional[int] = Field(None, description="Maximum uses (None/0 = unlimited)", ge=0)
    used_count: int = Field(0, description="Times used", ge=0)
    active: bool = Field(True, description="Whether coupon is enabled")
    partner_id: Optional[int] = Field(None, description="Partner ID")
    partner_name: Optional[str] = Field(None, description="Partner name")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")

    model_config = ConfigDict(from_attributes=True)

    # Computed properties
    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Check if the expiration moment has passed"""
        if self.expiration_date is None:
            return False
        now = now or datetime.now(timezone.utc)
        expiration = self.expiration_date
        if expiration.tzinfo is None:
            expiration = expiration.replace(tzinfo=timezone.utc)
        return expiration < now

    @property
    def is_exhausted(self) -> bool:
        """Check if the usage limit was reached"""
        if not self.usage_limit:
            return False
        return self.used_count >= self.usage_limit

    @property
    def display_name(self) -> str:
        partner_name = self.partner_name or "Cupom"
        if partner_name.startswith("Cupom"):
            return f"Cupom {self.code}"
        return partner_name

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json")
        data["discount_value"] = float(self.discount_value)
        data["is_expired"] = self.is_expired()
        data["is_exhausted"] = self.is_exhausted
        return data


class CouponCreate(BaseModel):
    """Schema for creating a new coupon"""
    code: str = Field(..., min_length=1, max_length=100)
    discount_type: DiscountType
    discount_value: Decimal = Field(..., gt=0)
    expiration_date: Optional[datetime] = None
    usage_limit: Optional[int] = Field(None, ge=0)
    active: bool = True
    partner_id: Optional[int] = None
    partner_name: Optional[str] = None

    @field_validator("code")
    @classmethod
    def _normalize_code(cls, value: str) -> str:
        code = normalize_code(value)
        if not code:
            raise ValueError("Código do cupom é obrigatório")
        return code

    @field_validator("expiration_date")
    @classmethod
    def _aware_expiration(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Dates typed in the dashboard carry no zone; store them as UTC
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_validator("discount_value")
    @classmethod
    def _money(cls, value: Decimal) -> Decimal:
        return to_money(value)

    @model_validator(mode="after")
    def _percent_at_most_100(self) -> "CouponCreate":
        if self.discount_type == DiscountType.PERCENT and self.discount_value > 100:
            raise ValueError("Desconto percentual não pode passar de 100%")
        return self


class DiscountBreakdown(BaseModel):
    """Amounts after applying a discount to a subtotal"""
    subtotal: Decimal
    discount_amount: Decimal
    total: Decimal

    def to_dict(self) -> dict:
        return {
            "subtotal": float(self.subtotal),
            "discount_amount": float(self.discount_amount),
            "total": float(self.total),
        }


class CouponValidation(BaseModel):
    """
    Result of validating a code typed at checkout

    When valid, carries everything the cart needs to apply the discount.
    A cart holds at most one validation: applying another code replaces it.
    """
    valid: bool
    message: str
    source: Optional[DiscountSource] = None
    code: Optional[str] = None
    discount_type: Optional[DiscountType] = None
    value: Optional[Decimal] = None
    name: Optional[str] = None

    @classmethod
    def invalid(cls, message: str) -> "CouponValidation":
        return cls(valid=False, message=message)

    @classmethod
    def from_coupon(cls, coupon: Coupon) -> "CouponValidation":
        if coupon.discount_type == DiscountType.PERCENT:
            label = f"{format_number_br(coupon.discount_value)}% OFF"
        else:
            label = f"{format_brl(coupon.discount_value)} OFF"

        return cls(
            valid=True,
            message=f"Desconto aplicado! {label}",
            source=DiscountSource.COUPON,
            code=coupon.code,
            discount_type=coupon.discount_type,
            value=coupon.discount_value,
            name=coupon.display_name,
        )

    def compute(self, subtotal: Decimal) -> DiscountBreakdown:
        """
        Apply this discount to a subtotal

        percent: subtotal * value / 100
        fixed: value, never more than the subtotal
        """
        subtotal = to_money(subtotal)

        if not self.valid or self.value is None or subtotal <= 0:
            discount = Decimal("0.00")
        elif self.discount_type == DiscountType.PERCENT:
            discount = to_money(subtotal * Decimal(self.value) / Decimal(100))
        else:
            discount = to_money(self.value)

        discount = min(discount, subtotal)
        total = max(Decimal("0.00"), subtotal - discount)

        return DiscountBreakdown(subtotal=subtotal, discount_amount=discount, total=total)

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json", exclude_none=True)
        if self.value is not None:
            data["value"] = float(self.value)
        return data
